import pytest
from pint import DimensionalityError, UnitRegistry

from numedit import Compiler, CompilerSettings, Solution, Unit, UnitSystem
from numedit.quantity import from_quantity, to_quantity

ureg = UnitRegistry()


def test_metric_result_to_quantity():
    compiler = Compiler(CompilerSettings(unit_system="metric"))
    q = to_quantity(compiler.eval("12in"), compiler.table)
    assert str(q.units) == "millimeter"
    assert q.to("inch").magnitude == pytest.approx(12.0)


def test_imperial_result_to_quantity():
    compiler = Compiler(CompilerSettings(unit_system="imperial"))
    q = to_quantity(compiler.eval("3ft"), compiler.table)
    assert q.magnitude == pytest.approx(3.0)
    assert q.to("meter").magnitude == pytest.approx(0.9144)


def test_generic_result_is_dimensionless():
    compiler = Compiler(CompilerSettings(unit_system="generic"))
    q = to_quantity(compiler.eval("7"), compiler.table)
    assert q.dimensionless
    assert q.magnitude == 7


def test_from_quantity_normalizes():
    compiler = Compiler(CompilerSettings(unit_system="imperial"))
    result = from_quantity(ureg.Quantity(2, "foot"), compiler)
    assert result.units == Unit(12000.0, UnitSystem.IMPERIAL)
    assert result.value == pytest.approx(24000.0)


def test_from_quantity_metric():
    compiler = Compiler(CompilerSettings(unit_system="metric"))
    result = from_quantity(ureg.Quantity(1500, "meter"), compiler)
    assert result == Solution(1500.0, Unit(1000.0, UnitSystem.METRIC))


def test_from_quantity_rejects_non_length():
    compiler = Compiler(CompilerSettings(unit_system="metric"))
    with pytest.raises(DimensionalityError):
        from_quantity(ureg.Quantity(2, "second"), compiler)
