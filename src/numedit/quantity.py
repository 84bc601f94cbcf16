# -----------------------------------------------------------------------------
# pint bridge
# Purpose:
#   Hand compiler results to code that works with pint quantities, and bring
#   pint lengths back in as normalized Solutions.
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import TYPE_CHECKING

from pint import UnitRegistry

from .types import Solution, UnitSystem
from .units import UnitTable

if TYPE_CHECKING:
    from .compiler import Compiler

_UR = UnitRegistry()
_Q_ = _UR.Quantity

# Short display names → pint unit names
PINT_NAMES = {
    "mm": "millimeter",
    "cm": "centimeter",
    "m": "meter",
    "km": "kilometer",
    "Mm": "megameter",
    "th": "thou",
    "in": "inch",
    "ft": "foot",
    "yd": "yard",
    "mi": "mile",
}

# pint unit of each system's scale-1 base
_BASE_UNITS = {
    UnitSystem.GENERIC: "meter",
    UnitSystem.METRIC: "meter",
    UnitSystem.IMPERIAL: "thou",
}


def to_quantity(solution: Solution, table: UnitTable):
    """
    Express `solution` as a pint Quantity in its display unit.
    Generic solutions become dimensionless quantities.
    """
    if solution.units.is_generic:
        return _Q_(solution.magnitude, "dimensionless")
    name = table.unit_name(solution.units)
    if name not in PINT_NAMES:
        # unnamed scale: fall back to the system base unit
        return _Q_(solution.value, _BASE_UNITS[table.system])
    return _Q_(solution.magnitude, PINT_NAMES[name])


def from_quantity(quantity, compiler: "Compiler") -> Solution:
    """
    Convert a pint length into a normalized Solution for `compiler`'s active
    system. Raises pint.DimensionalityError for non-length quantities.
    """
    base = quantity.to(_BASE_UNITS[compiler.unit_system])
    return compiler.normalize(Solution(float(base.magnitude), compiler.table.base_unit()))
