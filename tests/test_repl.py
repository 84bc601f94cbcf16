import io

import pytest

from numedit import Compiler, CompilerSettings
from numedit.repl import main, run


@pytest.fixture
def compiler():
    return Compiler(CompilerSettings(unit_system="metric", decimal_point="."))


def test_evaluates_lines(compiler):
    out = io.StringIO()
    run(["2+3\n", "12in\n", "\n", "99\n"], out, compiler)
    assert out.getvalue().splitlines() == [
        "The edit box shows: 5m",
        "The edit box shows: 304.8mm",
    ]


def test_switching_to_imperial(compiler):
    out = io.StringIO()
    last = run(["imperial\n", "3.5\n", "2\n"], out, compiler)
    lines = out.getvalue().splitlines()
    assert lines[0] == "System units were set to Imperial"
    assert lines[1] == "The edit box shows: 3'6\""
    assert lines[2] == "The edit box shows: 2ft"
    assert last.value == 24000.0


def test_errors_are_reported(compiler):
    out = io.StringIO()
    run(["1 2\n"], out, compiler)
    assert out.getvalue() == " - Error.\n"


def test_overflow_keeps_the_loop_running(compiler):
    out = io.StringIO()
    run(["0x" + "F" * 300 + "\n", "2\n"], out, compiler)
    assert out.getvalue().splitlines() == [" - Error.", "The edit box shows: 2m"]


def test_verbose_errors(compiler):
    out = io.StringIO()
    run(["1 2\n"], out, compiler, verbose=True)
    assert "[SOLVE] Indeterminate Expression" in out.getvalue()


def test_main_reads_stdin(monkeypatch, capsys):
    for name in ("NUMEDIT_UNIT_SYSTEM", "NUMEDIT_DECIMAL_POINT", "NUMEDIT_IMPERIAL_FRACTIONS", "NUMEDIT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("sys.stdin", io.StringIO("3.5\n\n"))
    assert main(["--units", "imperial", "--decimal-point", "."]) == 0
    assert "The edit box shows: 3'6\"" in capsys.readouterr().out
