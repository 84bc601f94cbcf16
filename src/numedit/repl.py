# -----------------------------------------------------------------------------
# Smart numeric "edit box" simulator
# Purpose:
#   Interactive loop around the Compiler: type an expression, see what a
#   unit-aware numeric field in a design tool would show. The previous result
#   is threaded into the next line so bare numbers keep its unit.
# Commands:
#   metric | imperial | generic   switch unit system (resets the previous result)
#   <blank line>                  quit
# -----------------------------------------------------------------------------

from __future__ import annotations
import argparse
import logging
import sys
from typing import Iterable, List, Optional, TextIO

from .compiler import Compiler
from .config import CompilerSettings, configure_logging
from .types import CompilerError, Solution, UnitSystem

logger = logging.getLogger(__name__)

BANNER = """
==========================================
=== Smart Numeric 'Edit Box' Simulator ===
==========================================

Enter "metric" to use the Metric system (default).
Enter "imperial" to use the Imperial system.
Enter "generic" to use generic units.
Enter a blank line to quit.
"""

_SYSTEM_COMMANDS = {
    "metric": UnitSystem.METRIC,
    "imperial": UnitSystem.IMPERIAL,
    "generic": UnitSystem.GENERIC,
}


def run(lines: Iterable[str], out: TextIO, compiler: Compiler, verbose: bool = False) -> Solution:
    """
    Drive the edit box from `lines` until a blank line or end of input.
    Returns the last solution shown.
    """
    previous = Solution(0.0, compiler.default_unit())

    for raw in lines:
        expression = raw.rstrip("\r\n")
        if not expression:
            break

        command = expression.strip().lower()
        if command in _SYSTEM_COMMANDS:
            system = _SYSTEM_COMMANDS[command]
            compiler.set_unit_out(system)
            out.write(f"System units were set to {system.value.capitalize()}\n")
            previous = Solution(0.0, compiler.default_unit())
            continue

        try:
            previous = compiler.eval(expression, previous)
        except CompilerError as e:
            logger.info("Rejected %r: %s", expression, e)
            out.write(f" - Error. {e}\n" if verbose else " - Error.\n")
            continue
        out.write(f"The edit box shows: {compiler.format(previous)}\n")

    return previous


def _prompt_lines(prompt: str, stream: TextIO, out: TextIO):
    while True:
        out.write(prompt)
        out.flush()
        line = stream.readline()
        if not line:
            return
        yield line


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="numedit", description="Smart numeric edit-box simulator")
    parser.add_argument("--units", choices=sorted(_SYSTEM_COMMANDS), default=None,
                        help="initial unit system (default: NUMEDIT_UNIT_SYSTEM or metric)")
    parser.add_argument("--no-fractions", action="store_true", help="disable imperial fraction output")
    parser.add_argument("--decimal-point", default=None, help="decimal separator (default: host locale)")
    parser.add_argument("--verbose", action="store_true", help="show error details")
    parser.add_argument("--log-level", default=None, help="logging level (default: NUMEDIT_LOG_LEVEL or WARNING)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.units:
        overrides["unit_system"] = args.units
    if args.no_fractions:
        overrides["imperial_fractions"] = False
    if args.decimal_point:
        overrides["decimal_point"] = args.decimal_point
    if args.log_level:
        overrides["log_level"] = args.log_level
    # command-line flags win over the environment
    settings = CompilerSettings(**{**CompilerSettings.from_env().model_dump(), **overrides})

    configure_logging(settings.log_level)
    compiler = Compiler(settings)

    sys.stdout.write(BANNER)
    run(_prompt_lines("\nInput > ", sys.stdin, sys.stdout), sys.stdout, compiler, verbose=args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
