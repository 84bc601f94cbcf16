# -----------------------------------------------------------------------------
# Formatter: render a normalized Solution for the edit box
# Purpose:
#   Whole numbers print as integers, imperial values try feet+inches and then
#   common fractions, everything else prints as a trimmed decimal. The unit's
#   short name is appended.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from typing import Optional, Tuple

from .types import Solution, UnitSystem
from .units import IMP_SCALE_FOOT, UnitTable, is_epsilon_integer

DECIMAL_PLACES = 6

# Tried in order; the first one that turns the fraction into a whole
# numerator wins.
DENOMINATORS = (2, 3, 4, 5, 6, 7, 8, 10, 12, 16, 32, 64, 128, 1000)


def _decimal(x: float, decimal_point: str) -> str:
    out = f"{x:.{DECIMAL_PLACES}f}".rstrip("0").rstrip(".")
    if out in ("", "-", "-0"):
        out = "0"
    return out.replace(".", decimal_point)


def _fraction(frac: float) -> Optional[Tuple[int, int]]:
    for denom in DENOMINATORS:
        if is_epsilon_integer(frac * denom):
            return int(round(frac * denom)), denom
    return None


def _feet_and_inches(normal: float, whole: int, frac: float) -> Optional[str]:
    inches = frac * 12
    if not is_epsilon_integer(inches):
        return None
    sign = "-" if normal < 0 else ""
    if whole:
        return f"{sign}{whole}'{int(round(inches))}\""
    return f"{sign}{int(round(inches))}\""


def format_solution(result: Solution, table: UnitTable, fractions: bool = True,
                    decimal_point: str = ".") -> str:
    """
    Render `result` in its attached display unit.
    Examples (imperial): 5ft, 3'6", 1/8ft, 2+1/4in, -3-1/2in
    Examples (metric):   14m, 304.8mm
    """
    normal = result.magnitude
    whole = int(math.floor(abs(normal)))
    frac = abs(normal) - whole

    if is_epsilon_integer(normal):
        return f"{int(round(normal))}{table.unit_name(result.units)}"

    if fractions and result.units.system is UnitSystem.IMPERIAL:
        if result.units.scale == IMP_SCALE_FOOT:
            # feet and inches carry their own unit marks
            feet_inches = _feet_and_inches(normal, whole, frac)
            if feet_inches is not None:
                return feet_inches

        found = _fraction(frac)
        if found is not None:
            num, denom = found
            if whole:
                joiner = "-" if normal < 0 else "+"
                out = f"{int(normal)}{joiner}{num}/{denom}"
            else:
                out = f"{'-' if normal < 0 else ''}{num}/{denom}"
            return out + table.unit_name(result.units)

    return _decimal(normal, decimal_point) + table.unit_name(result.units)
