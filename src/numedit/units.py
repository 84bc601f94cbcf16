# -----------------------------------------------------------------------------
# Unit tables & normalization
# Purpose:
#   Hold the named length units of the two supported unit systems, map raw
#   unit tokens to scale factors, and rewrite a Solution's display unit to the
#   most readable equivalent.
# Scope:
#   - Lengths only (not a dimensional analysis engine).
#   - Metric base unit is the meter; Imperial base unit is the thou (1/1000 in).
# -----------------------------------------------------------------------------

# src/numedit/units.py
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Tuple

from .types import Solution, Unit, UnitSystem

logger = logging.getLogger(__name__)

EPSILON = 1e-14

# Imperial lengths expressed in meters
METRIC_SCALE_INCH = 0.0254
METRIC_SCALE_FOOT = 0.3048
METRIC_SCALE_YARD = 0.9144
METRIC_SCALE_MILE = 1609.344

# Imperial lengths expressed in thou
IMP_SCALE_THOU = 1.0
IMP_SCALE_INCH = 1000.0
IMP_SCALE_FOOT = 12 * IMP_SCALE_INCH
IMP_SCALE_YARD = 3 * IMP_SCALE_FOOT
IMP_SCALE_MILE = 5280 * IMP_SCALE_FOOT

# Metric lengths expressed in meters
METRIC_SCALE_MM = 0.001
METRIC_SCALE_CM = 0.01
METRIC_SCALE_M = 1.0
METRIC_SCALE_KM = 1000.0
METRIC_SCALE_MEGAM = 1000000.0

# Short display name → every spelling accepted in an expression.
METRIC_ALIASES = {
    "mm": ["mm"],
    "cm": ["cm"],
    "m": ["m"],
    "km": ["km", "Km"],
    "Mm": ["Mm"],
}

IMPERIAL_ALIASES = {
    "th": ["th", "thou", "mil"],
    "in": ["in", "inch", "inches", '"'],
    "ft": ["ft", "foot", "feet", "'"],
    "yd": ["yd", "yard", "yds", "yards"],
    "mi": ["mi", "mile", "miles"],
}

# (short name, scale) pairs for each table flavour
_METRIC_IN_METERS = [
    ("mm", METRIC_SCALE_MM), ("cm", METRIC_SCALE_CM), ("m", METRIC_SCALE_M),
    ("km", METRIC_SCALE_KM), ("Mm", METRIC_SCALE_MEGAM),
]
_IMPERIAL_IN_METERS = [
    ("in", METRIC_SCALE_INCH), ("ft", METRIC_SCALE_FOOT),
    ("yd", METRIC_SCALE_YARD), ("mi", METRIC_SCALE_MILE),
]
_METRIC_IN_THOU = [(name, scale * IMP_SCALE_INCH / METRIC_SCALE_INCH) for name, scale in _METRIC_IN_METERS]
_IMPERIAL_IN_THOU = [
    ("th", IMP_SCALE_THOU), ("in", IMP_SCALE_INCH), ("ft", IMP_SCALE_FOOT),
    ("yd", IMP_SCALE_YARD), ("mi", IMP_SCALE_MILE),
]


def is_epsilon_integer(d: float) -> bool:
    # A float within 1e-14 of its nearest integer counts as that integer.
    return abs(d - round(d)) <= EPSILON


@dataclass(frozen=True)
class UnitTable:
    """
    Name → Unit and scale → short-name lookups for one active unit system.
    Build with UnitTable.for_system(); never updated in place.
    """
    system: UnitSystem
    units: Dict[str, Unit]
    names: Dict[float, str]

    @staticmethod
    def for_system(system: UnitSystem) -> "UnitTable":
        if system is UnitSystem.IMPERIAL:
            groups = [(_METRIC_IN_THOU, METRIC_ALIASES, UnitSystem.METRIC),
                      (_IMPERIAL_IN_THOU, IMPERIAL_ALIASES, UnitSystem.IMPERIAL)]
        else:
            # GENERIC shares the metric table so unit tokens still parse.
            groups = [(_METRIC_IN_METERS, METRIC_ALIASES, UnitSystem.METRIC),
                      (_IMPERIAL_IN_METERS, IMPERIAL_ALIASES, UnitSystem.IMPERIAL)]

        units: Dict[str, Unit] = {}
        names: Dict[float, str] = {}
        for scales, aliases, unit_system in groups:
            for short, scale in scales:
                unit = Unit(scale=scale, system=unit_system)
                for alias in aliases[short]:
                    units[alias] = unit
                names[scale] = short
        logger.debug("Built %s unit table with %d names", system.value, len(units))
        return UnitTable(system=system, units=units, names=names)

    def lookup(self, name: str) -> Unit | None:
        return self.units.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.units

    def base_unit(self) -> Unit:
        # Scale-1 unit of the active system (meter, thou, or generic).
        return Unit(1.0, self.system)

    def default_unit(self) -> Unit:
        if self.system is UnitSystem.IMPERIAL:
            return Unit(IMP_SCALE_FOOT, self.system)
        return Unit(1.0, self.system)

    def unit_name(self, unit: Unit) -> str:
        """
        Short display name for a unit ("" for generic).
        Unknown scales are logged and rendered without a suffix.
        """
        if unit.is_generic:
            return ""
        name = self.names.get(unit.scale)
        if name is None:
            logger.warning("No display name for unit scale %r (%s)", unit.scale, unit.system.value)
            return ""
        return name


# ---- Normalization rules ----------------------------------------------------
# Each rule: (from_scale, predicate(normalised_magnitude, base_value), to_scale).
# Rules are tried in order; the first match rescales and the loop restarts.

_IMPERIAL_RULES: List[Tuple[float, Callable[[float, float], bool], float]] = [
    # thou → inch once there is at least an inch
    (IMP_SCALE_THOU, lambda n, v: n >= IMP_SCALE_INCH, IMP_SCALE_INCH),
    # inch → foot past 6 ft, fractions or not
    (IMP_SCALE_INCH, lambda n, v: n > 72, IMP_SCALE_FOOT),
    # inch → foot when it lands on whole feet
    (IMP_SCALE_INCH, lambda n, v: n >= 12 and is_epsilon_integer(v / IMP_SCALE_FOOT), IMP_SCALE_FOOT),
    # yards are accepted as input but displayed as feet
    (IMP_SCALE_YARD, lambda n, v: True, IMP_SCALE_FOOT),
    # foot → mile when it lands on whole miles
    (IMP_SCALE_FOOT, lambda n, v: n >= 5280 and is_epsilon_integer(v / IMP_SCALE_MILE), IMP_SCALE_MILE),
]

_METRIC_RULES: List[Tuple[float, Callable[[float, float], bool], float]] = [
    (METRIC_SCALE_KM, lambda n, v: n >= 1000, METRIC_SCALE_MEGAM),
    (METRIC_SCALE_M, lambda n, v: n >= 1000, METRIC_SCALE_KM),
    (METRIC_SCALE_MM, lambda n, v: n >= 1000, METRIC_SCALE_M),
    # centimeters are never a display unit
    (METRIC_SCALE_CM, lambda n, v: True, METRIC_SCALE_M),
    (METRIC_SCALE_MEGAM, lambda n, v: n < 1, METRIC_SCALE_KM),
    (METRIC_SCALE_KM, lambda n, v: n < 1, METRIC_SCALE_M),
    (METRIC_SCALE_M, lambda n, v: n < 1, METRIC_SCALE_MM),
]


def _apply_rules(result: Solution, rules) -> Solution:
    while True:
        normalised = abs(result.value / result.units.scale)
        for from_scale, applies, to_scale in rules:
            if result.units.scale == from_scale and applies(normalised, result.value):
                result = replace(result, units=Unit(to_scale, result.units.system))
                break
        else:
            return result


def normalize(result: Solution, table: UnitTable) -> Solution:
    """
    Rescale the display unit toward the most natural magnitude until no rule
    applies. The base value is never changed; only the attached unit moves.
    - zero goes straight to the system default unit
    - GENERIC tables and generic-tagged solutions are returned untouched
    """
    if table.system is UnitSystem.GENERIC or result.units.is_generic:
        return result
    if result.value == 0:
        return Solution(result.value, table.default_unit())
    if table.system is UnitSystem.IMPERIAL:
        return _apply_rules(result, _IMPERIAL_RULES)
    return _apply_rules(result, _METRIC_RULES)
