# -----------------------------------------------------------------------------
# Types module: Shared value types for the expression compiler
# Purpose:
#   Define the tokens, operators, units and solutions passed between the
#   tokenizer, shunting-yard converter, evaluator, normalizer and formatter.
#   All of them are immutable once produced.
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class UnitSystem(Enum):
    GENERIC = "generic"
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class Unit:
    """
    A display unit.
    - scale: multiplier converting a value in this unit to the system base unit
    - system: which unit system the unit belongs to
    Unit() (scale 1.0, GENERIC) means "no explicit unit".
    """
    scale: float = 1.0
    system: UnitSystem = UnitSystem.GENERIC

    @property
    def is_generic(self) -> bool:
        return self.system is UnitSystem.GENERIC


GENERIC_UNIT = Unit()


@dataclass(frozen=True)
class Solution:
    """
    A numeric result tagged with a display unit.
    `value` is stored in the base unit of the active system, so
    `value / units.scale` is the magnitude shown to the user.
    """
    value: float
    units: Unit = GENERIC_UNIT

    @property
    def magnitude(self) -> float:
        return self.value / self.units.scale


class TokenKind(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    PAREN_OPEN = "paren_open"
    PAREN_CLOSE = "paren_close"
    SYMBOL = "symbol"
    UNIT = "unit"


_KIND_LABELS = {
    TokenKind.NUMBER: "Literal, Numeric",
    TokenKind.OPERATOR: "Operator",
    TokenKind.PAREN_OPEN: "Parenthesis, Open",
    TokenKind.PAREN_CLOSE: "Parenthesis, Close",
    TokenKind.SYMBOL: "Symbol",
    TokenKind.UNIT: "Unit",
}


@dataclass(frozen=True)
class Token:
    # position: offset of the first character in the input text
    # value: literal for NUMBER, unit scale for UNIT, unused otherwise
    position: int
    kind: TokenKind
    text: str
    value: float = 0.0

    def describe(self) -> str:
        out = f"[{_KIND_LABELS[self.kind]:<18}] @ ({self.position}) : {self.text}"
        if self.kind is TokenKind.NUMBER:
            out += f" [{self.value}]"
        elif self.kind is TokenKind.UNIT:
            out += f" [x{self.value}]"
        return out


@dataclass(frozen=True)
class Operator:
    precedence: int
    arity: int


# Implicit addition between adjacent lengths ("3ft 6in"). Binds tighter than
# the signs so "-3ft 6in" negates the whole length.
JOIN = "&"

# Binary operators plus the unary forms the shunting-yard upgrades +/- into.
OPERATORS: Dict[str, Operator] = {
    "*": Operator(precedence=3, arity=2),
    "/": Operator(precedence=3, arity=2),
    "+": Operator(precedence=1, arity=2),
    "-": Operator(precedence=1, arity=2),
    "u+": Operator(precedence=100, arity=1),
    "u-": Operator(precedence=100, arity=1),
    JOIN: Operator(precedence=200, arity=2),
}


class Stage(Enum):
    PARSER = "PARSE"
    SOLVER = "SOLVE"


class CompilerError(Exception):
    """
    Raised by any pipeline stage. Fatal to the current compile call.
    str(err) renders as "[PARSE] ..." or "[SOLVE] ...".
    """

    def __init__(self, stage: Stage, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"[{stage.value}] {message}")
