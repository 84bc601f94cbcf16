# -----------------------------------------------------------------------------
# Tokenizer: finite-state scanner for numeric edit-box expressions
# Purpose:
#   Turn raw text such as "3ft 6in + 2'" or "0x1F * 2" into an ordered list of
#   Tokens (numbers, operators, parentheses, units, symbols).
# Notes:
#   - Operators match greedy-longest against the operator registry.
#   - Letters (plus ' and ") form unit/symbol runs, classified via the unit table.
#   - The scan cursor is local to each call.
# -----------------------------------------------------------------------------

# src/numedit/tokenizer.py
from __future__ import annotations
import logging
import math
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import List

from .types import OPERATORS, CompilerError, Stage, Token, TokenKind
from .units import UnitTable

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(" \t\n\r\v\f")
FIRST_NUMERIC = frozenset(string.digits)
ADDITIONAL_NUMERIC = frozenset(".," + string.digits)
OPERATOR_CHARS = frozenset("*+-/")
UNIT_CHARS = frozenset(string.ascii_letters + "'\"")
HEX_DIGITS = frozenset(string.hexdigits)
BIN_DIGITS = frozenset("01")

# Operators that can appear literally in the input (the unary forms are
# produced later by the shunting-yard converter).
_SCANNABLE_OPERATORS = frozenset(op for op in OPERATORS if set(op) <= OPERATOR_CHARS)


class _State(Enum):
    NEW_TOKEN = auto()
    NUMERIC_LITERAL = auto()
    PREFIXED_NUMERIC_LITERAL = auto()
    HEX_NUMERIC_LITERAL = auto()
    BIN_NUMERIC_LITERAL = auto()
    UNIT_OR_SYMBOL = auto()
    PAREN_OPEN = auto()
    PAREN_CLOSE = auto()
    OPERATOR = auto()
    COMPLETE_TOKEN = auto()


@dataclass
class _Cursor:
    text: str
    pos: int = 0

    def peek(self) -> str:
        # "" marks end of input
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def advance(self) -> None:
        self.pos += 1


def _parse_error(message: str) -> CompilerError:
    return CompilerError(Stage.PARSER, message)


def _could_extend(candidate: str) -> bool:
    return any(op.startswith(candidate) for op in _SCANNABLE_OPERATORS)


def scan(text: str, table: UnitTable, decimal_point: str = ".") -> List[Token]:
    """
    Scan `text` into tokens.

    Parameters
    ----------
    text : str
        The expression typed by the user.
    table : UnitTable
        Active unit table; decides whether a letter run is a Unit or a Symbol.
    decimal_point : str
        Locale decimal separator. Accepted inside numbers in addition to
        '.' and ','; any of them acts as the (single) decimal delimiter.

    Raises
    ------
    CompilerError (Stage.PARSER)
        Empty input, unknown character, unknown operator, malformed or
        out-of-range number, or unbalanced parentheses.
    """
    if not text:
        raise _parse_error("No input.")

    cursor = _Cursor(text)
    tokens: List[Token] = []

    state = _State.NEW_TOKEN
    current = ""          # characters of the token being built
    digits = ""           # body of a hex/binary literal (prefix excluded)
    token_start = 0
    balance = 0
    decimal_found = False
    pending: Token | None = None

    while True:
        ch = cursor.peek()

        if state is _State.NEW_TOKEN:
            token_start = cursor.pos
            current = ""
            decimal_found = False
            pending = None

            if ch == "":
                if balance != 0:
                    raise _parse_error("Parenthesis '(' & ')' not balanced")
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Tokens for %r:\n%s", text, "\n".join(t.describe() for t in tokens))
                return tokens
            elif ch in WHITESPACE:
                cursor.advance()
            elif ch in FIRST_NUMERIC:
                current = ch
                cursor.advance()
                # a leading zero may introduce 0x / 0b
                state = _State.PREFIXED_NUMERIC_LITERAL if ch == "0" else _State.NUMERIC_LITERAL
            elif ch in OPERATOR_CHARS:
                # not consumed here; the operator state grows the match
                state = _State.OPERATOR
            elif ch == "(":
                state = _State.PAREN_OPEN
            elif ch == ")":
                state = _State.PAREN_CLOSE
            elif ch in UNIT_CHARS:
                current = ch
                cursor.advance()
                state = _State.UNIT_OR_SYMBOL
            else:
                raise _parse_error(f"Unknown character '{ch}'")

        elif state is _State.NUMERIC_LITERAL:
            if ch and (ch in ADDITIONAL_NUMERIC or ch == decimal_point):
                if ch not in FIRST_NUMERIC:
                    # any accepted delimiter stands for the decimal point
                    if decimal_found:
                        raise _parse_error("Bad numeric construction")
                    decimal_found = True
                    ch = "."
                current += ch
                cursor.advance()
            else:
                value = float(current)
                if not math.isfinite(value):
                    raise _parse_error("Numeric literal out of range")
                pending = Token(token_start, TokenKind.NUMBER, text[token_start:cursor.pos], value)
                state = _State.COMPLETE_TOKEN

        elif state is _State.PREFIXED_NUMERIC_LITERAL:
            if ch in ("x", "X"):
                current += ch
                digits = ""
                cursor.advance()
                state = _State.HEX_NUMERIC_LITERAL
            elif ch in ("b", "B"):
                current += ch
                digits = ""
                cursor.advance()
                state = _State.BIN_NUMERIC_LITERAL
            else:
                # plain decimal after all
                state = _State.NUMERIC_LITERAL

        elif state in (_State.HEX_NUMERIC_LITERAL, _State.BIN_NUMERIC_LITERAL):
            hex_mode = state is _State.HEX_NUMERIC_LITERAL
            allowed = HEX_DIGITS if hex_mode else BIN_DIGITS
            if ch and ch in allowed:
                current += ch
                digits += ch
                cursor.advance()
            elif not digits:
                raise _parse_error("Invalid prefixed numeric literal")
            else:
                # the terminating character is left for the next token
                try:
                    value = float(int(digits, 16 if hex_mode else 2))
                except OverflowError:
                    raise _parse_error("Numeric literal out of range") from None
                pending = Token(token_start, TokenKind.NUMBER, current, value)
                state = _State.COMPLETE_TOKEN

        elif state is _State.OPERATOR:
            if ch and ch in OPERATOR_CHARS and _could_extend(current + ch):
                current += ch
                cursor.advance()
            elif current in _SCANNABLE_OPERATORS:
                pending = Token(token_start, TokenKind.OPERATOR, current)
                state = _State.COMPLETE_TOKEN
            else:
                raise _parse_error(f"Unknown operator: {current + ch}")

        elif state is _State.UNIT_OR_SYMBOL:
            if ch and ch in UNIT_CHARS:
                current += ch
                cursor.advance()
            else:
                unit = table.lookup(current)
                if unit is not None:
                    pending = Token(token_start, TokenKind.UNIT, current, unit.scale)
                else:
                    pending = Token(token_start, TokenKind.SYMBOL, current)
                state = _State.COMPLETE_TOKEN

        elif state is _State.PAREN_OPEN:
            cursor.advance()
            balance += 1
            pending = Token(token_start, TokenKind.PAREN_OPEN, ch)
            state = _State.COMPLETE_TOKEN

        elif state is _State.PAREN_CLOSE:
            if balance == 0:
                raise _parse_error("Parenthesis '(' & ')' not balanced")
            cursor.advance()
            balance -= 1
            pending = Token(token_start, TokenKind.PAREN_CLOSE, ch)
            state = _State.COMPLETE_TOKEN

        elif state is _State.COMPLETE_TOKEN:
            tokens.append(pending)
            state = _State.NEW_TOKEN
