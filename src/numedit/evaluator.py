# -----------------------------------------------------------------------------
# Evaluator: run a postfix token stream into a unit-tagged Solution
# Purpose:
#   Stack machine over (value, unit) pairs. Unit tokens scale the value below
#   them; operators combine operands with the unit-propagation rules below.
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
import math
from typing import Callable, Dict, List, Optional

from .types import JOIN, OPERATORS, CompilerError, Solution, Stage, Token, TokenKind, Unit
from .units import UnitTable

logger = logging.getLogger(__name__)


def _solver_error(message: str) -> CompilerError:
    return CompilerError(Stage.SOLVER, message)


def _finite(solution: Solution) -> Solution:
    if not math.isfinite(solution.value):
        raise _solver_error("Result out of range")
    return solution


# ---- Binary operators --------------------------------------------------------
# lhs is the deeper stack entry, rhs the top one.

def _multiply(lhs: Solution, rhs: Solution, table: UnitTable) -> Solution:
    # a product of lengths is not a length here; it collapses to the base unit
    return Solution(lhs.value * rhs.value, table.base_unit())


def _divide(lhs: Solution, rhs: Solution, table: UnitTable) -> Solution:
    if rhs.value == 0:
        raise _solver_error("Division by zero")
    quotient = lhs.magnitude / rhs.magnitude
    if not rhs.units.is_generic:
        return Solution(quotient * rhs.units.scale, rhs.units)
    if not lhs.units.is_generic:
        return Solution(quotient * lhs.units.scale, lhs.units)
    return Solution(quotient, table.base_unit())


def _additive(sign: float) -> Callable[[Solution, Solution, UnitTable], Solution]:
    def combine(lhs: Solution, rhs: Solution, table: UnitTable) -> Solution:
        if lhs.units.is_generic and rhs.units.is_generic:
            # stays generic so a grouped sum still adopts a neighbouring unit
            return Solution(lhs.value + sign * rhs.value, Unit())
        if rhs.units.is_generic:
            # bare number joins the concrete side in its display unit
            return Solution((lhs.magnitude + sign * rhs.magnitude) * lhs.units.scale, lhs.units)
        if lhs.units.is_generic:
            return Solution((lhs.magnitude + sign * rhs.magnitude) * rhs.units.scale, rhs.units)
        # both already in the shared base unit
        return Solution(lhs.value + sign * rhs.value, table.base_unit())
    return combine


_BINARY: Dict[str, Callable[[Solution, Solution, UnitTable], Solution]] = {
    "*": _multiply,
    "/": _divide,
    "+": _additive(1.0),
    "-": _additive(-1.0),
    JOIN: _additive(1.0),
}

_UNARY: Dict[str, Callable[[Solution], Solution]] = {
    "u+": lambda operand: operand,
    "u-": lambda operand: Solution(-operand.value, operand.units),
}


def evaluate(postfix: List[Token], table: UnitTable, previous: Optional[Solution] = None) -> Solution:
    """
    Evaluate a postfix token list.

    - Without any unit token, the result borrows `previous`'s unit (unless it
      is generic) or the system default unit.
    - A result tagged with another system's unit is re-tagged with the active
      system's scale-1 unit; the value itself is already in the shared base.

    Raises CompilerError (Stage.SOLVER) on operand underflow, unsupported
    tokens, non-finite intermediate values, or a final stack that does not
    hold exactly one entry.
    """
    stack: List[Solution] = []
    explicit_units = False

    for inst in postfix:
        if inst.kind is TokenKind.NUMBER:
            stack.append(Solution(inst.value, Unit()))

        elif inst.kind is TokenKind.UNIT:
            unit = table.lookup(inst.text)
            if unit is None:
                raise _solver_error(f"Unknown unit '{inst.text}'")
            if not stack:
                raise _solver_error("Expression is malformed")
            operand = stack.pop()
            stack.append(_finite(Solution(operand.value * unit.scale, unit)))
            explicit_units = True

        elif inst.kind is TokenKind.OPERATOR:
            op = OPERATORS.get(inst.text)
            if op is None:
                raise _solver_error(f"Unknown operator '{inst.text}'")
            if len(stack) < op.arity:
                raise _solver_error("Expression is malformed")
            if op.arity == 2:
                rhs = stack.pop()
                lhs = stack.pop()
                stack.append(_finite(_BINARY[inst.text](lhs, rhs, table)))
            else:
                stack.append(_UNARY[inst.text](stack.pop()))

        elif inst.kind in (TokenKind.SYMBOL, TokenKind.PAREN_OPEN, TokenKind.PAREN_CLOSE):
            raise _solver_error(f"Unexpected token '{inst.text}'")

    if len(stack) != 1:
        logger.debug("Indeterminate stack: %s", stack)
        raise _solver_error("Indeterminate Expression")

    result = stack[0]

    if not explicit_units:
        if previous is None or previous.units.is_generic:
            units = table.default_unit()
        else:
            units = previous.units
        result = _finite(Solution(result.value * units.scale, units))

    if result.units.system is not table.system:
        result = Solution(result.value, table.base_unit())

    return result
