# -----------------------------------------------------------------------------
# Shunting-yard converter: infix tokens → postfix (RPN) tokens
# Purpose:
#   Reorder scanned tokens so the evaluator can run them on a plain stack.
#   Resolves unary vs binary +/- from the preceding token and inserts the
#   implied join between adjacent lengths ("3ft 6in").
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import List, Optional

from .types import JOIN, OPERATORS, CompilerError, Stage, Token, TokenKind

logger = logging.getLogger(__name__)

# After one of these, +/- are binary; otherwise they are signs.
_OPERAND_END = (TokenKind.NUMBER, TokenKind.UNIT, TokenKind.PAREN_CLOSE)


def _solver_error(message: str) -> CompilerError:
    return CompilerError(Stage.SOLVER, message)


def _push_operator(op_text: str, token: Token, holding: List[Token], output: List[Token]) -> Token:
    incoming = OPERATORS[op_text]
    # Prefix operators have no left operand, so nothing waits to be flushed.
    if incoming.arity == 2:
        while holding and holding[-1].kind is TokenKind.OPERATOR:
            if OPERATORS[holding[-1].text].precedence >= incoming.precedence:
                output.append(holding.pop())
            else:
                break
    op_token = Token(token.position, TokenKind.OPERATOR, op_text)
    holding.append(op_token)
    return op_token


def to_postfix(tokens: List[Token]) -> List[Token]:
    """
    Convert an infix token list to postfix order.
    - Numbers and units go straight to output (already in final order).
    - '(' waits on the holding stack; ')' flushes back to it.
    - Left-associative operators drain holding entries of >= precedence.
    Raises CompilerError (Stage.SOLVER) on stray ')' or unsupported tokens.
    """
    holding: List[Token] = []   # top of stack is the end of the list
    output: List[Token] = []
    previous: Optional[Token] = None

    for token in tokens:
        if token.kind is TokenKind.NUMBER:
            if previous is not None and previous.kind is TokenKind.UNIT:
                # "3ft 6in" reads as the single length "(3ft + 6in)"
                _push_operator(JOIN, token, holding, output)
            output.append(token)
            previous = token

        elif token.kind is TokenKind.UNIT:
            output.append(token)
            previous = token

        elif token.kind is TokenKind.PAREN_OPEN:
            holding.append(token)
            previous = token

        elif token.kind is TokenKind.PAREN_CLOSE:
            if not holding:
                raise _solver_error("Unexpected close parenthesis")
            while holding and holding[-1].kind is not TokenKind.PAREN_OPEN:
                output.append(holding.pop())
            if not holding:
                raise _solver_error("No open parenthesis found")
            holding.pop()
            previous = token

        elif token.kind is TokenKind.OPERATOR:
            op_text = token.text
            if op_text in ("+", "-") and (previous is None or previous.kind not in _OPERAND_END):
                op_text = "u" + op_text
            if op_text not in OPERATORS:
                raise _solver_error(f"Unknown operator '{op_text}'")
            previous = _push_operator(op_text, token, holding, output)

        elif token.kind is TokenKind.SYMBOL:
            raise _solver_error(f"Unsupported token '{token.text}'")

        else:
            raise _solver_error(f"Unexpected token '{token.text}'")

    while holding:
        if holding[-1].kind is TokenKind.PAREN_OPEN:
            raise _solver_error("Unmatched open parenthesis")
        output.append(holding.pop())

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Postfix:\n%s", "\n".join(t.describe() for t in output))
    return output
