import pytest

from numedit.shunting_yard import to_postfix
from numedit.tokenizer import scan
from numedit.types import CompilerError, Stage, Token, TokenKind, UnitSystem
from numedit.units import UnitTable

METRIC = UnitTable.for_system(UnitSystem.METRIC)


def _rpn(text):
    return [t.text for t in to_postfix(scan(text, METRIC))]


def test_precedence():
    assert _rpn("2+3*4") == ["2", "3", "4", "*", "+"]
    assert _rpn("(1+2)*3") == ["1", "2", "+", "3", "*"]


def test_left_associative():
    assert _rpn("8-2-1") == ["8", "2", "-", "1", "-"]
    assert _rpn("8/2/2") == ["8", "2", "/", "2", "/"]


def test_unary_resolution():
    assert _rpn("-3+4") == ["3", "u-", "4", "+"]
    assert _rpn("3*-4") == ["3", "4", "u-", "*"]
    assert _rpn("(-3)") == ["3", "u-"]
    assert _rpn("+2") == ["2", "u+"]


def test_stacked_signs():
    assert _rpn("--3") == ["3", "u-", "u-"]


def test_units_follow_their_operand():
    assert _rpn("2+3ft") == ["2", "3", "ft", "+"]
    assert _rpn("(1+2)ft") == ["1", "2", "+", "ft"]
    assert _rpn("3ft-2") == ["3", "ft", "2", "-"]


def test_implied_addition_between_lengths():
    assert _rpn("3ft 6in") == ["3", "ft", "6", "in", "&"]
    assert _rpn("3ft 6in + 2'") == ["3", "ft", "6", "in", "&", "2", "'", "+"]


def test_joined_length_binds_tighter_than_signs():
    assert _rpn("-3ft 6in") == ["3", "ft", "6", "in", "&", "u-"]
    assert _rpn("3ft 6in*2") == ["3", "ft", "6", "in", "&", "2", "*"]


def test_bare_numbers_are_not_joined():
    assert _rpn("1 2") == ["1", "2"]


def test_symbol_is_rejected():
    with pytest.raises(CompilerError) as exc:
        _rpn("2 foo")
    assert exc.value.stage is Stage.SOLVER


def test_stray_close_parenthesis():
    with pytest.raises(CompilerError, match="Unexpected close parenthesis") as exc:
        to_postfix([Token(0, TokenKind.PAREN_CLOSE, ")")])
    assert exc.value.stage is Stage.SOLVER


def test_close_without_open_after_operators():
    tokens = [Token(0, TokenKind.NUMBER, "1", 1.0), Token(1, TokenKind.OPERATOR, "+"),
              Token(2, TokenKind.NUMBER, "2", 2.0), Token(3, TokenKind.PAREN_CLOSE, ")")]
    with pytest.raises(CompilerError, match="No open parenthesis found"):
        to_postfix(tokens)


def test_unmatched_open_parenthesis():
    tokens = [Token(0, TokenKind.PAREN_OPEN, "("), Token(1, TokenKind.NUMBER, "1", 1.0)]
    with pytest.raises(CompilerError, match="Unmatched open parenthesis"):
        to_postfix(tokens)
