import pytest

from numedit.tokenizer import scan
from numedit.types import CompilerError, Stage, TokenKind, UnitSystem
from numedit.units import UnitTable

METRIC = UnitTable.for_system(UnitSystem.METRIC)
IMPERIAL = UnitTable.for_system(UnitSystem.IMPERIAL)


def _kinds(tokens):
    return [t.kind for t in tokens]


def test_mixed_lengths_expression():
    tokens = scan("3ft 6in + 2'", METRIC)
    assert _kinds(tokens) == [
        TokenKind.NUMBER, TokenKind.UNIT, TokenKind.NUMBER, TokenKind.UNIT,
        TokenKind.OPERATOR, TokenKind.NUMBER, TokenKind.UNIT,
    ]
    assert [t.text for t in tokens] == ["3", "ft", "6", "in", "+", "2", "'"]
    assert [t.position for t in tokens] == [0, 1, 4, 5, 8, 10, 11]
    assert tokens[1].value == pytest.approx(0.3048)
    assert tokens[3].value == pytest.approx(0.0254)


def test_unit_values_follow_active_table():
    tokens = scan("1ft", IMPERIAL)
    assert tokens[1].value == 12000.0


def test_hex_and_binary_literals():
    hex_tok, = scan("0x1F", METRIC)
    bin_tok, = scan("0b101", METRIC)
    assert hex_tok.kind is TokenKind.NUMBER and hex_tok.value == 31.0
    assert hex_tok.text == "0x1F"
    assert bin_tok.value == 5.0
    assert scan("0XfF", METRIC)[0].value == 255.0


def test_leading_zero_is_plain_decimal():
    assert scan("0", METRIC)[0].value == 0.0
    assert scan("0.5", METRIC)[0].value == 0.5
    assert scan("007", METRIC)[0].value == 7.0


def test_comma_and_configured_decimal_point():
    assert scan("1,5", METRIC)[0].value == 1.5
    tok, = scan("2;25", METRIC, decimal_point=";")
    assert tok.value == 2.25
    assert tok.text == "2;25"


def test_greedy_operators_split_sign():
    tokens = scan("3*-4", METRIC)
    assert [t.text for t in tokens] == ["3", "*", "-", "4"]
    assert _kinds(tokens)[1:3] == [TokenKind.OPERATOR, TokenKind.OPERATOR]


def test_unknown_letters_become_symbols():
    tokens = scan("2 foo", METRIC)
    assert tokens[1].kind is TokenKind.SYMBOL
    assert tokens[1].text == "foo"


def test_whitespace_only_gives_no_tokens():
    assert scan("   ", METRIC) == []


@pytest.mark.parametrize("text", ["", "1.2.3", "1,2.3", "0x", "0bz", "(1+2", "1+2)", "3 # 4", "((2)"])
def test_parser_errors(text):
    with pytest.raises(CompilerError) as exc:
        scan(text, METRIC)
    assert exc.value.stage is Stage.PARSER
    assert str(exc.value).startswith("[PARSE]")


def test_unknown_character_message():
    with pytest.raises(CompilerError, match="Unknown character '#'"):
        scan("3 # 4", METRIC)


@pytest.mark.parametrize("text", ["9" * 400, "0x" + "F" * 300, "0b" + "1" * 1100])
def test_literal_out_of_range(text):
    with pytest.raises(CompilerError, match="Numeric literal out of range") as exc:
        scan(text, METRIC)
    assert exc.value.stage is Stage.PARSER
