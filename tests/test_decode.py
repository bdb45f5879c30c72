"""
JSON decoding functionality tests.

Validates core parsing capabilities including number classification, string
escapes, duplicate keys and the various accepted input forms.
"""

import sys
from io import BytesIO
from io import StringIO

import pytest

import bourne
from bourne import ErrorKind
from bourne import NumberKind
from bourne import Value

from .conftest import EXAMPLE_DOCUMENT


@pytest.mark.parametrize(
    "text,number_kind,expected",
    [
        ("0", NumberKind.INTEGER, 0),
        ("-0", NumberKind.INTEGER, 0),
        ("42", NumberKind.INTEGER, 42),
        ("-17", NumberKind.INTEGER, -17),
        ("12345678901234567890", NumberKind.INTEGER, 12345678901234567890),
        ("1.0", NumberKind.FLOAT, 1.0),
        ("-0.5", NumberKind.FLOAT, -0.5),
        ("1e3", NumberKind.FLOAT, 1000.0),
        ("1E-2", NumberKind.FLOAT, 0.01),
        ("2e+2", NumberKind.FLOAT, 200.0),
    ],
)
def test_number_sub_kinds(
    text: str, number_kind: NumberKind, expected: int | float
) -> None:
    """
    Validates integer and float literals keep their lexical family.
    """
    value = bourne.loads(text)

    assert value.number_kind is number_kind
    assert value.as_number() == expected
    assert type(value.as_number()) is type(expected)


def test_integer_and_float_stay_distinct() -> None:
    assert bourne.loads("1") != bourne.loads("1.0")
    assert bourne.loads("1").as_float() is None
    assert bourne.loads("1.0").as_int() is None


@pytest.mark.parametrize("invalid_digit", ["1\uff10", "0.\uff10", "0e\uff10"])
def test_nonascii_digits_rejected(invalid_digit: str) -> None:
    """
    Validates rejection of non-ASCII digits per JSON specification.

    JSON specifies only ASCII digits are allowed in numeric literals.
    """
    with pytest.raises(bourne.ParseError):
        bourne.loads(invalid_digit)


@pytest.mark.parametrize(
    "invalid_constant",
    ["NaN", "Infinity", "-Infinity", "nan", "TRUE", "Null"],
)
def test_non_json_constants_rejected(invalid_constant: str) -> None:
    """
    Validates rejection of constants outside the JSON grammar.
    """
    with pytest.raises(bourne.ParseError):
        bourne.loads(invalid_constant)


def test_escape_sequences() -> None:
    """
    Validates every short escape and a unicode escape decode correctly.
    """
    value = bourne.loads(r'"\"\\\/\b\f\n\r\t\u0041"')

    assert value.as_str() == '"\\/\b\f\n\r\tA'
    # "/" is never escaped on output
    assert bourne.compact(value) == r'"\"\\/\b\f\n\r\tA"'


def test_surrogate_pair_escapes() -> None:
    value = bourne.loads(r'"\ud83d\ude00 and \u00e9"')

    assert value.as_str() == "\U0001f600 and \u00e9"
    assert bourne.loads(r'"\uD83D\uDE00"').as_str() == "\U0001f600"


def test_raw_unicode_passthrough() -> None:
    assert bourne.loads('"é😀 日本"').as_str() == "é😀 日本"
    assert bourne.loads('"\x7f"').as_str() == "\x7f"


def test_duplicate_keys_last_wins(preserve_order: None) -> None:
    """
    Validates a repeated key keeps its last value at its first position.
    """
    value = bourne.loads('{"a": 1, "b": 2, "a": 3}')

    assert value.get("a").as_int() == 3
    assert list(value.as_object()) == ["a", "b"]
    assert bourne.compact(value) == '{"a":3,"b":2}'


def test_insertion_order(preserve_order: None) -> None:
    s = '{"xkd":1, "kcw":2, "art":3, "hxm":4, "qrt":5, "pad":6, "hoy":7}'

    value = bourne.loads(s)

    assert list(value.as_object()) == [
        "xkd",
        "kcw",
        "art",
        "hxm",
        "qrt",
        "pad",
        "hoy",
    ]
    assert bourne.load(StringIO(s)) == value


def test_sorted_order_when_unordered(unordered: None) -> None:
    value = bourne.loads('{"b": 1, "c": 2, "a": 3}')

    assert list(value.as_object()) == ["a", "b", "c"]


def test_whitespace_insensitive() -> None:
    """
    Validates parsing with various whitespace patterns.
    """
    dense = bourne.loads('{"key":"value","k":["v",1]}')
    sparse = bourne.loads(
        '\n{   "key"    :    "value"    ,\r\n\t  "k" : [ "v" ,\t1 ]    }  \n'
    )

    assert dense == sparse


def test_example_document(preserve_order: None) -> None:
    """
    Validates the end-to-end example document and its compact round trip.
    """
    value = bourne.loads(EXAMPLE_DOCUMENT)

    assert value.is_object()
    assert len(value.as_object()) == 4
    assert value.get("integer").as_int() == 123
    decimal = value.get("decimal")
    assert decimal.get(0).as_float() == 3.14
    assert decimal.get(1).is_float()
    assert [item.to_python() for item in value.get("keywords").as_array()] == [
        True,
        False,
        None,
    ]
    two = value.get("nested").get("two")
    assert two.get("three").as_int() == 3

    assert bourne.compact(value) == EXAMPLE_DOCUMENT


def test_example_document_unordered(unordered: None) -> None:
    value = bourne.loads(EXAMPLE_DOCUMENT)

    assert bourne.compact(value) == (
        '{"decimal":[3.14,1.0],"integer":123,"keywords":[true,false,null],'
        '"nested":{"one":1,"two":{"three":3}}}'
    )


def test_bytes_input() -> None:
    """
    Validates UTF-8 encoded bytes decode like the equivalent text.
    """
    text = '{"name": "café", "n": [1, 2.5]}'

    assert bourne.loads(text.encode("utf-8")) == bourne.loads(text)
    assert bourne.loads(bytearray(b"[true]")) == bourne.json([True])


def test_load_file_objects() -> None:
    assert bourne.load(StringIO("[1, 2]")) == bourne.json([1, 2])
    assert bourne.load(BytesIO(b'{"a": null}')) == bourne.json({"a": None})

    with pytest.raises(TypeError, match="read"):
        bourne.load("[1, 2]")  # type: ignore[arg-type]


def test_extra_data_rejection() -> None:
    """
    Validates rejection of extra data after valid JSON.
    """
    with pytest.raises(bourne.ParseError, match="Extra data"):
        bourne.loads("[1, 2, 3]5")


def test_invalid_escape_rejection() -> None:
    """
    Validates rejection of invalid escape sequences.
    """
    with pytest.raises(bourne.ParseError, match="escape"):
        bourne.loads('["abc\\y"]')


def test_utf8_bom_rejection() -> None:
    """
    Validates rejection of UTF-8 BOM in JSON input.
    """
    bom_json = "[1,2,3]".encode("utf-8-sig").decode("utf-8")

    with pytest.raises(bourne.ParseError) as exc_info:
        bourne.loads(bom_json)
    assert "BOM" in str(exc_info.value)

    with pytest.raises(bourne.ParseError) as exc_info:
        bourne.load(StringIO(bom_json))
    assert "BOM" in str(exc_info.value)

    # BOM inside a string is preserved as character
    bom = "".encode("utf-8-sig").decode("utf-8")
    bom_in_str = f'"{bom}"'
    assert bourne.loads(bom_in_str).as_str() == "\ufeff"


def test_large_integer_limits() -> None:
    """
    Validates handling of very large integer literals.
    """
    maxdigits = sys.get_int_max_str_digits()
    if not maxdigits:
        pytest.skip("integer string conversion is unlimited")

    assert bourne.loads("1" * maxdigits).is_integer()

    with pytest.raises(bourne.ParseError) as exc_info:
        bourne.loads("1" * (maxdigits + 1))
    assert exc_info.value.kind is ErrorKind.INVALID_NUMBER
    assert exc_info.value.msg == "Number too large"


def test_tokens_are_lazy() -> None:
    lexer = bourne.JsonLexer("[1, 2")
    tokens = lexer.tokens()

    first = next(tokens)
    assert first.kind is bourne.TokenKind.LBRACKET
    # Nothing past the first token has been scanned yet
    assert lexer.pos == 1


def test_parse_is_loads() -> None:
    assert bourne.parse("[1]") == bourne.loads("[1]") == Value.array(
        [Value.integer(1)]
    )
