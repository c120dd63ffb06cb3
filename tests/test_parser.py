import pytest

from tnl.errors import ParseError
from tnl.parser import parse, parse_single, parse_value, tokenize
from tnl.values import Array, Boolean, Float, Ident, Integer, Null, Object, String


def test_parse_object_ident_and_raw_string():
    obj = parse('test r"file.ext"', 0, 0, None)
    assert isinstance(obj.elements[0], Ident)
    assert obj.elements[0].value == "test"
    assert obj.elements[1].as_str() == "file.ext"


def test_parse_value_with_underscores():
    value = parse_value("1_0010", 0, 0, None)
    assert value.to_u32() == 10010


def test_attributes_and_elements():
    obj = parse('a: 1\nb: "x", c\nnull true false')
    assert obj.attributes == {"a": Integer(1), "b": String("x")}
    assert obj.elements == [Ident("c"), Null(), Boolean(True), Boolean(False)]


def test_negative_numbers():
    value = parse_value("- 5")
    assert value == Integer(5, minus=True)
    assert value.to_i8() == -5
    assert (value.location.col, value.location.end_col) == (0, 3)
    assert parse_value("-1.5") == Float(-1.5)


def test_named_object_with_namespace():
    obj = parse("@ns:item { key: true, 3 }")
    item = obj.elements[0]
    assert isinstance(item, Object)
    assert (item.ns, item.name) == ("ns", "item")
    assert item.attributes == {"key": Boolean(True)}
    assert item.elements == [Integer(3)]


def test_named_object_without_body():
    obj = parse("@item")
    assert obj.elements == [Object(name="item")]


def test_anonymous_object_and_arrays():
    obj = parse("{ x: [1, 2 3,] } []")
    inner = obj.elements[0]
    assert inner.attributes["x"] == Array([Integer(1), Integer(2), Integer(3)])
    assert obj.elements[1] == Array()


def test_empty_input():
    assert parse("").elements == []
    assert parse_value("   // only a comment") is None


def test_root_location_covers_content():
    obj = parse("a\nbc")
    loc = obj.location
    assert (loc.row, loc.col, loc.end_row, loc.end_col) == (0, 0, 1, 2)


def test_start_offset_is_applied():
    obj = parse("x", 3, 2, "doc.tnl")
    loc = obj.elements[0].location
    assert (loc.row, loc.col) == (3, 2)
    assert loc.file == "doc.tnl"


def test_duplicated_attribute():
    with pytest.raises(ParseError) as info:
        parse("a: 1\na: 2")
    assert info.value.message == "duplicated attribute `a`"
    assert (info.value.row, info.value.col) == (0, 0)


def test_code_block_location_excludes_fences():
    value = parse_value("`abc`")
    assert value == String("abc")
    assert (value.location.col, value.location.end_col) == (1, 4)


def test_string_escapes():
    assert parse_value(r'"a\n\u{e9}\"\\"') == String('a\né"\\')


def test_raw_string_with_hashes():
    assert parse_value('r#"a"b"#') == String('a"b')


def test_comments_are_skipped():
    obj = parse("/* block */ a // line\n b")
    assert obj.elements == [Ident("a"), Ident("b")]


def test_hex_and_max_integer():
    assert parse_value("0xff") == Integer(255)
    assert parse_value("18446744073709551615").to_u64() == 18446744073709551615


def test_integer_overflow():
    with pytest.raises(ParseError):
        parse_value("18446744073709551616")


@pytest.mark.parametrize("text", ['"abc', "}", "{ a", "1abc", "[1", "@", "- x", "`x"])
def test_syntax_errors(text):
    with pytest.raises(ParseError):
        parse(text)


def test_unexpected_end_message():
    with pytest.raises(ParseError) as info:
        parse("{ a")
    assert info.value.message == "unexpected end of input"


def test_parse_value_rejects_trailing_tokens():
    with pytest.raises(ParseError):
        parse_value("1 2")


def test_parse_single():
    assert parse_single("[true]") == Array([Boolean(True)])
    with pytest.raises(ParseError):
        parse_single("")


def test_tokenize_kinds():
    kinds = [t.kind for t in tokenize("@x: [1, -2.5]")]
    assert kinds == [
        "symbol", "ident", "symbol", "symbol", "int", "symbol", "symbol", "float", "symbol",
    ]
    assert [t.text for t in tokenize("a null")] == ["a", "null"]