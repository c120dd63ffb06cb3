import pytest
from hypothesis import given
from hypothesis import strategies as st

from tnl.errors import AccessError, AccessErrorKind, Location
from tnl.values import (
    Array,
    Boolean,
    Float,
    Ident,
    Integer,
    Null,
    Object,
    String,
    ValueType,
    Visitor,
)

magnitudes = st.integers(min_value=0, max_value=(1 << 64) - 1)


class Recorder(Visitor):
    def visit_object(self, value):
        return ("object", value.name)

    def visit_array(self, value):
        return ("array", len(value.elements))

    def visit_null(self, value):
        return ("null", None)

    def visit_bool(self, value):
        return ("bool", value.value)

    def visit_int(self, value):
        return ("int", value.value)

    def visit_float(self, value):
        return ("float", value.value)

    def visit_string(self, value):
        return ("string", value.value)

    def visit_ident(self, value):
        return ("ident", value.value)


def all_kinds():
    return (Null(), Boolean(False), Integer(0), Float(0.0),
            Ident("a"), String("a"), Array(), Object())


def test_value_type_labels():
    assert [str(v.value_type) for v in all_kinds()] == [
        "`null`", "{bool}", "{int}", "{float}", "{ident}", "{string}", "{array}", "{object}",
    ]


def test_value_type_tags():
    assert [int(v.value_type) for v in all_kinds()] == list(range(8))


@pytest.mark.parametrize(
    "value, expected",
    [
        (Object(name="box"), ("object", "box")),
        (Array([Null(), Null()]), ("array", 2)),
        (Null(), ("null", None)),
        (Boolean(True), ("bool", True)),
        (Integer(7), ("int", 7)),
        (Float(1.5), ("float", 1.5)),
        (String("s"), ("string", "s")),
        (Ident("i"), ("ident", "i")),
    ],
)
def test_accept_dispatches_by_kind(value, expected):
    assert value.accept(Recorder()) == expected


def test_value_types_of_classes():
    assert [v.value_type for v in all_kinds()] == [
        ValueType.NULL, ValueType.BOOL, ValueType.INT, ValueType.FLOAT,
        ValueType.IDENT, ValueType.STRING, ValueType.ARRAY, ValueType.OBJECT,
    ]


def test_as_str_only_for_text():
    assert String("abc").as_str() == "abc"
    assert Ident("abc").as_str() == "abc"
    assert Integer(1).as_str() is None
    assert Null().as_str() is None


def test_equality_ignores_location():
    assert Ident("x", Location("f", 1, 1, 1, 2)) == Ident("x")
    assert Ident("x") != Ident("y")


def test_integer_rejects_out_of_range_magnitude():
    with pytest.raises(ValueError):
        Integer(-1)
    with pytest.raises(ValueError):
        Integer(1 << 64)


def test_i8_boundaries():
    assert Integer(0x7F).to_i8() == 0x7F
    assert Integer(0x80).to_i8() is None
    assert Integer(0x80, minus=True).to_i8() is None


def test_u8_boundaries():
    assert Integer(0xFF).to_u8() == 0xFF
    assert Integer(0x100).to_u8() is None
    assert Integer(0, minus=True).to_u8() is None


def test_u32_and_u64():
    assert Integer(0xFFFFFFFF).to_u32() == 0xFFFFFFFF
    assert Integer(0x100000000).to_u32() is None
    assert Integer(3, minus=True).to_u64() is None


@given(magnitudes, st.booleans())
def test_signed_conversions_agree_with_sign(value, minus):
    number = Integer(value, minus=minus)
    for method, bits in ((number.to_i16, 16), (number.to_i32, 32), (number.to_i64, 64)):
        result = method()
        if value >= 1 << (bits - 1):
            assert result is None
        else:
            assert abs(result) == value
            assert (result < 0) == (minus and value > 0)


@given(magnitudes)
def test_unsigned_conversions_reject_minus(value):
    number = Integer(value, minus=True)
    assert [number.to_u8(), number.to_u16(), number.to_u32(), number.to_u64()] == [None] * 4


@given(magnitudes)
def test_u64_returns_magnitude(value):
    assert Integer(value).to_u64() == value


def make_object():
    return Object(
        attributes={
            "flag": Boolean(True),
            "count": Integer(4),
            "ratio": Float(0.5),
            "kind": Ident("tag"),
            "title": String("hello"),
            "items": Array([Integer(1)]),
            "child": Object(name="inner"),
        },
        location=Location("doc", 0, 0, 9, 0),
    )


def test_query_returns_typed_values():
    obj = make_object()
    assert obj.query_bool("flag").value is True
    assert obj.query_int("count").value == 4
    assert obj.query_float("ratio").value == 0.5
    assert obj.query_ident("kind").value == "tag"
    assert obj.query_string("title").value == "hello"
    assert obj.query_array("items").elements == [Integer(1)]
    assert obj.query_object("child").name == "inner"


def test_query_missing_attribute():
    with pytest.raises(AccessError) as info:
        make_object().query_bool("absent")
    assert info.value.kind is AccessErrorKind.ATTRIBUTE_NOT_FOUND
    assert info.value.details == ("absent",)


def test_query_wrong_type():
    with pytest.raises(AccessError) as info:
        make_object().query_float("count")
    assert info.value.kind is AccessErrorKind.WRONG_TYPE
    assert info.value.details == (ValueType.FLOAT, ValueType.INT)


def test_query_array_rejects_object():
    with pytest.raises(AccessError) as info:
        make_object().query_array("child")
    assert info.value.details == (ValueType.ARRAY, ValueType.OBJECT)


def test_query_ident_or_string():
    obj = make_object()
    assert obj.query_ident_or_string("kind")[1] == "tag"
    assert obj.query_ident_or_string("title")[1] == "hello"
    with pytest.raises(AccessError) as info:
        obj.query_ident_or_string("count")
    assert info.value.kind is AccessErrorKind.WRONG_TYPE2
    assert info.value.details == (ValueType.STRING, ValueType.IDENT, ValueType.INT)


def test_attributes_keep_insertion_order():
    assert list(make_object().attributes) == [
        "flag", "count", "ratio", "kind", "title", "items", "child",
    ]