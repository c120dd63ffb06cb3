import math

import pytest

from tnl.accessor import Accessor, ArrayAccessor, ObjectAccessor
from tnl.errors import AccessError, AccessErrorKind
from tnl.parser import parse
from tnl.values import Float, Integer, Null, String, ValueType

DOC = """title: "report"
kind: summary
enabled: false
size: 300
offset: -12
scale: 0.5
missing: null
list: [10, 20]
@meta { version: 2 first second }
"""


@pytest.fixture
def root():
    return Accessor(parse(DOC)).as_object()


def test_read_attributes(root):
    assert root.attribute("title").as_str() == "report"
    assert root.attribute("kind").as_ident() == "summary"
    assert root.attribute("kind").as_str() == "summary"
    assert root.attribute("enabled").as_bool() is False
    assert root.attribute("size").as_u16() == 300
    assert root.attribute("offset").as_i32() == -12
    assert root.attribute("scale").as_f64() == 0.5
    assert root.attribute("missing").is_null()
    assert not root.attribute("size").is_null()


def test_int_out_of_range(root):
    with pytest.raises(AccessError) as info:
        root.attribute("size").as_u8()
    assert info.value.kind is AccessErrorKind.OUT_OF_RANGE_FOR
    assert info.value.reason == "out of range for `u8`"


def test_negative_to_unsigned(root):
    with pytest.raises(AccessError) as info:
        root.attribute("offset").as_u64()
    assert info.value.kind is AccessErrorKind.OUT_OF_RANGE_FOR


def test_int_limits():
    assert Accessor(Integer(127, True)).as_i8() == -127
    assert Accessor(Integer(2**64 - 1)).as_u64() == 2**64 - 1
    with pytest.raises(AccessError):
        Accessor(Integer(2**63)).as_i64()


def test_int_wrong_type(root):
    with pytest.raises(AccessError) as info:
        root.attribute("title").as_i64()
    assert info.value.kind is AccessErrorKind.WRONG_TYPE
    assert info.value.details == (ValueType.INT, ValueType.STRING)


def test_float_from_int():
    assert Accessor(Integer(7, True)).as_f64() == -7.0
    assert Accessor(Integer(7)).as_f32() == 7.0


def test_f32_rounding():
    assert Accessor(Float(0.5)).as_f32() == 0.5
    assert Accessor(Float(1e300)).as_f32() == math.inf
    assert Accessor(Float(-1e300)).as_f32() == -math.inf


def test_float_wrong_type():
    with pytest.raises(AccessError) as info:
        Accessor(String("x")).as_f64()
    assert info.value.kind is AccessErrorKind.WRONG_TYPE2
    assert info.value.details == (ValueType.INT, ValueType.FLOAT, ValueType.STRING)


def test_str_wrong_type():
    value = Integer(1)
    with pytest.raises(AccessError) as info:
        Accessor(value).as_str()
    assert info.value.details == (ValueType.STRING, ValueType.IDENT, ValueType.INT)
    assert info.value.location == value.location


def test_ident_rejects_string(root):
    with pytest.raises(AccessError):
        root.attribute("title").as_ident()


def test_bool_wrong_type():
    with pytest.raises(AccessError):
        Accessor(Null()).as_bool()


def test_array_index(root):
    items = root.attribute("list").as_array()
    assert len(items) == 2
    assert items.index(1).as_u8() == 20


def test_array_index_out_of_range(root):
    items = root.attribute("list").as_array()
    with pytest.raises(AccessError) as info:
        items.index(5)
    assert info.value.kind is AccessErrorKind.INDEX_OUT_OF_RANGE
    assert info.value.reason == "index(5) out of range(0..2)"


def test_object_elements_as_array(root):
    meta = root.index(0)
    elements = meta.as_array()
    assert elements.index(0).as_ident() == "first"
    assert meta.as_object().index(1).as_ident() == "second"
    assert meta.as_object().attribute("version").as_i64() == 2


def test_as_array_wrong_type(root):
    with pytest.raises(AccessError) as info:
        root.attribute("size").as_array()
    assert info.value.details == (ValueType.ARRAY, ValueType.OBJECT, ValueType.INT)


def test_as_object_wrong_type(root):
    with pytest.raises(AccessError) as info:
        root.attribute("list").as_object()
    assert info.value.details == (ValueType.OBJECT, ValueType.ARRAY)


def test_attribute_not_found(root):
    with pytest.raises(AccessError) as info:
        root.attribute("absent")
    assert info.value.kind is AccessErrorKind.ATTRIBUTE_NOT_FOUND
    assert info.value.reason == "attribute `absent` not found"


def test_optional_attribute(root):
    assert root.optional_attribute("absent") is None
    assert root.optional_attribute("title").as_str() == "report"


def test_object_index_out_of_range(root):
    with pytest.raises(AccessError):
        root.index(-1)
    with pytest.raises(AccessError):
        root.index(1)


def test_accessor_types(root):
    assert isinstance(root, ObjectAccessor)
    assert isinstance(root.attribute("list").as_array(), ArrayAccessor)
    assert root.attribute("list").as_array().index(0).as_i8() == 10