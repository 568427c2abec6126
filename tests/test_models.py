"""Tests for the value model."""

import pytest
from cbor_transcoder.models import (
    Array,
    Bool,
    ByteString,
    Float,
    Integer,
    Map,
    Null,
    NULL,
    Simple,
    Tag,
    TextString,
    UNDEFINED,
    Value,
    from_python,
)


class TestScalarValues:
    """Tests for scalar variants."""

    def test_integer_and_float_are_distinct(self):
        """Test that 42 and 42.0 are different values."""
        assert Integer(42) != Float(42.0)
        assert Integer(42) == Integer(42)

    def test_bool_is_not_integer(self):
        """Test that booleans are kept apart from integers."""
        assert Bool(True) != Integer(1)
        with pytest.raises(TypeError):
            Integer(True)

    def test_float_requires_float(self):
        """Test validation of float payloads."""
        with pytest.raises(TypeError):
            Float(1)

    def test_bytestring_accepts_bytearray(self):
        """Test that mutable buffers are frozen into bytes."""
        value = ByteString(bytearray(b"\x01\x02"))

        assert value.value == b"\x01\x02"
        assert isinstance(value.value, bytes)

    def test_values_are_immutable(self):
        """Test that values cannot be modified after construction."""
        value = TextString("abc")
        with pytest.raises(AttributeError):
            value.value = "xyz"

    def test_text_rejects_surrogates(self):
        """Test that text must be Unicode scalar values."""
        with pytest.raises(ValueError, match=r"U\+D800 at index 1"):
            TextString("a\ud800")
        with pytest.raises(ValueError):
            from_python("\udfff")

        assert TextString("\U0001f600").value == "\U0001f600"

    def test_value_is_abstract(self):
        """Test that the base class cannot be instantiated."""
        with pytest.raises(TypeError):
            Value()

    def test_null_singleton_equality(self):
        """Test that every Null equals the NULL constant."""
        assert Null() == NULL
        assert hash(Null()) == hash(NULL)


class TestContainers:
    """Tests for Array, Map and Tag."""

    def test_array_freezes_list(self):
        """Test that list items are stored as a tuple."""
        array = Array([Integer(1), Integer(2)])

        assert array.items == (Integer(1), Integer(2))
        assert len(array) == 2

    def test_array_rejects_non_values(self):
        """Test that raw Python objects are rejected as items."""
        with pytest.raises(TypeError):
            Array([1, 2])

    def test_map_preserves_order_and_duplicates(self):
        """Test that map pairs keep insertion order including repeated keys."""
        pairs = [
            (TextString("b"), Integer(1)),
            (TextString("a"), Integer(2)),
            (TextString("b"), Integer(3)),
        ]
        value = Map(pairs)

        assert value.keys() == (TextString("b"), TextString("a"), TextString("b"))
        assert value.get(TextString("b")) == Integer(3)
        assert value.get(TextString("missing")) is None

    def test_map_rejects_bad_pairs(self):
        """Test validation of map pairs."""
        with pytest.raises(ValueError):
            Map([(TextString("a"),)])
        with pytest.raises(TypeError):
            Map([("a", Integer(1))])

    def test_tag_number_range(self):
        """Test that tag numbers must fit in 64 bits."""
        assert Tag(2 ** 64 - 1, NULL).number == 2 ** 64 - 1
        with pytest.raises(ValueError):
            Tag(2 ** 64, NULL)
        with pytest.raises(ValueError):
            Tag(-1, NULL)


class TestSimpleValues:
    """Tests for Simple values."""

    def test_undefined(self):
        """Test the undefined constant."""
        assert UNDEFINED.code == 23
        assert UNDEFINED.is_undefined

    @pytest.mark.parametrize("code", [20, 21, 22, 24, 31, 256, -1])
    def test_reserved_codes_rejected(self, code):
        """Test that codes with other encodings are rejected."""
        with pytest.raises(ValueError):
            Simple(code)

    @pytest.mark.parametrize("code", [0, 19, 32, 255])
    def test_valid_codes(self, code):
        """Test valid simple codes."""
        assert Simple(code).code == code


class TestPythonConversion:
    """Tests for from_python and to_python."""

    def test_from_python_nested(self):
        """Test building a tree from plain Python objects."""
        value = from_python({"a": [1, 2.5, None, True], "b": b"\x00"})

        assert value == Map([
            (TextString("a"), Array([Integer(1), Float(2.5), NULL, Bool(True)])),
            (TextString("b"), ByteString(b"\x00")),
        ])

    def test_to_python_nested(self):
        """Test projecting a tree onto Python objects."""
        value = Map([
            (TextString("x"), Tag(1, Integer(5))),
            (TextString("y"), Array([UNDEFINED, TextString("z")])),
        ])

        assert value.to_python() == {"x": 5, "y": [None, "z"]}

    def test_to_python_duplicate_keys_become_pairs(self):
        """Test that duplicate keys are not silently collapsed."""
        value = Map([(TextString("a"), Integer(1)), (TextString("a"), Integer(2))])

        assert value.to_python() == [("a", 1), ("a", 2)]

    def test_to_python_unhashable_keys_become_pairs(self):
        """Test maps keyed by arrays."""
        value = Map([(Array([Integer(1)]), Integer(2))])

        assert value.to_python() == [([1], 2)]

    def test_from_python_rejects_unknown_types(self):
        """Test that unsupported objects are rejected."""
        with pytest.raises(TypeError):
            from_python(object())
