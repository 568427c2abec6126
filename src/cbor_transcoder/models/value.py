"""Value model shared by the CBOR and JSON codecs."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Tuple

MAX_UINT64 = 0xFFFFFFFFFFFFFFFF

# Simple codes that have a dedicated variant (false, true, null) or are
# not well-formed as simple values (24..31).
_RESERVED_SIMPLE_CODES = frozenset([20, 21, 22]) | frozenset(range(24, 32))

_SURROGATE = re.compile(r"[\ud800-\udfff]")


class Value(ABC):
    """Base class of every node in a value tree."""

    __slots__ = ()

    @abstractmethod
    def to_python(self) -> Any:
        """Project this value onto plain Python objects."""
        pass


@dataclass(frozen=True)
class Null(Value):
    """JSON null / CBOR simple value 22."""

    def to_python(self) -> Any:
        return None


@dataclass(frozen=True)
class Bool(Value):
    """Boolean value."""
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise TypeError(f"Bool requires a bool, got {type(self.value).__name__}")

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Integer(Value):
    """
    Integer of arbitrary precision.

    Kept apart from Float: CBOR uses a different major type and JSON
    prints integers without a decimal point.
    """
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer requires an int, got {type(self.value).__name__}")

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Float(Value):
    """IEEE 754 double."""
    value: float

    def __post_init__(self):
        if not isinstance(self.value, float):
            raise TypeError(f"Float requires a float, got {type(self.value).__name__}")

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ByteString(Value):
    """Raw byte sequence."""
    value: bytes

    def __post_init__(self):
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            raise TypeError(f"ByteString requires bytes, got {type(self.value).__name__}")

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class TextString(Value):
    """Unicode text."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"TextString requires a str, got {type(self.value).__name__}")
        surrogate = _SURROGATE.search(self.value)
        if surrogate:
            raise ValueError(f"TextString cannot hold surrogate code point "
                             f"U+{ord(surrogate.group(0)):04X} at index {surrogate.start()}")

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Array(Value):
    """Ordered sequence of values."""
    items: Tuple[Value, ...] = field(default_factory=tuple)

    def __post_init__(self):
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, Value):
                raise TypeError(f"Array items must be Value instances, got {type(item).__name__}")
        object.__setattr__(self, "items", items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class Map(Value):
    """
    Ordered sequence of key/value pairs.

    Keys may be any value and may repeat; pair order is insertion order
    and is never re-sorted.
    """
    pairs: Tuple[Tuple[Value, Value], ...] = field(default_factory=tuple)

    def __post_init__(self):
        pairs = tuple(tuple(pair) for pair in self.pairs)
        for pair in pairs:
            if len(pair) != 2:
                raise ValueError("Map pairs must have exactly two elements")
            key, value = pair
            if not isinstance(key, Value) or not isinstance(value, Value):
                raise TypeError("Map keys and values must be Value instances")
        object.__setattr__(self, "pairs", pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def keys(self) -> Tuple[Value, ...]:
        return tuple(key for key, _ in self.pairs)

    def get(self, key: Value, default: Any = None) -> Any:
        """Return the value of the last pair whose key equals ``key``."""
        result = default
        for k, v in self.pairs:
            if k == key:
                result = v
        return result

    def to_python(self) -> Any:
        converted = [(k.to_python(), v.to_python()) for k, v in self.pairs]
        try:
            keys = [k for k, _ in converted]
            if len(set(keys)) == len(keys):
                return dict(converted)
        except TypeError:
            pass  # unhashable keys
        return converted


@dataclass(frozen=True)
class Tag(Value):
    """Tagged value, carried opaquely."""
    number: int
    value: Value

    def __post_init__(self):
        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise TypeError("Tag number must be an int")
        if not 0 <= self.number <= MAX_UINT64:
            raise ValueError(f"Tag number out of range: {self.number}")
        if not isinstance(self.value, Value):
            raise TypeError("Tag content must be a Value instance")

    def to_python(self) -> Any:
        return self.value.to_python()


@dataclass(frozen=True)
class Simple(Value):
    """CBOR simple value with no dedicated variant (e.g. undefined)."""
    code: int

    def __post_init__(self):
        if isinstance(self.code, bool) or not isinstance(self.code, int):
            raise TypeError("Simple code must be an int")
        if not 0 <= self.code <= 255 or self.code in _RESERVED_SIMPLE_CODES:
            raise ValueError(f"Invalid simple value code: {self.code}")

    @property
    def is_undefined(self) -> bool:
        return self.code == 23

    def to_python(self) -> Any:
        return None


UNDEFINED = Simple(23)
NULL = Null()


def from_python(obj: Any) -> Value:
    """
    Build a value tree from plain Python objects.

    Args:
        obj: None, bool, int, float, bytes, str, list, tuple, dict or Value

    Returns:
        Equivalent Value

    Raises:
        TypeError: If an object has no Value counterpart
        ValueError: If a str holds surrogate code points
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NULL
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return ByteString(bytes(obj))
    if isinstance(obj, str):
        return TextString(obj)
    if isinstance(obj, (list, tuple)):
        return Array(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        return Map(tuple((from_python(k), from_python(v)) for k, v in obj.items()))
    raise TypeError(f"Cannot convert {type(obj).__name__} to a Value")
