"""
Data structures for representing Bencoded types.

Every decoded value is one of four variants deriving from ``BencodeType``.
Consumers either check with ``isinstance`` or pattern-match on the class::

    match value:
        case BencodeDict():
            ...
        case BencodeInt(n):
            ...
"""
from types import MappingProxyType

from .errors import UnsupportedTypeError

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "from_python",
    "INT64_MIN",
    "INT64_MAX",
]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("_value",)
    __match_args__ = ("value",)

    @property
    def value(self):
        return self._value

    def to_python(self):
        """Returns the plain Python equivalent (int, bytes, list or dict)."""
        return self._value

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"


class BencodeInt(BencodeType):
    """Represents a Bencoded integer (signed 64-bit)."""
    __slots__ = ()

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"BencodeInt out of 64-bit range: {value}")
        self._value = value

    def __int__(self):
        return self._value

    def __repr__(self):
        return f"BencodeInt({self._value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("BencodeString requires bytes.")
        self._value = bytes(value)

    @property
    def text(self) -> str:
        # surrogateescape keeps non-UTF-8 bytes (piece hashes, peer ids) reversible
        return self._value.decode("utf-8", errors="surrogateescape")

    def __len__(self):
        return len(self._value)

    def __bytes__(self):
        return self._value


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ()

    def __init__(self, value=()):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        for item in value:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode types.")
        self._value = tuple(value)

    def to_python(self):
        return [item.to_python() for item in self._value]

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __getitem__(self, index):
        return self._value[index]

    def __repr__(self):
        return f"BencodeList({list(self._value)!r})"


def _key(key) -> bytes:
    if isinstance(key, str):
        return key.encode()
    if isinstance(key, BencodeString):
        return key.value
    if isinstance(key, bytearray):
        return bytes(key)
    return key


class BencodeDict(BencodeType):
    """Represents a Bencoded dictionary."""
    __slots__ = ()

    def __init__(self, value=None):
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k, v in value.items():
            if not isinstance(k, bytes):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode types.")
        self._value = MappingProxyType(dict(value))

    def to_python(self):
        return {k: v.to_python() for k, v in self._value.items()}

    def get(self, key, default=None):
        return self._value.get(_key(key), default)

    def keys(self):
        return self._value.keys()

    def items(self):
        return self._value.items()

    def __getitem__(self, key):
        return self._value[_key(key)]

    def __contains__(self, key):
        return _key(key) in self._value

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return dict(self._value) == dict(other._value)

    __hash__ = None

    def __repr__(self):
        return f"BencodeDict({dict(self._value)!r})"


def from_python(obj) -> BencodeType:
    """
    Converts a plain Python value into the matching Bencode type.

    ``int`` becomes ``BencodeInt``, ``str``/``bytes`` become ``BencodeString``
    (text is UTF-8 encoded), ``list``/``tuple`` become ``BencodeList`` and
    ``dict`` becomes ``BencodeDict``. Values that already are Bencode types
    pass through unchanged.
    """
    if isinstance(obj, BencodeType):
        return obj

    if isinstance(obj, bool):
        raise UnsupportedTypeError("Cannot bencode object of type bool")

    if isinstance(obj, int):
        if not INT64_MIN <= obj <= INT64_MAX:
            raise UnsupportedTypeError(f"Integer out of 64-bit range: {obj}")
        return BencodeInt(obj)

    if isinstance(obj, str):
        return BencodeString(obj.encode())

    if isinstance(obj, (bytes, bytearray)):
        return BencodeString(obj)

    if isinstance(obj, (list, tuple)):
        return BencodeList([from_python(x) for x in obj])

    if isinstance(obj, dict):
        converted = {}
        for k, v in obj.items():
            if not isinstance(k, (str, bytes, BencodeString)):
                raise UnsupportedTypeError(f"Cannot use {type(k)} as a dictionary key")
            if _key(k) in converted:
                raise UnsupportedTypeError(f"Dictionary key {k!r} collides with another key")
            converted[_key(k)] = from_python(v)
        return BencodeDict(converted)

    raise UnsupportedTypeError(f"Cannot bencode object of type {type(obj)}")
