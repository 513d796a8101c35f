"""
Bencode decoder for BitTorrent metainfo, tracker responses and extension messages.

Decoding consumes exactly one value from a binary stream. Anything after that
value is left in the stream, so a ``ut_metadata`` data message (a dictionary
followed by raw piece bytes) can be split by decoding the dictionary and then
reading the remainder.
"""
import io
import logging
import re
import sys
from typing import Tuple

from .errors import (
    BencodeError,
    InvalidIntegerError,
    InvalidLengthPrefixError,
    NestingTooDeepError,
    NonStringKeyError,
    TrailingDataError,
    UnexpectedEOFError,
)
from .structure import (
    INT64_MAX,
    INT64_MIN,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeType,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 200
MAX_PREFIX_DIGITS = 20
READ_CHUNK_SIZE = 64 * 1024

TOKEN_INTEGER = b"i"
TOKEN_LIST = b"l"
TOKEN_DICT = b"d"
TOKEN_END = b"e"
TOKEN_STRING_SEPARATOR = b":"

DIGITS = b"0123456789"

_INTEGER_RE = re.compile(rb"-?[0-9]+")


def max_safe_depth() -> int:
    """
    Highest nesting depth that can be parsed without hitting the interpreter's
    recursion limit. Each level costs two frames; larger max_depth values are
    clamped to this.
    """
    return max(1, (sys.getrecursionlimit() - 300) // 2)


class _PushbackReader:
    """Binary stream wrapper with one byte of lookahead."""

    def __init__(self, stream):
        self.stream = stream
        self.consumed = 0
        self._pending = b""

    def read_byte(self) -> bytes:
        """Returns the next byte, or ``b""`` at end of stream."""
        if self._pending:
            ch, self._pending = self._pending, b""
        else:
            # non-blocking streams return None when no data is ready
            ch = self.stream.read(1) or b""
        self.consumed += len(ch)
        return ch

    def unread_byte(self, ch: bytes):
        self._pending = ch
        self.consumed -= len(ch)

    def read(self, n: int) -> bytes:
        """Reads up to n bytes, stopping early only at end of stream."""
        chunks = []
        if self._pending and n > 0:
            chunks.append(self._pending)
            self._pending = b""
            n -= 1

        while n > 0:
            chunk = self.stream.read(min(n, READ_CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            n -= len(chunk)

        data = b"".join(chunks)
        self.consumed += len(data)
        return data


class BencodeDecoder:
    """
    Decodes one Bencoded value from a binary stream.
    """
    def __init__(self, stream, max_depth: int = DEFAULT_MAX_DEPTH):
        self.reader = _PushbackReader(stream)
        self.max_depth = min(max_depth, max_safe_depth())
        self.depth = 0

    @property
    def consumed(self) -> int:
        """Number of bytes taken from the stream so far."""
        return self.reader.consumed

    def decode(self) -> BencodeType:
        """Main decode entry point. Decodes a single value."""
        return self._parse_value()

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _next(self) -> bytes:
        ch = self.reader.read_byte()
        if not ch:
            raise UnexpectedEOFError(f"Unexpected end of input at offset {self.consumed}")
        return ch

    def _peek(self) -> bytes:
        ch = self._next()
        self.reader.unread_byte(ch)
        return ch

    def _read_span(self, allowed: bytes, terminator: bytes, limit: int, error) -> bytes:
        """Consumes bytes up to and including terminator, returning the bytes before it."""
        span = bytearray()
        while True:
            ch = self._next()
            if ch == terminator:
                return bytes(span)
            if ch not in allowed:
                raise error(f"Unexpected byte {ch!r} at offset {self.consumed - 1}")
            if len(span) >= limit:
                raise error(f"Field longer than {limit} bytes at offset {self.consumed - 1}")
            span += ch

    def _enter(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise NestingTooDeepError(
                f"Nesting deeper than {self.max_depth} levels at offset {self.consumed}"
            )

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self) -> BencodeType:
        ch = self._next()

        if ch == TOKEN_DICT:
            return self._parse_dict()

        if ch == TOKEN_LIST:
            return self._parse_list()

        if ch == TOKEN_INTEGER:
            return self._parse_int()

        # anything else must be the length prefix of a byte string
        self.reader.unread_byte(ch)
        return self._parse_string()

    def _parse_int(self) -> BencodeInt:
        """Parses an integer; the leading 'i' is already consumed."""
        # one extra byte for the sign
        span = self._read_span(b"-" + DIGITS, TOKEN_END, MAX_PREFIX_DIGITS + 1, InvalidIntegerError)

        if not span:
            raise InvalidIntegerError("Empty integer")

        if not _INTEGER_RE.fullmatch(span):
            raise InvalidIntegerError(f"Invalid integer format: {span!r}")

        num = int(span)
        if not INT64_MIN <= num <= INT64_MAX:
            raise InvalidIntegerError(f"Integer out of 64-bit range: {span!r}")

        return BencodeInt(num)

    def _parse_string(self) -> BencodeString:
        """Parses a byte string from the Bencoded data."""
        prefix = self._read_span(DIGITS, TOKEN_STRING_SEPARATOR, MAX_PREFIX_DIGITS, InvalidLengthPrefixError)

        if not prefix:
            raise InvalidLengthPrefixError("Empty string length")

        length = int(prefix)
        data = self.reader.read(length)
        if len(data) < length:
            raise UnexpectedEOFError(
                f"Byte string declared {length} bytes but only {len(data)} remain"
            )

        return BencodeString(data)

    def _parse_list(self) -> BencodeList:
        """Parses a list; the leading 'l' is already consumed."""
        self._enter()
        items = []

        while self._peek() != TOKEN_END:
            items.append(self._parse_value())

        self._next()  # skip 'e'
        self.depth -= 1
        return BencodeList(items)

    def _parse_dict(self) -> BencodeDict:
        """Parses a dictionary; the leading 'd' is already consumed."""
        self._enter()
        obj = {}

        while True:
            ch = self._peek()
            if ch == TOKEN_END:
                break

            # keys MUST be strings
            if ch in (TOKEN_INTEGER, TOKEN_LIST, TOKEN_DICT):
                raise NonStringKeyError(
                    f"Dictionary key at offset {self.consumed} is not a byte string"
                )

            key = self._parse_string().value
            obj[key] = self._parse_value()  # last duplicate wins

        self._next()  # skip 'e'
        self.depth -= 1
        return BencodeDict(obj)


def _as_stream(source):
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(source)

    if isinstance(source, io.TextIOBase):
        raise TypeError("Bencode must be decoded from a binary stream, not text")

    if not hasattr(source, "read"):
        raise TypeError(f"Cannot decode Bencode from object of type {type(source)}")

    return source


def _run(decoder: BencodeDecoder) -> BencodeType:
    try:
        return decoder.decode()
    except BencodeError as exc:
        log.debug("Bencode decoding failed after %d bytes: %s", decoder.consumed, exc)
        raise


def decode(source, *, max_depth: int = DEFAULT_MAX_DEPTH) -> BencodeType:
    """
    Decodes one value from a bytes-like object or a binary stream.

    Only the bytes of that value are consumed from a stream; trailing bytes
    in a buffer are ignored. Use ``decode_all`` to reject them.
    """
    return _run(BencodeDecoder(_as_stream(source), max_depth))


def decode_prefix(data: bytes, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[BencodeType, int]:
    """
    Decodes the value at the start of data.

    Returns the value and the number of bytes it occupied.
    """
    decoder = BencodeDecoder(io.BytesIO(data), max_depth)
    value = _run(decoder)
    return value, decoder.consumed


def decode_all(data: bytes, *, max_depth: int = DEFAULT_MAX_DEPTH) -> BencodeType:
    """Decodes data, which must hold exactly one value."""
    value, end = decode_prefix(data, max_depth=max_depth)

    if end != len(data):
        log.debug("Bencode value ends at %d of %d bytes", end, len(data))
        raise TrailingDataError(f"{len(data) - end} bytes of data after valid value")

    return value
