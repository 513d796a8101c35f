"""
Bencode encoder for extension handshake messages.

Only dictionaries are encoded, and their values may only be integers or
nested dictionaries. That covers the shapes of the messages this client
builds, e.g. ``{"m": {"ut_metadata": 1}, "p": 6881}``. Byte strings and
lists can be decoded but are rejected here.
"""
import io
import logging

from .decoder import DEFAULT_MAX_DEPTH, max_safe_depth
from .errors import BencodeError, NestingTooDeepError, UnsupportedTypeError
from .structure import INT64_MAX, INT64_MIN, BencodeDict, BencodeInt, BencodeString

log = logging.getLogger(__name__)


def encode(sink, obj, *, sort_keys: bool = False, max_depth: int = DEFAULT_MAX_DEPTH):
    """
    Writes the Bencoded form of a dictionary to sink.

    sink is anything with a ``write(bytes)`` method. Output is written piece
    by piece, so after an error the sink holds a truncated fragment that the
    caller must discard. With sort_keys the keys are written in raw byte
    order (canonical bencode); otherwise in the mapping's iteration order.
    """
    if not isinstance(obj, (dict, BencodeDict)):
        log.debug("Refusing to bencode top-level %s", type(obj).__name__)
        raise UnsupportedTypeError(f"Only dictionaries can be bencoded, got {type(obj)}")

    try:
        _write_dict(sink, obj, sort_keys, min(max_depth, max_safe_depth()), 1)
    except BencodeError as exc:
        log.debug("Bencode encoding failed: %s", exc)
        raise


def encode_to_bytes(obj, *, sort_keys: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Encodes a dictionary into bencoded bytes."""
    buf = io.BytesIO()
    encode(buf, obj, sort_keys=sort_keys, max_depth=max_depth)
    return buf.getvalue()


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    return f"i{n}e".encode()


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return str(len(b)).encode() + b":" + b


def _key_to_bytes(k) -> bytes:
    if isinstance(k, str):
        return k.encode()
    if isinstance(k, bytes):
        return k
    if isinstance(k, BencodeString):
        return k.value
    raise UnsupportedTypeError(f"Cannot use {type(k)} as a dictionary key")


def _int_value(v):
    """Returns the integer held by v, or None if v is not an integer."""
    if isinstance(v, BencodeInt):
        return v.value
    if isinstance(v, int) and not isinstance(v, bool):
        if not INT64_MIN <= v <= INT64_MAX:
            raise UnsupportedTypeError(f"Integer out of 64-bit range: {v}")
        return v
    return None


def _write_dict(sink, d, sort_keys: bool, max_depth: int, depth: int):
    if depth > max_depth:
        raise NestingTooDeepError(f"Dictionary nested deeper than {max_depth} levels")

    items = [(_key_to_bytes(k), v) for k, v in d.items()]
    if len({k for k, _ in items}) != len(items):
        raise UnsupportedTypeError("Dictionary keys collide once converted to bytes")
    if sort_keys:
        items.sort(key=lambda kv: kv[0])

    sink.write(b"d")
    for key, value in items:
        sink.write(encode_bytes(key))

        n = _int_value(value)
        if n is not None:
            sink.write(encode_int(n))
        elif isinstance(value, (dict, BencodeDict)):
            _write_dict(sink, value, sort_keys, max_depth, depth + 1)
        else:
            raise UnsupportedTypeError(
                f"Cannot bencode dictionary value of type {type(value)}"
            )
    sink.write(b"e")
