"""
Exceptions raised by the bencode decoder and encoder.
"""


class BencodeError(Exception):
    """Base class for all bencode errors."""
    pass


class BencodeDecodeError(BencodeError, ValueError):
    """Custom exception for Bencode decoding errors."""
    pass


class InvalidIntegerError(BencodeDecodeError):
    """Empty or non-decimal digit span in an ``i...e`` integer."""
    pass


class InvalidLengthPrefixError(BencodeDecodeError):
    """Malformed length prefix in front of a byte string."""
    pass


class UnexpectedEOFError(BencodeDecodeError, EOFError):
    """The input ended before the value it declared was complete."""
    pass


class TrailingDataError(BencodeDecodeError):
    pass


class NestingTooDeepError(BencodeError, ValueError):
    """Lists or dictionaries nested deeper than the configured limit."""
    pass


class UnsupportedTypeError(BencodeError, TypeError):
    """A value (or dictionary key) the codec cannot represent."""
    pass


class NonStringKeyError(BencodeDecodeError, UnsupportedTypeError):
    """A dictionary key in the input was not a byte string."""
    pass
