"""
Bencode package for encoding and decoding BitTorrent data.
"""
from .decoder import DEFAULT_MAX_DEPTH, BencodeDecoder, decode, decode_all, decode_prefix
from .encoder import encode, encode_to_bytes
from .errors import (
    BencodeDecodeError,
    BencodeError,
    InvalidIntegerError,
    InvalidLengthPrefixError,
    NestingTooDeepError,
    NonStringKeyError,
    TrailingDataError,
    UnexpectedEOFError,
    UnsupportedTypeError,
)
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, from_python

__all__ = [
    'decode', 'decode_all', 'decode_prefix', 'encode', 'encode_to_bytes', 'from_python',
    'BencodeDecoder', 'DEFAULT_MAX_DEPTH',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'BencodeError', 'BencodeDecodeError', 'InvalidIntegerError', 'InvalidLengthPrefixError',
    'UnexpectedEOFError', 'TrailingDataError', 'NestingTooDeepError', 'NonStringKeyError',
    'UnsupportedTypeError',
]
