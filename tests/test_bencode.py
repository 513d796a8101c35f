import io

import pytest

from bencodec import decode, encode, encode_to_bytes
from bencodec.errors import InvalidIntegerError, UnexpectedEOFError, UnsupportedTypeError
from bencodec.structure import BencodeInt, BencodeString, BencodeList, BencodeDict


def test_int():
    print("Testing integer decoding...")
    obj = decode(b"i42e")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeInt)
    assert obj.value == 42

    assert decode(b"i-42e").value == -42


def test_string():
    print("Testing string decoding...")
    obj = decode(b"4:spam")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeString)
    assert obj.value == b"spam"


def test_empty_string():
    obj = decode(b"0:")
    assert isinstance(obj, BencodeString)
    assert obj.value == b""


def test_list():
    print("Testing list decoding...")
    obj = decode(b"l4:spami42ee")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeList)
    assert obj == BencodeList([BencodeString(b"spam"), BencodeInt(42)])


def test_dict():
    print("Testing dictionary decoding...")
    obj = decode(b"d3:key5:valuee")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeDict)
    assert obj.value[b"key"].value == b"value"


def test_nested_dict():
    obj = decode(b"d4:infod6:lengthi1024e4:name8:test.txtee")
    assert obj.to_python() == {b"info": {b"length": 1024, b"name": b"test.txt"}}
    assert obj["info"]["name"].text == "test.txt"


def test_invalid_integer():
    with pytest.raises(InvalidIntegerError):
        decode(b"ie")


def test_unterminated_list():
    with pytest.raises(UnexpectedEOFError):
        decode(b"l4:spam")


def test_duplicate_key_last_wins():
    obj = decode(b"d1:ai1e1:ai2ee")
    assert obj == BencodeDict({b"a": BencodeInt(2)})


def test_encode_handshake():
    print("Testing dictionary encoding...")
    buf = io.BytesIO()
    encode(buf, {"m": {"ut_metadata": 1}})
    print("Encoded:", buf.getvalue())
    assert buf.getvalue() == b"d1:md11:ut_metadatai1eee"


def test_encode_two_keys_any_order():
    enc = encode_to_bytes({"ut_metadata": 1, "p": 6881})
    assert enc in (b"d1:pi6881e11:ut_metadatai1ee", b"d11:ut_metadatai1e1:pi6881ee")


def test_encode_rejects_non_dict():
    with pytest.raises(UnsupportedTypeError):
        encode(io.BytesIO(), BencodeInt(1))
    with pytest.raises(UnsupportedTypeError):
        encode(io.BytesIO(), BencodeString(b"hello"))
    with pytest.raises(UnsupportedTypeError):
        encode(io.BytesIO(), "hello")


def test_roundtrip():
    value = BencodeDict({
        b"m": BencodeDict({b"ut_metadata": BencodeInt(1), b"ut_pex": BencodeInt(2)}),
        b"p": BencodeInt(6881),
        b"metadata_size": BencodeInt(-31235),
    })
    assert decode(encode_to_bytes(value)) == value
