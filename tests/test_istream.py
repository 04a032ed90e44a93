import struct
import sys

import pytest

from dbuswire.istream import MessageIStream


def little(data):
    return MessageIStream(data, sys.byteorder != "little")


def big(data):
    return MessageIStream(data, sys.byteorder != "big")


def test_read_byte_then_aligned_uint32_little():
    stream = little(struct.pack("<BxxxI", 7, 0x12345678))
    assert stream.read_byte() == 7
    assert stream.read_integer(4, False) == 0x12345678
    assert stream.offset == 8
    assert stream.empty()


def test_read_uint32_big_endian():
    stream = big(struct.pack(">BxxxI", 9, 0x12345678))
    assert stream.read_byte() == 9
    assert stream.read_integer(4, False) == 0x12345678


def test_unsigned_interpretation_of_negative_bits():
    stream = little(struct.pack("<h", -1))
    assert stream.read_integer(2, False) == 0xFFFF


def test_uint16_and_uint64_alignment():
    stream = little(struct.pack("<BxHxxxxQ", 1, 513, 2**40 + 3))
    assert stream.read_byte() == 1
    assert stream.read_integer(2) == 513
    assert stream.read_integer(8) == 2**40 + 3
    assert stream.offset == 16


def test_read_double_both_orders():
    assert little(struct.pack("<d", 1.5)).read_double() == 1.5
    assert big(struct.pack(">d", -2.25)).read_double() == -2.25


def test_read_string_and_bytes():
    stream = little(b"hello\0rest")
    assert stream.read_string(5) == "hello"
    assert stream.read_bytes(1) == b"\0"
    assert stream.read_string(4) == "rest"
    assert stream.empty()


def test_read_string_too_long_raises():
    stream = little(b"abc")
    with pytest.raises(ValueError):
        stream.read_string(4)
    assert stream.read_string(3) == "abc"


def test_read_byte_on_empty_raises():
    with pytest.raises(IndexError):
        little(b"").read_byte()


def test_align_beyond_end_raises():
    stream = little(b"\x01\x02")
    stream.read_byte()
    with pytest.raises(IndexError):
        stream.align(4)


def test_align_no_op_on_boundary():
    stream = little(b"abcd")
    stream.align(8)
    assert stream.offset == 0
    assert stream.read_string(4) == "abcd"


def test_sub_stream_splits_data_and_shares_offset():
    stream = little(b"abcdef")
    stream.read_byte()
    sub = stream.sub_stream(3)
    assert sub.offset == 1
    assert stream.offset == 4
    assert sub.read_string(3) == "bcd"
    assert sub.empty()
    assert stream.read_string(2) == "ef"


def test_sub_stream_alignment_uses_parent_offset():
    data = struct.pack("<BxxxIxxxx", 5, 42)
    stream = little(data)
    stream.read_byte()
    sub = stream.sub_stream(7)
    assert sub.read_integer(4) == 42
    assert sub.offset == 8


def test_sub_stream_too_large_raises():
    with pytest.raises(IndexError):
        little(b"ab").sub_stream(3)