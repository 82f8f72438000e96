import struct

import pytest

from pngsecret.errors import MalformedChunk
from pngsecret.png_chunk import (
    Chunk,
    crc32,
    decode_chunk,
    encode_chunk,
    is_critical,
    is_public,
    is_reserved_bit_valid,
    is_safe_to_copy,
    is_valid_type,
    make_chunk,
)

MESSAGE = b'This is where your secret message will be!'
MESSAGE_CRC = 2882656334


def raw_chunk(chunk_type=b'RuSt', data=MESSAGE, crc=MESSAGE_CRC, length=None):
    if length is None:
        length = len(data)
    return struct.pack('>I', length) + chunk_type + data + struct.pack('>I', crc)


def test_crc_matches_known_value():
    assert crc32(b'RuSt', MESSAGE) == MESSAGE_CRC


def test_decode_chunk():
    chunk, consumed = decode_chunk(raw_chunk(), 0)

    assert chunk == Chunk(b'RuSt', MESSAGE, 42, MESSAGE_CRC)
    assert consumed == 42 + 12


def test_decode_chunk_at_offset():
    content = b'garbage!' + raw_chunk() + b'more'
    chunk, consumed = decode_chunk(content, 8)

    assert chunk.data == MESSAGE
    assert consumed == 54


def test_decode_chunk_bad_crc():
    with pytest.raises(MalformedChunk, match='checksum'):
        decode_chunk(raw_chunk(crc=MESSAGE_CRC - 1), 0)


def test_decode_chunk_length_overrun():
    with pytest.raises(MalformedChunk):
        decode_chunk(raw_chunk(length=100), 0)


def test_decode_chunk_length_above_maximum():
    with pytest.raises(MalformedChunk):
        decode_chunk(raw_chunk(length=2**31), 0)


def test_decode_chunk_header_cut_short():
    with pytest.raises(MalformedChunk):
        decode_chunk(raw_chunk()[:10], 0)


def test_decode_chunk_rejects_non_letter_type():
    data = b'abc'
    content = raw_chunk(b'Ru1t', data, crc32(b'Ru1t', data))
    with pytest.raises(MalformedChunk):
        decode_chunk(content, 0)


def test_encode_chunk_matches_wire_layout():
    assert encode_chunk(make_chunk(b'RuSt', MESSAGE)) == raw_chunk()


def test_encode_chunk_recomputes_stale_crc():
    stale = Chunk(b'RuSt', MESSAGE, 42, 0)
    assert encode_chunk(stale) == raw_chunk()


def test_make_chunk_derives_length_and_crc():
    chunk = make_chunk(b'tEXt', b'Comment\x00hi')
    assert chunk.length == 10
    assert chunk.crc == crc32(b'tEXt', b'Comment\x00hi')


@pytest.mark.parametrize('bad_type', [b'RuS', b'Ru St', b'Ru1t', b'\x00\x00\x00\x00'])
def test_make_chunk_rejects_bad_type(bad_type):
    with pytest.raises(MalformedChunk):
        make_chunk(bad_type, b'')


def test_type_property_bits():
    assert is_critical(b'RuSt')
    assert not is_critical(b'ruSt')
    assert is_public(b'RUSt')
    assert not is_public(b'RuSt')
    assert is_reserved_bit_valid(b'RuSt')
    assert not is_reserved_bit_valid(b'Rust')
    assert is_safe_to_copy(b'RuSt')
    assert not is_safe_to_copy(b'RuST')


def test_is_valid_type():
    assert is_valid_type(b'IHDR')
    assert not is_valid_type(b'IHD')
    assert not is_valid_type(b'IH!R')
