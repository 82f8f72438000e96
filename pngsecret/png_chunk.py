import struct
import zlib
from collections import namedtuple

from pngsecret.errors import MalformedChunk

#chunk = [4B length][4B type][payload][4B CRC]
Chunk = namedtuple('Chunk', ['type', 'data', 'length', 'crc'])

MAX_CHUNK_LENGTH = 2**31 - 1
CHUNK_OVERHEAD = 4 + 4 + 4   #length + type + crc


def crc32(chunk_type, data):
    #crc covers type + data, the length field is not part of it
    return zlib.crc32(data, zlib.crc32(chunk_type))


#the fifth bit of every type byte is a flag, lowercase letter = bit set
def is_critical(chunk_type):
    return not chunk_type[0] & 0x20


def is_public(chunk_type):
    return not chunk_type[1] & 0x20


def is_reserved_bit_valid(chunk_type):
    return not chunk_type[2] & 0x20


def is_safe_to_copy(chunk_type):
    return bool(chunk_type[3] & 0x20)


def is_valid_type(chunk_type) -> bool:
    if len(chunk_type) != 4:
        return False
    return all(65 <= b <= 90 or 97 <= b <= 122 for b in chunk_type)


def make_chunk(chunk_type: bytes, data: bytes) -> Chunk:
    chunk_type = bytes(chunk_type)
    data = bytes(data)
    if not is_valid_type(chunk_type):
        raise MalformedChunk(f'Invalid chunk type: {chunk_type!r}')
    if len(data) > MAX_CHUNK_LENGTH:
        raise MalformedChunk(f'Chunk data too long: {len(data)} bytes')
    return Chunk(chunk_type, data, len(data), crc32(chunk_type, data))


def encode_chunk(chunk: Chunk) -> bytes:
    t, d, *_ = chunk
    return struct.pack('>I', len(d)) + t + d + struct.pack('>I', crc32(t, d))


def decode_chunk(content, offset):
    """Read one chunk from ``content`` starting at ``offset``.

    Returns ``(chunk, consumed)`` where ``consumed`` is the number of bytes
    the chunk takes in the stream, header and CRC included.
    """
    remaining = len(content) - offset
    if remaining < CHUNK_OVERHEAD:
        raise MalformedChunk(f'Chunk at offset {offset} is cut short: {remaining} bytes left')

    chunk_length, chunk_type = struct.unpack_from('>I4s', content, offset)
    if chunk_length > MAX_CHUNK_LENGTH:
        raise MalformedChunk(f'Chunk at offset {offset} declares length {chunk_length}')
    if remaining < chunk_length + CHUNK_OVERHEAD:
        raise MalformedChunk(
            f'Chunk {chunk_type!r} at offset {offset} declares {chunk_length} bytes, '
            f'only {remaining - CHUNK_OVERHEAD} left'
        )

    start = offset + 8
    chunk_data = bytes(content[start:start + chunk_length])
    chunk_crc, = struct.unpack_from('>I', content, start + chunk_length)

    #CRC protects integrity, compute zlib.crc32(type + data) and compare
    calc_crc = crc32(chunk_type, chunk_data)
    if chunk_crc != calc_crc:
        raise MalformedChunk(
            f'Chunk {chunk_type!r} at offset {offset} checksum failed: '
            f'stored {chunk_crc:08x}, computed {calc_crc:08x}'
        )
    if not is_valid_type(chunk_type):
        raise MalformedChunk(f'Invalid chunk type {chunk_type!r} at offset {offset}')

    return Chunk(chunk_type, chunk_data, chunk_length, chunk_crc), chunk_length + CHUNK_OVERHEAD
