import os
import shutil
import tempfile

from pngsecret.errors import MalformedChunk, NotAPng, TruncatedStream
from pngsecret.png_chunk import decode_chunk, encode_chunk

#1 PNG format constants
PngSignature: bytes = b'\x89PNG\r\n\x1a\n'   #8 byte PNG header


#2 parser walks the PNG structure by hand and returns the chunks + bytes after IEND
def parse(content):
    content = bytes(content)

    #validation
    if content[:len(PngSignature)] != PngSignature:
        raise NotAPng('Invalid PNG Signature')

    chunks = []
    offset = len(PngSignature)
    while True:
        if offset >= len(content):
            raise TruncatedStream(f'No IEND chunk before end of data at offset {offset}')

        chunk, consumed = decode_chunk(content, offset)
        if not chunks and chunk.type != b'IHDR':
            raise MalformedChunk(f'First chunk must be IHDR, got {chunk.type!r}')

        chunks.append(chunk)
        offset += consumed
        if chunk.type == b'IEND':
            break  #end of the PNG stream, anything further is tail data

    tail = content[offset:]
    return chunks, tail


def serialize(chunks, tail=b''):
    parts = [PngSignature]
    parts.extend(encode_chunk(chunk) for chunk in chunks)
    parts.append(bytes(tail))
    return b''.join(parts)


def read_file(file_path):
    with open(file_path, 'rb') as f:
        return f.read()


def write_file(file_path, content):
    #write next to the target and rename over it, a failed write leaves the old file intact
    directory = os.path.dirname(os.path.abspath(file_path))
    fd, tmp_path = tempfile.mkstemp(prefix='.pngsecret-', suffix='.png', dir=directory)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)
        if os.path.exists(file_path):
            shutil.copymode(file_path, tmp_path)
        else:
            #mkstemp creates 0600, give a new file the mode open() would
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp_path, 0o666 & ~umask)
        os.replace(tmp_path, file_path)
    except BaseException:
        os.unlink(tmp_path)
        raise


def readPNG(file_path):
    return parse(read_file(file_path))
