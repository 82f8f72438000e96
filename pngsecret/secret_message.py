"""Hide, read and strip secret messages stored as private PNG chunks.

The message goes into an ancillary, private chunk placed right before IEND.
Its chunk type is the token handed back to the user, so nothing has to be
stored anywhere else: given the token, the chunk can be found again in the
same file or in any copy of it.
"""
from pngsecret import PNG
from pngsecret.chunk_token import chunk_type_to_token, is_token_type, new_token, token_to_chunk_type
from pngsecret.errors import EmptyPlaintext, TokenNotFound
from pngsecret.png_chunk import make_chunk


def _to_bytes(plaintext):
    if isinstance(plaintext, str):
        return plaintext.encode('utf-8')
    return bytes(plaintext)


def find_secret(chunks, chunk_type):
    #first match wins, two tokens drawn the same give the same type
    for i, (t, *_) in enumerate(chunks):
        if t == chunk_type:
            return i
    raise TokenNotFound(f'No chunk for token {chunk_type.decode("ascii")}')


def list_secrets(chunks):
    return [chunk_type_to_token(t) for t, *_ in chunks if is_token_type(t)]


def encode(content, plaintext, rng=None):
    """Embed ``plaintext`` in the PNG ``content``.

    Returns ``(output_bytes, token)``. A ``str`` message is stored as UTF-8.
    """
    plaintext = _to_bytes(plaintext)
    if not plaintext:
        raise EmptyPlaintext('Message is empty, nothing to hide')

    chunks, tail = PNG.parse(content)
    #redraw until the type is free in this file, otherwise decode would find the older chunk
    taken = {t for t, *_ in chunks}
    token, chunk_type = new_token(rng)
    while chunk_type in taken:
        token, chunk_type = new_token(rng)
    secret = make_chunk(chunk_type, plaintext)

    #insert right before IEND, IHDR/PLTE/IDAT order stays as it was
    iend = len(chunks) - 1   #parse stops on IEND, it is always last
    new_chunks = chunks[:iend] + [secret] + chunks[iend:]

    return PNG.serialize(new_chunks, tail), token


def decode(content, token):
    chunk_type = token_to_chunk_type(token)
    chunks, _ = PNG.parse(content)
    _, data, *_ = chunks[find_secret(chunks, chunk_type)]
    return data


def remove(content, token):
    """Cut the chunk named by ``token`` out of ``content``.

    Returns ``(output_bytes, plaintext)``, every other chunk keeps its place.
    """
    chunk_type = token_to_chunk_type(token)
    chunks, tail = PNG.parse(content)
    i = find_secret(chunks, chunk_type)
    _, data, *_ = chunks[i]
    new_chunks = chunks[:i] + chunks[i + 1:]
    return PNG.serialize(new_chunks, tail), data
