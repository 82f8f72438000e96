import random
import string

from pngsecret.errors import InvalidToken

TOKEN_LENGTH = 4
TOKEN_ALPHABET = string.ascii_letters

#bit 5 (0x20) of each type byte is the case bit
#   byte 0 set   -> ancillary
#   byte 1 set   -> private
#   byte 2 clear -> reserved bit valid
#   byte 3 set   -> safe to copy, editors that don't know the chunk keep it
CASE_BIT = 0x20
SET_MASK = (CASE_BIT, CASE_BIT, 0x00, CASE_BIT)
CLEAR_MASK = (0x00, 0x00, CASE_BIT, 0x00)


def _apply_masks(base: bytes) -> bytes:
    return bytes((b | s) & ~c for b, s, c in zip(base, SET_MASK, CLEAR_MASK))


def new_token(rng=None):
    """Draw a fresh token and the chunk type it maps to.

    ``rng`` is any ``random.Random`` compatible generator, pass a seeded one
    to get repeatable tokens. Without it ``random.SystemRandom`` is used.
    """
    if rng is None:
        rng = random.SystemRandom()

    base = bytes(ord(rng.choice(TOKEN_ALPHABET)) for _ in range(TOKEN_LENGTH))
    chunk_type = _apply_masks(base)
    return chunk_type.decode('ascii'), chunk_type


def token_to_chunk_type(token) -> bytes:
    if isinstance(token, str):
        try:
            raw = token.encode('ascii')
        except UnicodeEncodeError:
            raise InvalidToken(f'Token must be ASCII letters: {token!r}') from None
    else:
        raw = bytes(token)

    if len(raw) != TOKEN_LENGTH:
        raise InvalidToken(f'Token must be {TOKEN_LENGTH} letters, got {len(raw)}: {token!r}')
    if not all(chr(b) in TOKEN_ALPHABET for b in raw):
        raise InvalidToken(f'Token must be ASCII letters: {token!r}')
    #the case pattern is part of the token, a token that does not carry it was never issued
    if _apply_masks(raw) != raw:
        raise InvalidToken(f'Token {token!r} does not match the ancillary/private letter pattern')
    return raw


def chunk_type_to_token(chunk_type) -> str:
    return token_to_chunk_type(chunk_type).decode('ascii')


def is_token_type(chunk_type) -> bool:
    try:
        token_to_chunk_type(chunk_type)
    except InvalidToken:
        return False
    return True
