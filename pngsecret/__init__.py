from pngsecret.errors import (
    EmptyPlaintext,
    InvalidToken,
    IoError,
    MalformedChunk,
    NotAPng,
    PngSecretError,
    TokenNotFound,
    TruncatedStream,
    UnsupportedImage,
)
from pngsecret.secret_message import decode, encode, remove

__version__ = '0.1.0'
