#every error is a ValueError, callers that catch ValueError around readPNG keep working
class PngSecretError(ValueError):
    pass


#bad or missing 8 byte signature
class NotAPng(PngSecretError):
    pass


#length overrun, crc mismatch, bad chunk type, IHDR not first
class MalformedChunk(PngSecretError):
    pass


#buffer ended before IEND
class TruncatedStream(PngSecretError):
    pass


class InvalidToken(PngSecretError):
    pass


class TokenNotFound(PngSecretError):
    pass


class EmptyPlaintext(PngSecretError):
    pass


#decompressIDAT only knows 8 bit, non interlaced images
class UnsupportedImage(PngSecretError):
    pass


#file errors are not wrapped, OSError from open() goes straight to the caller
IoError = OSError
