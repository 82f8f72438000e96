import zlib
import struct
import numpy as np

from pngsecret.errors import MalformedChunk, UnsupportedImage

#samples per pixel for each PNG color type
CHANNELS = {
    0: 1,   #grayscale
    2: 3,   #RGB
    3: 1,   #palette index
    4: 2,   #grayscale + alpha
    6: 4,   #RGBA
}

# decompresses the PNG image from the compressed IDAT stream
#   1 inflates the IDAT data (zlib / DEFLATE)
#   2 reverses the PNG filters (None, Sub, Up, Average, Paeth)
#   3 returns a numpy.ndarray shaped (height, width) for grayscale, (height, width, channels)
#     otherwise, palette images are expanded to RGB through PLTE, dtype=uint8
# used to check that an embedded message left the pixels alone, never to write pixels back

def decompressIDAT(IHDR_data: bytes, IDAT_data: bytes, PLTE_data: bytes = None) -> np.ndarray:
    #1 parse IHDR, check compression and filter methods
    if len(IHDR_data) != 13:
        raise MalformedChunk(f'IHDR must be 13 bytes, got {len(IHDR_data)}')
    width, height, bitd, colort, compm, filterm, interlacem = struct.unpack('>IIBBBBB', IHDR_data)

    #PNG defines only one compression method (0 = DEFLATE) and one filter method (0)
    if compm != 0 or filterm != 0:
        raise UnsupportedImage(f'compression={compm}, filter={filterm} not defined by PNG')
    if bitd != 8:
        raise UnsupportedImage(f'bit depth {bitd} not supported, only 8')
    if interlacem != 0:
        raise UnsupportedImage('Adam7 interlaced images not supported')
    if colort not in CHANNELS:
        raise UnsupportedImage(f'unknown color type {colort}')
    if colort == 3 and PLTE_data is None:
        raise UnsupportedImage('palette image without PLTE chunk')

    #2 inflate, the result is the whole image row by row with a filter byte in front of each row
    try:
        IDAT_data = zlib.decompress(IDAT_data)
    except zlib.error as e:
        raise MalformedChunk(f'IDAT stream does not inflate: {e}') from e

    bpp    = CHANNELS[colort]  #bytes per pixel at 8 bits per sample
    stride = width * bpp       #bytes in one pixel row without the filter byte
    if len(IDAT_data) != height * (stride + 1):
        raise MalformedChunk(f'IDAT holds {len(IDAT_data)} bytes, expected {height * (stride + 1)}')

    #3 PaethPredictor, RFC 2083 (filter 4)
    def PaethPredictor(a: int, b: int, c: int) -> int:
        p  = a + b - c
        pa = abs(p - a)
        pb = abs(p - b)
        pc = abs(p - c)
        if pa <= pb and pa <= pc:
            return a
        elif pb <= pc:
            return b
        else:
            return c

    #4 undo the filters
    Recon  = []  #reconstructed image bytes (flat list)

    #neighbours as named in RFC 2083
    # a = pixel to the left, b = pixel above, c = pixel above-left
    def a(r, c): return Recon[r * stride + c - bpp] if c >= bpp else 0
    def b(r, c): return Recon[(r - 1) * stride + c]     if r > 0 else 0
    def c(r, c): return Recon[(r - 1) * stride + c - bpp] if r > 0 and c >= bpp else 0

    i = 0  #index into IDAT_data
    for r in range(height):
        #first byte of every row = filter type
        ftype = IDAT_data[i]
        i += 1

        for c_ in range(stride):
            F = IDAT_data[i]  #filtered byte
            i += 1

            if ftype == 0:      #None
                val = F
            elif ftype == 1:    #Sub
                val = F + a(r, c_)
            elif ftype == 2:    #Up
                val = F + b(r, c_)
            elif ftype == 3:    #Average
                val = F + (a(r, c_) + b(r, c_)) // 2
            elif ftype == 4:    #Paeth
                val = F + PaethPredictor(a(r, c_), b(r, c_), c(r, c_))
            else:
                raise MalformedChunk(f'unknown filter type {ftype} in row {r}')

            #keep the low 8 bits only, the sum may overflow 255
            Recon.append(val & 0xFF)

    img = np.array(Recon, dtype=np.uint8).reshape((height, width, bpp))

    if colort == 3:
        if len(PLTE_data) % 3:
            raise MalformedChunk(f'PLTE length {len(PLTE_data)} is not a multiple of 3')
        palette = np.frombuffer(PLTE_data, dtype=np.uint8).reshape((-1, 3))
        if img.max(initial=0) >= len(palette):
            raise MalformedChunk('palette index out of range')
        return palette[img[..., 0]]
    if bpp == 1:
        return img[..., 0]
    return img


#joins every IDAT in stream order, the image data may be split across many chunks
def pixelsFromChunks(chunks) -> np.ndarray:
    IHDR_data = next(d for t, d, *_ in chunks if t == b'IHDR')
    PLTE_data = next((d for t, d, *_ in chunks if t == b'PLTE'), None)
    IDAT_data = b''.join(d for t, d, *_ in chunks if t == b'IDAT')
    if not IDAT_data:
        raise MalformedChunk('No IDAT chunk')
    return decompressIDAT(IHDR_data, IDAT_data, PLTE_data)
