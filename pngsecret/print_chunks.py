import zlib
import struct

from pngsecret.chunk_token import chunk_type_to_token, is_token_type
from pngsecret.png_chunk import CHUNK_OVERHEAD, is_critical, is_public, is_safe_to_copy
from pngsecret.PNG import PngSignature

COLOR_TYPES = {
    0: 'grayscale',
    2: 'RGB',
    3: 'indexed color',
    4: 'grayscale with alpha',
    6: 'RGB with alpha',
}

#pCAL = <name>\0 X0 X1 (int32) eq_type n_par <unit>\0 params..., the parameters are not shown
def printpCAL(data):
    try:
        name, rest = data.split(b"\x00", 1)
        equation_type = rest[8]
        unit = rest[10:].split(b"\x00", 1)[0]
    except (ValueError, IndexError):
        print("  [Malformed pCAL] - raw dump suppressed")
        return
    print(f"  calibration '{name.decode('latin-1')}', unit '{unit.decode('latin-1')}', equation type {equation_type}")


def chunkFlags(typ: bytes) -> str:
    return ', '.join([
        'critical' if is_critical(typ) else 'ancillary',
        'public' if is_public(typ) else 'private',
        'safe to copy' if is_safe_to_copy(typ) else 'unsafe to copy',
    ])


#4 pretty printer for a single PNG chunk as returned by PNG.parse
def printChunk(chunk, offset):

    t, d, length, crc = chunk
    typ = t.decode('ascii')  #4 letter identifier (IHDR, IDAT, ...)

    print(f"{typ} length: {length}, offset: {offset}, crc: {crc:08x} ({chunkFlags(t)})")

    #mandatory critical chunks
    if typ == 'IDAT':
        return

    if typ == 'IHDR' and length == 13:
        w, h, bitd, colort, compm, filterm, interlacem = struct.unpack('>IIBBBBB', d)
        print(f"  width={w}, height={h}, bit_depth={bitd}, "
              f"color_type={colort} ({COLOR_TYPES.get(colort, 'unknown')}), "
              f"compression={compm}, filter={filterm}, interlace={interlacem}")
        return

    if typ == 'PLTE':
        #PLTE is the palette: a list of 3 byte RGB colors
        n_colors = len(d) // 3
        print(f"  {n_colors} colors")
        for i in range(n_colors):
            r, g, b = d[i*3:i*3+3]
            print(f"    Color {i}: R={r} G={g} B={b}")
        return

    #selected ancillary chunks
    if typ == 'gAMA' and length == 4:
        gamma, = struct.unpack('>I', d)
        print(f"  gamma={gamma/100000.0}")

    elif typ == 'sBIT':
        print(f"  significant bits per channel = {list(d)}")

    elif typ == 'pCAL':
        printpCAL(d)

    elif typ == 'tIME' and length == 7:
        y, mo, day, h, mi, s = struct.unpack('>HBBBBB', d)
        print(f"  {y:04}-{mo:02}-{day:02} {h:02}:{mi:02}:{s:02}")

    elif typ == 'bKGD':
        #1, 2 or 6 bytes depending on color type, 6 (16-bit RGB) is the usual one
        if len(d) == 6:
            r, g, b = struct.unpack('>HHH', d)
            print(f"  background RGB (16-bit) = ({r}, {g}, {b})")
        else:
            print(f"  bKGD raw data (length={length})")

    elif typ == 'pHYs' and length == 9:
        x_ppu, y_ppu, unit = struct.unpack('>IIB', d)
        unit_descr = 'meter' if unit == 1 else 'unknown'
        print(f"  x_ppu={x_ppu}\n  y_ppu={y_ppu}\n  unit={unit} ({unit_descr})")

    elif typ == 'tEXt':
        #uncompressed text: key\0value
        try:
            key, val = d.split(b'\x00', 1)
            print(f"  key='{key.decode('latin-1')}', text='{val.decode('latin-1')}'")
        except ValueError:
            print("  [Malformed tEXt] - raw dump suppressed")

    elif typ == 'zTXt':
        #zlib compressed text, inflate it first
        try:
            key, rest = d.split(b'\x00', 1)
            compressed_text = rest[1:]
            text = zlib.decompress(compressed_text).decode('latin-1')
            print(f"  key='{key.decode('latin-1')}', text='{text}'")
        except (ValueError, zlib.error):
            print("  zTXt raw data (parse error)")

    elif typ == 'IEND':
        #no data
        pass

    elif is_token_type(t):
        #message itself is not printed, decode it with the token
        print(f"  possible secret message, token={chunk_type_to_token(t)}, {length} bytes")

    else:
        print(f"  Unknown chunk type {typ}, raw data length {length}")


def printChunks(chunks, tail=b''):
    offset = len(PngSignature)
    for chunk in chunks:
        printChunk(chunk, offset)
        offset += chunk.length + CHUNK_OVERHEAD
    print(f'Bytes behind IEND: {len(tail)}')
