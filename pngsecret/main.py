import argparse
import os
import sys

from pngsecret import PNG
from pngsecret import secret_message
from pngsecret.decompress_IDAT import pixelsFromChunks
from pngsecret.errors import PngSecretError
from pngsecret.print_chunks import printChunks

OPERATIONS = ('encode', 'decode', 'remove', 'print')


def build_parser():
    parser = argparse.ArgumentParser(
        prog='pngsecret',
        description='A command line utility for embedding secret messages in PNG images.',
    )
    parser.add_argument('operation', choices=OPERATIONS, help='Operation to perform')
    parser.add_argument('-f', '--file-path', required=True, help='Path to the PNG file')
    parser.add_argument('-c', '--chunk-type', '--token', dest='token',
                        help='Token printed by encode, required for decode and remove')
    parser.add_argument('-m', '--message', help='Message to hide, required for encode')
    parser.add_argument('-o', '--output-file',
                        help='Output PNG (encode: default <name>_secret.png, remove: default in place)')
    parser.add_argument('--pixels', action='store_true',
                        help='print: decode IDAT and report the image size')
    parser.add_argument('--show', action='store_true',
                        help='print: display the decoded image')
    return parser


def output_path(input_path, output_file):
    if output_file is None:
        root, ext = os.path.splitext(input_path)
        return root + '_secret' + (ext or '.png')
    #a bare file name goes next to the input
    if not os.path.dirname(output_file):
        return os.path.join(os.path.dirname(input_path), output_file)
    return output_file


def showImage(img, title):
    import matplotlib.pyplot as plt

    plt.imshow(img, cmap='gray' if img.ndim == 2 else None)
    plt.title(title)
    plt.axis('off')
    plt.show()


def cmd_encode(args):
    content = PNG.read_file(args.file_path)
    output, token = secret_message.encode(content, args.message)
    out_path = output_path(args.file_path, args.output_file)
    PNG.write_file(out_path, output)
    print(f'Secret encoded successfully into {out_path}')
    print(f'The token is {token}, please keep it a secret. It will be used for decoding your message.')


def cmd_decode(args):
    content = PNG.read_file(args.file_path)
    message = secret_message.decode(content, args.token)
    print(message.decode('utf-8', errors='replace'))


def cmd_remove(args):
    content = PNG.read_file(args.file_path)
    output, message = secret_message.remove(content, args.token)
    out_path = args.file_path
    if args.output_file is not None:
        out_path = output_path(args.file_path, args.output_file)
    PNG.write_file(out_path, output)
    print(message.decode('utf-8', errors='replace'))


def cmd_print(args):
    chunks, tail = PNG.readPNG(args.file_path)
    printChunks(chunks, tail)

    secrets = secret_message.list_secrets(chunks)
    if secrets:
        print(f'Possible secret chunks: {", ".join(secrets)}')

    if args.pixels or args.show:
        img = pixelsFromChunks(chunks)
        print(f'Decoded pixels: shape={img.shape}, dtype={img.dtype}')
        if args.show:
            showImage(img, os.path.basename(args.file_path))


COMMANDS = {
    'encode': cmd_encode,
    'decode': cmd_decode,
    'remove': cmd_remove,
    'print': cmd_print,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.operation == 'encode' and args.message is None:
        parser.error('the -m/--message argument is required for encode')
    if args.operation in ('decode', 'remove') and args.token is None:
        parser.error(f'the -c/--chunk-type argument is required for {args.operation}')

    try:
        COMMANDS[args.operation](args)
    except (PngSecretError, OSError) as e:
        print(f'Error: {type(e).__name__}: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
