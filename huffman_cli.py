# filename: huffman_cli.py
"""Command line shell around HuffmanService.

Usage:
    python huffman_cli.py compress <file> [-o OUTPUT]
    python huffman_cli.py decompress <file.huff> [-o OUTPUT_DIR]
"""

import argparse
import logging
import os
import sys
from collections import namedtuple

from huffman_errors import HuffmanError
from huffman_service import HuffmanService

EXTENSION = ".huff"


class CompressionStats(namedtuple("CompressionStats", "original_size compressed_size")):
    __slots__ = ()

    @property
    def ratio(self):
        """Percentage of the original size saved."""
        if self.original_size == 0:
            return 0.0
        return 100.0 * (1 - self.compressed_size / self.original_size)


def compress_file(input_path, output_path=None, service=None):
    service = service or HuffmanService()
    if output_path is None:
        output_path = input_path + EXTENSION

    with open(input_path, "rb") as f:
        data = f.read()
    compressed = service.compress(data, os.path.basename(input_path))
    with open(output_path, "wb") as f:
        f.write(compressed)

    return output_path, CompressionStats(len(data), len(compressed))


def _safe_name(stored_name):
    # Never let a stored name escape the output directory
    name = os.path.basename(stored_name.replace("\\", "/"))
    if name in ("", ".", "..") or "\x00" in name:
        return ""
    try:
        os.fsencode(name)
    except UnicodeError:
        return ""
    return name


def decompress_file(input_path, output_dir=None, service=None):
    service = service or HuffmanService()
    if output_dir is None:
        output_dir = os.path.dirname(os.path.abspath(input_path))

    with open(input_path, "rb") as f:
        result = service.decompress(f.read())

    name = _safe_name(result.filename)
    if not name:
        name = os.path.basename(input_path)
        if name.endswith(EXTENSION):
            name = name[:-len(EXTENSION)]
        name = name or "output"
    output_path = os.path.join(output_dir, name)
    with open(output_path, "wb") as f:
        f.write(result.data)

    return output_path, result.status


def build_parser():
    parser = argparse.ArgumentParser(description="Huffman file compressor")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step")
    commands = parser.add_subparsers(dest="command", required=True)

    compress = commands.add_parser("compress", help="Compress a file")
    compress.add_argument("input", help="File to compress")
    compress.add_argument("-o", "--output", default=None, help=f"Output file (default: <input>{EXTENSION})")

    decompress = commands.add_parser("decompress", help="Restore a compressed file")
    decompress.add_argument("input", help=f"{EXTENSION} file to restore")
    decompress.add_argument(
        "-o", "--output-dir", default=None,
        help="Directory for the restored file (default: next to the input)",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "compress":
            output, stats = compress_file(args.input, args.output)
            print(f"Compressed {args.input} to {output}")
            print(f"Original: {stats.original_size} bytes | "
                  f"Compressed: {stats.compressed_size} bytes | "
                  f"Ratio: {stats.ratio:.2f}%")
            return 0

        output_path, status = decompress_file(args.input, args.output_dir)
        print(f"CRC32: {'ok' if status.crc32_ok else 'MISMATCH'}")
        print(f"SHA-256: {'ok' if status.sha256_ok else 'MISMATCH'}")
        print(f"Restored {output_path}")
        if not status.ok:
            print("Warning: integrity validation failed", file=sys.stderr)
            return 2
        return 0
    except (HuffmanError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
