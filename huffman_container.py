# filename: huffman_container.py
"""Binary layout of a compressed file.

All integers are big-endian::

    magic            4 bytes   0x48554646 ("HUFF")
    filename         2-byte length + modified UTF-8
    original length  8 bytes, unsigned
    CRC32            8 bytes (32-bit value)
    SHA-256          32 bytes
    canonical table  see huffman_canonical.serialize_table
    payload          MSB-first bitstream, zero padded to a byte
"""

import logging
import struct
from collections import namedtuple

from huffman_canonical import parse_table, serialize_table
from huffman_errors import InvalidFormat

logger = logging.getLogger(__name__)

MAGIC = 0x48554646
SHA256_SIZE = 32
MAX_UTF_LENGTH = 0xFFFF

_MAGIC = struct.Struct(">I")
_UTF_LENGTH = struct.Struct(">H")
_SIZES = struct.Struct(">QQ")

ContainerHeader = namedtuple("ContainerHeader", "filename original_length crc32 sha256")
CompressedFile = namedtuple("CompressedFile", "header groups payload")


def encode_modified_utf8(text):
    """Encode like Java's DataOutput.writeUTF, without the length prefix.

    NUL becomes two bytes and characters outside the BMP are written as a
    pair of three-byte surrogates.
    """
    units = text.encode("utf-16-be", "surrogatepass")
    out = bytearray()
    for i in range(0, len(units), 2):
        unit = (units[i] << 8) | units[i + 1]
        if 0x0001 <= unit <= 0x007F:
            out.append(unit)
        elif unit <= 0x07FF:
            out.append(0xC0 | (unit >> 6))
            out.append(0x80 | (unit & 0x3F))
        else:
            out.append(0xE0 | (unit >> 12))
            out.append(0x80 | ((unit >> 6) & 0x3F))
            out.append(0x80 | (unit & 0x3F))
    return bytes(out)


def decode_modified_utf8(data):
    units = bytearray()
    i = 0
    while i < len(data):
        first = data[i]
        if first < 0x80:
            unit, width = first, 1
        elif first & 0xE0 == 0xC0:
            unit, width = first & 0x1F, 2
        elif first & 0xF0 == 0xE0:
            unit, width = first & 0x0F, 3
        else:
            raise InvalidFormat(f"malformed filename byte 0x{first:02x}")
        if i + width > len(data):
            raise InvalidFormat("filename ends inside a character")
        for follow in data[i + 1:i + width]:
            if follow & 0xC0 != 0x80:
                raise InvalidFormat(f"malformed filename byte 0x{follow:02x}")
            unit = (unit << 6) | (follow & 0x3F)
        units += unit.to_bytes(2, "big")
        i += width
    return units.decode("utf-16-be", "surrogatepass")


class _Reader:
    def __init__(self, buffer):
        self.buffer = buffer
        self.offset = 0

    def read(self, count, what):
        end = self.offset + count
        if end > len(self.buffer):
            raise InvalidFormat(f"file is truncated while reading {what}")
        chunk = self.buffer[self.offset:end]
        self.offset = end
        return chunk


def write_container(header, groups, payload):
    name = encode_modified_utf8(header.filename)
    if len(name) > MAX_UTF_LENGTH:
        raise ValueError(f"filename is {len(name)} bytes encoded, limit is {MAX_UTF_LENGTH}")
    if len(header.sha256) != SHA256_SIZE:
        raise ValueError("SHA-256 digest must be 32 bytes")

    out = bytearray(_MAGIC.pack(MAGIC))
    out += _UTF_LENGTH.pack(len(name))
    out += name
    out += _SIZES.pack(header.original_length, header.crc32)
    out += header.sha256
    out += serialize_table(groups)
    out += payload
    return bytes(out)


def read_container(buffer):
    """Parse a compressed file, checking the magic marker before anything else."""
    reader = _Reader(bytes(buffer))

    (magic,) = _MAGIC.unpack(reader.read(_MAGIC.size, "magic marker"))
    if magic != MAGIC:
        raise InvalidFormat(f"bad magic marker 0x{magic:08x}")

    (name_length,) = _UTF_LENGTH.unpack(reader.read(_UTF_LENGTH.size, "filename length"))
    filename = decode_modified_utf8(reader.read(name_length, "filename"))
    original_length, crc = _SIZES.unpack(reader.read(_SIZES.size, "sizes"))
    digest = reader.read(SHA256_SIZE, "SHA-256 digest")

    groups, reader.offset = parse_table(reader.buffer, reader.offset)
    payload = reader.buffer[reader.offset:]

    header = ContainerHeader(filename, original_length, crc, digest)
    logger.debug(
        "read container for %r: %d bytes, %d code lengths, %d payload bytes",
        filename, original_length, len(groups), len(payload),
    )
    return CompressedFile(header, groups, payload)
