# filename: huffman_bitstream.py

import logging

from huffman_errors import InvalidFormat, TruncatedPayload

logger = logging.getLogger(__name__)


def pack(data, codes):
    """Concatenate the code of every byte into an MSB-first bitstream.

    The last byte is padded with zero bits.
    """
    out = bytearray()
    current_byte = 0
    bit_pos = 7

    for byte in data:
        for bit in codes[byte]:
            if bit == "1":
                current_byte |= 1 << bit_pos
            bit_pos -= 1
            if bit_pos < 0:
                out.append(current_byte)
                current_byte = 0
                bit_pos = 7

    if bit_pos < 7:
        out.append(current_byte)

    logger.debug("packed %d bytes into %d payload bytes", len(data), len(out))
    return bytes(out)


def unpack(payload, root, original_length):
    """Decode ``original_length`` symbols by walking the tree bit by bit.

    Padding bits after the last symbol are never walked.
    """
    out = bytearray()
    if original_length == 0:
        return bytes(out)
    if root is None:
        raise InvalidFormat("no decode tree for a non-empty payload")

    node = root
    for byte_value in payload:
        for bit_pos in range(7, -1, -1):
            node = node.right if (byte_value >> bit_pos) & 1 else node.left
            if node is None:
                raise InvalidFormat("payload bit leads outside the code table")
            if node.is_leaf:
                out.append(node.symbol)
                if len(out) == original_length:
                    return bytes(out)
                node = root

    raise TruncatedPayload(len(out), original_length)


def payload_bit_length(frequencies, codes):
    return sum(freq * len(codes[symbol]) for symbol, freq in frequencies.items())
