# filename: huffman_canonical.py
"""Canonical form of a Huffman code table.

Only the code length of each symbol is stored. Codes are regenerated by
handing out consecutive integers, shortest lengths first and ascending
symbols within a length, shifting left whenever the length grows.
"""

import logging
from collections import defaultdict

from huffman_core import HuffmanNode
from huffman_errors import InvalidFormat

logger = logging.getLogger(__name__)

MAX_SYMBOLS = 256


def to_canonical(codes):
    """Group the symbols of a code table by code length.

    Returns a list of ``(length, symbols)`` pairs in ascending length order,
    each symbol list ascending.
    """
    groups = defaultdict(list)
    for symbol, code in codes.items():
        groups[len(code)].append(symbol)
    return [(length, sorted(groups[length])) for length in sorted(groups)]


def serialize_table(groups):
    out = bytearray([len(groups)])
    for length, symbols in groups:
        out.append(length)
        # A full 256-symbol group is stored with a zero count
        out.append(len(symbols) % MAX_SYMBOLS)
        out.extend(symbols)
    return bytes(out)


def parse_table(buffer, offset=0):
    """Read a serialized table starting at ``offset``.

    Returns ``(groups, offset)`` where the offset points just past the table.
    """
    def read(count):
        nonlocal offset
        if offset + count > len(buffer):
            raise InvalidFormat("canonical table is truncated")
        chunk = buffer[offset:offset + count]
        offset += count
        return chunk

    group_count = read(1)[0]
    groups = []
    seen = set()
    prev_length = 0
    for _ in range(group_count):
        length, count = read(2)
        if length <= prev_length:
            raise InvalidFormat(f"code length {length} out of order after {prev_length}")
        symbols = list(read(count or MAX_SYMBOLS))
        if symbols != sorted(set(symbols)):
            raise InvalidFormat(f"symbols of length {length} are not strictly ascending")
        if seen.intersection(symbols):
            raise InvalidFormat("symbol listed under more than one code length")
        seen.update(symbols)
        groups.append((length, symbols))
        prev_length = length
    return groups, offset


def canonical_codes(groups):
    """Regenerate the bit strings of a canonical table."""
    codes = {}
    current_code = 0
    prev_length = 0
    for length, symbols in groups:
        current_code <<= length - prev_length
        for symbol in symbols:
            if current_code >> length:
                raise InvalidFormat(f"too many codes of length {length}")
            codes[symbol] = format(current_code, f"0{length}b")
            current_code += 1
        prev_length = length
    return codes


def reconstruct_canonical(table):
    """Decode a serialized table straight into a code table."""
    groups, end = parse_table(table)
    if end != len(table):
        raise InvalidFormat(f"{len(table) - end} unexpected bytes after canonical table")
    return canonical_codes(groups)


def reconstruct_tree(codes):
    """Build a decode tree in which every code leads to its symbol's leaf."""
    root = HuffmanNode(None, 0)
    for symbol, code in codes.items():
        if not code:
            raise InvalidFormat(f"empty code for symbol {symbol}")
        node = root
        for bit in code[:-1]:
            child = node.left if bit == "0" else node.right
            if child is None:
                child = HuffmanNode(None, 0)
                if bit == "0":
                    node.left = child
                else:
                    node.right = child
            elif child.is_leaf:
                raise InvalidFormat(f"code {code} extends the code of symbol {child.symbol}")
            node = child

        leaf = HuffmanNode(symbol, 0)
        if code[-1] == "0":
            if node.left is not None:
                raise InvalidFormat(f"code {code} collides with another code")
            node.left = leaf
        else:
            if node.right is not None:
                raise InvalidFormat(f"code {code} collides with another code")
            node.right = leaf

    logger.debug("rebuilt decode tree for %d symbols", len(codes))
    return root
