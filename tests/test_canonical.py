import random
from collections import Counter

import pytest

from huffman_canonical import (
	canonical_codes,
	parse_table,
	reconstruct_canonical,
	reconstruct_tree,
	serialize_table,
	to_canonical,
)
from huffman_core import HuffmanLogic
from huffman_errors import InvalidFormat


TEXTBOOK_CODES = {
	ord('f'): "0",
	ord('c'): "100",
	ord('d'): "101",
	ord('e'): "111",
	ord('a'): "1100",
	ord('b'): "1101",
}


def _is_prefix_free(codes):
	values = sorted(codes.values())
	return all(not b.startswith(a) for a, b in zip(values, values[1:]))


def _decode_one(root, code):
	node = root
	for bit in code:
		node = node.left if bit == "0" else node.right
	return node


def test_to_canonical_groups_by_length():
	groups = to_canonical(TEXTBOOK_CODES)
	assert groups == [
		(1, [ord('f')]),
		(3, [ord('c'), ord('d'), ord('e')]),
		(4, [ord('a'), ord('b')]),
	]


def test_serialize_table_layout():
	table = serialize_table(to_canonical(TEXTBOOK_CODES))
	assert table == bytes([3, 1, 1, 102, 3, 3, 99, 100, 101, 4, 2, 97, 98])


def test_serialize_empty_table():
	assert serialize_table([]) == b"\x00"
	assert reconstruct_canonical(b"\x00") == {}


def test_reconstruct_canonical_assigns_consecutive_codes():
	codes = reconstruct_canonical(serialize_table(to_canonical(TEXTBOOK_CODES)))
	assert codes == {
		ord('f'): "0",
		ord('c'): "100",
		ord('d'): "101",
		ord('e'): "110",
		ord('a'): "1110",
		ord('b'): "1111",
	}


def test_reconstruct_canonical_single_symbol():
	assert reconstruct_canonical(bytes([1, 1, 1, 0x41])) == {0x41: "0"}


def test_full_alphabet_group_uses_zero_count():
	codes = HuffmanLogic().build_codes(bytes(range(256)))
	groups = to_canonical(codes)
	table = serialize_table(groups)
	assert table == bytes([1, 8, 0]) + bytes(range(256))

	parsed, end = parse_table(table)
	assert parsed == groups
	assert end == len(table)
	assert canonical_codes(parsed) == {s: format(s, "08b") for s in range(256)}


def test_canonical_round_trip_keeps_lengths_and_prefix_freedom():
	logic = HuffmanLogic()
	rng = random.Random(2024)
	for _ in range(50):
		weights = [rng.randint(1, 1000) for _ in range(rng.randint(1, 256))]
		symbols = rng.sample(range(256), len(weights))
		codes = logic.generate_codes(logic.build_tree(dict(zip(symbols, weights))))

		groups = to_canonical(codes)
		rebuilt = reconstruct_canonical(serialize_table(groups))

		assert set(rebuilt) == set(codes)
		assert all(len(rebuilt[s]) == len(codes[s]) for s in codes)
		assert _is_prefix_free(rebuilt)
		assert to_canonical(rebuilt) == groups
		# Canonical codes are a fixed point
		assert reconstruct_canonical(serialize_table(to_canonical(rebuilt))) == rebuilt


def test_reconstruct_tree_places_every_symbol():
	codes = reconstruct_canonical(serialize_table(to_canonical(TEXTBOOK_CODES)))
	root = reconstruct_tree(codes)
	for symbol, code in codes.items():
		leaf = _decode_one(root, code)
		assert leaf.is_leaf
		assert leaf.symbol == symbol


def test_reconstruct_tree_single_code():
	root = reconstruct_tree({0x41: "0"})
	assert not root.is_leaf
	assert root.left.symbol == 0x41
	assert root.right is None


def test_reconstruct_tree_matches_builder_leaf_depths():
	logic = HuffmanLogic()
	data = b"the quick brown fox jumps over the lazy dog" * 3
	codes = logic.build_codes(data)
	root = reconstruct_tree(codes)
	depths = Counter()

	def walk(node, depth):
		if node.is_leaf:
			depths[depth] += 1
			return
		walk(node.left, depth + 1)
		walk(node.right, depth + 1)

	walk(root, 0)
	assert depths == Counter(len(c) for c in codes.values())


@pytest.mark.parametrize("codes", [
	{1: "0", 2: "0"},
	{1: "0", 2: "01"},
	{1: "01", 2: "0"},
	{1: ""},
])
def test_reconstruct_tree_rejects_non_prefix_codes(codes):
	with pytest.raises(InvalidFormat):
		reconstruct_tree(codes)


@pytest.mark.parametrize("table", [
	b"",                              # no length count
	bytes([1, 2]),                    # group header cut short
	bytes([1, 2, 3, 10, 11]),         # fewer symbols than announced
	bytes([2, 3, 1, 5, 2, 1, 6]),     # lengths not ascending
	bytes([1, 0, 1, 5]),              # zero length
	bytes([1, 2, 2, 7, 7]),           # duplicate symbol
	bytes([2, 1, 1, 7, 2, 1, 7]),     # symbol under two lengths
	bytes([1, 2, 2, 9, 8]),           # symbols not ascending
])
def test_parse_table_rejects_malformed(table):
	with pytest.raises(InvalidFormat):
		reconstruct_canonical(table)


def test_canonical_codes_rejects_overfull_length():
	# Three one-bit codes cannot exist
	with pytest.raises(InvalidFormat):
		reconstruct_canonical(bytes([1, 1, 3, 1, 2, 3]))


def test_reconstruct_canonical_rejects_trailing_bytes():
	with pytest.raises(InvalidFormat):
		reconstruct_canonical(bytes([1, 1, 1, 0x41, 0xFF]))


def test_parse_table_returns_offset_past_table():
	buffer = b"xx" + bytes([1, 1, 2, 3, 4]) + b"payload"
	groups, end = parse_table(buffer, 2)
	assert groups == [(1, [3, 4])]
	assert buffer[end:] == b"payload"
