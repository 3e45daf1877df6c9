# filename: huffman_core.py

import heapq
import itertools
import logging
from collections import Counter

logger = logging.getLogger(__name__)


class HuffmanNode:
    """A leaf (``symbol`` set) or an internal node owning two children."""

    __slots__ = ("symbol", "freq", "left", "right")

    def __init__(self, symbol, freq, left=None, right=None):
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    @classmethod
    def merge(cls, left, right):
        return cls(None, left.freq + right.freq, left, right)

    @property
    def is_leaf(self):
        return self.symbol is not None

    def __lt__(self, other):
        return self.freq < other.freq

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(symbol={self.symbol}, freq={self.freq})"
        return f"HuffmanNode(freq={self.freq})"


class HuffmanLogic:
    def analyze_frequency(self, data):
        # Only symbols that occur are present, keyed in ascending order
        return dict(sorted(Counter(data).items()))

    def merge_sort(self, nodes):
        """Stable ascending sort of nodes by frequency."""
        if len(nodes) <= 1:
            return list(nodes)

        mid = len(nodes) // 2
        left = self.merge_sort(nodes[:mid])
        right = self.merge_sort(nodes[mid:])

        merged = []
        i = j = 0
        while i < len(left) and j < len(right):
            # <= keeps equal frequencies in their input order
            if left[i].freq <= right[j].freq:
                merged.append(left[i])
                i += 1
            else:
                merged.append(right[j])
                j += 1
        merged.extend(left[i:])
        merged.extend(right[j:])
        return merged

    def build_tree(self, frequencies):
        """Greedily merge the two lightest nodes until one tree remains.

        Returns ``None`` for an empty frequency table and a bare leaf when
        only one symbol occurs.
        """
        leaves = [HuffmanNode(symbol, freq) for symbol, freq in frequencies.items()]
        if not leaves:
            return None

        # The counter breaks frequency ties so that earlier nodes pop first.
        # A sorted list is already a valid heap.
        counter = itertools.count()
        priority_queue = [(node.freq, next(counter), node) for node in self.merge_sort(leaves)]

        while len(priority_queue) > 1:
            _, _, left = heapq.heappop(priority_queue)
            _, _, right = heapq.heappop(priority_queue)
            merged = HuffmanNode.merge(left, right)
            heapq.heappush(priority_queue, (merged.freq, next(counter), merged))

        root = priority_queue[0][2]
        logger.debug("built tree over %d symbols, total weight %d", len(leaves), root.freq)
        return root

    def generate_codes(self, node):
        """Map every symbol under ``node`` to its root path as a bit string."""
        codes = {}
        if node is None:
            return codes
        if node.is_leaf:
            # A lone leaf has no path; give it a one-bit code
            codes[node.symbol] = "0"
            return codes
        self._walk(node, "", codes)
        return codes

    def _walk(self, node, current_code, codes):
        if node.is_leaf:
            codes[node.symbol] = current_code
            return
        self._walk(node.left, current_code + "0", codes)
        self._walk(node.right, current_code + "1", codes)

    def build_codes(self, data):
        return self.generate_codes(self.build_tree(self.analyze_frequency(data)))
