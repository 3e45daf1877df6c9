# filename: huffman_service.py

import logging
from collections import namedtuple

from huffman_bitstream import pack, payload_bit_length, unpack
from huffman_canonical import canonical_codes, reconstruct_tree, to_canonical
from huffman_container import ContainerHeader, read_container, write_container
from huffman_core import HuffmanLogic
from huffman_integrity import crc32, sha256, validate

logger = logging.getLogger(__name__)

DecompressResult = namedtuple("DecompressResult", "filename data status")


class HuffmanService:
    def __init__(self):
        self.logic = HuffmanLogic()

    def compress(self, data, filename=""):
        data = bytes(data)
        frequencies = self.logic.analyze_frequency(data)
        tree = self.logic.build_tree(frequencies)
        groups = to_canonical(self.logic.generate_codes(tree))

        # Encode with the canonical codes so the payload matches what the
        # reader regenerates from the table alone
        codes = canonical_codes(groups)
        payload = pack(data, codes)

        header = ContainerHeader(filename, len(data), crc32(data), sha256(data))
        compressed = write_container(header, groups, payload)
        logger.debug(
            "compressed %d bytes (%d symbols) to %d bytes, %d payload bits",
            len(data), len(frequencies), len(compressed),
            payload_bit_length(frequencies, codes),
        )
        return compressed

    def decompress(self, data):
        container = read_container(data)
        header = container.header

        root = reconstruct_tree(canonical_codes(container.groups)) if container.groups else None
        output = unpack(container.payload, root, header.original_length)

        status = validate(output, header.crc32, header.sha256)
        return DecompressResult(header.filename, output, status)
