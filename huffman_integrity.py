# filename: huffman_integrity.py

import hashlib
import logging
import zlib
from collections import namedtuple

from huffman_errors import IntegrityMismatch

logger = logging.getLogger(__name__)


def crc32(data):
    return zlib.crc32(data) & 0xFFFFFFFF


def sha256(data):
    return hashlib.sha256(data).digest()


class ValidationStatus(namedtuple("ValidationStatus", "crc32_ok sha256_ok")):
    __slots__ = ()

    @property
    def ok(self):
        return self.crc32_ok and self.sha256_ok

    def raise_for_status(self):
        if not self.ok:
            raise IntegrityMismatch(self)


def validate(data, expected_crc32, expected_sha256):
    """Recompute both checksums over ``data`` and compare them to the header.

    A mismatch is logged and reported, never raised.
    """
    status = ValidationStatus(
        crc32_ok=crc32(data) == expected_crc32,
        sha256_ok=sha256(data) == bytes(expected_sha256),
    )
    if not status.ok:
        logger.warning(
            "integrity check failed (CRC32 %s, SHA-256 %s)",
            "ok" if status.crc32_ok else "mismatch",
            "ok" if status.sha256_ok else "mismatch",
        )
    return status
