# filename: huffman_errors.py


class HuffmanError(Exception):
    """Base class for everything the compressor raises on bad input."""


class InvalidFormat(HuffmanError):
    """The compressed buffer is not a readable container (magic, header or table)."""


class TruncatedPayload(HuffmanError):
    """The payload ended before the original number of bytes was decoded."""

    def __init__(self, decoded, expected):
        super().__init__(
            f"payload exhausted after {decoded} of {expected} bytes"
        )
        self.decoded = decoded
        self.expected = expected


class IntegrityMismatch(HuffmanError):
    """CRC32 and/or SHA-256 of the decoded data disagree with the header."""

    def __init__(self, status):
        failed = []
        if not status.crc32_ok:
            failed.append("CRC32")
        if not status.sha256_ok:
            failed.append("SHA-256")
        super().__init__("integrity check failed: " + ", ".join(failed))
        self.status = status
