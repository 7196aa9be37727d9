"""
Checksum functions used to compare file chunks.

Checksums only decide equality inside a group, so speed matters more than
cryptographic strength.
"""

import hashlib
import logging
import zlib
from abc import ABC, abstractmethod
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_CHECKSUM = "md5"


class Checksum(ABC):
    """Turns a chunk of bytes into a fixed-form digest string."""

    name = ""

    @abstractmethod
    def digest(self, data: bytes) -> str:
        """Return the digest of data. Must be deterministic."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(self.name)


class Md5Checksum(Checksum):
    """MD5 digest as lowercase hex."""

    name = "md5"

    def digest(self, data: bytes) -> str:
        return hashlib.md5(data).hexdigest()


class Crc32Checksum(Checksum):
    """CRC-32 as 8 lowercase hex digits."""

    name = "crc32"

    def digest(self, data: bytes) -> str:
        return f"{zlib.crc32(data) & 0xFFFFFFFF:08x}"


CHECKSUMS: Dict[str, type] = {
    Md5Checksum.name: Md5Checksum,
    Crc32Checksum.name: Crc32Checksum,
}


def select_checksum(name: str) -> Checksum:
    """
    Return the checksum implementation registered under name.

    Unknown names never abort the run: a warning is logged and the default
    algorithm is used instead.

    Args:
        name: Checksum name, case-insensitive (e.g. 'md5', 'crc32')

    Returns:
        Checksum instance
    """
    key = (name or "").strip().lower()
    checksum_class = CHECKSUMS.get(key)
    if checksum_class is None:
        logger.warning("Unknown checksum '%s', %s will be used", name, DEFAULT_CHECKSUM)
        checksum_class = CHECKSUMS[DEFAULT_CHECKSUM]
    return checksum_class()
