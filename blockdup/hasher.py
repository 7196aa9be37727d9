"""
Incremental, block-by-block file hashing for duplicate detection.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional

from .checksum import Checksum, Md5Checksum
from .exceptions import ConfigurationError, FileChangedError


DEFAULT_BLOCK_SIZE = 10


@dataclass(frozen=True)
class HashSettings:
    """Block size and checksum shared by every file of one search."""
    block_size: int = DEFAULT_BLOCK_SIZE
    checksum: Checksum = field(default_factory=Md5Checksum)

    def __post_init__(self) -> None:
        if self.block_size < 1:
            raise ConfigurationError("Block size must be greater or equal to 1 byte")


def get_file_size(file_path: Path) -> int:
    """
    Get file size in bytes.

    Errors are not swallowed: a file whose size cannot be read makes the
    whole search fail.

    Args:
        file_path: Path to the file

    Returns:
        File size in bytes
    """
    return Path(file_path).stat().st_size


class FileEntry:
    """
    One candidate file, read sequentially one block per call.

    The file handle is opened on the first read and closed as soon as the
    content is exhausted, or when close() is called.
    """

    def __init__(self, path: Path, settings: HashSettings, total_size: Optional[int] = None):
        """
        Args:
            path: Path to the file
            settings: Block size and checksum of the search
            total_size: Size recorded at discovery; stat'ed when omitted
        """
        self.path = Path(path)
        self.settings = settings
        self.total_size = get_file_size(self.path) if total_size is None else total_size
        self.read_position = 0
        self.last_hash: Optional[str] = None
        self._handle: Optional[BinaryIO] = None

    @property
    def finished(self) -> bool:
        return self.read_position >= self.total_size

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def next_chunk(self) -> str:
        """
        Hash the next block of the file.

        Once the file is exhausted the cached hash of the last block is
        returned without touching the file again.

        Returns:
            Digest string of the block just read

        Raises:
            OSError: The file cannot be opened or read
            FileChangedError: The file ended before its recorded size
        """
        if self.finished:
            if self.last_hash is None:
                # Zero-length file: the empty chunk still has a digest
                self.last_hash = self.settings.checksum.digest(b"")
            return self.last_hash

        if self._handle is None:
            self._handle = open(self.path, "rb")

        expected = min(self.settings.block_size, self.total_size - self.read_position)
        chunk = self._handle.read(expected)
        if len(chunk) < expected:
            self.close()
            raise FileChangedError(
                f"File shrank during search: {self.path} "
                f"(expected {self.total_size} bytes, got {self.read_position + len(chunk)})"
            )

        self.read_position += len(chunk)
        self.last_hash = self.settings.checksum.digest(chunk)

        if self.finished:
            self.close()
        return self.last_hash

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self._handle is not None:
            try:
                self._handle.close()
            finally:
                self._handle = None

    def __enter__(self) -> "FileEntry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileEntry({self.path}, pos={self.read_position}/{self.total_size})"
