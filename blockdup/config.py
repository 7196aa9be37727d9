"""
Search configuration and option validation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .checksum import DEFAULT_CHECKSUM, Checksum, select_checksum
from .exceptions import ConfigurationError
from .hasher import DEFAULT_BLOCK_SIZE, HashSettings

DIRS_SEPARATOR = ";"

DEFAULT_SCAN_LEVEL = 0
DEFAULT_MIN_FILE_SIZE = 1


def split_paths(paths: Union[str, List, None]) -> List[Path]:
    """
    Split a semicolon-separated string of directories into paths.

    Empty parts are ignored, so 'a;;b;' gives [a, b]. Lists are passed
    through with each item converted to a Path.
    """
    if not paths:
        return []
    if isinstance(paths, (str, Path)):
        parts = str(paths).split(DIRS_SEPARATOR)
    else:
        parts = [str(p) for p in paths]
    return [Path(part.strip()) for part in parts if part.strip()]


@dataclass
class SearchConfig:
    """
    Options of one duplicate search.

    Everything is validated on construction, so a bad option stops the run
    before any directory is read.
    """

    # Directories to search; a semicolon-separated string is accepted too.
    include_dirs: List[Path]

    # Directories skipped together with everything below them.
    exclude_dirs: List[Path] = field(default_factory=list)

    # 0 - only the include directories themselves, N - N levels below them.
    scan_level: int = DEFAULT_SCAN_LEVEL

    # Files smaller than this many bytes are ignored.
    min_file_size: int = DEFAULT_MIN_FILE_SIZE

    # Case-insensitive glob for file names, empty to accept all files.
    file_mask: str = ""

    # Bytes hashed per file in each refinement pass.
    block_size: int = DEFAULT_BLOCK_SIZE

    # 'md5' or 'crc32'; anything else falls back to md5 with a warning.
    checksum: str = DEFAULT_CHECKSUM

    # Reader threads per pass, None picks a count from the CPU count.
    workers: Optional[int] = None

    # Suppress progress bars and stage headers.
    quiet: bool = False

    _checksum: Checksum = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        self.include_dirs = split_paths(self.include_dirs)
        self.exclude_dirs = split_paths(self.exclude_dirs)
        self.file_mask = (self.file_mask or "").strip()

        if not self.include_dirs:
            raise ConfigurationError("At least one include directory is required")
        if self.scan_level < 0:
            raise ConfigurationError("Scan level must not be negative")
        if self.min_file_size < 0:
            raise ConfigurationError("Minimum file size must not be negative")
        if self.block_size < 1:
            raise ConfigurationError("Block size must be greater or equal to 1 byte")
        if self.workers is not None and self.workers < 1:
            raise ConfigurationError("Worker count must be at least 1")

        self._checksum = select_checksum(self.checksum)
        self.checksum = self._checksum.name

    def hash_settings(self) -> HashSettings:
        return HashSettings(block_size=self.block_size, checksum=self._checksum)
