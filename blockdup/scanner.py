"""
Directory scanning functionality.
"""

import fnmatch
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Set

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ScanResult:
    """Container for scan results and skip statistics."""

    def __init__(self):
        self.files: List[Path] = []
        self.sizes: Dict[Path, int] = {}
        self.directories_scanned = 0
        self.skipped_items: Dict[str, int] = {
            'excluded_dirs': 0,
            'broken_symlinks': 0,
            'not_regular_files': 0,
            'below_min_size': 0,
            'name_filtered': 0
        }


def normalize_dir(directory) -> Path:
    """Absolute, symlink-resolved form of a directory path."""
    return Path(directory).expanduser().resolve()


def matches_mask(file_name: str, file_mask: str) -> bool:
    """
    Case-insensitive shell-glob match against a whole file name.

    An empty mask matches every name.
    """
    if not file_mask:
        return True
    return fnmatch.fnmatchcase(file_name.lower(), file_mask.lower())


def _raise_walk_error(error: OSError) -> None:
    raise error


def _is_excluded(directory: Path, excluded: Set[str]) -> bool:
    """True if the directory or any of its ancestors is excluded."""
    return any(
        os.path.normcase(str(path)) in excluded
        for path in (directory, *directory.parents)
    )


def scan_directories(
    include_dirs: Iterable[Path],
    exclude_dirs: Iterable[Path] = (),
    scan_level: int = 0,
    min_size: int = 1,
    file_mask: str = "",
    quiet: bool = False
) -> ScanResult:
    """
    Walk the include directories and collect candidate files.

    Depth 0 means only the files directly inside each include directory;
    N descends N levels of subdirectories. Excluded directories are never
    entered, whatever their depth.

    Args:
        include_dirs: Directories to search
        exclude_dirs: Directories skipped together with their subtrees
        scan_level: Recursion depth
        min_size: Minimum file size in bytes
        file_mask: Case-insensitive file name glob, empty for all files
        quiet: Suppress progress output

    Returns:
        ScanResult with the accepted files and their sizes

    Raises:
        OSError: A directory cannot be listed or a file cannot be stat'ed
    """
    result = ScanResult()
    excluded: Set[str] = {os.path.normcase(str(normalize_dir(d))) for d in exclude_dirs}

    try:
        with tqdm(desc="Scanning", unit=" dirs", disable=quiet, leave=False) as pbar:
            for directory in include_dirs:
                root = normalize_dir(directory)
                if _is_excluded(root, excluded):
                    result.skipped_items['excluded_dirs'] += 1
                    continue

                for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
                    result.directories_scanned += 1
                    pbar.update(1)

                    depth = len(Path(dirpath).relative_to(root).parts)
                    kept_dirs = []
                    if depth < scan_level:
                        for name in dirnames:
                            if os.path.normcase(os.path.join(dirpath, name)) in excluded:
                                result.skipped_items['excluded_dirs'] += 1
                            else:
                                kept_dirs.append(name)
                    dirnames[:] = kept_dirs

                    for name in filenames:
                        _process_file(Path(dirpath) / name, min_size, file_mask, result)

                    pbar.set_postfix(files=len(result.files), refresh=False)

    except KeyboardInterrupt:
        print(f"\nScan interrupted. Found {len(result.files)} files so far.", file=sys.stderr)
        raise

    logger.debug(
        "Scanned %d directories, accepted %d files, skipped %s",
        result.directories_scanned, len(result.files), result.skipped_items
    )
    return result


def _process_file(file_path: Path, min_size: int, file_mask: str, result: ScanResult) -> None:
    """Apply the name, type and size filters to a single directory entry."""
    if not matches_mask(file_path.name, file_mask):
        result.skipped_items['name_filtered'] += 1
        return

    if file_path.is_symlink() and not file_path.exists():
        result.skipped_items['broken_symlinks'] += 1
        return

    if not file_path.is_file():
        result.skipped_items['not_regular_files'] += 1
        return

    if file_path in result.sizes:
        # Reached through two overlapping include directories
        return

    size = file_path.stat().st_size
    if size < min_size:
        result.skipped_items['below_min_size'] += 1
        return

    result.files.append(file_path)
    result.sizes[file_path] = size


def find_candidates(
    include_dirs: Iterable[Path],
    exclude_dirs: Iterable[Path] = (),
    scan_level: int = 0,
    min_size: int = 1,
    file_mask: str = "",
    quiet: bool = False
) -> ScanResult:
    """
    Scan directories and report what was skipped.

    See scan_directories() for the meaning of the arguments.
    """
    result = scan_directories(include_dirs, exclude_dirs, scan_level, min_size, file_mask, quiet)

    # Log summary of skipped items
    total_skipped = sum(result.skipped_items.values())
    if total_skipped > 0:
        logger.info("Skipped %d items:", total_skipped)
        for item_type, count in result.skipped_items.items():
            if count > 0:
                logger.info("  • %s: %d", item_type.replace('_', ' ').title(), count)

    return result
