"""
Initial partition of candidate files by exact size.
"""

from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tqdm import tqdm

from .hasher import get_file_size


def partition_by_size(
    files: Iterable[Path],
    sizes: Optional[Dict[Path, int]] = None,
    quiet: bool = False
) -> Dict[int, List[Path]]:
    """
    Group files by byte size and drop sizes held by a single file.

    Args:
        files: Candidate file paths
        sizes: Sizes already known from the directory scan
        quiet: Suppress progress output

    Returns:
        Dictionary mapping size to the files of that size (two or more each),
        in the order the files were given
    """
    sizes = sizes or {}
    size_to_files = defaultdict(list)
    seen = set()

    for file_path in tqdm(files, desc="Analyzing sizes", unit=" files", leave=False, disable=quiet):
        file_path = Path(file_path)
        if file_path in seen:
            continue
        seen.add(file_path)

        size = sizes.get(file_path)
        if size is None:
            size = get_file_size(file_path)
        size_to_files[size].append(file_path)

    # A single file of a given size cannot have a duplicate
    return {
        size: file_group
        for size, file_group in size_to_files.items()
        if len(file_group) > 1
    }
