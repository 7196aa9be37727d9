"""
Duplicate file detection by progressive, block-by-block refinement.

Stage 1: Collect candidate files from the include directories
Stage 2: Group candidates by exact size
Stage 3: Hash one block per file per pass and split groups as soon as
         their members disagree, until every group is exhausted
"""

import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from .config import SearchConfig
from .exceptions import SearchCancelled
from .groups import Group, GroupTable
from .hasher import FileEntry, HashSettings
from .parallel_hasher import get_optimal_worker_count, parallel_next_chunks
from .partitioner import partition_by_size
from .scanner import find_candidates

logger = logging.getLogger(__name__)


@dataclass
class PassStats:
    """What one refinement pass did to the group table."""
    pass_number: int
    groups_examined: int = 0
    groups_split: int = 0
    groups_created: int = 0
    groups_finished: int = 0
    files_dropped: int = 0
    active_groups: int = 0


class RefinementEngine:
    """
    Splits size groups into confirmed duplicate sets.

    The table only ever holds active groups. Each pass reads one block from
    every member of every active group, then builds a successor table:
    groups whose members all agreed keep their id, groups that disagreed
    are replaced by fresh groups for each hash shared by two or more files,
    and exhausted groups move to the finished list.
    """

    def __init__(self, settings: HashSettings, max_workers: Optional[int] = 1, quiet: bool = False):
        """
        Args:
            settings: Block size and checksum for every file
            max_workers: Reader threads per pass (None for auto, 1 reads inline)
            quiet: Suppress progress output
        """
        self.settings = settings
        self.max_workers = get_optimal_worker_count() if max_workers is None else max_workers
        self.quiet = quiet
        self._table = GroupTable()
        self._finished: List[Group] = []
        self._passes = 0
        self._cancel_event = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def table(self) -> GroupTable:
        return self._table

    @property
    def finished_groups(self) -> List[Group]:
        return list(self._finished)

    @property
    def passes(self) -> int:
        return self._passes

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Ask a running search to stop before its next pass."""
        self._cancel_event.set()

    def load(self, size_buckets: Dict[int, List[Path]]) -> GroupTable:
        """
        Create one group per size bucket.

        Buckets of empty files are complete before any read, so they go
        straight to the finished list.
        """
        for size, file_group in size_buckets.items():
            if len(file_group) < 2:
                continue
            entries = [FileEntry(path, self.settings, total_size=size) for path in file_group]
            group = self._table.create(entries)
            if group.finished:
                self._table.remove(group.group_id).close()
                self._finished.append(group)

        logger.debug(
            "Loaded %d size groups, %d already complete",
            len(self._table), len(self._finished)
        )
        return self._table

    def step(self) -> PassStats:
        """Run one refinement pass over every active group."""
        self._passes += 1
        stats = PassStats(pass_number=self._passes)

        active = self._table.active_groups()
        stats.groups_examined = len(active)

        # Every read of the pass completes before any group is touched
        entries = [entry for group in active for entry in group.entries]
        hashes = parallel_next_chunks(entries, self._get_executor())

        next_table = self._table.successor()
        finished = []

        for group in active:
            buckets = defaultdict(list)
            for entry in group.entries:
                buckets[hashes[entry]].append(entry)

            if len(buckets) == 1:
                if group.finished:
                    finished.append(group)
                else:
                    next_table.adopt(group)
                continue

            stats.groups_split += 1
            for bucket in buckets.values():
                if len(bucket) < 2:
                    for entry in bucket:
                        entry.close()
                    stats.files_dropped += len(bucket)
                    continue

                child = next_table.create(bucket)
                stats.groups_created += 1
                if child.finished:
                    finished.append(next_table.remove(child.group_id))

            logger.debug(
                "Pass %d: group %d split into %d hash buckets",
                self._passes, group.group_id, len(buckets)
            )

        for group in finished:
            group.close()
        self._finished.extend(finished)
        self._table = next_table

        stats.groups_finished = len(finished)
        stats.active_groups = len(self._table)
        logger.debug("Pass %d: %s", self._passes, stats)
        return stats

    def run(self, size_buckets: Dict[int, List[Path]]) -> List[Group]:
        """
        Refine size buckets until no group can change any more.

        Args:
            size_buckets: Size -> files of that size, as built by
                partition_by_size()

        Returns:
            Confirmed duplicate groups

        Raises:
            OSError: A file could not be opened or read
            SearchCancelled: cancel() was called during the run
        """
        try:
            self.load(size_buckets)
            with tqdm(desc="Comparing blocks", unit=" passes", disable=self.quiet, leave=False) as pbar:
                while self._table.active_groups():
                    if self._cancel_event.is_set():
                        raise SearchCancelled(f"Search cancelled after {self._passes} passes")

                    stats = self.step()
                    pbar.update(1)
                    pbar.set_postfix(
                        groups=stats.active_groups,
                        duplicates=len(self._finished),
                        refresh=False
                    )
        finally:
            self.close()

        return self.finished_groups

    def _get_executor(self) -> Optional[ThreadPoolExecutor]:
        if self.max_workers <= 1:
            return None
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers)
        return self._executor

    def close(self) -> None:
        """Release every open file handle and the reader threads."""
        try:
            self._table.close()
            for group in self._finished:
                group.close()
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> "RefinementEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def find_duplicates(config: SearchConfig) -> List[Group]:
    """
    Find groups of identical files as described by config.

    Args:
        config: Validated search options

    Returns:
        Confirmed duplicate groups, in discovery order

    Raises:
        OSError: Any file system error; no partial result is returned
        SearchCancelled: The search was cancelled
    """
    quiet = config.quiet

    if not quiet:
        print("\n=== Stage 1: Scanning directories ===")

    scan = find_candidates(
        config.include_dirs,
        exclude_dirs=config.exclude_dirs,
        scan_level=config.scan_level,
        min_size=config.min_file_size,
        file_mask=config.file_mask,
        quiet=quiet
    )

    if not quiet:
        print(f"  Found {len(scan.files)} candidate files in {scan.directories_scanned} directories")
        print("\n=== Stage 2: Grouping files by size ===")

    size_buckets = partition_by_size(scan.files, scan.sizes, quiet=quiet)
    files_needing_hash = sum(len(group) for group in size_buckets.values())

    if not quiet:
        print(f"  {len(scan.files) - files_needing_hash} files are unique by size alone")
        print(f"  {files_needing_hash} files need content comparison")

    if not size_buckets:
        return []

    if not quiet:
        print(f"\n=== Stage 3: Block comparison ({config.block_size} bytes, {config.checksum}) ===")

    with RefinementEngine(config.hash_settings(), max_workers=config.workers, quiet=quiet) as engine:
        groups = engine.run(size_buckets)

    if not quiet:
        print(f"  {len(groups)} duplicate groups confirmed after {engine.passes} passes")

    return groups
