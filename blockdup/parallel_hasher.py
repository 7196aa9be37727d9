"""
Parallel block reads for one refinement pass.
"""

import os
from concurrent.futures import Executor, as_completed
from typing import Dict, List, Optional

from .hasher import FileEntry


def get_optimal_worker_count() -> int:
    """
    Determine optimal number of worker threads based on system capabilities.

    Returns:
        Number of worker threads to use
    """
    cpu_count = os.cpu_count() or 4
    return min(cpu_count * 2, 16)


def parallel_next_chunks(
    entries: List[FileEntry],
    executor: Optional[Executor] = None
) -> Dict[FileEntry, str]:
    """
    Read and hash the next block of every entry.

    The function only returns once every read of the pass has completed, so
    callers can make split decisions on a complete picture. Each entry is
    handled by exactly one worker.

    Args:
        entries: File entries to advance by one block
        executor: Thread pool to read with; None reads inline

    Returns:
        Dictionary mapping each entry to the hash of the block just read

    Raises:
        OSError: The first read error of the pass, after all reads stopped
    """
    if not entries:
        return {}

    results = {}

    if executor is None or len(entries) == 1:
        for entry in entries:
            results[entry] = entry.next_chunk()
        return results

    future_to_entry = {
        executor.submit(entry.next_chunk): entry
        for entry in entries
    }
    error = None
    for future in as_completed(future_to_entry):
        try:
            results[future_to_entry[future]] = future.result()
        except Exception as e:
            # Keep draining so no read of this pass is still running on return
            if error is None:
                error = e

    if error is not None:
        raise error
    return results
