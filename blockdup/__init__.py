"""
blockdup - find identical files by comparing them block by block.
"""

from .config import SearchConfig
from .engine import RefinementEngine, find_duplicates
from .groups import Group, GroupTable
from .hasher import FileEntry, HashSettings

__version__ = "1.0.0"

__all__ = [
    "FileEntry",
    "Group",
    "GroupTable",
    "HashSettings",
    "RefinementEngine",
    "SearchConfig",
    "find_duplicates",
]
