"""
Candidate duplicate groups and the table that holds them during refinement.
"""

import itertools
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .hasher import FileEntry


class Group:
    """A set of two or more files whose blocks hashed equal so far."""

    def __init__(self, group_id: int, entries: Iterable[FileEntry]):
        self.group_id = group_id
        self.members: Dict[Path, FileEntry] = {}
        for entry in entries:
            self.members[entry.path] = entry

        if len(self.members) < 2:
            raise ValueError(f"A group needs at least two files, got {len(self.members)}")

    @property
    def size(self) -> int:
        """Byte size shared by every member."""
        return next(iter(self.members.values())).total_size

    @property
    def finished(self) -> bool:
        return all(entry.finished for entry in self.members.values())

    @property
    def paths(self) -> List[Path]:
        return list(self.members)

    @property
    def entries(self) -> List[FileEntry]:
        return list(self.members.values())

    def close(self) -> None:
        for entry in self.members.values():
            entry.close()

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.members)

    def __repr__(self) -> str:
        return f"Group(id={self.group_id}, files={len(self.members)}, size={self.size})"


class GroupTable:
    """
    Mapping from group id to Group.

    Tables produced for successive passes share one id counter, so an id
    that was split or finished is never handed out again.
    """

    def __init__(self, id_source: Optional[Iterator[int]] = None):
        self._ids = id_source if id_source is not None else itertools.count()
        self._groups: Dict[int, Group] = {}

    def create(self, entries: Iterable[FileEntry]) -> Group:
        """Build a group with a fresh id and add it to the table."""
        group = Group(next(self._ids), entries)
        self._groups[group.group_id] = group
        return group

    def adopt(self, group: Group) -> None:
        """Insert an existing group under its own id."""
        if group.group_id in self:
            raise KeyError(f"Group {group.group_id} is already in the table")
        self._groups[group.group_id] = group

    def remove(self, group_id: int) -> Group:
        """Take a group out of the table, e.g. once it is finished."""
        return self._groups.pop(group_id)

    def successor(self) -> "GroupTable":
        """Empty table for the next pass, sharing this table's id counter."""
        return GroupTable(self._ids)

    def active_groups(self) -> List[Group]:
        return [group for group in self._groups.values() if not group.finished]

    def close(self) -> None:
        for group in self._groups.values():
            group.close()

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[Group]:
        return iter(list(self._groups.values()))

    def __contains__(self, group_id: int) -> bool:
        return group_id in self._groups
