# src/tabmerge/core/selection.py
import sys
from typing import List, Sequence

import pathspec

from tabmerge.models import FileRecord

def build_path_spec(patterns: Sequence[str]) -> pathspec.PathSpec:
    """
    Compiles gitwildmatch patterns (the .gitignore syntax) into a PathSpec.
    Blank lines and '#' comments are ignored by pathspec itself.
    """
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", patterns)
    except Exception as e:
        print(f"Error parsing selection patterns: {e}", file=sys.stderr)
        return pathspec.PathSpec.from_lines("gitwildmatch", [])


class SelectionState:
    """
    Included/excluded flag for each record of one enumeration snapshot.
    A fresh state has every record included.
    """

    def __init__(self, n: int = 0):
        self._flags: List[bool] = []
        self.initialize(n)

    def __len__(self) -> int:
        return len(self._flags)

    def initialize(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"Record count must be non-negative, got {n}")
        self._flags = [True] * n

    def _check_index(self, i: int) -> None:
        # Negative indices are rejected rather than wrapped around
        if not 0 <= i < len(self._flags):
            raise IndexError(f"Selection index {i} out of range [0, {len(self._flags)})")

    def is_selected(self, i: int) -> bool:
        self._check_index(i)
        return self._flags[i]

    def toggle(self, i: int) -> None:
        self._check_index(i)
        self._flags[i] = not self._flags[i]

    def set(self, i: int, flag: bool) -> None:
        self._check_index(i)
        self._flags[i] = bool(flag)

    def set_all(self, flag: bool) -> None:
        """Select all (True) or unselect all (False)."""
        self._flags = [bool(flag)] * len(self._flags)

    def count(self) -> int:
        return sum(self._flags)

    def selected_indices(self) -> List[int]:
        """Included indices in ascending order, i.e. enumeration order."""
        return [i for i, flag in enumerate(self._flags) if flag]

    def select(self, records: Sequence[FileRecord]) -> List[FileRecord]:
        """Returns the included records, in enumeration order."""
        if len(records) != len(self._flags):
            raise ValueError(
                f"Selection covers {len(self._flags)} records but {len(records)} were given"
            )
        return [records[i] for i in self.selected_indices()]

    def apply_patterns(self, records: Sequence[FileRecord], patterns: Sequence[str], flag: bool) -> int:
        """
        Sets the flag of every record whose display path matches one of the patterns.
        Returns the number of matching records.
        """
        if len(records) != len(self._flags):
            raise ValueError(
                f"Selection covers {len(self._flags)} records but {len(records)} were given"
            )
        spec = build_path_spec(patterns)
        matched = 0
        for i, record in enumerate(records):
            if spec.match_file(record.path):
                self._flags[i] = bool(flag)
                matched += 1
        return matched
