"""Error type shared by the maze loader, the route finder and persistence.

Every failure is a :class:`MazeError` tagged with an :class:`ErrorKind`.
The kind fixes the human readable message and the category
(``format``, ``routing`` or ``persistence``), so callers can branch on
``err.kind`` instead of on a hierarchy of exception classes.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    UNRECOGNIZED_SYMBOL = ("format", "Unable to create maze. Invalid characters appear in the input.")
    RAGGED_ROWS = ("format", "Unable to create maze. Row lengths not consistent.")
    DUPLICATE_ENTRANCE = ("format", "Unable to create maze. Found multiple maze entrance points.")
    DUPLICATE_EXIT = ("format", "Unable to create maze. Found multiple maze exit points.")
    MISSING_ENTRANCE = ("format", "Unable to create maze. Cannot find maze entrance point.")
    MISSING_EXIT = ("format", "Unable to create maze. Cannot find maze exit point.")
    NO_ROUTE_FOUND = ("routing", "Maze is unsolvable.")
    EMPTY_ROUTE = ("persistence", "Route is empty; there is nothing to save.")
    STORAGE_UNAVAILABLE = ("persistence", "Unable to read or write file.")
    CORRUPT_SNAPSHOT = ("persistence", "File does not contain a valid route.")

    @property
    def category(self) -> str:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class MazeError(Exception):
    def __init__(self, kind: ErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        text = kind.message if detail is None else f"{kind.message} {detail}"
        super().__init__(text)

    @property
    def category(self) -> str:
        return self.kind.category

    def to_dict(self) -> dict:
        return {
            "status": "error",
            "kind": self.kind.name,
            "category": self.category,
            "message": str(self),
        }
