

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import ErrorKind, MazeError
from .tile import Tile, classify
from .types import Direction, Position, TileType


class Maze:
    """A rectangular grid of tiles with one entrance and one exit.

    Rows are stored top to bottom, but positions are Cartesian: ``y`` counts
    rows from the bottom. Position ``(x, y)`` lives at
    ``rows[height - y - 1][x]``.

    The shape and the tile objects never change after construction; only the
    tiles' traversal flags do.
    """

    def __init__(self, rows: Sequence[Sequence[Tile]], entrance: Tile, exit: Tile):
        self._rows: Tuple[Tuple[Tile, ...], ...] = tuple(tuple(row) for row in rows)
        self.height = len(self._rows)
        self.width = len(self._rows[0]) if self._rows else 0
        # tiles hash by identity, so this answers locate() without a scan
        self._index: Dict[Tile, Position] = {}
        for r, row in enumerate(self._rows):
            for c, tile in enumerate(row):
                self._index.setdefault(tile, Position(c, self.height - r - 1))
        if self.locate(entrance) is None or self.locate(exit) is None:
            raise ValueError("entrance and exit must be tiles of this maze")
        self.entrance = entrance
        self.exit = exit

    @property
    def rows(self) -> Tuple[Tuple[Tile, ...], ...]:
        return self._rows

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def tile_at(self, pos: Position) -> Optional[Tile]:
        if not self.in_bounds(pos):
            return None
        return self._rows[self.height - pos.y - 1][pos.x]

    def locate(self, tile: Tile) -> Optional[Position]:
        return self._index.get(tile)

    def adjacent(self, tile: Tile, direction: Direction) -> Optional[Tile]:
        pos = self.locate(tile)
        if pos is None:
            return None
        return self.tile_at(pos.move(*direction.delta))

    def tiles(self) -> Iterator[Tuple[Position, Tile]]:
        """Yield ``(position, tile)`` pairs in storage order (top row first)."""
        for r, row in enumerate(self._rows):
            for c, tile in enumerate(row):
                yield Position(c, self.height - r - 1), tile

    def render(self) -> str:
        return "".join("".join(t.symbol for t in row) + "\n" for row in self._rows)

    def __str__(self) -> str:
        return self.render()


def _split_rows(text: str) -> List[str]:
    # only \n, \r\n and \r end a row; other separators are maze symbols
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_maze(text: str) -> Maze:
    rows: List[List[Tile]] = []
    for r, line in enumerate(_split_rows(text)):
        row: List[Tile] = []
        for c, ch in enumerate(line):
            try:
                row.append(classify(ch))
            except MazeError as e:
                raise MazeError(e.kind, f"{e.detail} (row {r}, column {c})") from None
        if rows and len(row) != len(rows[0]):
            raise MazeError(
                ErrorKind.RAGGED_ROWS,
                f"Row {r} has {len(row)} tiles, expected {len(rows[0])}.",
            )
        rows.append(row)

    entrance: Optional[Tile] = None
    exit_tile: Optional[Tile] = None
    for r, row in enumerate(rows):
        for c, tile in enumerate(row):
            if tile.kind == TileType.ENTRANCE:
                if entrance is not None:
                    raise MazeError(ErrorKind.DUPLICATE_ENTRANCE, f"Second one at row {r}, column {c}.")
                entrance = tile
            elif tile.kind == TileType.EXIT:
                if exit_tile is not None:
                    raise MazeError(ErrorKind.DUPLICATE_EXIT, f"Second one at row {r}, column {c}.")
                exit_tile = tile

    if entrance is None:
        raise MazeError(ErrorKind.MISSING_ENTRANCE)
    if exit_tile is None:
        raise MazeError(ErrorKind.MISSING_EXIT)

    return Maze(rows, entrance, exit_tile)


def load_maze_from_file(path: str | Path) -> Maze:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MazeError(ErrorKind.STORAGE_UNAVAILABLE, f"{path}: {e}") from e
    return parse_maze(text)
