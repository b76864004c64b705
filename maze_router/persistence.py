"""
persistence.py

Save and restore a RouteFinder as a JSON document.

The document captures the whole object graph in one unit: the maze symbols,
every tile's traversal flags, the route stack (entrance first) and the
finished flag. Flags are stored as one string per row using:

    '.'  untouched
    'v'  visited
    'd'  visited and dead end

Example:

    {
      "format_version": 1,
      "maze": ["#e##", "#..#", "#.x#", "####"],
      "flags": [".v..", ".vv.", "..v.", "...."],
      "path": [[1, 3], [1, 2], [2, 2], [2, 1]],
      "finished": true,
      "steps": 3
    }

Writes are whole-file and blocking; a crash mid-write leaves a file that
load_route_file() will reject as corrupt.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field, ValidationError

from .errors import ErrorKind, MazeError
from .maze import Maze, parse_maze
from .router import RouteFinder
from .tile import Tile
from .types import Position, TileType

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

FLAG_NONE = "."
FLAG_VISITED = "v"
FLAG_DEAD_END = "d"


class RouteDocument(BaseModel):
    format_version: int = FORMAT_VERSION
    maze: List[str] = Field(min_length=1)
    flags: List[str] = Field(min_length=1)
    path: List[List[int]] = Field(min_length=1)
    finished: bool = False
    steps: int = Field(default=0, ge=0)


def _tile_flag(tile: Tile) -> str:
    if tile.dead_end:
        return FLAG_DEAD_END
    if tile.visited:
        return FLAG_VISITED
    return FLAG_NONE


def dump_route(rf: RouteFinder) -> Dict[str, Any]:
    route = rf.route
    if not route:
        raise MazeError(ErrorKind.EMPTY_ROUTE)
    maze = rf.maze
    doc = RouteDocument(
        maze=["".join(t.symbol for t in row) for row in maze.rows],
        flags=["".join(_tile_flag(t) for t in row) for row in maze.rows],
        path=[list(maze.locate(t).as_tuple()) for t in route],
        finished=rf.is_finished(),
        steps=rf.steps,
    )
    return doc.model_dump()


def _corrupt(detail: str) -> MazeError:
    return MazeError(ErrorKind.CORRUPT_SNAPSHOT, detail)


def _apply_flags(maze: Maze, flags: List[str]) -> None:
    if len(flags) != maze.height or any(len(line) != maze.width for line in flags):
        raise _corrupt("Flag grid does not match the maze shape.")
    for row, line in zip(maze.rows, flags):
        for tile, flag in zip(row, line):
            if flag == FLAG_NONE:
                continue
            if flag not in (FLAG_VISITED, FLAG_DEAD_END):
                raise _corrupt(f"Unknown tile flag {flag!r}.")
            if tile.kind == TileType.WALL:
                raise _corrupt(f"Wall tile carries flag {flag!r}.")
            tile.mark_visited()
            if flag == FLAG_DEAD_END:
                tile.mark_dead_end()


def _resolve_path(maze: Maze, coords: List[List[int]]) -> List[Tile]:
    path: List[Tile] = []
    for pair in coords:
        if len(pair) != 2:
            raise _corrupt(f"Bad path coordinate {pair!r}.")
        tile = maze.tile_at(Position(pair[0], pair[1]))
        if tile is None:
            raise _corrupt(f"Path coordinate {pair!r} is outside the maze.")
        if tile.kind == TileType.WALL:
            raise _corrupt(f"Path runs through wall {pair!r}.")
        if tile.dead_end:
            raise _corrupt(f"Path runs through dead end {pair!r}.")
        if path:
            prev = maze.locate(path[-1])
            if abs(prev.x - pair[0]) + abs(prev.y - pair[1]) != 1:
                raise _corrupt(f"Path jumps from {list(prev.as_tuple())} to {pair!r}.")
        path.append(tile)
    if path[0] is not maze.entrance:
        raise _corrupt("Route does not start at the maze entrance.")
    if len({id(t) for t in path}) != len(path):
        raise _corrupt("Route visits a tile twice.")
    # every tile below the head has already been stepped on
    if any(not t.visited for t in path[:-1]):
        raise _corrupt("Route contains an unvisited tile below the head.")
    return path


def load_route(document: Any) -> RouteFinder:
    try:
        doc = RouteDocument.model_validate(document)
    except ValidationError as e:
        raise _corrupt(f"{e.error_count()} schema error(s).") from e
    if doc.format_version != FORMAT_VERSION:
        raise _corrupt(f"Unsupported format version {doc.format_version}.")

    try:
        maze = parse_maze("\n".join(doc.maze))
    except MazeError as e:
        raise _corrupt(str(e)) from e
    _apply_flags(maze, doc.flags)
    path = _resolve_path(maze, doc.path)
    if doc.finished and path[-1] is not maze.exit:
        raise _corrupt("Route is marked finished but its head is not the exit.")

    return RouteFinder._restore(maze, path, doc.finished, doc.steps)


def save_route(rf: RouteFinder, path: str | Path) -> None:
    data = dump_route(rf)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        raise MazeError(ErrorKind.STORAGE_UNAVAILABLE, f"{path}: {e}") from e
    logger.debug("saved route (%d tiles) to %s", len(data["path"]), path)


def load_route_file(path: str | Path) -> RouteFinder:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except OSError as e:
        raise MazeError(ErrorKind.STORAGE_UNAVAILABLE, f"{path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise _corrupt(f"{path} is not JSON.") from e
    rf = load_route(raw)
    logger.debug("loaded route from %s", path)
    return rf
