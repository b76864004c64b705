"""Maze route finder package.

Exposes public APIs for parsing mazes, stepping through them with a
depth-first route finder, and saving/restoring routes.
"""

from .types import (
    Position,
    TileType,
    Direction,
)
from .errors import ErrorKind, MazeError
from .tile import Tile, classify
from .maze import Maze, parse_maze, load_maze_from_file
from .router import RouteFinder, RouteSnapshot, StepOutcome
from .persistence import dump_route, load_route, save_route, load_route_file

__all__ = [
    "Position",
    "TileType",
    "Direction",
    "ErrorKind",
    "MazeError",
    "Tile",
    "classify",
    "Maze",
    "parse_maze",
    "load_maze_from_file",
    "RouteFinder",
    "RouteSnapshot",
    "StepOutcome",
    "dump_route",
    "load_route",
    "save_route",
    "load_route_file",
]
