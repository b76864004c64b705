"""Step-by-step depth-first route finding.

A :class:`RouteFinder` walks a :class:`~maze_router.maze.Maze` one tile per
call to :meth:`RouteFinder.step`. It keeps the current candidate route as a
stack whose bottom is the entrance and whose top is the head being explored.

Each step either pushes the first navigable neighbour (scanning north, east,
south, west), or pops the head and marks it as a dead end. Visited tiles are
never entered again, so a maze is either solved or proven unsolvable after at
most two steps per reachable tile.

Usage:
    from maze_router import parse_maze, RouteFinder

    rf = RouteFinder(parse_maze(open('maze.txt').read()))
    while not rf.step():
        print(rf.render())
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from .errors import ErrorKind, MazeError
from .maze import Maze
from .tile import Tile
from .types import CARDINAL_ORDER, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteSnapshot:
    """What a renderer needs to draw one step of the search."""

    grid: str
    path: Tuple[Position, ...]
    head: Optional[Position]
    head_is_exit: bool
    finished: bool
    steps: int

    def to_dict(self) -> dict:
        return {
            "grid": self.grid,
            "path": [list(p.as_tuple()) for p in self.path],
            "head": list(self.head.as_tuple()) if self.head is not None else None,
            "head_is_exit": self.head_is_exit,
            "finished": self.finished,
            "steps": self.steps,
        }


@dataclass
class StepOutcome:
    status: Literal["progress", "solved", "failed"]
    snapshot: RouteSnapshot
    message: Optional[str] = None
    events: List[dict] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.status != "progress"

    def to_dict(self) -> dict:
        result = {
            "outcome": self.status,
            "done": self.done,
            "events": self.events,
            "snapshot": self.snapshot.to_dict(),
        }
        if self.message:
            result["message"] = self.message
        return result


class RouteFinder:
    def __init__(self, maze: Maze):
        self.maze = maze
        self._path: List[Tile] = [maze.entrance]
        self._finished = False
        self.steps = 0

    @property
    def route(self) -> List[Tile]:
        """Copy of the current stack, entrance first."""
        return list(self._path)

    def is_finished(self) -> bool:
        return self._finished

    def current_head(self) -> Tile:
        if not self._path:
            raise MazeError(ErrorKind.EMPTY_ROUTE)
        return self._path[-1]

    def head_position(self) -> Optional[Position]:
        if not self._path:
            return None
        return self.maze.locate(self._path[-1])

    def step(self) -> bool:
        """Advance the search by one tile.

        Returns True once the head is the exit, False while still exploring.
        Raises MazeError(NO_ROUTE_FOUND) when every tile reachable from the
        entrance has been exhausted.
        """
        if not self._path:
            raise MazeError(ErrorKind.NO_ROUTE_FOUND)

        head = self._path[-1]
        head.mark_visited()

        if head is self.maze.exit:
            if not self._finished:
                logger.debug("exit reached at %s after %d steps", self.maze.locate(head), self.steps)
            self._finished = True
            return True

        self.steps += 1
        for direction in CARDINAL_ORDER:
            nxt = self.maze.adjacent(head, direction)
            if nxt is not None and nxt.is_navigable():
                self._path.append(nxt)
                return False

        popped = self._path.pop()
        popped.mark_dead_end()
        logger.debug("dead end at %s, backtracking", self.maze.locate(popped))
        if not self._path:
            raise MazeError(ErrorKind.NO_ROUTE_FOUND)
        return False

    def advance(self) -> StepOutcome:
        """Run one step and report it, turning an unsolvable maze into a failed outcome."""
        before = len(self._path)
        try:
            solved = self.step()
        except MazeError as e:
            if e.kind != ErrorKind.NO_ROUTE_FOUND:
                raise
            return StepOutcome(status="failed", snapshot=self.snapshot(), message=str(e))
        if solved:
            return StepOutcome(status="solved", snapshot=self.snapshot(), message="Exit reached.")
        event = {"type": "push" if len(self._path) > before else "backtrack"}
        return StepOutcome(status="progress", snapshot=self.snapshot(), events=[event])

    def solve(self, max_steps: Optional[int] = None) -> bool:
        """Step until the exit is reached.

        Returns False only when ``max_steps`` runs out first. Unsolvable
        mazes raise MazeError(NO_ROUTE_FOUND) like :meth:`step`.
        """
        taken = 0
        while max_steps is None or taken < max_steps:
            if self.step():
                return True
            taken += 1
        return False

    def snapshot(self) -> RouteSnapshot:
        path = tuple(self.maze.locate(t) for t in self._path)
        head = path[-1] if path else None
        return RouteSnapshot(
            grid=self.render(),
            path=path,
            head=head,
            head_is_exit=bool(self._path) and self._path[-1] is self.maze.exit,
            finished=self._finished,
            steps=self.steps,
        )

    def render(self) -> str:
        return "".join(
            "".join(t.route_symbol() for t in row) + "\n" for row in self.maze.rows
        )

    def __str__(self) -> str:
        return self.render()

    def save(self, path: str | Path) -> None:
        from .persistence import save_route

        save_route(self, path)

    @classmethod
    def load(cls, path: str | Path) -> "RouteFinder":
        from .persistence import load_route_file

        return load_route_file(path)

    @classmethod
    def _restore(cls, maze: Maze, path: List[Tile], finished: bool, steps: int) -> "RouteFinder":
        rf = cls(maze)
        rf._path = list(path)
        rf._finished = finished
        rf.steps = steps
        return rf
