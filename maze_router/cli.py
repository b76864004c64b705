

from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from .errors import ErrorKind, MazeError
from .maze import load_maze_from_file
from .persistence import load_route_file, save_route
from .router import RouteFinder

EXIT_SOLVED = 0
EXIT_NO_ROUTE = 1
EXIT_BAD_INPUT = 2
EXIT_UNFINISHED = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maze-router",
        description="Find a route through a text maze by depth-first backtracking.",
    )
    parser.add_argument("maze", nargs="?", type=str, help="Path to maze file")
    parser.add_argument("--resume", metavar="FILE", help="Continue a saved route instead of loading a maze")
    parser.add_argument("--steps", type=int, default=None, help="Stop after this many steps")
    parser.add_argument("--trace", action="store_true", help="Print the route after every step")
    parser.add_argument("--save", metavar="FILE", help="Save the route when stepping stops")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if (args.maze is None) == (args.resume is None):
        parser.error("give exactly one of MAZE or --resume")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.resume:
            rf = load_route_file(args.resume)
        else:
            rf = RouteFinder(load_maze_from_file(args.maze))
    except MazeError as e:
        print(e, file=sys.stderr)
        return EXIT_BAD_INPUT

    print(rf.maze.render() if not args.resume else rf.render())

    code = EXIT_UNFINISHED
    taken = 0
    try:
        while args.steps is None or taken < args.steps:
            if rf.step():
                code = EXIT_SOLVED
                break
            taken += 1
            if args.trace:
                print(f"Step {rf.steps}:")
                print(rf.render())
    except MazeError as e:
        if e.kind != ErrorKind.NO_ROUTE_FOUND:
            raise
        print(rf.render())
        print(e)
        return EXIT_NO_ROUTE

    print(rf.render())
    if code == EXIT_SOLVED:
        print(f"Exit reached in {len(rf.route) - 1} moves ({rf.steps} steps).")
    else:
        print(f"Stopped after {taken} steps; exit not reached yet.")

    if args.save:
        try:
            save_route(rf, args.save)
        except MazeError as e:
            print(e, file=sys.stderr)
            return EXIT_BAD_INPUT
        print(f"Route saved to {args.save}.")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
