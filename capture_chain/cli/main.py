from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from capture_chain.engine.attacks import attacks, parse_piece_char
from capture_chain.engine.geometry import pretty, squares_to_bb, str_to_square
from capture_chain.engine.puzzle import RULES, Puzzle
from capture_chain.search.solver import Solver


logger = logging.getLogger(__name__)


def _cmd_solve(args: argparse.Namespace) -> int:
    puzzle = Puzzle.from_fen(args.fen)
    if args.rule is not None:
        puzzle = dataclasses.replace(puzzle, rule=args.rule)
    logger.info("solving %s", puzzle.to_fen())
    res = Solver().solve(puzzle)
    if res.solved:
        for i, m in enumerate(res.moves, start=1):
            print(f"{i}. {m.to_algebraic()}")
    else:
        print("unsolved")
    print(f"nodes={res.nodes} visited={res.visited} depth={res.depth} time_ms={res.time_ms}")
    return 0 if res.solved else 1


def _cmd_attacks(args: argparse.Namespace) -> int:
    kind, color = parse_piece_char(args.piece)
    occupied = squares_to_bb(str_to_square(s) for s in args.occupied)
    print(pretty(attacks(kind, color, str_to_square(args.square), occupied)), end="")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "capture_chain.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capture-chain", description="Solve single-color capture-chain chess puzzles"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="Solve a puzzle given in compound FEN")
    p_solve.add_argument("fen", help='e.g. "8/8/8/8/8/8/8/R6p a1"')
    p_solve.add_argument("--rule", choices=RULES, default=None, help="Override the puzzle rule")
    p_solve.set_defaults(func=_cmd_solve)

    p_att = sub.add_parser("attacks", help="Draw the squares a piece attacks")
    p_att.add_argument("piece", help="FEN piece letter, uppercase for white")
    p_att.add_argument("square", help="Square name, e.g. d4")
    p_att.add_argument("--occupied", nargs="*", default=[], help="Blocking squares")
    p_att.set_defaults(func=_cmd_attacks)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    try:
        return args.func(args)
    except ValueError as e:
        # PuzzleError, or bad square/piece letters on the command line
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
