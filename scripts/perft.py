#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `capture_chain/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from capture_chain.engine.perft import count_states, perft
from capture_chain.engine.puzzle import Puzzle


def main() -> None:
    parser = argparse.ArgumentParser(description="Count capture sequences for a puzzle")
    parser.add_argument("fen", type=str, help="Compound FEN puzzle notation")
    parser.add_argument(
        "--depth", type=int, default=None, help="Plies to count (default: pieces - 1)"
    )
    parser.add_argument("--states", action="store_true", help="Also count reachable states")
    args = parser.parse_args()

    puzzle = Puzzle.from_fen(args.fen)
    depth = args.depth if args.depth is not None else len(puzzle.pieces) - 1
    start = time.perf_counter()
    nodes = perft(puzzle, depth)
    dt = time.perf_counter() - start
    line = f"nodes={nodes} depth={depth} time_ms={int(dt*1000)}"
    if args.states:
        line += f" states={count_states(puzzle)}"
    print(line)


if __name__ == "__main__":
    main()
