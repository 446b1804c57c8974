#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List

# Ensure repo root (which contains `capture_chain/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from capture_chain.engine.perft import count_states
from capture_chain.engine.puzzle import Puzzle
from capture_chain.search.solver import Solver


@dataclass
class BenchItem:
    id: str
    fen: str


DEFAULT_PUZZLES: List[BenchItem] = [
    BenchItem("relay-3", "8/8/8/8/b7/4P3/2N5/R7 a1"),
    BenchItem("carry-rook-square", "8/8/8/p3p3/8/8/8/R3p3 a1 carry"),
    BenchItem("rook-blocked", "8/8/8/8/p7/2n5/8/R7 a1"),
    BenchItem("queen-star", "3p3p/8/1p3p2/8/p2Q3p/8/1p3p2/p2p3p d4 carry"),
    BenchItem("mixed-relay", "r3k3/1P6/2b5/3N4/4q3/5B2/6n1/R3K2r a1"),
]


def load_puzzles(path: str) -> List[BenchItem]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return [
        BenchItem(id=str(obj.get("id", f"puzzle-{i}")), fen=str(obj["fen"]))
        for i, obj in enumerate(data.get("puzzles", []))
    ]


def bench_puzzle(solver: Solver, item: BenchItem, *, iterations: int) -> Dict[str, Any]:
    try:
        puzzle = Puzzle.from_fen(item.fen)
    except ValueError as e:
        raise ValueError(f"Invalid puzzle {item.id}: {e}") from e

    total_time = 0
    last = None
    for _ in range(max(1, iterations)):
        last = solver.solve(puzzle)
        total_time += last.time_ms
    assert last is not None

    avg_time = int(total_time / max(1, iterations))
    return {
        "id": item.id,
        "fen": item.fen,
        "pieces": len(puzzle.pieces),
        "solved": last.solved,
        "moves": [m.to_algebraic() for m in last.moves],
        "nodes": last.nodes,
        "visited": last.visited,
        "reachable": count_states(puzzle),
        "time_ms": avg_time,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the capture-chain solver")
    parser.add_argument("--puzzles", default=None, help="JSON file with a 'puzzles' list")
    parser.add_argument(
        "--iterations", type=int, default=1, help="Repeat runs per puzzle and average"
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument(
        "--progress", action="store_true", help="Print per-puzzle progress to stderr"
    )
    args = parser.parse_args()

    items = load_puzzles(args.puzzles) if args.puzzles else DEFAULT_PUZZLES
    if not items:
        raise SystemExit("No puzzles found")

    solver = Solver()
    results: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for idx, it in enumerate(items, start=1):
        res = bench_puzzle(solver, it, iterations=args.iterations)
        results.append(res)
        if args.progress:
            sys.stderr.write(
                f"[{idx}/{len(items)}] {it.id}: solved={res['solved']} "
                f"visited={res['visited']} time={res['time_ms']}ms\n"
            )
            sys.stderr.flush()

    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "iterations": max(1, args.iterations),
        },
        "results": results,
        "summary": {
            "puzzles": len(results),
            "solved": sum(1 for r in results if r["solved"]),
            "total_time_ms": int((time.perf_counter() - t0) * 1000),
            "total_visited": sum(r["visited"] for r in results),
        },
    }
    print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
