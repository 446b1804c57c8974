from __future__ import annotations

from typing import List, Set

from .puzzle import Puzzle, PuzzleState


def perft(puzzle: Puzzle, depth: int) -> int:
    """Count capture sequences of exactly `depth` plies from the root.

    Definition:
    - depth == 0 returns 1 (the root itself).
    - depth > 0 returns the sum over all successors of perft(depth-1).

    Since every capture removes one piece, perft(puzzle, n - 1) > 0 exactly
    when the puzzle is solvable, and any deeper count is 0.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth > len(puzzle.pieces) - 1:
        return 0
    return _perft(puzzle, puzzle.root(), depth)


def _perft(puzzle: Puzzle, state: PuzzleState, depth: int) -> int:
    if depth == 0:
        return 1
    nodes = 0
    for _, child in puzzle.successors(state):
        nodes += _perft(puzzle, child, depth - 1)
    return nodes


def count_states(puzzle: Puzzle) -> int:
    """Number of distinct states reachable from the root, root included."""
    root = puzzle.root()
    seen: Set[PuzzleState] = {root}
    stack: List[PuzzleState] = [root]
    while stack:
        state = stack.pop()
        for _, child in puzzle.successors(state):
            if child not in seen:
                seen.add(child)
                stack.append(child)
    return len(seen)
