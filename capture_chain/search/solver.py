from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

from capture_chain.engine.move import Move
from capture_chain.engine.puzzle import Puzzle, PuzzleState


logger = logging.getLogger(__name__)

Predecessors = Dict[PuzzleState, Tuple[PuzzleState, Move]]


class SearchInvariantError(RuntimeError):
    """The search produced internally inconsistent data (a bug, not bad input)."""


@dataclass
class SolveResult:
    solved: bool
    moves: List[Move]
    nodes: int  # states expanded
    visited: int  # distinct states discovered, root included
    depth: int  # deepest ply dequeued
    time_ms: int
    final_state: Optional[PuzzleState] = None


class Solver:
    """Breadth-first capture-chain solver.

    The first terminal state dequeued is reported, so the returned sequence is
    a shortest one. Running out of states is a normal ``solved=False`` result.
    """

    def solve(
        self,
        puzzle: Puzzle,
        *,
        on_depth: Optional[
            Callable[
                [
                    int,  # depth about to be expanded
                    int,  # frontier size at that point
                    int,  # visited states so far
                ],
                None,
            ]
        ] = None,
    ) -> SolveResult:
        start = time.perf_counter()
        root = puzzle.root()
        frontier: Deque[Tuple[PuzzleState, int]] = deque([(root, 0)])
        visited: Set[PuzzleState] = {root}
        predecessors: Predecessors = {}
        nodes = 0
        current_depth = -1
        logger.debug("solve start: pieces=%d rule=%s", len(puzzle.pieces), puzzle.rule)

        while frontier:
            state, depth = frontier.popleft()
            if depth != current_depth:
                current_depth = depth
                if on_depth is not None:
                    on_depth(depth, len(frontier) + 1, len(visited))
            if state.is_terminal():
                moves = reconstruct(state, predecessors, max_steps=len(puzzle.pieces) - 1)
                return self._finish(True, moves, nodes, visited, depth, start, state)
            nodes += 1
            for move, child in puzzle.successors(state):
                if child in visited:
                    continue
                visited.add(child)
                predecessors[child] = (state, move)
                frontier.append((child, depth + 1))

        return self._finish(False, [], nodes, visited, max(current_depth, 0), start, None)

    @staticmethod
    def _finish(
        solved: bool,
        moves: List[Move],
        nodes: int,
        visited: Set[PuzzleState],
        depth: int,
        start: float,
        final_state: Optional[PuzzleState],
    ) -> SolveResult:
        time_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "solve finished",
            extra={
                "solved": solved,
                "nodes": nodes,
                "visited": len(visited),
                "depth": depth,
                "time_ms": time_ms,
            },
        )
        return SolveResult(
            solved=solved,
            moves=moves,
            nodes=nodes,
            visited=len(visited),
            depth=depth,
            time_ms=time_ms,
            final_state=final_state,
        )


def reconstruct(
    terminal: PuzzleState, predecessors: Predecessors, max_steps: Optional[int] = None
) -> List[Move]:
    """Walk predecessor links from `terminal` back to the root.

    The root is the only state without a predecessor entry. Moves are returned
    in root-to-terminal order.

    Raises:
        SearchInvariantError: If a link does not describe a single capture
            leading to its child, or the chain exceeds `max_steps`.
    """
    moves: List[Move] = []
    state = terminal
    while state in predecessors:
        parent, move = predecessors[state]
        removed = parent.remaining & ~state.remaining
        if (
            move.to_sq != state.active_square
            or move.from_sq != parent.active_square
            or removed != 1 << move.captured_id
            or state.remaining & ~parent.remaining
        ):
            raise SearchInvariantError(f"inconsistent predecessor link for {state}")
        moves.append(move)
        if max_steps is not None and len(moves) > max_steps:
            raise SearchInvariantError("predecessor chain longer than the piece count allows")
        state = parent
    moves.reverse()
    return moves


def solve(puzzle: Puzzle) -> SolveResult:
    return Solver().solve(puzzle)
