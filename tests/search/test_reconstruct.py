from __future__ import annotations

import pytest

from capture_chain.engine.puzzle import Puzzle
from capture_chain.search.solver import Predecessors, SearchInvariantError, reconstruct


def chain_predecessors(p: Puzzle) -> tuple:
    preds: Predecessors = {}
    state = p.root()
    while not state.is_terminal():
        move, child = next(p.successors(state))
        preds[child] = (state, move)
        state = child
    return state, preds


def test_root_has_empty_path() -> None:
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 a1")
    assert reconstruct(p.root(), {}) == []


def test_moves_come_back_in_root_order() -> None:
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 a1")
    terminal, preds = chain_predecessors(p)
    moves = reconstruct(terminal, preds, max_steps=len(p.pieces) - 1)
    assert [m.to_coord() for m in moves] == ["a1a4", "a4c2", "c2e3"]


def test_chain_longer_than_allowed_is_fatal() -> None:
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 a1")
    terminal, preds = chain_predecessors(p)
    with pytest.raises(SearchInvariantError):
        reconstruct(terminal, preds, max_steps=2)


def test_mismatched_link_is_fatal() -> None:
    p = Puzzle.from_fen("8/8/8/p3p3/8/8/8/R3p3 a1 carry")
    root = p.root()
    (m_e1, c_e1), (m_a5, _) = list(p.successors(root))
    with pytest.raises(SearchInvariantError):
        reconstruct(c_e1, {c_e1: (root, m_a5)})
    assert reconstruct(c_e1, {c_e1: (root, m_e1)}) == [m_e1]
