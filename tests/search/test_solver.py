from __future__ import annotations

import pytest

from capture_chain.engine.attacks import KNIGHT, PAWN, ROOK
from capture_chain.engine.geometry import BLACK, WHITE, str_to_square
from capture_chain.engine.perft import count_states, perft
from capture_chain.engine.puzzle import CARRY, RELAY, Puzzle, PuzzleState
from capture_chain.search.solver import Solver, solve


def sq(name: str) -> int:
    return str_to_square(name)


@pytest.mark.parametrize("rule", [RELAY, CARRY])
def test_rook_pawn_knight_scenario_is_unsolved(rule: str) -> None:
    # Rook a1 (active), black pawn a4, black knight c3.
    # Ra1xa4 is the only capture; afterwards neither the black pawn on a4
    # (attacks b3) nor the rook on a4 (a-file, 4th rank) reaches c3.
    p = Puzzle.build(
        [(ROOK, WHITE, sq("a1")), (PAWN, BLACK, sq("a4")), (KNIGHT, BLACK, sq("c3"))],
        active_id=0,
        rule=rule,
    )
    (first, _), = list(p.successors(p.root()))
    assert (first.from_sq, first.captured_id, first.to_sq) == (sq("a1"), 1, sq("a4"))

    res = Solver().solve(p)
    assert res.solved is False
    assert res.moves == []
    assert res.final_state is None
    assert res.nodes == 2
    assert res.visited == 2
    assert res.depth == 1


def test_relay_chain_solution() -> None:
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 a1")
    res = solve(p)
    assert res.solved is True
    assert [m.to_algebraic() for m in res.moves] == ["Ra1xa4", "Ba4xc2", "Nc2xe3"]
    assert res.depth == 3
    assert res.final_state == PuzzleState(active_id=2, active_square=sq("e3"), remaining=0)


def test_same_position_under_carry_is_unsolved() -> None:
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 a1 carry")
    assert solve(p).solved is False


def test_carry_rook_tour() -> None:
    p = Puzzle.from_fen("8/8/8/p3p3/8/8/8/R3p3 a1 carry")
    res = solve(p)
    assert res.solved is True
    assert [m.to_coord() for m in res.moves] == ["a1e1", "e1e5", "e5a5"]
    assert all(m.capturing_id == 0 for m in res.moves)


def test_carry_tour_is_unsolved_under_relay() -> None:
    # After the first capture the chain continues as a black pawn on rank 1 or 5
    p = Puzzle.from_fen("8/8/8/p3p3/8/8/8/R3p3 a1")
    assert solve(p).solved is False


@pytest.mark.parametrize(
    "fen,solved",
    [
        ("8/8/8/8/8/8/8/R6p a1", True),  # open rank
        ("8/8/8/8/8/8/1p6/R7 a1", False),  # rook vs diagonal neighbour
        ("8/8/8/8/8/2p5/8/1N6 b1", True),  # knight leap
        ("8/8/8/3p4/4P3/8/8/8 e4", True),  # white pawn captures upward
        ("8/8/8/3P4/4p3/8/8/8 e4", False),  # black pawn captures downward only
        ("8/8/8/8/8/8/8/K6p a1", False),  # king reaches one square
    ],
)
def test_two_piece_boundary(fen: str, solved: bool) -> None:
    p = Puzzle.from_fen(fen)
    res = solve(p)
    assert res.solved is solved
    assert len(res.moves) == (1 if solved else 0)


def test_on_depth_reports_each_level_once() -> None:
    seen = []
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 a1")
    Solver().solve(p, on_depth=lambda depth, frontier, visited: seen.append((depth, visited)))
    assert seen == [(0, 1), (1, 2), (2, 3), (3, 4)]


def test_unsolved_search_expands_each_state_once() -> None:
    # Queen a1 clears the a2/b1/b2 pawns in any order but never lines up
    # with the knight on h6. Per depth: 1 + 3 + 6 + 3 distinct states, while
    # six different sequences end in those last three.
    p = Puzzle.from_fen("8/8/7n/8/8/8/pp6/Qp6 a1 carry")
    res = solve(p)
    assert res.solved is False
    assert res.moves == []
    assert res.nodes == res.visited == count_states(p) == 13
    assert perft(p, 3) == 6


def test_solver_is_deterministic() -> None:
    p = Puzzle.from_fen("8/8/8/p3p3/8/8/8/R3p3 a1 carry")
    first = [m.to_coord() for m in solve(p).moves]
    for _ in range(3):
        assert [m.to_coord() for m in solve(p).moves] == first
