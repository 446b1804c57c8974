from __future__ import annotations

import pytest

from capture_chain.engine.attacks import BISHOP, ROOK
from capture_chain.engine.geometry import BLACK, str_to_square
from capture_chain.engine.puzzle import CARRY, Puzzle, PuzzleError


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/8/b7/4P3/2N5/R7 a1",
        "8/8/8/p3p3/8/8/8/R3p3 a1 carry",
        "r3k3/1P6/2b5/3N4/4q3/5B2/6n1/R3K2r e4",
    ],
)
def test_round_trip(fen: str) -> None:
    assert Puzzle.from_fen(fen).to_fen() == fen


def test_default_rule_is_not_emitted() -> None:
    assert Puzzle.from_fen("8/8/8/8/8/8/8/R6p a1 relay").to_fen() == "8/8/8/8/8/8/8/R6p a1"


def test_ids_follow_square_order() -> None:
    p = Puzzle.from_fen("8/8/8/8/b7/4P3/2N5/R7 e3")
    assert [pc.square for pc in p.pieces] == sorted(pc.square for pc in p.pieces)
    assert p.pieces[0].kind == ROOK
    assert p.pieces[3].kind == BISHOP and p.pieces[3].color == BLACK
    assert p.pieces[p.active_id].square == str_to_square("e3")


def test_rule_field() -> None:
    assert Puzzle.from_fen("8/8/8/8/8/8/8/R6p a1 carry").rule == CARRY


@pytest.mark.parametrize(
    "fen",
    [
        "",  # empty
        "8/8/8/8/8/8/8/R6p",  # missing active square
        "8/8/8/8/8/8/8/R6p a1 relay extra",  # too many fields
        "8/8/8/8/8/8/R6p a1",  # not enough ranks
        "8/8/8/8/8/8/8/R6p a2",  # nothing on the active square
        "8/8/8/8/8/8/8/R6p z9",  # bad active square
        "8/8/8/8/8/8/8/R7 a1",  # single piece
        "8/8/8/8/8/8/8/R6x a1",  # bad piece
        "9/8/8/8/8/8/8/R6p a1",  # bad empty count
        "0R6p/8/8/8/8/8/8/8 a8",  # zero empty count
        "²/8/8/8/8/8/8/R6p a1",  # non-ASCII digit
        "8/8/8/8/8/8/8/R5p a1",  # short rank
        "8/8/8/8/8/8/8/R6pp a1",  # long rank
        "8/8/8/8/8/8/8/R6p a1 sideways",  # bad rule
    ],
)
def test_invalid_notation_raises(fen: str) -> None:
    with pytest.raises(PuzzleError):
        Puzzle.from_fen(fen)
