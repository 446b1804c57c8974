from __future__ import annotations

from typing import Callable, Dict, Final, Tuple

from .geometry import (
    BISHOP_DIRECTIONS,
    BLACK,
    COLORS,
    DIRECTION_SHIFTS,
    KING_ATTACKS,
    KNIGHT_ATTACKS,
    MASK64,
    PAWN_ATTACKS,
    ROOK_DIRECTIONS,
    WHITE,
    on_board,
    shift,
)


# Piece kinds
PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = range(6)
KINDS: Final = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING)
KIND_TO_CHAR: Final = {
    PAWN: "p",
    KNIGHT: "n",
    BISHOP: "b",
    ROOK: "r",
    QUEEN: "q",
    KING: "k",
}
CHAR_TO_KIND: Final = {v: k for k, v in KIND_TO_CHAR.items()}
KIND_NAMES: Final = {
    PAWN: "pawn",
    KNIGHT: "knight",
    BISHOP: "bishop",
    ROOK: "rook",
    QUEEN: "queen",
    KING: "king",
}


def piece_char(kind: int, color: str) -> str:
    """FEN letter for a piece: uppercase for white, lowercase for black."""
    ch = KIND_TO_CHAR[kind]
    return ch.upper() if color == WHITE else ch


def parse_piece_char(ch: str) -> Tuple[int, str]:
    """Inverse of :func:`piece_char`.

    Raises:
        ValueError: If ``ch`` is not one of ``pnbrqkPNBRQK``.
    """
    if len(ch) != 1 or ch.lower() not in CHAR_TO_KIND:
        raise ValueError(f"invalid piece: {ch!r}")
    return CHAR_TO_KIND[ch.lower()], (WHITE if ch.isupper() else BLACK)


def _occluded_fill(gen: int, empty: int, direction: int) -> int:
    """Kogge-Stone fill of ``gen`` through ``empty`` squares along ``direction``.

    The result holds the source bits plus every empty square reachable from
    them without crossing an occupied square; it does not include the blocker.
    """
    amount, wrap = DIRECTION_SHIFTS[direction]
    pro = empty & wrap
    gen |= pro & shift(gen, amount)
    pro &= shift(pro, amount)
    gen |= pro & shift(gen, 2 * amount)
    pro &= shift(pro, 2 * amount)
    gen |= pro & shift(gen, 4 * amount)
    return gen


def ray_attacks(square: int, occupied: int, direction: int) -> int:
    """Squares attacked along one ray, up to and including the first blocker."""
    amount, wrap = DIRECTION_SHIFTS[direction]
    empty = ~occupied & MASK64
    return shift(_occluded_fill(1 << square, empty, direction), amount) & wrap


def rook_attacks(square: int, occupied: int) -> int:
    bb = 0
    for d in ROOK_DIRECTIONS:
        bb |= ray_attacks(square, occupied, d)
    return bb


def bishop_attacks(square: int, occupied: int) -> int:
    bb = 0
    for d in BISHOP_DIRECTIONS:
        bb |= ray_attacks(square, occupied, d)
    return bb


def _pawn(color: str, square: int, occupied: int) -> int:
    return PAWN_ATTACKS[color][square]


def _knight(color: str, square: int, occupied: int) -> int:
    return KNIGHT_ATTACKS[square]


def _bishop(color: str, square: int, occupied: int) -> int:
    return bishop_attacks(square, occupied)


def _rook(color: str, square: int, occupied: int) -> int:
    return rook_attacks(square, occupied)


def _queen(color: str, square: int, occupied: int) -> int:
    return rook_attacks(square, occupied) | bishop_attacks(square, occupied)


def _king(color: str, square: int, occupied: int) -> int:
    return KING_ATTACKS[square]


# One attack rule per kind; the kind set is closed.
_ATTACKERS: Final[Dict[int, Callable[[str, int, int], int]]] = {
    PAWN: _pawn,
    KNIGHT: _knight,
    BISHOP: _bishop,
    ROOK: _rook,
    QUEEN: _queen,
    KING: _king,
}


def attacks(kind: int, color: str, square: int, occupied: int) -> int:
    """Return the bitboard of squares attacked by a piece.

    Args:
        kind (int): Piece kind (``PAWN`` .. ``KING``).
        color (str): ``"w"`` or ``"b"``; only pawns depend on it.
        square (int): Square the piece stands on.
        occupied (int): Squares of every other piece currently on the board.

    Returns:
        int: Attacked squares. Sliders stop at, and include, the first occupied
        square in each direction; leapers ignore ``occupied``.

    Raises:
        ValueError: If ``square``, ``kind`` or ``color`` is out of range.
    """
    if not on_board(square):
        raise ValueError(f"invalid square index: {square}")
    if color not in COLORS:
        raise ValueError(f"invalid color: {color!r}")
    rule = _ATTACKERS.get(kind)
    if rule is None:
        raise ValueError(f"invalid piece kind: {kind!r}")
    return rule(color, square, occupied & MASK64)
