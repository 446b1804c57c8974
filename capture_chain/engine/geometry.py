"""Static 8x8 board geometry.

Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
Everything here is pure and computed once at import time.
"""

from __future__ import annotations

from typing import Dict, Final, List, Optional, Tuple


WHITE: Final = "w"
BLACK: Final = "b"
COLORS: Final = (WHITE, BLACK)

MASK64: Final = 0xFFFFFFFFFFFFFFFF
FILE_A: Final = 0x0101010101010101
FILE_H: Final = 0x8080808080808080
NOT_FILE_A: Final = MASK64 ^ FILE_A
NOT_FILE_H: Final = MASK64 ^ FILE_H

# Ray directions
NORTH, SOUTH, EAST, WEST, NORTH_EAST, NORTH_WEST, SOUTH_EAST, SOUTH_WEST = range(8)
DIRECTIONS: Final = (NORTH, SOUTH, EAST, WEST, NORTH_EAST, NORTH_WEST, SOUTH_EAST, SOUTH_WEST)
ROOK_DIRECTIONS: Final = (NORTH, SOUTH, EAST, WEST)
BISHOP_DIRECTIONS: Final = (NORTH_EAST, NORTH_WEST, SOUTH_EAST, SOUTH_WEST)

# (file delta, rank delta) per direction
DIRECTION_DELTAS: Final[Dict[int, Tuple[int, int]]] = {
    NORTH: (0, 1),
    SOUTH: (0, -1),
    EAST: (1, 0),
    WEST: (-1, 0),
    NORTH_EAST: (1, 1),
    NORTH_WEST: (-1, 1),
    SOUTH_EAST: (1, -1),
    SOUTH_WEST: (-1, -1),
}

# Bit shift per direction and the squares a one-step shift may land on without
# wrapping around the board edge.
DIRECTION_SHIFTS: Final[Dict[int, Tuple[int, int]]] = {
    NORTH: (8, MASK64),
    SOUTH: (-8, MASK64),
    EAST: (1, NOT_FILE_A),
    WEST: (-1, NOT_FILE_H),
    NORTH_EAST: (9, NOT_FILE_A),
    NORTH_WEST: (7, NOT_FILE_H),
    SOUTH_EAST: (-7, NOT_FILE_A),
    SOUTH_WEST: (-9, NOT_FILE_H),
}

KNIGHT_DELTAS: Final = ((-1, 2), (1, 2), (-2, 1), (2, 1), (-2, -1), (2, -1), (-1, -2), (1, -2))
KING_DELTAS: Final = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))


def file_of(sq: int) -> int:
    return sq % 8


def rank_of(sq: int) -> int:
    return sq // 8


def on_board(sq: int) -> bool:
    return 0 <= sq < 64


def shift(bb: int, amount: int) -> int:
    """Shift a bitboard by ``amount`` bits (negative shifts right), clipped to 64 bits."""
    if amount >= 0:
        return (bb << amount) & MASK64
    return bb >> -amount


def neighbor(sq: int, direction: int) -> Optional[int]:
    """Return the square one step from ``sq`` in ``direction``, or None off the board."""
    df, dr = DIRECTION_DELTAS[direction]
    tf, tr = file_of(sq) + df, rank_of(sq) + dr
    if 0 <= tf < 8 and 0 <= tr < 8:
        return tr * 8 + tf
    return None


def iter_bits(bb: int):
    """Yield the indices of the set bits of ``bb`` in ascending order."""
    while bb:
        lsb = bb & -bb
        yield lsb.bit_length() - 1
        bb ^= lsb


def squares_to_bb(squares) -> int:
    bb = 0
    for sq in squares:
        bb |= 1 << sq
    return bb


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return (int(s[1]) - 1) * 8 + (ord(s[0]) - ord("a"))


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if not on_board(idx):
        raise ValueError(f"invalid square index: {idx}")
    return chr(ord("a") + file_of(idx)) + str(rank_of(idx) + 1)


def pretty(bb: int) -> str:
    """Render a square set as an 8x8 grid, rank 8 first, ``*`` marking members."""
    lines: List[str] = []
    for rank in range(7, -1, -1):
        row = "".join("*" if (bb >> (rank * 8 + f)) & 1 else "." for f in range(8))
        lines.append(f"{rank + 1} {row}")
    lines.append("  abcdefgh")
    return "\n".join(lines) + "\n"


def _leaper_table(deltas: Tuple[Tuple[int, int], ...]) -> List[int]:
    table = [0] * 64
    for sq in range(64):
        f, r = file_of(sq), rank_of(sq)
        for df, dr in deltas:
            tf, tr = f + df, r + dr
            if 0 <= tf < 8 and 0 <= tr < 8:
                table[sq] |= 1 << (tr * 8 + tf)
    return table


def _ray_table() -> Dict[int, List[int]]:
    rays: Dict[int, List[int]] = {}
    for direction in DIRECTIONS:
        masks = [0] * 64
        for sq in range(64):
            nxt = neighbor(sq, direction)
            while nxt is not None:
                masks[sq] |= 1 << nxt
                nxt = neighbor(nxt, direction)
        rays[direction] = masks
    return rays


KNIGHT_ATTACKS: Final = _leaper_table(KNIGHT_DELTAS)
KING_ATTACKS: Final = _leaper_table(KING_DELTAS)
# White pawns capture toward rank 8, black pawns toward rank 1
PAWN_ATTACKS: Final[Dict[str, List[int]]] = {
    WHITE: _leaper_table(((-1, 1), (1, 1))),
    BLACK: _leaper_table(((-1, -1), (1, -1))),
}
# Squares reachable along each direction on an empty board
RAYS: Final = _ray_table()
