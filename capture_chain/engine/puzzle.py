from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple, Union

from .attacks import KINDS, attacks, parse_piece_char, piece_char
from .geometry import COLORS, iter_bits, on_board, square_to_str, str_to_square
from .move import Move


# Transition rules: who continues the chain after a capture.
RELAY = "relay"  # the capturer takes over the captured piece's identity
CARRY = "carry"  # the capturer keeps its own identity
RULES = (RELAY, CARRY)


class PuzzleError(ValueError):
    """Malformed puzzle, notation, or illegal move."""


@dataclass(frozen=True)
class Piece:
    id: int
    kind: int
    color: str
    square: int

    def to_char(self) -> str:
        return piece_char(self.kind, self.color)


@dataclass(frozen=True)
class PuzzleState:
    """Search node: the active piece, where it stands, and who else survives.

    ``remaining`` is a bitset over piece ids and never contains ``active_id``.
    """

    active_id: int
    active_square: int
    remaining: int

    def is_terminal(self) -> bool:
        return self.remaining == 0

    def piece_count(self) -> int:
        return 1 + bin(self.remaining).count("1")


@dataclass(frozen=True)
class Puzzle:
    """Immutable piece registry plus the designated starting piece.

    Notes:
    - Piece ``i`` is ``pieces[i]``; non-active pieces never leave their square
      until captured.
    - Construction validates everything up front; a built puzzle is always
      searchable.
    """

    pieces: Tuple[Piece, ...]
    active_id: int
    rule: str = RELAY
    _by_square: Dict[int, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.pieces) < 2:
            raise PuzzleError("puzzle needs at least 2 pieces")
        if self.rule not in RULES:
            raise PuzzleError(f"invalid rule: {self.rule!r}")
        if not (0 <= self.active_id < len(self.pieces)):
            raise PuzzleError(f"active piece id out of range: {self.active_id}")
        for idx, p in enumerate(self.pieces):
            if p.id != idx:
                raise PuzzleError(f"piece at index {idx} has id {p.id}")
            if p.kind not in KINDS:
                raise PuzzleError(f"invalid piece kind: {p.kind!r}")
            if p.color not in COLORS:
                raise PuzzleError(f"invalid color: {p.color!r}")
            if not on_board(p.square):
                raise PuzzleError(f"square out of board: {p.square}")
            if p.square in self._by_square:
                raise PuzzleError(f"duplicate square: {square_to_str(p.square)}")
            self._by_square[p.square] = p.id

    @classmethod
    def build(
        cls, pieces: Iterable[Tuple[int, str, int]], active_id: int, rule: str = RELAY
    ) -> "Puzzle":
        """Create a puzzle from ``(kind, color, square)`` tuples; ids follow list order.

        Raises:
            PuzzleError: If the piece list or ``active_id`` violates a precondition.
        """
        return cls(
            pieces=tuple(Piece(i, k, c, sq) for i, (k, c, sq) in enumerate(pieces)),
            active_id=active_id,
            rule=rule,
        )

    @classmethod
    def from_fen(cls, text: str) -> "Puzzle":
        """Parse compound FEN: ``<placement> <active-square> [<rule>]``.

        Placement is standard FEN piece placement. Piece ids are assigned in
        ascending square order (a1 first).

        Raises:
            PuzzleError: If the text is malformed or describes an invalid puzzle.
        """
        if not text or not isinstance(text, str):
            raise PuzzleError("puzzle notation must be a non-empty string")
        parts = text.strip().split()
        if len(parts) not in (2, 3):
            raise PuzzleError("puzzle notation must have 2 or 3 fields")
        placement, active, rule = parts[0], parts[1], (parts[2] if len(parts) == 3 else RELAY)

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise PuzzleError("placement must have 8 ranks")
        found: Dict[int, Tuple[int, str]] = {}
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                # ASCII only; str.isdigit() also accepts digits int() rejects
                if ch in "0123456789":
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise PuzzleError("invalid empty count in placement rank")
                    file_idx += n
                    continue
                try:
                    kind, color = parse_piece_char(ch)
                except ValueError as e:
                    raise PuzzleError(str(e)) from e
                if file_idx >= 8:
                    raise PuzzleError("too many squares in placement rank")
                found[rank_idx * 8 + file_idx] = (kind, color)
                file_idx += 1
            if file_idx != 8:
                raise PuzzleError("rank does not sum to 8 squares")

        try:
            active_sq = str_to_square(active)
        except ValueError as e:
            raise PuzzleError("invalid active square") from e
        if active_sq not in found:
            raise PuzzleError(f"no piece on active square {active}")

        squares = sorted(found)
        return cls.build(
            [(found[sq][0], found[sq][1], sq) for sq in squares],
            active_id=squares.index(active_sq),
            rule=rule,
        )

    def to_fen(self) -> str:
        """Serialize back to compound FEN; the rule is omitted when it is the default."""
        rows: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row = []
            for file_idx in range(8):
                pid = self._by_square.get(rank_idx * 8 + file_idx)
                if pid is None:
                    run += 1
                    continue
                if run:
                    row.append(str(run))
                    run = 0
                row.append(self.pieces[pid].to_char())
            if run:
                row.append(str(run))
            rows.append("".join(row))
        fen = "/".join(rows) + " " + square_to_str(self.pieces[self.active_id].square)
        if self.rule != RELAY:
            fen += " " + self.rule
        return fen

    def root(self) -> PuzzleState:
        full = (1 << len(self.pieces)) - 1
        return PuzzleState(
            active_id=self.active_id,
            active_square=self.pieces[self.active_id].square,
            remaining=full & ~(1 << self.active_id),
        )

    def piece_at(self, square: int) -> Piece | None:
        pid = self._by_square.get(square)
        return None if pid is None else self.pieces[pid]

    def occupancy(self, remaining: int) -> int:
        """Squares bitboard of the pieces in ``remaining``."""
        occ = 0
        for pid in iter_bits(remaining):
            occ |= 1 << self.pieces[pid].square
        return occ

    def successors(self, state: PuzzleState) -> Iterator[Tuple[Move, PuzzleState]]:
        """Yield every legal capture from ``state`` in ascending target-square order."""
        mover = self.pieces[state.active_id]
        occupied = self.occupancy(state.remaining)
        targets = attacks(mover.kind, mover.color, state.active_square, occupied) & occupied
        for to_sq in iter_bits(targets):
            captured = self.pieces[self._by_square[to_sq]]
            child = PuzzleState(
                active_id=captured.id if self.rule == RELAY else state.active_id,
                active_square=to_sq,
                remaining=state.remaining & ~(1 << captured.id),
            )
            yield Move(state.active_square, to_sq, mover, captured), child

    def apply(self, state: PuzzleState, from_sq: int, to_sq: int) -> Tuple[Move, PuzzleState]:
        """Play one capture from ``state``.

        Raises:
            PuzzleError: If the move does not start on the active square or is
                not a legal capture.
        """
        if from_sq != state.active_square:
            raise PuzzleError(
                f"move must start from the active square {square_to_str(state.active_square)}"
            )
        for move, child in self.successors(state):
            if move.to_sq == to_sq:
                return move, child
        raise PuzzleError(f"illegal capture: {square_to_str(from_sq)}{square_to_str(to_sq)}")

    def replay(self, moves: Sequence[Union[Move, Tuple[int, int]]]) -> PuzzleState:
        """Apply ``moves`` from the root and return the final state."""
        state = self.root()
        for m in moves:
            from_sq, to_sq = (m.from_sq, m.to_sq) if isinstance(m, Move) else m
            _, state = self.apply(state, from_sq, to_sq)
        return state
