from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from .attacks import KIND_TO_CHAR, PAWN
from .geometry import square_to_str, str_to_square

if TYPE_CHECKING:  # pragma: no cover
    from .puzzle import Piece


@dataclass(frozen=True)
class Move:
    """A single capture in a puzzle solution.

    Attributes:
        from_sq (int): Square the capturing piece stood on.
        to_sq (int): Square of the captured piece, where the capturer lands.
        capturing (Piece): The piece making the capture.
        captured (Piece): The piece removed from the board.
    """

    from_sq: int
    to_sq: int
    capturing: "Piece"
    captured: "Piece"

    @property
    def capturing_id(self) -> int:
        return self.capturing.id

    @property
    def captured_id(self) -> int:
        return self.captured.id

    def to_coord(self) -> str:
        """Serialize as coordinate notation, e.g. ``"a1a4"``."""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq)

    def to_algebraic(self) -> str:
        """Serialize as long algebraic capture notation, e.g. ``"Ra1xa4"``.

        Pawns carry no piece letter (``"b2xc3"``).
        """
        letter = "" if self.capturing.kind == PAWN else KIND_TO_CHAR[self.capturing.kind].upper()
        return f"{letter}{square_to_str(self.from_sq)}x{square_to_str(self.to_sq)}"


def parse_coord(text: str) -> Tuple[int, int]:
    """Parse coordinate notation into ``(from_sq, to_sq)``.

    Accepts ``"a1a4"`` as well as the capture form ``"a1xa4"``.

    Raises:
        ValueError: If the text is not two valid squares.
    """
    s = text.strip().replace("x", "")
    if len(s) != 4:
        raise ValueError(f"invalid move: {text!r}")
    return str_to_square(s[0:2]), str_to_square(s[2:4])
