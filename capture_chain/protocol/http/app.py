from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import (
    exception_handler,
    http_exception_handler,
    puzzle_error_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.attacks import KIND_NAMES, attacks, parse_piece_char
from ...engine.geometry import iter_bits, square_to_str, squares_to_bb, str_to_square
from ...engine.move import Move, parse_coord
from ...engine.perft import perft as perft_nodes
from ...engine.puzzle import Piece, Puzzle, PuzzleError
from ...search.solver import Solver


logger = logging.getLogger(__name__)

MAX_PERFT_DEPTH = 16


class PuzzleRequest(BaseModel):
    fen: str = Field(..., description="Compound FEN: placement, active square, optional rule")
    rule: Optional[Literal["relay", "carry"]] = Field(
        default=None, description="Overrides the rule given in the notation"
    )


class VerifyRequest(PuzzleRequest):
    moves: List[str] = Field(default_factory=list, description="Coordinate moves, e.g. a1a4")


class PerftRequest(PuzzleRequest):
    # sequence count, not deduplicated: cost grows factorially with depth
    depth: int = Field(default=1, ge=0, le=MAX_PERFT_DEPTH)


class AttacksRequest(BaseModel):
    piece: str = Field(..., min_length=1, max_length=1, description="FEN piece letter")
    square: str
    occupied: List[str] = Field(default_factory=list)


class PieceOut(BaseModel):
    id: int
    kind: str
    color: str
    square: str


class MoveOut(BaseModel):
    notation: str
    coord: str
    from_square: str
    to_square: str
    capturing: PieceOut
    captured: PieceOut


class SolveResponse(BaseModel):
    solved: bool
    moves: List[MoveOut]
    nodes: int
    visited: int
    depth: int
    time_ms: int


class VerifyResponse(BaseModel):
    valid: bool
    solved: bool
    remaining: int
    error: Optional[str] = None


def create_app() -> FastAPI:
    app = FastAPI(title="Capture Chain Solver API", version="0.1.0")

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(PuzzleError, puzzle_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/solve", response_model=SolveResponse)
    def solve(req: PuzzleRequest) -> SolveResponse:
        puzzle = _load_puzzle(req)
        res = Solver().solve(puzzle)
        return SolveResponse(
            solved=res.solved,
            moves=[_move_out(m) for m in res.moves],
            nodes=res.nodes,
            visited=res.visited,
            depth=res.depth,
            time_ms=res.time_ms,
        )

    @app.post("/api/verify", response_model=VerifyResponse)
    async def verify(req: VerifyRequest) -> VerifyResponse:
        puzzle = _load_puzzle(req)
        try:
            moves = [parse_coord(m) for m in req.moves]
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        state = puzzle.root()
        try:
            for from_sq, to_sq in moves:
                _, state = puzzle.apply(state, from_sq, to_sq)
        except PuzzleError as e:
            return VerifyResponse(
                valid=False, solved=False, remaining=state.piece_count(), error=str(e)
            )
        return VerifyResponse(
            valid=True, solved=state.is_terminal(), remaining=state.piece_count()
        )

    @app.post("/api/attacks")
    async def attacked_squares(req: AttacksRequest) -> Dict[str, List[str]]:
        try:
            kind, color = parse_piece_char(req.piece)
            square = str_to_square(req.square)
            occupied = squares_to_bb(str_to_square(s) for s in req.occupied)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        bb = attacks(kind, color, square, occupied)
        return {"squares": [square_to_str(sq) for sq in iter_bits(bb)]}

    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, int]:
        return {"nodes": perft_nodes(_load_puzzle(req), req.depth)}

    return app


def _load_puzzle(req: PuzzleRequest) -> Puzzle:
    puzzle = Puzzle.from_fen(req.fen)
    if req.rule is not None and req.rule != puzzle.rule:
        puzzle = dataclasses.replace(puzzle, rule=req.rule)
    return puzzle


def _piece_out(piece: Piece) -> PieceOut:
    return PieceOut(
        id=piece.id,
        kind=KIND_NAMES[piece.kind],
        color=piece.color,
        square=square_to_str(piece.square),
    )


def _move_out(move: Move) -> MoveOut:
    return MoveOut(
        notation=move.to_algebraic(),
        coord=move.to_coord(),
        from_square=square_to_str(move.from_sq),
        to_square=square_to_str(move.to_sq),
        capturing=_piece_out(move.capturing),
        captured=_piece_out(move.captured),
    )


# Default app for non-factory servers
app = create_app()
