from __future__ import annotations

import pytest

from capture_chain.cli.main import build_parser, main


def test_solve_prints_numbered_moves(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["solve", "8/8/8/8/b7/4P3/2N5/R7 a1"])
    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out[:3] == ["1. Ra1xa4", "2. Ba4xc2", "3. Nc2xe3"]
    assert out[3].startswith("nodes=")


def test_solve_unsolved_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["solve", "8/8/8/8/b7/4P3/2N5/R7 a1", "--rule", "carry"])
    assert rc == 1
    assert capsys.readouterr().out.splitlines()[0] == "unsolved"


def test_bad_notation_reports_error(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["solve", "8/8/8/8/8/8/8/R7 a1"])
    assert rc == 2
    assert "error:" in capsys.readouterr().err


def test_attacks_draws_board(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["attacks", "N", "a1"])
    lines = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert lines[5] == "3 .*......"
    assert lines[6] == "2 ..*....."
    assert lines[7] == "1 ........"


def test_serve_defaults() -> None:
    args = build_parser().parse_args(["serve"])
    assert args.host == "127.0.0.1" and args.port == 8000
