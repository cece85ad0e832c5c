"""Tests for UCI line parsing and command builders."""

from __future__ import annotations

import pytest

from chesseval.engine.protocol import (
    BestMove,
    ReadyOk,
    ScoreKind,
    ScoreUpdate,
    UciOk,
    Unrecognized,
    go_depth_command,
    parse_line,
    position_command,
)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (
            "info depth 15 seldepth 21 multipv 1 score cp 34 nodes 812345 pv e2e4",
            ScoreUpdate(ScoreKind.CENTIPAWNS, 34),
        ),
        ("info depth 3 score cp -120 pv d7d5", ScoreUpdate(ScoreKind.CENTIPAWNS, -120)),
        ("info depth 22 score mate -3 pv h7h8q", ScoreUpdate(ScoreKind.MATE, -3)),
        ("info depth 9 score mate +2", ScoreUpdate(ScoreKind.MATE, 2)),
        ("info depth 12 score cp 18 upperbound", ScoreUpdate(ScoreKind.CENTIPAWNS, 18)),
    ],
)
def test_info_lines_with_score_become_score_updates(
    line: str, expected: ScoreUpdate
) -> None:
    assert parse_line(line) == expected


@pytest.mark.parametrize(
    "line",
    [
        "info string NNUE evaluation using nn-1111.nnue enabled",
        "info depth 5 currmove e2e4 currmovenumber 1",
        "info depth 5 score wdl 500 300 200",
        "info depth 5 score cp twelve",
    ],
)
def test_info_lines_without_parseable_score_are_unrecognized(line: str) -> None:
    assert parse_line(line) == Unrecognized(line)


def test_bestmove_lines() -> None:
    assert parse_line("bestmove e2e4 ponder e7e5") == BestMove("e2e4")
    assert parse_line("bestmove (none)") == BestMove(None)
    assert parse_line("bestmove") == BestMove(None)


def test_handshake_acknowledgements() -> None:
    assert parse_line("uciok") == UciOk()
    assert parse_line("readyok\r\n") == ReadyOk()


@pytest.mark.parametrize(
    "line",
    ["", "   ", "id name Stockfish 17", "option name Hash type spin", "\x00\xff garbage"],
)
def test_other_lines_never_raise(line: str) -> None:
    assert isinstance(parse_line(line), Unrecognized)


def test_score_token_must_follow_progress_marker() -> None:
    assert isinstance(parse_line("string score cp 40"), Unrecognized)


def test_position_command_carries_fen() -> None:
    fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
    assert position_command(fen) == f"position fen {fen}"


def test_position_command_rejects_multiline_fen() -> None:
    with pytest.raises(ValueError):
        position_command("8/8/8/8/8/8/8/8 w - - 0 1\ngo infinite")
    with pytest.raises(ValueError):
        position_command("  ")


def test_go_depth_command() -> None:
    assert go_depth_command(15) == "go depth 15"
    with pytest.raises(ValueError):
        go_depth_command(0)
