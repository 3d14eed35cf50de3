"""
Tests for move classification, accuracy and pattern detection.
"""

import chess
import pytest

from chess_analysis.analysis.classifier import (
    classify_move,
    count_critical_moments,
    side_accuracy,
    split_by_side,
)
from chess_analysis.analysis.patterns import (
    PATTERNS,
    detect_patterns,
    game_phase,
    material_balance,
    material_count,
)
from chess_analysis.models import MoveClassification, PositionAnalysis


def analysis(ply, classification=None):
    return PositionAnalysis(ply=ply, fen="", move="", results=(), classification=classification)


class TestClassifyMove:

    @pytest.mark.parametrize(
        "swing, expected",
        [
            (3.0, MoveClassification.BLUNDER),
            (7.5, MoveClassification.BLUNDER),
            (2.99, MoveClassification.MISTAKE),
            (1.5, MoveClassification.MISTAKE),
            (1.0, MoveClassification.INACCURACY),
            (0.5, MoveClassification.INACCURACY),
            (0.1, MoveClassification.BEST),
            (0.0, MoveClassification.BEST),
            (0.3, None),
        ],
    )
    def test_thresholds(self, swing, expected):
        assert classify_move(swing, move_index=20) is expected

    def test_sign_ignored(self):
        assert classify_move(-3.5, 4) is MoveClassification.BLUNDER
        assert classify_move(-0.05, 4) is MoveClassification.BEST

    def test_brilliant_needs_middlegame(self):
        assert classify_move(0.15, 11) is MoveClassification.BRILLIANT
        assert classify_move(0.15, 10) is None
        assert classify_move(0.2, 30) is MoveClassification.BRILLIANT

    def test_single_label(self):
        for swing in (0.0, 0.15, 0.5, 1.5, 3.0):
            labels = [c for c in MoveClassification if classify_move(swing, 15) is c]
            assert len(labels) == 1


class TestAccuracy:

    def test_no_moves(self):
        assert side_accuracy([]) == 100.0

    def test_blunders_and_mistakes_count_against(self):
        moves = [
            analysis(0, MoveClassification.BEST),
            analysis(2, MoveClassification.BLUNDER),
            analysis(4, MoveClassification.MISTAKE),
            analysis(6, MoveClassification.INACCURACY),
        ]
        assert side_accuracy(moves) == pytest.approx(50.0)

    def test_split_by_parity(self):
        moves = [analysis(i) for i in range(5)]
        first, second = split_by_side(moves)

        assert [m.ply for m in first] == [0, 2, 4]
        assert [m.ply for m in second] == [1, 3]

    def test_critical_moments(self):
        moves = [
            analysis(0, MoveClassification.BLUNDER),
            analysis(1, MoveClassification.MISTAKE),
            analysis(2, MoveClassification.BRILLIANT),
            analysis(3),
        ]
        assert count_critical_moments(moves) == 2


class TestPatterns:

    def test_catalogue(self):
        assert len(PATTERNS) == 8
        assert PATTERNS["Fork"].type == "tactical"
        assert PATTERNS["Lucena Position"].type == "endgame"

    def test_knight_fork(self):
        board = chess.Board("r3k3/8/8/1N6/8/8/8/4K3 w - - 0 1")
        assert detect_patterns(board) == ["Fork"]

    def test_pin(self):
        board = chess.Board("4k3/8/2n5/8/8/8/8/4KB2 w - - 0 1")
        assert detect_patterns(board) == ["Pin"]

    def test_starting_position(self):
        assert detect_patterns(chess.Board()) == []

    def test_board_unchanged(self):
        board = chess.Board("r3k3/8/8/1N6/8/8/8/4K3 w - - 0 1")
        fen = board.fen()
        detect_patterns(board)
        assert board.fen() == fen

    def test_game_phase(self):
        assert game_phase(chess.Board()) == "opening"
        assert game_phase(chess.Board("4k3/8/8/8/8/8/8/4K3 b - - 0 8")) == "middlegame"
        assert game_phase(chess.Board("4k3/8/8/8/8/8/8/4K3 w - - 0 20")) == "endgame"

    def test_material(self):
        board = chess.Board()
        assert material_count(board, chess.WHITE) == 39
        assert material_balance(board) == 0

        board = chess.Board("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        assert material_balance(board) == 5

        board = chess.Board("q3k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        assert material_balance(board) == -4
