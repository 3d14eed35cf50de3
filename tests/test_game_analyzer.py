"""
Tests for GameAnalyzer: per-ply analysis, swings, summaries, degraded mode.
"""

import chess
import pytest

from chess_analysis.analysis.game import GameAnalyzer, load_pgn, parse_moves
from chess_analysis.analysis.position import PositionAnalyzer
from chess_analysis.data.records import GameRecord
from chess_analysis.engine.pool import EnginePool
from chess_analysis.errors import InvalidGameRecord
from chess_analysis.models import MoveClassification
from tests.engine_fakes import START_FEN, ScriptedFactory

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"

ITALIAN_PGN = """[Event "Casual Game"]
[Site "Paris"]
[White "Alice"]
[Black "Bob"]
[Result "*"]
[WhiteElo "1650"]
[BlackElo "1710"]
[TimeControl "600+5"]
[Opening "Italian Game"]

1. e4 e5 2. Nf3 Nc6 3. Bc4 *
"""


def make_game_analyzer(searches=None, broken=(), crash_fens=()):
    factory = ScriptedFactory(searches=searches, broken=broken, crash_fens=crash_fens)
    pool = EnginePool(client_factory=factory)
    return GameAnalyzer(PositionAnalyzer(pool)), factory


class TestLoadPgn:

    def test_headers_and_moves(self):
        board, moves, headers = load_pgn(ITALIAN_PGN)

        assert board.fen() == START_FEN
        assert len(moves) == 5
        assert headers["White"] == "Alice"

    def test_empty_text(self):
        with pytest.raises(InvalidGameRecord):
            load_pgn("")

    def test_illegal_move(self):
        with pytest.raises(InvalidGameRecord):
            load_pgn('[Event "x"]\n\n1. e4 e5 2. Ke3 *\n')

    def test_parse_moves_san_and_uci(self):
        moves = parse_moves(["e4", "e7e5", "Nf3"], chess.Board())
        assert [m.uci() for m in moves] == ["e2e4", "e7e5", "g1f3"]

    def test_parse_moves_illegal(self):
        with pytest.raises(InvalidGameRecord, match="ply 1"):
            parse_moves(["e4", "e4"], chess.Board())


class TestAnalyzeGame:

    def test_one_entry_per_ply(self):
        analyzer, _ = make_game_analyzer()

        report = analyzer.analyze_game(ITALIAN_PGN)

        assert [m.ply for m in report.moves] == [0, 1, 2, 3, 4]
        assert [m.move for m in report.moves] == ["e4", "e5", "Nf3", "Nc6", "Bc4"]
        assert report.moves[0].fen == START_FEN
        assert report.moves[1].fen == AFTER_E4
        assert not report.degraded

    def test_searches_every_position_and_final(self):
        analyzer, factory = make_game_analyzer()
        analyzer.analyze_game(ITALIAN_PGN)

        transport = factory.created[0].transport
        assert len(transport.commands("go")) == 6
        assert transport.commands("go")[0] == "go depth 18"

    def test_equal_evaluations_are_best_moves(self):
        analyzer, _ = make_game_analyzer()
        report = analyzer.analyze_game(ITALIAN_PGN)

        assert all(m.classification is MoveClassification.BEST for m in report.moves)
        assert report.summary.white_accuracy == 100.0
        assert report.summary.black_accuracy == 100.0
        assert report.summary.critical_moments == 0

    def test_blunder_detected(self):
        analyzer, _ = make_game_analyzer({
            START_FEN: ["info depth 18 score cp 50 nodes 10 pv d2d4", "bestmove d2d4"],
            AFTER_E4: ["info depth 18 score cp 250 nodes 10 pv d7d5", "bestmove d7d5"],
        })

        report = analyzer.analyze_moves(["e4"])

        first = report.moves[0]
        assert first.evaluation_swing == pytest.approx(3.0)
        assert first.classification is MoveClassification.BLUNDER
        assert first.results[0].best_move == "d2d4"
        assert report.blunders == 1
        assert report.summary.white_accuracy == 0.0
        assert report.summary.black_accuracy == 100.0
        assert report.summary.critical_moments == 1
        assert "Reduce blunders" in report.insights.improvements

    def test_improving_move_is_not_penalized(self):
        analyzer, _ = make_game_analyzer({
            START_FEN: ["info depth 18 score mate 3 nodes 10 pv e2e4", "bestmove e2e4"],
            AFTER_E4: ["info depth 18 score mate -2 nodes 10 pv e7e5", "bestmove e7e5"],
        })

        report = analyzer.analyze_moves(["e4"])

        assert report.moves[0].evaluation_swing == 0.0
        assert report.moves[0].classification is MoveClassification.BEST

    def test_checkmate_ends_without_final_search(self):
        analyzer, factory = make_game_analyzer()

        report = analyzer.analyze_moves(["f3", "e5", "g4", "Qh4#"])

        assert len(report.moves) == 4
        assert report.moves[-1].evaluation_swing == 0.0
        assert report.summary.game_result == "0-1"
        assert len(factory.created[0].transport.commands("go")) == 4

    def test_summary_from_headers(self):
        analyzer, _ = make_game_analyzer()
        report = analyzer.analyze_game(ITALIAN_PGN)

        assert report.summary.average_rating == 1680
        assert report.summary.time_control == "600+5"
        assert report.summary.opening == "Italian Game"
        assert report.summary.game_result == "*"
        assert report.recommendations.next_opponent_level == "1600-1800"

    def test_starting_fen_black_to_move(self):
        analyzer, _ = make_game_analyzer({
            AFTER_E4: ["info depth 18 score cp 0 nodes 10 pv e7e5", "bestmove e7e5"],
        })

        report = analyzer.analyze_moves(["e5", "Nf3"], starting_fen=AFTER_E4)

        assert [m.move for m in report.moves] == ["e5", "Nf3"]
        assert report.metadata["FEN"] == AFTER_E4

    def test_progress_callback(self):
        analyzer, _ = make_game_analyzer()
        calls = []

        analyzer.analyze_game(ITALIAN_PGN, progress=lambda done, total: calls.append((done, total)))

        assert calls == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]

    def test_empty_game(self):
        analyzer, factory = make_game_analyzer()
        report = analyzer.analyze_moves([])

        assert report.moves == ()
        assert report.summary.white_accuracy == 100.0
        assert factory.created == []

    def test_invalid_record(self):
        analyzer, factory = make_game_analyzer()

        with pytest.raises(InvalidGameRecord):
            analyzer.analyze_game("1. e4 e5 2. Qxf7 *")

        assert factory.created == []

    def test_record_metadata_kept(self):
        analyzer, _ = make_game_analyzer()
        record = GameRecord(pgn_text=ITALIAN_PGN, metadata={"Site": "lichess.org", "Link": "abc"})

        report = analyzer.analyze_record(record)

        assert report.metadata["Site"] == "lichess.org"
        assert report.metadata["Link"] == "abc"
        assert report.metadata["White"] == "Alice"


class TestDegraded:

    def test_engine_unavailable(self):
        analyzer, _ = make_game_analyzer(broken={"17"})

        report = analyzer.analyze_game(ITALIAN_PGN)

        assert report.degraded
        assert len(report.moves) == 5
        assert report.summary.white_accuracy == 50.0
        assert report.summary.black_accuracy == 50.0
        assert report.summary.critical_moments == 0

        first = report.moves[0].results[0]
        assert first.evaluation == 0.0
        assert first.depth == 1
        assert first.pv == ("e2e4",)
        assert report.moves[0].classification is None

    def test_engine_crash_mid_game(self):
        analyzer, _ = make_game_analyzer(crash_fens=[AFTER_E4])

        report = analyzer.analyze_game(ITALIAN_PGN)

        assert report.degraded
        assert [m.move for m in report.moves] == ["e4", "e5", "Nf3", "Nc6", "Bc4"]
        assert all(m.classification is None for m in report.moves)

    def test_invalid_record_still_raises(self):
        analyzer, _ = make_game_analyzer(broken={"17"})
        with pytest.raises(InvalidGameRecord):
            analyzer.analyze_moves(["e4", "Ke7"])
