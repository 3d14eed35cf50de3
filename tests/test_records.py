"""
Tests for GameRecord and PGNParser.
"""

import chess.pgn
import pytest

from chess_analysis.data.records import GameRecord, PGNParser

GAMES = """[Event "Rated Blitz"]
[White "alice"]
[Black "bob"]
[WhiteElo "2100"]
[BlackElo "2050"]
[Result "1-0"]

1. e4 e5 2. Bc4 Nc6 3. Qh5 Nf6 4. Qxf7# 1-0

[Event "Rated Blitz"]
[White "carol"]
[Black "alice"]
[WhiteElo "1500"]
[BlackElo "2110"]
[Result "0-1"]

1. f3 e5 2. g4 Qh4# 0-1

[Event "Rated Blitz"]
[White "dave"]
[Black "alice"]
[WhiteElo "2200"]
[BlackElo "2120"]
[Result "1/2-1/2"]

1. d4 d5 1/2-1/2
"""


@pytest.fixture
def pgn_file(tmp_path):
    path = tmp_path / "games.pgn"
    path.write_text(GAMES)
    return path


class TestGameRecord:

    def test_from_pgn_copies_headers(self):
        record = GameRecord.from_pgn(GAMES)

        assert record.pgn_text == GAMES
        assert record.metadata["White"] == "alice"
        assert record.metadata["WhiteElo"] == "2100"

    def test_from_game(self):
        game = chess.pgn.Game()
        game.headers["White"] = "eve"
        game.add_main_variation(chess.Move.from_uci("e2e4"))

        record = GameRecord.from_game(game)

        assert record.metadata["White"] == "eve"
        assert "1. e4" in record.pgn_text

    def test_immutable(self):
        record = GameRecord.from_pgn(GAMES)
        with pytest.raises(AttributeError):
            record.pgn_text = ""


class TestPGNParser:

    def test_all_games(self, pgn_file):
        parser = PGNParser()
        records = list(parser.parse_file(pgn_file))

        assert [r.metadata["White"] for r in records] == ["alice", "carol", "dave"]
        assert parser.get_games_parsed() == 3

    def test_records_round_trip_through_reader(self, pgn_file):
        record = next(PGNParser().parse_file(pgn_file))
        assert record.pgn_text.strip().endswith("Qxf7# 1-0")

    def test_min_elo(self, pgn_file):
        records = list(PGNParser(min_elo=2000).parse_file(pgn_file))
        assert [r.metadata["White"] for r in records] == ["alice", "dave"]

    def test_max_games(self, pgn_file):
        records = list(PGNParser(max_games=2).parse_file(pgn_file))
        assert len(records) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(PGNParser().parse_file(tmp_path / "missing.pgn"))

    def test_games_with_errors_skipped(self, tmp_path):
        path = tmp_path / "broken.pgn"
        path.write_text('[White "x"]\n\n1. e4 e5 2. Ke3 *\n\n' + GAMES)

        records = list(PGNParser().parse_file(path))

        assert [r.metadata["White"] for r in records] == ["alice", "carol", "dave"]
