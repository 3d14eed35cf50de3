"""
Game records and streaming PGN input.

A GameRecord is the shape every game source delivers: raw PGN text plus
metadata (players, ratings, site, time control). Archive clients for
online platforms produce the same shape.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional

import chess.pgn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameRecord:
    """Raw game as delivered by a game source."""

    pgn_text: str
    metadata: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_game(cls, game: chess.pgn.Game) -> "GameRecord":
        exporter = chess.pgn.StringExporter(headers=True, variations=False, comments=False)
        return cls(pgn_text=game.accept(exporter), metadata=dict(game.headers))

    @classmethod
    def from_pgn(cls, pgn_text: str) -> "GameRecord":
        """Wrap PGN text, copying its headers into metadata."""
        game = chess.pgn.read_headers(io.StringIO(pgn_text))
        metadata = dict(game) if game is not None else {}
        return cls(pgn_text=pgn_text, metadata=metadata)


class PGNParser:
    """Stream games from PGN files without loading them into memory."""

    def __init__(self, min_elo: Optional[int] = None, max_games: Optional[int] = None):
        """
        Initialize PGN parser with filtering criteria.

        Args:
            min_elo: Minimum ELO rating for both players (None = no filter)
            max_games: Maximum number of games to parse (None = unlimited)
        """
        self.min_elo = min_elo
        self.max_games = max_games
        self._games_parsed = 0

    def parse_file(self, pgn_path: Path) -> Iterator[GameRecord]:
        """
        Stream games from a single PGN file.

        Args:
            pgn_path: Path to PGN file

        Yields:
            GameRecord objects that pass the ELO filter
        """
        if not pgn_path.exists():
            raise FileNotFoundError(f"PGN file not found: {pgn_path}")

        logger.info(f"Parsing PGN file: {pgn_path}")
        self._games_parsed = 0

        with open(pgn_path, "r", encoding="utf-8", errors="ignore") as pgn_file:
            while True:
                if self.max_games is not None and self._games_parsed >= self.max_games:
                    logger.info(f"Reached max_games limit: {self.max_games}")
                    break

                game = chess.pgn.read_game(pgn_file)
                if game is None:
                    break

                if game.errors:
                    logger.warning(f"Skipping game with errors: {game.errors[0]}")
                    continue

                if self._passes_elo_filter(game):
                    self._games_parsed += 1
                    yield GameRecord.from_game(game)

        logger.info(f"Parsed {self._games_parsed} games from {pgn_path}")

    def _passes_elo_filter(self, game: chess.pgn.Game) -> bool:
        """Both players must be rated at least min_elo."""
        if self.min_elo is None:
            return True

        try:
            white_elo = int(game.headers.get("WhiteElo", "?"))
            black_elo = int(game.headers.get("BlackElo", "?"))
        except ValueError:
            return False

        return white_elo >= self.min_elo and black_elo >= self.min_elo

    def get_games_parsed(self) -> int:
        """Get count of games parsed so far."""
        return self._games_parsed
