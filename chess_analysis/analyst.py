"""
High-level entry point combining the engine pool and the analyzers.

ChessAnalyst never lets engine trouble escape: positions fall back to a
material estimate, games to a neutral report. Only definitively invalid
input (a malformed FEN) is raised to the caller.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from chess_analysis.analysis.config import AnalysisConfig
from chess_analysis.analysis.game import GameAnalyzer, ProgressCallback
from chess_analysis.analysis.position import PositionAnalyzer
from chess_analysis.analysis.summary import empty_report, summarize_player
from chess_analysis.data.records import GameRecord
from chess_analysis.engine.config import EngineConfig
from chess_analysis.engine.pool import DEFAULT_COMPARE_VERSIONS, EnginePool
from chess_analysis.engine.protocol import SearchResult
from chess_analysis.errors import InvalidGameRecord
from chess_analysis.models import GameAnalysisReport, MoveSuggestion, PlayerStats

logger = logging.getLogger(__name__)


class ChessAnalyst:
    """
    Position, game and player analysis backed by Stockfish.

    The pool is owned by the analyst unless one is passed in, in which
    case the caller keeps ownership and close() leaves it running.

    Example:
        with ChessAnalyst() as analyst:
            suggestion = analyst.analyze_position(chess.STARTING_FEN, depth=12)
            report = analyst.analyze_game(pgn_text)
    """

    def __init__(
        self,
        engine_config: Optional[EngineConfig] = None,
        analysis_config: Optional[AnalysisConfig] = None,
        pool: Optional[EnginePool] = None,
    ):
        self.config = analysis_config or AnalysisConfig()
        self._owns_pool = pool is None
        self.pool = pool if pool is not None else EnginePool(engine_config)
        self.positions = PositionAnalyzer(self.pool, self.config)
        self.games = GameAnalyzer(self.positions, self.config)

    def analyze_position(
        self,
        fen: str,
        depth: Optional[int] = None,
        version: Optional[str] = None,
    ) -> MoveSuggestion:
        """Best move with reasoning; material estimate if no engine runs."""
        return self.positions.analyze_position(fen, depth=depth, version=version)

    def analyze_game(
        self,
        pgn_text: str,
        version: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> GameAnalysisReport:
        """Analyze a PGN game; an unparseable record yields the empty report."""
        try:
            return self.games.analyze_game(pgn_text, version=version, progress=progress)
        except InvalidGameRecord as e:
            logger.warning(f"Invalid game record, returning empty report: {e}")
            return empty_report()

    def analyze_record(
        self,
        record: GameRecord,
        version: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> GameAnalysisReport:
        try:
            return self.games.analyze_record(record, version=version, progress=progress)
        except InvalidGameRecord as e:
            logger.warning(f"Invalid game record, returning empty report: {e}")
            return empty_report()

    def analyze_player(
        self,
        records: Sequence[GameRecord],
        username: Optional[str] = None,
        version: Optional[str] = None,
        on_game: Optional[Callable[[int, GameAnalysisReport], None]] = None,
    ) -> Tuple[List[GameAnalysisReport], PlayerStats]:
        """
        Analyze several games of one player, one after the other.

        Args:
            records: Games, oldest first
            username: Player name used to pick ratings from the headers
            version: Engine version
            on_game: Called with (index, report) after each game

        Returns:
            (reports in input order, aggregate PlayerStats)
        """
        reports = []
        for index, record in enumerate(records):
            report = self.analyze_record(record, version=version)
            reports.append(report)
            if on_game is not None:
                on_game(index, report)

        ratings = list(_player_ratings(records, username)) if username else None
        return reports, summarize_player(reports, ratings)

    def compare_versions(
        self,
        fen: str,
        versions: Iterable[str] = DEFAULT_COMPARE_VERSIONS,
        depth: Optional[int] = None,
    ) -> Dict[str, SearchResult]:
        return self.pool.compare_across_versions(
            fen,
            versions,
            depth=depth if depth is not None else self.config.depth,
            time_limit_ms=self.config.time_limit_ms,
        )

    def close(self) -> None:
        if self._owns_pool:
            self.pool.terminate_all()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _player_ratings(records: Iterable[GameRecord], username: str) -> Iterable[int]:
    """Ratings of the named player in each record that has one."""
    name = username.lower()
    for record in records:
        for side in ("White", "Black"):
            if record.metadata.get(side, "").lower() == name:
                elo = record.metadata.get(f"{side}Elo", "")
                if elo.isdigit():
                    yield int(elo)
                break
