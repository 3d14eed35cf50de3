"""
Position Analysis

Best move, candidate moves and a confidence score for one position.

Alternative moves:
    After the primary search the position is searched again
    alternative_count times. The engine is not told to exclude earlier
    best moves, so the candidates can repeat the primary move. The number
    of attempts is fixed regardless of duplicates.

Confidence:
    min(1.0, |eval(best) - eval(second)| / 2.0), or 1.0 with fewer than
    two candidates.

Fallback:
    Without an engine the suggestion is a material count (White minus
    Black) and a random move among the first few legal moves, with
    confidence 0.3. The fallback never raises.
"""

import logging
import random
from typing import List, Optional, Sequence

import chess

from chess_analysis.analysis.config import AnalysisConfig
from chess_analysis.analysis.patterns import detect_patterns, game_phase, material_balance
from chess_analysis.engine.client import EngineClient
from chess_analysis.engine.pool import EnginePool
from chess_analysis.engine.protocol import SearchRequest, SearchResult
from chess_analysis.errors import EngineUnavailable, InvalidPosition
from chess_analysis.models import Alternative, MoveSuggestion
from chess_analysis.report.reasoning import (
    alternative_reasoning,
    fallback_reasoning,
    generate_reasoning,
)

logger = logging.getLogger(__name__)


def parse_fen(fen: str) -> chess.Board:
    """
    Build a board from a FEN string.

    Raises:
        InvalidPosition: If the FEN is malformed or the position is invalid
    """
    try:
        board = chess.Board(fen)
    except ValueError as e:
        raise InvalidPosition(f"Invalid FEN '{fen}': {e}") from e
    if not board.is_valid():
        raise InvalidPosition(f"Illegal position: {fen}")
    return board


def calculate_confidence(primary: SearchResult, top_moves: Sequence[SearchResult]) -> float:
    """Confidence in [0, 1] from the gap between the best and second move."""
    if len(top_moves) < 2:
        return 1.0
    gap = abs(primary.evaluation - top_moves[1].evaluation)
    return min(1.0, gap / 2.0)


class PositionAnalyzer:
    """
    Analyze single positions through an engine pool.

    Attributes:
        pool: Engine pool shared with other analyzers
        config: Search limits and fallback settings
    """

    def __init__(
        self,
        pool: EnginePool,
        config: Optional[AnalysisConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.pool = pool
        self.config = config or AnalysisConfig()
        self._rng = rng or random.Random()

    def search(
        self,
        fen: str,
        version: Optional[str] = None,
        depth: Optional[int] = None,
        time_limit_ms: Optional[int] = None,
    ) -> SearchResult:
        """
        Run one search.

        Raises:
            EngineUnavailable: If the engine for the version cannot be used
        """
        engine = self.pool.get_engine(version or self.config.version)
        request = SearchRequest(
            fen=fen,
            depth_limit=depth if depth is not None else self.config.depth,
            time_limit_ms=time_limit_ms if time_limit_ms is not None else self.config.time_limit_ms,
        )
        return engine.search(request)

    def top_moves(
        self,
        fen: str,
        version: Optional[str] = None,
        count: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Collect candidate moves by re-searching the same position.

        Known limitation: the engine is not asked to exclude earlier
        results, so candidates may repeat.

        Returns:
            Up to count results, searches without a best move dropped
        """
        engine = self.pool.get_engine(version or self.config.version)
        return self._collect_candidates(engine, fen, count)

    def _collect_candidates(
        self, engine: EngineClient, fen: str, count: Optional[int]
    ) -> List[SearchResult]:
        attempts = count if count is not None else self.config.alternative_count
        request = SearchRequest(
            fen=fen,
            depth_limit=self.config.alternative_depth,
            time_limit_ms=self.config.alternative_time_limit_ms,
        )

        results = []
        for attempt in range(attempts):
            result = engine.search(request)
            if result.best_move:
                results.append(result)
            else:
                logger.debug(f"Candidate search {attempt + 1}/{attempts} found no move")
        return results

    def analyze_position(
        self,
        fen: str,
        depth: Optional[int] = None,
        version: Optional[str] = None,
        time_limit_ms: Optional[int] = None,
    ) -> MoveSuggestion:
        """
        Suggest a move for a position.

        Args:
            fen: Position to analyze
            depth: Depth of the primary search (default from config)
            version: Engine version (default from config)
            time_limit_ms: Time budget of the primary search

        Returns:
            MoveSuggestion; a material-only estimate if the engine is
            unavailable

        Raises:
            InvalidPosition: If the FEN is invalid
        """
        board = parse_fen(fen)
        version = version or self.config.version

        try:
            engine = self.pool.get_engine(version)
            primary = engine.search(
                SearchRequest(
                    fen=fen,
                    depth_limit=depth if depth is not None else self.config.depth,
                    time_limit_ms=(
                        time_limit_ms if time_limit_ms is not None else self.config.time_limit_ms
                    ),
                )
            )
            candidates = self._collect_candidates(engine, fen, None)
        except EngineUnavailable as e:
            logger.warning(f"Stockfish analysis failed, using fallback: {e}")
            return self.fallback_analysis(board)

        patterns = detect_patterns(board)
        phase = game_phase(board)

        logger.info(
            f"Analyzed {fen}: {primary.best_move} {primary.evaluation:+.2f} "
            f"(depth {primary.depth}, {len(candidates)} candidates)"
        )

        return MoveSuggestion(
            move=primary.best_move,
            evaluation=primary.white_evaluation(board.turn),
            confidence=calculate_confidence(primary, candidates),
            reasoning=generate_reasoning(primary, patterns, phase),
            alternatives=tuple(
                Alternative(
                    move=alt.best_move,
                    evaluation=alt.white_evaluation(board.turn),
                    reasoning=alternative_reasoning(alt, rank),
                )
                for rank, alt in enumerate(candidates[1:], start=2)
            ),
            patterns=tuple(patterns),
            phase=phase,
            engine_result=primary,
        )

    def fallback_analysis(self, board: chess.Board) -> MoveSuggestion:
        """Material-only suggestion used when no engine is available."""
        moves = list(board.legal_moves)
        balance = material_balance(board)

        move = ""
        if moves:
            move = self._rng.choice(moves[: self.config.fallback_candidates]).uci()

        return MoveSuggestion(
            move=move,
            evaluation=float(balance),
            confidence=self.config.fallback_confidence,
            reasoning=fallback_reasoning(move, balance),
            alternatives=tuple(
                Alternative(
                    move=m.uci(),
                    evaluation=0.0,
                    reasoning="Alternative move based on basic principles",
                )
                for m in moves[1:4]
            ),
            phase=game_phase(board),
            fallback=True,
        )
