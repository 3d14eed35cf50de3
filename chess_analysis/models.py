"""
Result types produced by position and game analysis.

All of these are frozen: a report is built once and then only read.
Sequences are stored as tuples for the same reason.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from chess_analysis.engine.protocol import SearchResult


class MoveClassification(Enum):
    """Quality label of a played move."""

    BLUNDER = "blunder"
    MISTAKE = "mistake"
    INACCURACY = "inaccuracy"
    BEST = "best"
    BRILLIANT = "brilliant"


@dataclass(frozen=True)
class PositionAnalysis:
    """One ply of an analyzed game.

    fen is the position before the move, move is the played move in SAN and
    results holds the engine output for that position. evaluation_swing is
    the difference between the best available evaluation and the evaluation
    after the played move, both from the mover's side.
    """

    ply: int
    fen: str
    move: str
    results: Tuple[SearchResult, ...]
    classification: Optional[MoveClassification] = None
    evaluation_swing: float = 0.0

    @property
    def blunder(self) -> bool:
        return self.classification is MoveClassification.BLUNDER

    @property
    def mistake(self) -> bool:
        return self.classification is MoveClassification.MISTAKE

    @property
    def inaccuracy(self) -> bool:
        return self.classification is MoveClassification.INACCURACY

    @property
    def best(self) -> bool:
        return self.classification is MoveClassification.BEST

    @property
    def brilliant(self) -> bool:
        return self.classification is MoveClassification.BRILLIANT

    @property
    def is_critical(self) -> bool:
        return self.blunder or self.brilliant


@dataclass(frozen=True)
class Alternative:
    """A candidate move other than the suggested one."""

    move: str
    evaluation: float
    reasoning: str


@dataclass(frozen=True)
class MoveSuggestion:
    """Best move for a position with the reasoning behind it.

    evaluation is White-positive. engine_result is None when the
    suggestion comes from the material-only fallback.
    """

    move: str
    evaluation: float
    confidence: float
    reasoning: str
    alternatives: Tuple[Alternative, ...] = ()
    patterns: Tuple[str, ...] = ()
    phase: Optional[str] = None
    engine_result: Optional[SearchResult] = None
    fallback: bool = False


@dataclass(frozen=True)
class GameSummary:
    white_accuracy: float
    black_accuracy: float
    average_rating: int
    game_result: str
    time_control: str
    opening: str
    critical_moments: int


@dataclass(frozen=True)
class GameInsights:
    patterns: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    strengths: Tuple[str, ...] = ()
    weaknesses: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Recommendations:
    study_topics: Tuple[str, ...] = ()
    training_exercises: Tuple[str, ...] = ()
    next_opponent_level: str = ""


@dataclass(frozen=True)
class GameAnalysisReport:
    """Full analysis of one game, one PositionAnalysis per ply in order.

    degraded is True when the engine was unavailable and the per-move
    entries carry placeholder evaluations.
    """

    moves: Tuple[PositionAnalysis, ...]
    summary: GameSummary
    insights: GameInsights
    recommendations: Recommendations
    metadata: Dict[str, str] = field(default_factory=dict)
    degraded: bool = False

    @property
    def blunders(self) -> int:
        return sum(1 for m in self.moves if m.blunder)

    @property
    def mistakes(self) -> int:
        return sum(1 for m in self.moves if m.mistake)

    @property
    def average_accuracy(self) -> float:
        return (self.summary.white_accuracy + self.summary.black_accuracy) / 2


@dataclass(frozen=True)
class PlayerStats:
    """Aggregate over several analyzed games."""

    games: int
    average_accuracy: float
    best_accuracy: float
    worst_accuracy: float
    total_blunders: int
    total_critical_moments: int
    common_patterns: Tuple[str, ...] = ()
    improvement_areas: Tuple[str, ...] = ()
    rating_progress: Tuple[int, ...] = ()
