"""
Game summaries, insights, recommendations and multi-game statistics.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from chess_analysis.analysis.classifier import (
    count_critical_moments,
    side_accuracy,
    split_by_side,
)
from chess_analysis.models import (
    GameAnalysisReport,
    GameInsights,
    GameSummary,
    PlayerStats,
    PositionAnalysis,
    Recommendations,
)

logger = logging.getLogger(__name__)

DEFAULT_RATING = 1500
NEUTRAL_ACCURACY = 50.0


def _rating(metadata: Dict[str, str], key: str) -> Optional[int]:
    try:
        return int(metadata.get(key, ""))
    except ValueError:
        return None


def average_rating(metadata: Dict[str, str], default: int = DEFAULT_RATING) -> int:
    """Mean of WhiteElo/BlackElo headers, or the default if neither is set."""
    ratings = [r for r in (_rating(metadata, "WhiteElo"), _rating(metadata, "BlackElo")) if r]
    if not ratings:
        return default
    return int(round(sum(ratings) / len(ratings)))


def build_summary(
    analyses: Sequence[PositionAnalysis],
    metadata: Dict[str, str],
    game_result: str,
    white_moves_first: bool = True,
) -> GameSummary:
    """
    Per-side accuracy and critical moments for one game.

    Args:
        analyses: One entry per ply, in order
        metadata: PGN headers
        game_result: Result string ("1-0", "0-1", "1/2-1/2", "*")
        white_moves_first: False for games set up with Black to move
    """
    first, second = split_by_side(analyses)
    white, black = (first, second) if white_moves_first else (second, first)

    return GameSummary(
        white_accuracy=side_accuracy(white),
        black_accuracy=side_accuracy(black),
        average_rating=average_rating(metadata),
        game_result=game_result,
        time_control=metadata.get("TimeControl", "Unknown"),
        opening=metadata.get("Opening", metadata.get("ECO", "Unknown")),
        critical_moments=count_critical_moments(analyses),
    )


def build_insights(analyses: Sequence[PositionAnalysis]) -> GameInsights:
    blunders = sum(1 for a in analyses if a.blunder)
    brilliant = sum(1 for a in analyses if a.brilliant)

    return GameInsights(
        patterns=("Tactical awareness", "Positional understanding"),
        improvements=("Reduce blunders", "Better time management") if blunders > 0 else (),
        strengths=("Tactical vision", "Calculation accuracy") if brilliant > 0 else (),
        weaknesses=("Tactical oversight", "Time pressure") if blunders > 2 else (),
    )


def build_recommendations(summary: GameSummary) -> Recommendations:
    return Recommendations(
        study_topics=("Tactics", "Endgames", "Opening theory"),
        training_exercises=("Puzzle solving", "Game analysis", "Speed chess"),
        next_opponent_level="1600-1800" if summary.average_rating > 1500 else "1400-1600",
    )


def build_report(
    analyses: Sequence[PositionAnalysis],
    metadata: Dict[str, str],
    game_result: str,
    white_moves_first: bool = True,
) -> GameAnalysisReport:
    """Assemble the immutable report for an engine-analyzed game."""
    summary = build_summary(analyses, metadata, game_result, white_moves_first)
    return GameAnalysisReport(
        moves=tuple(analyses),
        summary=summary,
        insights=build_insights(analyses),
        recommendations=build_recommendations(summary),
        metadata=dict(metadata),
    )


def degraded_report(
    analyses: Sequence[PositionAnalysis],
    metadata: Dict[str, str],
    game_result: str,
) -> GameAnalysisReport:
    """Report for a game replayed without an engine: neutral numbers only."""
    return GameAnalysisReport(
        moves=tuple(analyses),
        summary=GameSummary(
            white_accuracy=NEUTRAL_ACCURACY,
            black_accuracy=NEUTRAL_ACCURACY,
            average_rating=average_rating(metadata, default=1200),
            game_result=game_result,
            time_control=metadata.get("TimeControl", "Unknown"),
            opening=metadata.get("Opening", "Unknown"),
            critical_moments=0,
        ),
        insights=GameInsights(
            improvements=("Study basic tactics", "Practice endgames"),
            strengths=("Good opening knowledge",),
            weaknesses=("Tactical awareness needs improvement",),
        ),
        recommendations=Recommendations(
            study_topics=("Basic tactics", "Opening principles"),
            training_exercises=("Puzzle solving", "Endgame practice"),
            next_opponent_level="Similar rating players",
        ),
        metadata=dict(metadata),
        degraded=True,
    )


def empty_report() -> GameAnalysisReport:
    """Neutral report used when a game record cannot be parsed."""
    return GameAnalysisReport(
        moves=(),
        summary=GameSummary(
            white_accuracy=NEUTRAL_ACCURACY,
            black_accuracy=NEUTRAL_ACCURACY,
            average_rating=1200,
            game_result="*",
            time_control="Unknown",
            opening="Unknown",
            critical_moments=0,
        ),
        insights=GameInsights(
            improvements=("Learn chess basics",),
            weaknesses=("Complete beginner",),
        ),
        recommendations=Recommendations(
            study_topics=("Rules of chess", "Basic tactics"),
            training_exercises=("Learn piece movements", "Practice checkmating"),
            next_opponent_level="Beginner players",
        ),
        degraded=True,
    )


def summarize_player(
    reports: Sequence[GameAnalysisReport],
    ratings: Optional[Iterable[int]] = None,
) -> PlayerStats:
    """
    Aggregate statistics over several games.

    Args:
        reports: Analyzed games
        ratings: Player rating after each game, oldest first

    Returns:
        PlayerStats (all zeros for an empty input)
    """
    if not reports:
        return PlayerStats(
            games=0,
            average_accuracy=0.0,
            best_accuracy=0.0,
            worst_accuracy=0.0,
            total_blunders=0,
            total_critical_moments=0,
        )

    accuracies = np.array([r.average_accuracy for r in reports], dtype=np.float64)
    blunders = sum(r.blunders for r in reports)
    mistakes = sum(r.mistakes for r in reports)

    pattern_counts: Counter = Counter()
    for report in reports:
        pattern_counts.update(report.insights.patterns)

    improvement_areas: List[str] = []
    if blunders:
        improvement_areas.append("Tactics")
    if mistakes:
        improvement_areas.append("Calculation")
    if float(np.mean(accuracies)) < 80.0:
        improvement_areas.append("Endgames")

    stats = PlayerStats(
        games=len(reports),
        average_accuracy=float(np.mean(accuracies)),
        best_accuracy=float(np.max(accuracies)),
        worst_accuracy=float(np.min(accuracies)),
        total_blunders=blunders,
        total_critical_moments=sum(r.summary.critical_moments for r in reports),
        common_patterns=tuple(name for name, _ in pattern_counts.most_common(3)),
        improvement_areas=tuple(improvement_areas),
        rating_progress=tuple(ratings or ()),
    )
    logger.debug(f"Player stats over {stats.games} games: {stats.average_accuracy:.1f}%")
    return stats
