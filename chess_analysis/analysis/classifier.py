"""
Move Classification

Thresholds (absolute evaluation swing, in pawns), checked in order:

    >= 3.0                       blunder
    >= 1.5                       mistake
    >= 0.5                       inaccuracy
    <= 0.1                       best
    <= 0.2 and move index > 10   brilliant
    otherwise                    unclassified

The first match wins, so a move carries at most one label.
"""

from typing import Optional, Sequence

from chess_analysis.models import MoveClassification, PositionAnalysis

BLUNDER_THRESHOLD = 3.0
MISTAKE_THRESHOLD = 1.5
INACCURACY_THRESHOLD = 0.5
BEST_THRESHOLD = 0.1
BRILLIANT_THRESHOLD = 0.2
OPENING_PLIES = 10


def classify_move(evaluation: float, move_index: int) -> Optional[MoveClassification]:
    """
    Label a move from its evaluation swing.

    Args:
        evaluation: Evaluation swing in pawns (sign ignored)
        move_index: Zero-based ply index of the move in the game

    Returns:
        MoveClassification, or None if no threshold matches
    """
    swing = abs(evaluation)

    if swing >= BLUNDER_THRESHOLD:
        return MoveClassification.BLUNDER
    if swing >= MISTAKE_THRESHOLD:
        return MoveClassification.MISTAKE
    if swing >= INACCURACY_THRESHOLD:
        return MoveClassification.INACCURACY
    if swing <= BEST_THRESHOLD:
        return MoveClassification.BEST
    if swing <= BRILLIANT_THRESHOLD and move_index > OPENING_PLIES:
        return MoveClassification.BRILLIANT
    return None


def side_accuracy(analyses: Sequence[PositionAnalysis]) -> float:
    """
    Share of moves that are neither blunders nor mistakes, in percent.

    A side without moves has nothing to hold against it and scores 100.
    """
    if not analyses:
        return 100.0
    accurate = sum(1 for a in analyses if not a.blunder and not a.mistake)
    return 100.0 * accurate / len(analyses)


def split_by_side(analyses: Sequence[PositionAnalysis]):
    """Partition plies by parity: (first mover's moves, second mover's moves)."""
    first = [a for i, a in enumerate(analyses) if i % 2 == 0]
    second = [a for i, a in enumerate(analyses) if i % 2 == 1]
    return first, second


def count_critical_moments(analyses: Sequence[PositionAnalysis]) -> int:
    """Number of plies flagged blunder or brilliant."""
    return sum(1 for a in analyses if a.is_critical)
