"""
Analysis configuration.
"""

from dataclasses import dataclass

from chess_analysis.engine.config import DEFAULT_VERSION


@dataclass
class AnalysisConfig:
    """Search limits and fallback settings for position and game analysis."""

    # Single position
    depth: int = 20
    """Depth limit of the primary search"""

    time_limit_ms: int = 10000
    """Time budget of the primary search"""

    # Alternatives
    alternative_count: int = 3
    """Number of re-searches used to collect candidate moves"""

    alternative_depth: int = 15
    """Depth limit of each alternative search"""

    alternative_time_limit_ms: int = 5000
    """Time budget of each alternative search"""

    # Whole games
    game_depth: int = 18
    """Depth limit per ply when analyzing a game"""

    game_time_limit_ms: int = 8000
    """Time budget per ply when analyzing a game"""

    version: str = DEFAULT_VERSION
    """Engine version used when the caller does not name one"""

    # Fallback when no engine is available
    fallback_confidence: float = 0.3
    """Confidence reported for material-only estimates"""

    fallback_candidates: int = 5
    """The fallback move is drawn from the first N legal moves"""
