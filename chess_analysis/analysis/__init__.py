"""
Analysis Module

Position and game analysis on top of the engine pool.

Key Components:
    - PositionAnalyzer: best move, candidates, confidence, material fallback
    - GameAnalyzer: per-ply searches and move classification
    - classify_move: blunder / mistake / inaccuracy / best / brilliant

Data Flow:
    FEN -> PositionAnalyzer.analyze_position() -> MoveSuggestion
    PGN -> GameAnalyzer.analyze_game() -> GameAnalysisReport
"""

from chess_analysis.analysis.classifier import (
    classify_move,
    count_critical_moments,
    side_accuracy,
)
from chess_analysis.analysis.config import AnalysisConfig
from chess_analysis.analysis.game import GameAnalyzer, load_pgn, parse_moves
from chess_analysis.analysis.patterns import (
    PATTERNS,
    detect_patterns,
    game_phase,
    material_balance,
)
from chess_analysis.analysis.position import PositionAnalyzer, calculate_confidence
from chess_analysis.analysis.summary import empty_report, summarize_player

__all__ = [
    'AnalysisConfig',
    'GameAnalyzer',
    'PositionAnalyzer',
    'PATTERNS',
    'calculate_confidence',
    'classify_move',
    'count_critical_moments',
    'detect_patterns',
    'empty_report',
    'game_phase',
    'load_pgn',
    'material_balance',
    'parse_moves',
    'side_accuracy',
    'summarize_player',
]
