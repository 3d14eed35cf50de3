"""
Game input: records from archives and PGN files.
"""

from chess_analysis.data.records import GameRecord, PGNParser

__all__ = [
    "GameRecord",
    "PGNParser",
]
