"""
Report Module

Turns structured analysis results into text.

Key Components:
    - generate_reasoning: explanation paragraph for a search result
    - report_to_markdown: full game report
    - player_stats_to_markdown: multi-game summary
"""

from chess_analysis.report.markdown import player_stats_to_markdown, report_to_markdown
from chess_analysis.report.reasoning import (
    alternative_reasoning,
    describe_outcome,
    fallback_reasoning,
    format_evaluation,
    generate_reasoning,
)

__all__ = [
    'alternative_reasoning',
    'describe_outcome',
    'fallback_reasoning',
    'format_evaluation',
    'generate_reasoning',
    'player_stats_to_markdown',
    'report_to_markdown',
]
