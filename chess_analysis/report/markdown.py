"""
Markdown rendering of game reports and player statistics.
"""

from datetime import datetime
from typing import Optional

from chess_analysis.models import GameAnalysisReport, PlayerStats

_LABELS = {
    "blunder": "??",
    "mistake": "?",
    "inaccuracy": "?!",
    "best": "",
    "brilliant": "!!",
}


def _move_number(ply: int) -> str:
    if ply % 2 == 0:
        return f"{ply // 2 + 1}."
    return f"{ply // 2 + 1}..."


def report_to_markdown(report: GameAnalysisReport, title: Optional[str] = None) -> str:
    """Render a game report as a markdown document."""
    summary = report.summary
    lines = [
        f"# {title or 'Game Analysis Report'}",
        "",
        f"**Generated**: {datetime.now().isoformat()}",
        "",
        "## Summary",
        "",
        f"- **Result**: {summary.game_result}",
        f"- **Opening**: {summary.opening}",
        f"- **Time Control**: {summary.time_control}",
        f"- **Average Rating**: {summary.average_rating}",
        f"- **White Accuracy**: {summary.white_accuracy:.1f}%",
        f"- **Black Accuracy**: {summary.black_accuracy:.1f}%",
        f"- **Critical Moments**: {summary.critical_moments}",
    ]

    if report.degraded:
        lines.append("- **Engine**: unavailable, evaluations are placeholders")

    if report.moves:
        lines.extend(
            [
                "",
                "## Moves",
                "",
                "| Ply | Move | Best | Eval | Swing | Label |",
                "|-----|------|------|------|-------|-------|",
            ]
        )
        for analysis in report.moves:
            result = analysis.results[0] if analysis.results else None
            best = result.best_move if result else ""
            evaluation = f"{result.evaluation:+.2f}" if result else ""
            label = ""
            if analysis.classification is not None:
                name = analysis.classification.value
                label = f"{name} {_LABELS[name]}".strip()
            lines.append(
                f"| {_move_number(analysis.ply)} | {analysis.move} | {best} | "
                f"{evaluation} | {analysis.evaluation_swing:.2f} | {label} |"
            )

    insights = report.insights
    sections = [
        ("Strengths", insights.strengths),
        ("Weaknesses", insights.weaknesses),
        ("Improvements", insights.improvements),
        ("Study Topics", report.recommendations.study_topics),
        ("Training Exercises", report.recommendations.training_exercises),
    ]
    for heading, items in sections:
        if items:
            lines.extend(["", f"## {heading}", ""])
            lines.extend(f"- {item}" for item in items)

    if report.recommendations.next_opponent_level:
        lines.extend(
            [
                "",
                f"**Next opponent level**: {report.recommendations.next_opponent_level}",
            ]
        )

    return "\n".join(lines)


def player_stats_to_markdown(stats: PlayerStats, username: str = "Player") -> str:
    lines = [
        f"# {username}: {stats.games} game(s)",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Average accuracy | {stats.average_accuracy:.1f}% |",
        f"| Best accuracy | {stats.best_accuracy:.1f}% |",
        f"| Worst accuracy | {stats.worst_accuracy:.1f}% |",
        f"| Blunders | {stats.total_blunders} |",
        f"| Critical moments | {stats.total_critical_moments} |",
    ]
    if stats.improvement_areas:
        lines.extend(["", "## Improvement Areas", ""])
        lines.extend(f"- {area}" for area in stats.improvement_areas)
    return "\n".join(lines)
