"""
Natural-language reasoning for engine results.

Pure string construction. Every optional input (mate distance, patterns,
phase) may be missing.
"""

from typing import Optional, Sequence

from chess_analysis.engine.protocol import SearchResult


def format_evaluation(evaluation: float) -> str:
    """Signed pawn value, e.g. '+1.25', '-0.40', '0.00'."""
    if evaluation > 0:
        return f"+{evaluation:.2f}"
    return f"{evaluation:.2f}"


def describe_outcome(evaluation: float) -> str:
    """Qualitative effect of a move from its evaluation in pawns."""
    if evaluation > 2:
        return "gives a decisive advantage."
    if evaluation > 0.5:
        return "improves the position significantly."
    if evaluation > -0.5:
        return "maintains equal chances."
    return "leads to a disadvantage."


def generate_reasoning(
    result: SearchResult,
    patterns: Sequence[str] = (),
    phase: Optional[str] = None,
) -> str:
    """
    Explain a search result.

    Args:
        result: Engine result for the position
        patterns: Names of detected patterns
        phase: Game phase ("opening", "middlegame", "endgame")

    Returns:
        One paragraph: evaluation or mate announcement, patterns,
        and a phase-dependent verdict; a single checkmate sentence when
        the side to move is already mated
    """
    if result.mate_in == 0:
        return "Checkmate: the side to move has been mated and has no moves."

    parts = []

    if result.is_mate:
        parts.append(f"Mate in {abs(result.mate_in)} moves.")
    else:
        parts.append(f"Evaluation: {format_evaluation(result.evaluation)}.")

    if patterns:
        parts.append(f"This position contains tactical patterns: {', '.join(patterns)}.")

    where = f"In the {phase}" if phase else "In this position"
    parts.append(f"{where}, this move {describe_outcome(result.evaluation)}")

    return " ".join(parts)


def alternative_reasoning(result: SearchResult, rank: int) -> str:
    """One-line description of the rank-th candidate move."""
    return f"Alternative move {rank} with evaluation {format_evaluation(result.evaluation)}."


def fallback_reasoning(move: str, balance: int) -> str:
    """Disclose that a suggestion is a material-only estimate."""
    sign = "+" if balance > 0 else ""
    if not move:
        return (
            f"No legal moves are available. Material balance: {sign}{balance}. "
            "This is a simplified analysis without the Stockfish engine."
        )
    return (
        f"Basic analysis suggests {move} as a reasonable move. "
        f"Material balance: {sign}{balance}. "
        "This is a simplified analysis without the Stockfish engine."
    )
