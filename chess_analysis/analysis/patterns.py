"""
Tactical and positional pattern catalogue with light-weight detection.

Detection only looks one move ahead for the side to move:
    - Fork: a knight move that attacks two or more valuable enemy pieces
    - Pin: a bishop, rook or queen move that creates a new absolute pin

The remaining catalogue entries are used for descriptions only.
"""

from dataclasses import dataclass
from typing import Dict, List, Set

import chess

PIECE_VALUES = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0,
}

OPENING_PLY_LIMIT = 10
MIDDLEGAME_PLY_LIMIT = 30


@dataclass(frozen=True)
class Pattern:
    name: str
    type: str
    description: str
    difficulty: str


PATTERNS: Dict[str, Pattern] = {
    p.name: p
    for p in [
        Pattern("Fork", "tactical",
                "A piece attacks two or more enemy pieces simultaneously", "beginner"),
        Pattern("Pin", "tactical",
                "A piece attacks an enemy piece that cannot move without exposing "
                "a more valuable piece", "intermediate"),
        Pattern("Skewer", "tactical",
                "A piece attacks two enemy pieces on the same line, forcing the more "
                "valuable piece to move", "intermediate"),
        Pattern("Discovered Attack", "tactical",
                "Moving a piece reveals an attack from another piece behind it", "advanced"),
        Pattern("Zugzwang", "positional",
                "A player is forced to make a move that worsens their position", "advanced"),
        Pattern("Opposition", "endgame",
                "Kings face each other with one square between, giving the player "
                "to move an advantage", "intermediate"),
        Pattern("Lucena Position", "endgame",
                "Rook and pawn vs rook endgame winning technique", "master"),
        Pattern("Philidor Position", "endgame",
                "Rook and pawn vs rook endgame drawing technique", "master"),
    ]
}


def _is_fork(board: chess.Board, move: chess.Move) -> bool:
    # Called with the move already pushed; the forking side is not to move
    enemy = board.turn
    targets = 0
    for square in board.attacks(move.to_square):
        piece = board.piece_at(square)
        if piece is None or piece.color != enemy:
            continue
        if piece.piece_type == chess.KING or PIECE_VALUES[piece.piece_type] >= 3:
            targets += 1
    return targets >= 2


def _pinned_squares(board: chess.Board, color: chess.Color) -> Set[chess.Square]:
    return {
        square
        for square in board.pieces(chess.PAWN, color)
        | board.pieces(chess.KNIGHT, color)
        | board.pieces(chess.BISHOP, color)
        | board.pieces(chess.ROOK, color)
        | board.pieces(chess.QUEEN, color)
        if board.is_pinned(color, square)
    }


def detect_patterns(board: chess.Board) -> List[str]:
    """
    Find patterns available to the side to move.

    Args:
        board: Position to inspect (left unchanged)

    Returns:
        Pattern names in catalogue order, without duplicates
    """
    found = set()
    enemy = not board.turn
    pinned_before = _pinned_squares(board, enemy)
    work = board.copy(stack=False)

    for move in list(work.legal_moves):
        piece_type = work.piece_type_at(move.from_square)
        if piece_type not in (chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN):
            continue

        work.push(move)
        if piece_type == chess.KNIGHT:
            if _is_fork(work, move):
                found.add("Fork")
        elif _pinned_squares(work, enemy) - pinned_before - {move.to_square}:
            found.add("Pin")
        work.pop()

        if len(found) == 2:
            break

    return [name for name in PATTERNS if name in found]


def plies_played(board: chess.Board) -> int:
    """Plies since the start of the game according to the FEN move counters."""
    return (board.fullmove_number - 1) * 2 + (0 if board.turn == chess.WHITE else 1)


def game_phase(board: chess.Board) -> str:
    """Coarse phase from the move number: opening, middlegame or endgame."""
    plies = plies_played(board)
    if plies < OPENING_PLY_LIMIT:
        return "opening"
    if plies < MIDDLEGAME_PLY_LIMIT:
        return "middlegame"
    return "endgame"


def material_count(board: chess.Board, color: chess.Color) -> int:
    """Sum of piece values for one side (pawn 1, minor 3, rook 5, queen 9)."""
    return sum(
        len(board.pieces(piece_type, color)) * value
        for piece_type, value in PIECE_VALUES.items()
    )


def material_balance(board: chess.Board) -> int:
    """White material minus Black material."""
    return material_count(board, chess.WHITE) - material_count(board, chess.BLACK)
