"""
UCI Line Protocol

Data types and parsers for the text protocol spoken with the engine.

Outbound (one command per line):
    uci
    setoption name Threads value 4
    ucinewgame
    isready
    position fen <FEN>
    go depth <N>
    stop
    quit

Inbound:
    uciok / readyok               handshake acknowledgements
    info depth 12 nodes 48213 score cp 31 pv e2e4 e7e5 ...
    bestmove e2e4 [ponder e7e5]   terminal event of a search

Evaluation convention:
    Scores are in pawns from the perspective of the side to move.
    'score cp 31' becomes 0.31. Mate scores become large values so that
    shorter mates are more extreme:

        score mate 3   ->  10000 - 3  =  9997
        score mate -2  -> -10000 + 2  = -9998

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import chess

MATE_VALUE = 10000


class EngineState(Enum):
    """Lifecycle of an engine client."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    SEARCHING = "searching"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class SearchRequest:
    """A single search to run on one position."""

    fen: str
    depth_limit: int
    time_limit_ms: int


@dataclass(frozen=True)
class SearchResult:
    """Final snapshot of one search.

    evaluation is in pawns from the side to move's point of view.
    best_move is empty when the engine produced nothing usable.
    """

    best_move: str
    evaluation: float
    depth: int
    nodes: int
    elapsed_ms: int
    pv: Tuple[str, ...] = ()
    mate_in: Optional[int] = None

    @property
    def is_mate(self) -> bool:
        return self.mate_in is not None

    def white_evaluation(self, turn: chess.Color) -> float:
        """
        Convert the evaluation to the White-positive reporting convention.

        Args:
            turn: Side to move in the searched position

        Returns:
            Evaluation in pawns, positive when White is better
        """
        return self.evaluation if turn == chess.WHITE else -self.evaluation


@dataclass
class SearchAccumulator:
    """Mutable best-so-far state updated from progress events."""

    best_move: str = ""
    evaluation: float = 0.0
    depth: int = 0
    nodes: int = 0
    pv: List[str] = field(default_factory=list)
    mate_in: Optional[int] = None

    def snapshot(self, elapsed_ms: int) -> SearchResult:
        return SearchResult(
            best_move=self.best_move,
            evaluation=self.evaluation,
            depth=self.depth,
            nodes=self.nodes,
            elapsed_ms=elapsed_ms,
            pv=tuple(self.pv),
            mate_in=self.mate_in,
        )


def mate_score(mate_in: int) -> float:
    """
    Encode a mate distance as a pawn evaluation.

    Positive when the side to move mates. The offset keeps shorter
    mates more extreme than longer ones.

    Args:
        mate_in: Moves to mate as reported by 'score mate <n>'

    Returns:
        Evaluation in pawns
    """
    if mate_in > 0:
        return float(MATE_VALUE - mate_in)
    return float(-MATE_VALUE - mate_in)


def _parse_int(tokens: List[str], index: int) -> Optional[int]:
    if index >= len(tokens):
        return None
    try:
        return int(tokens[index])
    except ValueError:
        return None


def parse_info_line(line: str, acc: SearchAccumulator) -> None:
    """
    Update an accumulator from one 'info' line.

    Recognized fields: depth, nodes, score cp, score mate, pv.
    'pv' and 'string' consume the rest of the line. Anything else,
    including malformed numbers, is skipped.

    Args:
        line: Raw engine output line starting with 'info'
        acc: Accumulator to update in place
    """
    tokens = line.split()
    i = 1
    while i < len(tokens):
        token = tokens[i]

        if token == "depth":
            value = _parse_int(tokens, i + 1)
            if value is not None:
                acc.depth = value
            i += 2

        elif token == "nodes":
            value = _parse_int(tokens, i + 1)
            if value is not None:
                acc.nodes = value
            i += 2

        elif token == "score":
            kind = tokens[i + 1] if i + 1 < len(tokens) else ""
            value = _parse_int(tokens, i + 2)
            if value is not None:
                if kind == "cp":
                    acc.evaluation = value / 100
                    acc.mate_in = None
                elif kind == "mate":
                    acc.evaluation = mate_score(value)
                    acc.mate_in = value
            i += 3

        elif token == "pv":
            moves = tokens[i + 1:]
            if moves:
                acc.pv = moves
                acc.best_move = moves[0]
            break

        elif token == "string":
            break

        else:
            i += 1


def parse_bestmove(line: str) -> str:
    """
    Extract the move from a 'bestmove' line.

    Returns:
        UCI move string, or "" for 'bestmove (none)' or a bare 'bestmove'
    """
    tokens = line.split()
    if len(tokens) < 2 or tokens[1] == "(none)":
        return ""
    return tokens[1]
