"""
Game Analysis

Replays a game, searches the position before every move and classifies
each played move by how much evaluation it gave away.

Evaluation swing of ply i (pawns, mover's point of view):

    best_i   = eval(position before move i)
    played_i = -eval(position before move i + 1)
    swing_i  = max(0, best_i - played_i)

The position after the last move is searched too, unless the game is
over: delivering mate costs nothing, any other finished game counts as 0.

One PositionAnalysis is produced per ply, in ply order. If the engine is
unavailable the game is still replayed and a neutral, degraded report is
returned.
"""

import io
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import chess
import chess.pgn

from chess_analysis.analysis.classifier import classify_move
from chess_analysis.analysis.config import AnalysisConfig
from chess_analysis.analysis.position import PositionAnalyzer
from chess_analysis.analysis.summary import build_report, degraded_report
from chess_analysis.data.records import GameRecord
from chess_analysis.engine.protocol import SearchResult
from chess_analysis.errors import EngineUnavailable, InvalidGameRecord
from chess_analysis.models import GameAnalysisReport, PositionAnalysis

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def load_pgn(pgn_text: str) -> Tuple[chess.Board, List[chess.Move], Dict[str, str]]:
    """
    Parse PGN text into a starting board, the mainline moves and headers.

    Raises:
        InvalidGameRecord: If no game is found or the movetext has errors
    """
    try:
        game = chess.pgn.read_game(io.StringIO(pgn_text))
    except ValueError as e:
        raise InvalidGameRecord(f"Invalid PGN: {e}") from e

    if game is None:
        raise InvalidGameRecord("Invalid PGN: no game found")
    if game.errors:
        raise InvalidGameRecord(f"Invalid PGN: {game.errors[0]}")

    return game.board(), list(game.mainline_moves()), dict(game.headers)


def parse_moves(moves: Sequence[str], board: chess.Board) -> List[chess.Move]:
    """
    Resolve SAN or UCI strings against a board, in order.

    Raises:
        InvalidGameRecord: If a move cannot be parsed or is illegal
    """
    work = board.copy(stack=False)
    parsed = []
    for index, text in enumerate(moves):
        try:
            move = work.parse_san(text)
        except ValueError:
            try:
                move = work.parse_uci(text)
            except ValueError as e:
                raise InvalidGameRecord(
                    f"Invalid move '{text}' at ply {index}: {e}"
                ) from e
        work.push(move)
        parsed.append(move)
    return parsed


class GameAnalyzer:
    """
    Analyze complete games move by move.

    Attributes:
        position_analyzer: Runs the per-ply searches
        config: Depth and time limits per ply
    """

    def __init__(
        self,
        position_analyzer: PositionAnalyzer,
        config: Optional[AnalysisConfig] = None,
    ):
        self.position_analyzer = position_analyzer
        self.config = config or position_analyzer.config

    def analyze_game(
        self,
        pgn_text: str,
        version: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> GameAnalysisReport:
        """
        Analyze a game given as PGN text.

        Raises:
            InvalidGameRecord: If the PGN cannot be parsed
        """
        board, moves, headers = load_pgn(pgn_text)
        return self._analyze(board, moves, headers, version, progress)

    def analyze_moves(
        self,
        moves: Sequence[str],
        version: Optional[str] = None,
        starting_fen: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> GameAnalysisReport:
        """
        Analyze a game given as a list of SAN or UCI moves.

        Raises:
            InvalidGameRecord: If the starting FEN or a move is invalid
        """
        try:
            board = chess.Board(starting_fen) if starting_fen else chess.Board()
        except ValueError as e:
            raise InvalidGameRecord(f"Invalid starting FEN: {e}") from e

        headers = {}
        if starting_fen:
            headers = {"SetUp": "1", "FEN": starting_fen}
        return self._analyze(board, parse_moves(moves, board), headers, version, progress)

    def analyze_record(
        self,
        record: GameRecord,
        version: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> GameAnalysisReport:
        """Analyze a game fetched from an archive, keeping its metadata."""
        board, moves, headers = load_pgn(record.pgn_text)
        metadata = {**headers, **record.metadata}
        return self._analyze(board, moves, metadata, version, progress)

    def _analyze(
        self,
        board: chess.Board,
        moves: List[chess.Move],
        metadata: Dict[str, str],
        version: Optional[str],
        progress: Optional[ProgressCallback],
    ) -> GameAnalysisReport:
        version = version or self.config.version
        white_first = board.turn == chess.WHITE

        # Replay first so bad records fail before any engine work
        plies: List[Tuple[str, str, chess.Move]] = []
        work = board.copy(stack=False)
        for move in moves:
            plies.append((work.fen(), work.san(move), move))
            work.push(move)
        final = work

        result = metadata.get("Result", "*")
        if result == "*":
            result = final.result()

        logger.info(f"Analyzing game: {len(plies)} plies with Stockfish {version}")

        try:
            results = self._search_plies(plies, final, version, progress)
        except EngineUnavailable as e:
            logger.warning(f"Stockfish game analysis failed, using fallback: {e}")
            return degraded_report(self._placeholder_analyses(plies), metadata, result)

        analyses = self._classify(plies, results, final)
        report = build_report(analyses, metadata, result, white_moves_first=white_first)
        logger.info(
            f"Game analyzed: white {report.summary.white_accuracy:.1f}%, "
            f"black {report.summary.black_accuracy:.1f}%, "
            f"{report.summary.critical_moments} critical moment(s)"
        )
        return report

    def _search_plies(
        self,
        plies: List[Tuple[str, str, chess.Move]],
        final: chess.Board,
        version: str,
        progress: Optional[ProgressCallback],
    ) -> List[Optional[SearchResult]]:
        """Search every pre-move position plus the final one (None if game over)."""
        results: List[Optional[SearchResult]] = []
        total = len(plies)

        for index, (fen, san, _) in enumerate(plies):
            results.append(self._search(fen, version))
            logger.debug(f"Ply {index} {san}: {results[-1].evaluation:+.2f}")
            if progress is not None:
                progress(index + 1, total)

        if plies and not final.is_game_over():
            results.append(self._search(final.fen(), version))
        else:
            results.append(None)

        return results

    def _search(self, fen: str, version: str) -> SearchResult:
        return self.position_analyzer.search(
            fen,
            version=version,
            depth=self.config.game_depth,
            time_limit_ms=self.config.game_time_limit_ms,
        )

    def _classify(
        self,
        plies: List[Tuple[str, str, chess.Move]],
        results: List[Optional[SearchResult]],
        final: chess.Board,
    ) -> List[PositionAnalysis]:
        analyses = []
        for index, (fen, san, _) in enumerate(plies):
            before = results[index]
            after = results[index + 1]

            if after is not None:
                played = -after.evaluation
            elif final.is_checkmate():
                played = before.evaluation
            else:
                played = 0.0

            swing = max(0.0, before.evaluation - played)
            analyses.append(
                PositionAnalysis(
                    ply=index,
                    fen=fen,
                    move=san,
                    results=(before,),
                    classification=classify_move(swing, index),
                    evaluation_swing=swing,
                )
            )
        return analyses

    @staticmethod
    def _placeholder_analyses(
        plies: List[Tuple[str, str, chess.Move]],
    ) -> List[PositionAnalysis]:
        return [
            PositionAnalysis(
                ply=index,
                fen=fen,
                move=san,
                results=(
                    SearchResult(
                        best_move=move.uci(),
                        evaluation=0.0,
                        depth=1,
                        nodes=1,
                        elapsed_ms=0,
                        pv=(move.uci(),),
                    ),
                ),
            )
            for index, (fen, san, move) in enumerate(plies)
        ]
