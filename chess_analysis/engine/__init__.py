"""
Engine Orchestration

Drives external UCI engines (Stockfish) through a line protocol.

Key Components:
    - EngineTransport: swappable line channel (SubprocessTransport for pipes)
    - EngineClient: one engine process, handshake and search loop
    - EnginePool: one lazily created client per engine version

Data Flow:
    SearchRequest -> EngineClient.search() -> SearchResult
                     (position fen / go depth / info... / bestmove)
"""

from chess_analysis.engine.client import EngineClient
from chess_analysis.engine.config import (
    DEFAULT_VERSION,
    STOCKFISH_VERSIONS,
    EngineConfig,
    EngineVersion,
)
from chess_analysis.engine.pool import EnginePool
from chess_analysis.engine.protocol import (
    EngineState,
    SearchRequest,
    SearchResult,
    mate_score,
    parse_info_line,
)
from chess_analysis.engine.transport import EngineTransport, SubprocessTransport

__all__ = [
    'EngineClient',
    'EngineConfig',
    'EngineVersion',
    'EnginePool',
    'EngineState',
    'EngineTransport',
    'SubprocessTransport',
    'SearchRequest',
    'SearchResult',
    'DEFAULT_VERSION',
    'STOCKFISH_VERSIONS',
    'mate_score',
    'parse_info_line',
]
