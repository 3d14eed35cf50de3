"""
Exception hierarchy for engine orchestration and analysis.

Engine failures are split by how callers are expected to react:
    - EngineUnavailable: the process is gone or never came up. Analysis
      code recovers from this locally with a material-only estimate.
    - EngineNotReady: a search was issued on a client that was never
      initialized or has been terminated. Fatal for that call.
    - EngineBusy: a non-blocking search found the client occupied.

Input errors (InvalidGameRecord, InvalidPosition) are definitive and are
reported as such instead of being degraded.
"""


class ChessAnalysisError(Exception):
    """Base class for all errors raised by chess_analysis."""


class EngineError(ChessAnalysisError):
    """Base class for engine process failures."""


class EngineUnavailable(EngineError):
    """Engine process could not be started, answered too late, or died."""


class EngineNotReady(EngineError):
    """Search attempted on a client that is not in the READY state."""


class EngineBusy(EngineError):
    """Another search currently owns the engine."""


class InvalidGameRecord(ChessAnalysisError, ValueError):
    """PGN text or move list could not be parsed or replayed."""


class InvalidPosition(ChessAnalysisError, ValueError):
    """FEN string does not describe a valid position."""
