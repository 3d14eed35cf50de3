"""
Chess Analysis

Position and game analysis driven by external UCI engines (Stockfish).

## Architecture

1. **engine**: Engine orchestration
   - EngineTransport: line channel to an engine process (swappable)
   - EngineClient: handshake, search loop, stop/timeout handling
   - EnginePool: one lazily initialized client per engine version

2. **analysis**: Turning evaluations into judgements
   - PositionAnalyzer: best move, candidate moves, confidence,
     material-only fallback when no engine is available
   - GameAnalyzer: per-ply searches, blunder/mistake/inaccuracy/best/
     brilliant labels, per-side accuracy, critical moments

3. **report**: Text output
   - Reasoning paragraphs for suggestions
   - Markdown game reports

4. **data**: Game records streamed from PGN files

## Quick Start

```python
import chess
from chess_analysis import ChessAnalyst

with ChessAnalyst() as analyst:
    suggestion = analyst.analyze_position(chess.STARTING_FEN, depth=12)
    print(suggestion.move, suggestion.confidence)
    print(suggestion.reasoning)
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__author__ = "Alix Muller"
__license__ = "MIT"

from chess_analysis.analyst import ChessAnalyst
from chess_analysis.errors import (
    ChessAnalysisError,
    EngineBusy,
    EngineNotReady,
    EngineUnavailable,
    InvalidGameRecord,
    InvalidPosition,
)

__all__ = [
    'ChessAnalyst',
    'ChessAnalysisError',
    'EngineBusy',
    'EngineNotReady',
    'EngineUnavailable',
    'InvalidGameRecord',
    'InvalidPosition',
]
