#!/usr/bin/env python3
"""
CLI tool for analyzing positions and games with Stockfish.

Usage:
    python tools/analyze_games.py position \\
        "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3" \\
        --depth 18

    python tools/analyze_games.py game data/my_games.pgn \\
        --max-games 5 --output-report reports/

    python tools/analyze_games.py compare \\
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1" \\
        --versions 17 16
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_analysis.analysis.config import AnalysisConfig
from chess_analysis.analysis.summary import summarize_player
from chess_analysis.analyst import ChessAnalyst
from chess_analysis.data.records import PGNParser
from chess_analysis.engine.config import DEFAULT_VERSION, EngineConfig, get_version_info
from chess_analysis.report.markdown import player_stats_to_markdown, report_to_markdown


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_analyst(args) -> ChessAnalyst:
    engine_config = EngineConfig(
        default_path=args.stockfish_path,
        threads=args.threads,
        hash_mb=args.hash,
    )
    analysis_config = AnalysisConfig(
        depth=args.depth,
        game_depth=args.depth,
        version=args.version,
    )
    return ChessAnalyst(engine_config=engine_config, analysis_config=analysis_config)


def analyze_position(args):
    """Print the suggested move for one FEN."""
    with build_analyst(args) as analyst:
        suggestion = analyst.analyze_position(args.fen, depth=args.depth)

    print(f"Best move:   {suggestion.move or '-'}")
    print(f"Evaluation:  {suggestion.evaluation:+.2f}")
    print(f"Confidence:  {suggestion.confidence:.2f}")
    if suggestion.fallback:
        print("Engine:      unavailable (material estimate)")
    print(f"\n{suggestion.reasoning}")

    if suggestion.alternatives:
        print("\nAlternatives:")
        for alt in suggestion.alternatives:
            print(f"  {alt.move:<8} {alt.evaluation:+.2f}  {alt.reasoning}")


def analyze_games(args):
    """Analyze every game in a PGN file and print or write reports."""
    pgn_path = Path(args.pgn)
    if not pgn_path.exists():
        print(f"Error: PGN file not found: {pgn_path}")
        sys.exit(1)

    output_dir = Path(args.output_report) if args.output_report else None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    parser = PGNParser(min_elo=args.min_elo, max_games=args.max_games)
    records = list(parser.parse_file(pgn_path))
    if not records:
        print(f"No games found in {pgn_path}")
        return

    with build_analyst(args) as analyst:
        reports = []
        for index, record in enumerate(records, start=1):
            title = (
                f"{record.metadata.get('White', '?')} vs "
                f"{record.metadata.get('Black', '?')}"
            )
            with tqdm(desc=f"Game {index}/{len(records)}", unit="ply", leave=False) as bar:

                def progress(done, total):
                    bar.total = total
                    bar.update(done - bar.n)

                report = analyst.analyze_record(record, progress=progress)
            reports.append(report)

            markdown = report_to_markdown(report, title=title)
            if output_dir is not None:
                report_path = output_dir / f"game_{index:03d}.md"
                report_path.write_text(markdown)
                print(f"Wrote {report_path}")
            else:
                print(markdown)
                print()

        if len(reports) > 1:
            print(player_stats_to_markdown(summarize_player(reports), username=args.player or "Player"))


def compare_versions(args):
    """Search one position with several engine versions."""
    with build_analyst(args) as analyst:
        results = analyst.compare_versions(args.fen, args.versions, depth=args.depth)

    print(f"{'Version':<12} {'Elo':>6} {'Move':<8} {'Eval':>8} {'Depth':>6} {'Nodes':>12}")
    for version, result in results.items():
        info = get_version_info(version)
        elo = str(info.elo) if info else "?"
        print(
            f"{version:<12} {elo:>6} {result.best_move or '-':<8} "
            f"{result.evaluation:>+8.2f} {result.depth:>6} {result.nodes:>12,}"
        )


def add_engine_arguments(parser: argparse.ArgumentParser, depth: int):
    parser.add_argument(
        "--stockfish-path",
        type=str,
        default=None,
        help="Path to Stockfish binary (default: auto-detect)",
    )
    parser.add_argument(
        "--version",
        type=str,
        default=DEFAULT_VERSION,
        help="Stockfish version to use",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=depth,
        help="Search depth",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=4,
        help="Engine threads",
    )
    parser.add_argument(
        "--hash",
        type=int,
        default=256,
        help="Engine hash size in MB",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Analyze chess positions and games with Stockfish",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    pos_parser = subparsers.add_parser("position", help="Suggest a move for a FEN")
    pos_parser.add_argument("fen", help="Position in FEN notation")
    add_engine_arguments(pos_parser, depth=20)

    game_parser = subparsers.add_parser("game", help="Analyze games from a PGN file")
    game_parser.add_argument("pgn", help="PGN file with one or more games")
    game_parser.add_argument(
        "--max-games",
        type=int,
        default=None,
        help="Maximum games to analyze (default: all)",
    )
    game_parser.add_argument(
        "--min-elo",
        type=int,
        default=None,
        help="Skip games where either player is rated below this",
    )
    game_parser.add_argument(
        "--player",
        type=str,
        default=None,
        help="Player name for the multi-game summary",
    )
    game_parser.add_argument(
        "--output-report",
        help="Directory for markdown reports (default: print to stdout)",
    )
    add_engine_arguments(game_parser, depth=18)

    cmp_parser = subparsers.add_parser("compare", help="Compare engine versions on a FEN")
    cmp_parser.add_argument("fen", help="Position in FEN notation")
    cmp_parser.add_argument(
        "--versions",
        nargs="+",
        default=["17", "16", "15"],
        help="Versions to compare",
    )
    add_engine_arguments(cmp_parser, depth=20)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    setup_logging(verbose=args.verbose)

    try:
        if args.command == "position":
            analyze_position(args)
        elif args.command == "game":
            analyze_games(args)
        elif args.command == "compare":
            compare_versions(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError: {e}")
        if hasattr(args, "verbose") and args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
