"""Run the AI practice analysis from the command line and print the Markdown."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.database import SessionLocal, run_migrations
from app.logging_config import configure_logging
from app.models.schemas import AnalysisType
from app.services.ai_analyzer import PracticeAnalyzer
from app.services.completion_client import get_completion_client
from app.services.errors import PracticeAnalysisError
from app.services.practice_repository import PracticeRepository


logger = logging.getLogger("scripts.analyze_practice")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="AI analysis of recent guitar practice sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Strengths and experiments over the last 30 sessions
  python scripts/analyze_practice.py --types strengths experiments

  # Single-call analysis, also dumping the structured step
  python scripts/analyze_practice.py --quick --limit 20
  python scripts/analyze_practice.py --types patterns --show-data
        """,
    )
    parser.add_argument(
        "--types",
        nargs="+",
        choices=[t.value for t in AnalysisType],
        default=[AnalysisType.PATTERNS.value, AnalysisType.STRENGTHS.value],
        help="Analysis categories to request (default: patterns strengths)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of recent sessions to analyse (1-100)",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Use the single-step analysis over a summarised history",
    )
    parser.add_argument(
        "--show-data",
        action="store_true",
        help="Also print the structured data analysis (two-step mode only)",
    )
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    types = [AnalysisType(t) for t in args.types]
    db = SessionLocal()
    try:
        analyzer = PracticeAnalyzer(get_completion_client(), PracticeRepository(db))
        if args.quick:
            result = await analyzer.quick_analyze(types, args.limit)
            print(result["analysis"])
        else:
            result = await analyzer.analyze(types, args.limit)
            if args.show_data:
                print(json.dumps(result["dataAnalysis"], indent=2, ensure_ascii=False))
                print()
            print(result["insights"])
        logger.info("Analysed %d session(s)", result["sessionCount"])
        return 0
    except PracticeAnalysisError as exc:
        logger.error("❌ %s", exc.message)
        return 1
    finally:
        db.close()


def main() -> None:
    args = parse_args()

    configure_logging()
    settings = get_settings()

    if args.limit is not None and not 1 <= args.limit <= 100:
        logger.error("❌ --limit must be between 1 and 100")
        sys.exit(2)

    logger.info("🎸 Running practice analysis with %s", settings.anthropic_model)
    run_migrations()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
