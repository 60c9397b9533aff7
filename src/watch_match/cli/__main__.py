"""CLI entry point: python -m watch_match.cli {init-db,load-references,match}"""

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path

import structlog

from watch_match.config.settings import get_settings
from watch_match.db.engine import get_engine
from watch_match.db.session import get_session_factory
from watch_match.exceptions import WatchMatchError
from watch_match.library.repository import SqlReferenceLibrary, add_references
from watch_match.logging_config import configure_logging
from watch_match.matching.config import load_matching_config
from watch_match.matching.discrepancy import summarize_discrepancies
from watch_match.matching.schemas import ReferenceWatch, WatchDescription
from watch_match.models import Base
from watch_match.service.orchestrator import find_matches


async def run_init_db() -> None:
    """Create all tables that do not exist yet."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    structlog.get_logger().info("database_initialized")


async def run_load_references(path: Path) -> None:
    """Load a JSON list of reference records into the library."""
    data = json.loads(path.read_text(encoding="utf-8"))
    references = [ReferenceWatch.model_validate(item) for item in data]

    session_factory = get_session_factory()
    async with session_factory() as session, session.begin():
        count = await add_references(session, references)

    structlog.get_logger().info("references_loaded", path=str(path), count=count)


async def run_match(path: Path, session_id: str | None, config_path: Path) -> dict:
    """Match one description file and return a JSON-ready report."""
    description = WatchDescription.model_validate_json(path.read_text(encoding="utf-8"))
    config = load_matching_config(config_path)
    library = SqlReferenceLibrary(get_session_factory())

    outcome = await find_matches(description, library, config, session_id=session_id)

    report: dict = {
        "total_candidates_retrieved": outcome.total_candidates_retrieved,
        "total_candidates_accepted": outcome.total_candidates_accepted,
        "comparison_recorded": outcome.comparison_recorded,
        "matches": [
            {
                "reference_id": m.reference_watch.id,
                "brand": m.reference_watch.brand,
                "model_name": m.reference_watch.model_name,
                "reference_number": m.reference_watch.reference_number,
                "match_score": round(m.match_score, 2),
                "confidence_tier": m.confidence_tier,
                "component_scores": dataclasses.asdict(m.component_scores),
            }
            for m in outcome.matches
        ],
    }
    if outcome.best_match is not None:
        summary = summarize_discrepancies(outcome.best_match.discrepancies)
        report["best_match_discrepancies"] = dataclasses.asdict(summary)
    return report


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="watch_match.cli",
        description="Watch reference matching CLI",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create database tables")

    load_parser = subparsers.add_parser(
        "load-references", help="Load reference watches from a JSON list"
    )
    load_parser.add_argument("path", type=str, help="JSON file with reference records")

    match_parser = subparsers.add_parser(
        "match", help="Match a watch description JSON file against the library"
    )
    match_parser.add_argument("path", type=str, help="Watch description JSON file")
    match_parser.add_argument("--session-id", type=str, default=None)
    match_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Matching config YAML (default: WATCH_MATCH_MATCHING_CONFIG_PATH)",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)

    try:
        if args.command == "init-db":
            asyncio.run(run_init_db())
        elif args.command == "load-references":
            asyncio.run(run_load_references(Path(args.path)))
        elif args.command == "match":
            config_path = Path(args.config) if args.config else settings.matching_config_path
            report = asyncio.run(run_match(Path(args.path), args.session_id, config_path))
            print(json.dumps(report, indent=2, default=str))
    except WatchMatchError as e:
        structlog.get_logger().error("command_failed", command=args.command, error=str(e))
        sys.exit(2)


if __name__ == "__main__":
    main()
