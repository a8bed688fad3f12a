# main.py

import argparse
import asyncio
import sys
from pathlib import Path

from problem_finder.config import DATA_DIRECTORY, MAX_MATRIX_BYTES
from problem_finder.domain.models import Platform
from problem_finder.application.indexing_service import IndexingService
from problem_finder.application.search_service import ProblemSearchService
from problem_finder.infrastructure.artifact_store import PlatformArtifactStore
from problem_finder.interface.cli import (
    ask_continue,
    display_analysis,
    display_error,
    display_results,
    display_statuses,
    display_training_stats,
    display_welcome_banner,
    prompt_for_query,
)


PLATFORM_CHOICES = [platform.value for platform in Platform]


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)

    if args.command == "index":
        return _run_index(args)

    search_service = ProblemSearchService.from_data_directory(args.data_dir, MAX_MATRIX_BYTES)

    if args.command == "search":
        platform = Platform(args.platform) if args.platform else None
        results = asyncio.run(search_service.search(args.query, platform=platform, limit=args.limit))
        display_results(args.query, results, limit=args.limit)
        return 0

    if args.command == "status":
        display_statuses(asyncio.run(_load_statuses(search_service)))
        return 0

    if args.command == "analyze":
        service = search_service.get_platform(Platform(args.platform))
        display_analysis(asyncio.run(service.analyze_query(args.query)))
        return 0

    return _interactive(search_service)


def _run_index(args) -> int:
    """Offline pipeline: clean the raw table, fit TF-IDF, persist artifacts."""
    failures = 0
    for value in args.platform or [Platform.CODEFORCES.value]:
        platform = Platform(value)
        store = PlatformArtifactStore(Path(args.data_dir) / platform.value, MAX_MATRIX_BYTES)
        result = IndexingService(platform.display_name, store).run(clean=not args.skip_cleaning)

        if result.success:
            display_training_stats(platform.display_name, result.steps["tfidf"].stats)
            print(f"[Main] {platform.display_name} done in {result.total_seconds:.2f}s")
        else:
            failures += 1
            display_error(f"{platform.display_name}: {result.error}")

    return 1 if failures else 0


async def _load_statuses(search_service: ProblemSearchService):
    await search_service.warm_up()
    return await search_service.get_statuses()


def _interactive(search_service: ProblemSearchService) -> int:
    display_welcome_banner()
    display_statuses(asyncio.run(_load_statuses(search_service)))

    while True:
        query = prompt_for_query()
        results = asyncio.run(search_service.search(query))
        display_results(query, results)

        if not ask_continue():
            break
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="problem-finder",
        description="Keyword search over competitive-programming problem sets.",
    )
    parser.add_argument("--data-dir", default=DATA_DIRECTORY, help="Root of the per-platform data folders")
    commands = parser.add_subparsers(dest="command")

    index = commands.add_parser("index", help="Build the TF-IDF index from problems.csv")
    index.add_argument("--platform", action="append", choices=PLATFORM_CHOICES,
                       help="Platform to index (repeatable, default: codeforce)")
    index.add_argument("--skip-cleaning", action="store_true",
                       help="Train on the existing problem.csv without re-cleaning")

    search = commands.add_parser("search", help="Run one query and print the ranked problems")
    search.add_argument("query")
    search.add_argument("--platform", choices=PLATFORM_CHOICES)
    search.add_argument("-n", "--limit", type=int, default=10, help="Max results (<= 0 for all)")

    commands.add_parser("status", help="Show per-platform readiness")

    analyze = commands.add_parser("analyze", help="Similarity diagnostics for a query")
    analyze.add_argument("query")
    analyze.add_argument("--platform", choices=PLATFORM_CHOICES, default=Platform.CODEFORCES.value)

    return parser


if __name__ == "__main__":
    sys.exit(main())
