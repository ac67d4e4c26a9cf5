#!/usr/bin/env python3
"""Movie Recommendation Assistant CLI."""

import argparse
import asyncio
import json
import logging
import sys
from config.settings import Settings
from orchestrator import MovieRecommendationOrchestrator
from streaming.category_stream import format_sse_event


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Movie Recommendation Assistant - multi-agent movie picks and category streams"
    )
    parser.add_argument(
        "--catalog-source",
        type=str,
        choices=["memory", "csv", "api"],
        default="memory",
        help="Where to read the movie catalog from (default: memory)"
    )
    parser.add_argument(
        "--csv-path",
        type=str,
        help="Path to catalog CSV file (with --catalog-source csv)"
    )
    parser.add_argument(
        "--api-url",
        type=str,
        help="Catalog API base URL (with --catalog-source api)"
    )
    parser.add_argument(
        "--provider",
        type=str,
        choices=["openai", "anthropic"],
        default="openai",
        help="LLM provider for evaluators (default: openai)"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    recommend = subparsers.add_parser("recommend", help="Recommend movies for a viewer age")
    recommend.add_argument(
        "--age",
        "-a",
        type=int,
        required=True,
        help="Viewer age"
    )

    stream = subparsers.add_parser("stream", help="Stream a category, best rated first")
    stream.add_argument(
        "--category",
        "-c",
        type=str,
        required=True,
        help="Category to stream (case-insensitive)"
    )
    stream.add_argument(
        "--limit",
        type=int,
        help="Stop after this many movies"
    )
    stream.add_argument(
        "--sse",
        action="store_true",
        help="Print server-sent event frames instead of JSON lines"
    )

    return parser


async def run_stream(
    orchestrator: MovieRecommendationOrchestrator,
    category: str,
    limit=None,
    sse: bool = False
) -> int:
    """Print a category stream; returns the number of movies printed."""
    cancel = asyncio.Event()
    count = 0
    async with orchestrator.stream_category(category, cancel=cancel) as stream:
        async for movie in stream:
            if sse:
                print(format_sse_event(movie), end="", flush=True)
            else:
                print(movie.model_dump_json(), flush=True)
            count += 1
            if limit is not None and count >= limit:
                cancel.set()

    if stream.error is not None:
        print(f"Stream ended early: {stream.error}", file=sys.stderr)
    return count


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    settings_kwargs = {
        "catalog_source": args.catalog_source,
        "llm_provider": args.provider,
        "verbose": args.verbose,
    }
    if args.csv_path:
        settings_kwargs["catalog_csv_path"] = args.csv_path
    if args.api_url:
        settings_kwargs["catalog_api_url"] = args.api_url

    try:
        orchestrator = MovieRecommendationOrchestrator(settings=Settings(**settings_kwargs))

        if args.command == "recommend":
            result = orchestrator.recommend(args.age)
            print("\n" + "="*60)
            print("RECOMMENDATIONS")
            print("="*60 + "\n")
            print(result.reasoning)
            if args.verbose:
                print(json.dumps(result.model_dump(mode="json"), indent=2))
        else:
            asyncio.run(run_stream(orchestrator, args.category, args.limit, args.sse))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
