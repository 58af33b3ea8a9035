# Path: scripts/search_image.py
# Purpose: Simple CLI to find which registered account most likely appears in a photo.
# Layer: scripts.
# Details: Loads the query image, runs the search with progress output, and prints ranked accounts.

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from PIL import Image

from accountlens.config import AppSettings, configure_logging
from accountlens.core.factory import create_orchestrator
from accountlens.core.models import SearchProgress


def print_progress(progress: SearchProgress) -> None:
    print(f"[{progress.percent:3d}%] {progress.status.value}: {progress.message}")


async def run(args: argparse.Namespace) -> None:
    settings = AppSettings.from_file(args.config) if args.config else AppSettings.from_env()
    configure_logging(settings.log_level)

    orchestrator = create_orchestrator(settings)
    try:
        with Image.open(args.image) as image:
            image.load()
            candidates = await orchestrator.search(image, context_tag=args.context, on_progress=print_progress)
    finally:
        orchestrator.index.close()

    if not candidates:
        print("No candidates found.")
        return

    for rank, candidate in enumerate(candidates[: args.limit], start=1):
        scores = candidate.scores
        print(
            f"{rank:2d}. {candidate.account_name} ({candidate.account_handle}) total={candidate.total_score:.3f} "
            f"embedding={scores.embedding:.3f} hash={scores.hash:.3f} metadata={scores.metadata:.2f} "
            f"frequency={scores.frequency:.3f} matched={len(candidate.matched_images)}/{candidate.image_count}"
        )


def main() -> None:
    """Execute a search from the command line."""

    parser = argparse.ArgumentParser(description="Find the account shown in a photo")
    parser.add_argument("image", type=Path, help="Query image")
    parser.add_argument("--context", default=None, help="Optional context tag such as an event name")
    parser.add_argument("--limit", type=int, default=10, help="Number of accounts to print")
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file")
    args = parser.parse_args()

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
