# Path: scripts/register_images.py
# Purpose: CLI tool to register a folder of images under one social-media account.
# Layer: scripts.
# Details: Demonstrates how to wire scanning, embedding, hashing, and the record store together.

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from accountlens.config import AppSettings, configure_logging
from accountlens.core.factory import create_orchestrator
from accountlens.core.indexing import BatchRegistrar, ImageScanner


async def run(args: argparse.Namespace) -> None:
    settings = AppSettings.from_file(args.config) if args.config else AppSettings.from_env()
    configure_logging(settings.log_level)

    images = ImageScanner(args.folder, recursive=not args.no_recursive).scan()
    orchestrator = create_orchestrator(settings)
    try:
        registrar = BatchRegistrar(orchestrator)
        result = await registrar.register_files(images, args.name, args.handle, context_tag=args.context)
        stats = await orchestrator.stats()
    finally:
        orchestrator.index.close()

    print(f"Registered {result.success} of {len(images)} images for {args.handle} ({result.failed} failed)")
    for failure in result.errors:
        print(f"  failed: {failure.path}: {failure.error}")
    print(f"Index now holds {stats.total_images} images across {stats.unique_account_count} accounts")


def main() -> None:
    """Register every image in a folder for one account."""

    parser = argparse.ArgumentParser(description="Register images for AccountLens")
    parser.add_argument("folder", type=Path, help="Folder containing images of the account")
    parser.add_argument("--name", required=True, help="Display name of the account")
    parser.add_argument("--handle", required=True, help="Account handle, e.g. @someone")
    parser.add_argument("--context", default=None, help="Optional context tag such as an event name")
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file")
    parser.add_argument("--no-recursive", action="store_true", help="Do not descend into subfolders")
    args = parser.parse_args()

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
