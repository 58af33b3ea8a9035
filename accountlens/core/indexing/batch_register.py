# Path: accountlens/core/indexing/batch_register.py
# Purpose: Register many image files for one account in a single pass.
# Layer: core/indexing.
# Details: Loads files with Pillow, registers them through the orchestrator, and records per-file failures.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image
from tqdm import tqdm

from accountlens.core.errors import AccountLensError
from accountlens.core.search.orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class BatchFailure:
    path: Path
    error: str


@dataclass
class BatchResult:
    """Outcome of a batch registration run."""

    success: int = 0
    failed: int = 0
    record_ids: List[str] = field(default_factory=list)
    errors: List[BatchFailure] = field(default_factory=list)


class BatchRegistrar:
    """Register a set of image files under one account handle."""

    def __init__(self, orchestrator: SearchOrchestrator, show_progress: bool = True) -> None:
        self.orchestrator = orchestrator
        self.show_progress = show_progress

    async def register_files(
        self,
        paths: Iterable[Path],
        account_name: str,
        account_handle: str,
        context_tag: Optional[str] = None,
    ) -> BatchResult:
        """
        Fingerprint and register each file, continuing past files that fail.

        External calls:
        - accountlens/core/search/orchestrator.py::SearchOrchestrator.register - stores one image.
        """

        result = BatchResult()
        for path in tqdm(list(paths), desc="Registering images", unit="img", disable=not self.show_progress):
            try:
                with Image.open(path) as image:
                    image.load()
                    record_id = await self.orchestrator.register(
                        image,
                        account_name,
                        account_handle,
                        context_tag=context_tag,
                        image_url=path.resolve().as_uri(),
                    )
            except (OSError, ValueError, AccountLensError) as exc:
                logger.warning("Failed to register %s: %s", path, exc)
                result.failed += 1
                result.errors.append(BatchFailure(path=path, error=str(exc)))
                continue

            result.success += 1
            result.record_ids.append(record_id)

        logger.info(
            "Batch registration for %s: %d registered, %d failed", account_handle, result.success, result.failed
        )
        return result
