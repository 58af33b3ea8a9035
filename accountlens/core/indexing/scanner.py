# Path: accountlens/core/indexing/scanner.py
# Purpose: Scan folders and collect image file paths for registration.
# Layer: core/indexing.
# Details: Provides reusable filesystem scanning for batch registration jobs.

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}


class ImageScanner:
    """Scan filesystem paths for supported image files."""

    def __init__(self, root: Path, recursive: bool = True) -> None:
        self.root = root
        self.recursive = recursive

    def scan(self) -> List[Path]:
        """Return discovered image paths in a stable, sorted order."""

        return sorted(self._iter_image_files())

    def _iter_image_files(self) -> Iterable[Path]:
        """Yield image files under the root directory."""

        pattern = self.root.rglob("*") if self.recursive else self.root.glob("*")
        for path in pattern:
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield path
