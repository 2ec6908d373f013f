"""Prerendered page lookup.

Pages generated ahead of time are served straight from disk (or, on
CloudFront, from the static origin) without invoking the application.
"""

import json
import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

logger = logging.getLogger(__name__)


class AssetReadFailure(OSError):
    """Raised when a known prerendered page cannot be read from disk."""

    pass


class PrerenderedFiles:
    """Set of prerendered pages plus the directory they live in."""

    def __init__(self, files: Iterable[str], directory: Union[str, Path] = "prerendered") -> None:
        """Initialize with the known relative paths.

        Args:
            files: Relative POSIX paths of prerendered pages
            directory: Directory the paths are relative to
        """
        self.files: FrozenSet[str] = frozenset(files)
        self.directory = Path(directory)

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "PrerenderedFiles":
        """Build the asset set by walking a directory.

        A missing directory yields an empty set.
        """
        root = Path(directory)
        if not root.is_dir():
            logger.info(f"No prerendered directory at {root}, serving everything dynamically")
            return cls([], root)

        files = [path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()]
        logger.info(f"Discovered {len(files)} prerendered files in {root}")
        return cls(files, root)

    @classmethod
    def from_manifest(
        cls, manifest_path: Union[str, Path], directory: Union[str, Path]
    ) -> "PrerenderedFiles":
        """Build the asset set from a JSON list of relative paths."""
        with open(manifest_path, "r", encoding="utf-8") as f:
            files = json.load(f)

        if not isinstance(files, list) or not all(isinstance(item, str) for item in files):
            raise ValueError(f"Prerendered manifest {manifest_path} must be a JSON list of strings")

        logger.info(f"Loaded {len(files)} prerendered files from {manifest_path}")
        return cls(files, directory)

    def resolve(self, uri: str) -> Optional[str]:
        """Map a request path to a prerendered file, if there is one.

        One leading and one trailing slash are stripped, then the candidates
        ``index.html`` (empty path), ``<path>``, ``<path>/index.html`` and
        ``<path>.html`` are tried in that order.

        Args:
            uri: Raw request path

        Returns:
            The matching relative file path, or None
        """
        sanitized = uri[1:] if uri.startswith("/") else uri
        sanitized = sanitized[:-1] if sanitized.endswith("/") else sanitized

        if sanitized == "":
            return "index.html" if "index.html" in self.files else None

        for candidate in (sanitized, f"{sanitized}/index.html", f"{sanitized}.html"):
            if candidate in self.files:
                return candidate

        return None

    def read(self, file_path: str) -> str:
        """Read a prerendered page as text.

        Raises:
            AssetReadFailure: If the file cannot be read
        """
        path = self.directory / file_path
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise AssetReadFailure(f"Failed to read prerendered file {path}: {e}") from e

    def __contains__(self, file_path: object) -> bool:
        return file_path in self.files

    def __len__(self) -> int:
        return len(self.files)
