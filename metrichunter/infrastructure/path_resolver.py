"""Filesystem layout for job files, reports and cloned repositories."""
import os
from pathlib import Path
from typing import Union


# Category folders under each language directory
SOURCE_MONITOR_DIR = "SourceMonitor"
REPORTS_DIR = "Reports"
REPOSITORIES_DIR = "Repositories"


class PathResolver:
    """Builds deterministic paths scoped by language.

    Every path has the shape <base_dir>/<language>/<segment>/... so
    different languages never share a working directory.
    """

    def __init__(self, base_dir: Union[str, Path] = "."):
        """Initialize path resolver.

        Args:
            base_dir: Root directory all paths are built under
        """
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def build_path(self, language: str, *segments: str) -> Path:
        """Build a path without touching the filesystem.

        Segments may contain forward slashes (e.g. a repository full name),
        they are split into separate path components.
        """
        parts = []
        for segment in segments:
            parts.extend(part for part in str(segment).split("/") if part)
        return self._base_dir.joinpath(language, *parts)

    def build_and_create_path(self, language: str, *segments: str) -> Path:
        """Build a directory path and create the directory chain.

        Raises:
            OSError: If the directories cannot be created
        """
        path = self.build_path(language, *segments)
        os.makedirs(path, exist_ok=True)
        return path
