"""On-disk tool cache shared by steps of one job.

Layout follows the runner's hosted tool cache::

    <root>/<tool>/<version>/<arch>/           installed files
    <root>/<tool>/<version>/<arch>.complete   written once the copy finished

An entry without its marker is treated as absent, so an interrupted copy
is never reused.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Union

import semantic_version

from constants import Constants
from errors import ToolCacheError
from platforms import detect_architecture

logger = logging.getLogger(__name__)


def default_cache_root() -> Path:
    """Return ``RUNNER_TOOL_CACHE`` or a private directory under the temp dir."""
    configured = os.environ.get(Constants.ENV_RUNNER_TOOL_CACHE)
    if configured:
        return Path(configured)
    return Path(tempfile.gettempdir()) / "setup-shiroa" / "tool-cache"


def _clean_version(version: str) -> str:
    value = version.strip()
    if value.startswith(Constants.TAG_PREFIX):
        value = value[len(Constants.TAG_PREFIX):]
    try:
        return str(semantic_version.Version(value))
    except ValueError:
        return value


class ToolCache:
    """Key-value store from (tool, version) to an installed directory."""

    def __init__(self, root: Optional[Union[str, Path]] = None, arch: Optional[str] = None):
        self.root = Path(root) if root else default_cache_root()
        self.arch = arch or detect_architecture().value

    def _entry_dir(self, tool: str, version: str) -> Path:
        return self.root / tool / _clean_version(version) / self.arch

    @staticmethod
    def _marker(entry: Path) -> Path:
        return entry.with_name(f"{entry.name}.complete")

    def find(self, tool: str, version: str) -> Optional[Path]:
        """Return the cached directory, or None when not cached."""
        if not tool or not version:
            return None
        entry = self._entry_dir(tool, version)
        if entry.is_dir() and self._marker(entry).exists():
            logger.debug("Found tool in cache %s %s %s", tool, version, self.arch)
            return entry
        logger.debug("Tool not in cache %s %s %s", tool, version, self.arch)
        return None

    def find_all_versions(self, tool: str) -> List[str]:
        """List the versions of ``tool`` with a completed entry for this arch."""
        tool_dir = self.root / tool
        if not tool_dir.is_dir():
            return []
        versions = []
        for child in sorted(tool_dir.iterdir()):
            entry = child / self.arch
            if entry.is_dir() and self._marker(entry).exists():
                versions.append(child.name)
        return versions

    def cache_dir(self, source: Union[str, Path], tool: str, version: str) -> Path:
        """Copy ``source`` into the cache and return the cached path.

        Raises:
            ToolCacheError: If ``source`` is not a directory or the copy fails.
        """
        source_path = Path(source)
        if not source_path.is_dir():
            raise ToolCacheError(f"sourceDir is not a directory: {source_path}")

        entry = self._entry_dir(tool, version)
        marker = self._marker(entry)
        logger.debug("Caching tool %s %s %s", tool, version, self.arch)
        try:
            if marker.exists():
                marker.unlink()
            if entry.exists():
                shutil.rmtree(entry)
            shutil.copytree(source_path, entry, symlinks=True)
            marker.write_text("", encoding="utf-8")
        except OSError as exc:
            raise ToolCacheError(f"Failed to cache {tool} {version}: {exc}") from exc
        return entry
