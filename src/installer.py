"""Artifact installer: reuse a cached copy or fetch and unpack a release."""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import semantic_version

from archive import ensure_extension, extract_tar, extract_zip
from common.http_client import download_file
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from constants import Constants
from errors import ExtractionError, UnsupportedVersionError
from platforms import (
    Architecture,
    Platform,
    detect_architecture,
    detect_platform,
    resolve_artifact,
)
from toolcache import ToolCache

logger = logging.getLogger(__name__)

Downloader = Callable[[str], Union[str, Path]]


@dataclass
class InstallResult:
    """Outcome of one install."""

    path: Path
    version: str
    cache_hit: bool


def check_minimum_version(version: str) -> semantic_version.Version:
    """Reject versions that are malformed or older than the first prebuilt release."""
    try:
        parsed = semantic_version.Version(version)
    except ValueError:
        raise UnsupportedVersionError(
            f"Version must be a valid semantic version, was {version}"
        ) from None
    if parsed < semantic_version.Version(Constants.MIN_VERSION):
        raise UnsupportedVersionError(
            f"Version must be >= {Constants.MIN_VERSION}, was {version}"
        )
    return parsed


class ArtifactInstaller:
    """Install one exact version of the tool into the tool cache."""

    def __init__(
        self,
        cache: ToolCache,
        *,
        platform: Optional[Platform] = None,
        arch: Optional[Architecture] = None,
        web_base: Optional[str] = None,
        repository: str = Constants.REPOSITORY,
        downloader: Optional[Downloader] = None,
        temp_dir: Optional[Union[str, Path]] = None,
    ):
        self.cache = cache
        self.platform = platform
        self.arch = arch
        self.web_base = web_base
        self.repository = repository
        self.temp_dir = temp_dir
        self.downloader = downloader or (lambda url: download_file(url, self.temp_dir))

    def install(self, version: str) -> InstallResult:
        """Return the installed directory for ``version``.

        Raises:
            UnsupportedVersionError: If ``version`` is below the floor.
            UnsupportedPlatformError: If no archive exists for this host.
            DownloadError: If the archive cannot be fetched.
            ExtractionError: If the archive cannot be unpacked.
            ToolCacheError: If the result cannot be cached.
        """
        check_minimum_version(version)

        found = self.cache.find(Constants.TOOL_NAME, version)
        if found:
            logger.info("%s %s retrieved from cache: %s", Constants.DISPLAY_NAME, version, found)
            return InstallResult(path=found, version=version, cache_hit=True)

        extracted = self.download(version)
        cached = self.cache.cache_dir(extracted, Constants.TOOL_NAME, version)
        logger.info("%s v%s added to cache: %s", Constants.DISPLAY_NAME, version, cached)
        return InstallResult(path=cached, version=version, cache_hit=False)

    def _extract_dir(self) -> Optional[Path]:
        if not self.temp_dir:
            return None
        base = Path(self.temp_dir)
        base.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(dir=base))

    def download(self, version: str) -> Path:
        """Fetch and unpack the archive, returning the directory holding the binary."""
        logger.debug("Fetching %s %s", Constants.DISPLAY_NAME, version)

        platform = self.platform or detect_platform()
        logger.debug("Detected platform: %s", platform.value)
        arch = self.arch or detect_architecture()
        logger.debug("Detected architecture: %s", arch.value)

        artifact = resolve_artifact(platform, arch)
        logger.debug("Determined archive target: %s", artifact.target)
        logger.debug("Determined archive extension: %s", artifact.extension)

        url = artifact.download_url(version, self.web_base, self.repository)
        with Timer() as t:
            archive = Path(self.downloader(url))
        if is_debug_enabled(logger):
            logger.debug(
                "Downloaded archive: %s",
                archive,
                extra=extra_context(
                    event="download",
                    component="installer",
                    action="download",
                    target=safe_url(url),
                    duration_ms=t.duration_ms(),
                )
            )

        archive = ensure_extension(archive, artifact.extension)
        dest = self._extract_dir()
        if artifact.is_zip:
            extracted = extract_zip(archive, dest)
        else:
            extracted = extract_tar(archive, dest, compression="gz")
        logger.debug("Extracted %s %s to %s", Constants.DISPLAY_NAME, version, extracted)

        # Windows archives unpack the binary at the root.
        if platform != Platform.WINDOWS:
            extracted = extracted / artifact.directory
            if not extracted.is_dir():
                raise ExtractionError(
                    f"Archive {artifact.filename} does not contain directory {artifact.directory}"
                )
        return extracted
