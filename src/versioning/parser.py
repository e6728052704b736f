"""Parsing of user supplied version specifiers."""

import re

from constants import Constants
from .models import ResolutionMode, VersionSpec

# MAJOR.MINOR.PATCH with optional pre-release and build metadata.
_EXACT_VERSION_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


def is_exact_version(raw: str) -> bool:
    """Return True when ``raw`` names one version rather than a range."""
    return bool(_EXACT_VERSION_RE.match(raw.strip()))


def normalize_exact_version(raw: str) -> str:
    """Strip surrounding whitespace and a leading tag prefix."""
    value = raw.strip()
    if value.startswith(Constants.TAG_PREFIX):
        value = value[len(Constants.TAG_PREFIX):]
    return value


def parse_version_spec(raw: str, allow_prereleases: bool = False) -> VersionSpec:
    """Construct a VersionSpec from the ``shiroa-version`` input.

    An empty value is treated as "latest".
    """
    spec = (raw or "").strip()
    if not spec or spec.lower() == Constants.LATEST:
        return VersionSpec(raw=Constants.LATEST, mode=ResolutionMode.LATEST,
                           include_prerelease=allow_prereleases)
    if is_exact_version(spec):
        return VersionSpec(raw=normalize_exact_version(spec), mode=ResolutionMode.EXACT,
                           include_prerelease=allow_prereleases)
    return VersionSpec(raw=spec, mode=ResolutionMode.RANGE,
                       include_prerelease=allow_prereleases)
