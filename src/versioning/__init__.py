"""Version specifier parsing and release resolution."""

from .models import ResolutionMode, VersionSpec
from .parser import is_exact_version, parse_version_spec

__all__ = [
    "ResolutionMode",
    "VersionSpec",
    "is_exact_version",
    "parse_version_spec",
]
