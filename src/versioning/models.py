"""Data models for version resolution."""

from dataclasses import dataclass
from enum import Enum


class ResolutionMode(Enum):
    """Resolution strategy derived from the spec."""
    EXACT = "exact"
    RANGE = "range"
    LATEST = "latest"


@dataclass(frozen=True)
class VersionSpec:
    """Normalized representation of a version spec and derived behavior flags."""
    raw: str
    mode: ResolutionMode
    include_prerelease: bool

    @property
    def range_expression(self) -> str:
        """Range handed to the matcher; "latest" means any version."""
        return "*" if self.mode == ResolutionMode.LATEST else self.raw
