"""Host platform detection and the prebuilt artifact naming tables."""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from constants import Constants
from errors import UnsupportedPlatformError


class Platform(Enum):
    """Operating systems with published archives."""

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"


class Architecture(Enum):
    """CPU architectures, named the way the tool cache names them."""

    ARM64 = "arm64"
    ARM = "arm"
    LOONG64 = "loong64"
    RISCV64 = "riscv64"
    X64 = "x64"


TARGETS: Dict[Tuple[Platform, Architecture], str] = {
    (Platform.LINUX, Architecture.ARM64): "aarch64-unknown-linux-musl",
    (Platform.LINUX, Architecture.ARM): "arm-unknown-linux-musleabihf",
    (Platform.LINUX, Architecture.LOONG64): "loongarch64-unknown-linux-musl",
    (Platform.LINUX, Architecture.RISCV64): "riscv64gc-unknown-linux-musl",
    (Platform.LINUX, Architecture.X64): "x86_64-unknown-linux-musl",
    (Platform.DARWIN, Architecture.ARM64): "aarch64-apple-darwin",
    (Platform.DARWIN, Architecture.X64): "x86_64-apple-darwin",
    (Platform.WINDOWS, Architecture.ARM64): "aarch64-pc-windows-msvc",
    (Platform.WINDOWS, Architecture.X64): "x86_64-pc-windows-msvc",
}

EXTENSIONS: Dict[Platform, str] = {
    Platform.LINUX: "tar.gz",
    Platform.DARWIN: "tar.gz",
    Platform.WINDOWS: "zip",
}

_SYSTEM_ALIASES: Dict[str, Platform] = {
    "linux": Platform.LINUX,
    "darwin": Platform.DARWIN,
    "macos": Platform.DARWIN,
    "windows": Platform.WINDOWS,
    "win32": Platform.WINDOWS,
}

_MACHINE_ALIASES: Dict[str, Architecture] = {
    "x86_64": Architecture.X64,
    "amd64": Architecture.X64,
    "x64": Architecture.X64,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
    "armv6l": Architecture.ARM,
    "armv7l": Architecture.ARM,
    "armv8l": Architecture.ARM,
    "arm": Architecture.ARM,
    "loongarch64": Architecture.LOONG64,
    "loong64": Architecture.LOONG64,
    "riscv64": Architecture.RISCV64,
}


def detect_platform(system: Optional[str] = None) -> Platform:
    """Map ``platform.system()`` (or the given name) to a Platform."""
    name = (system if system is not None else _platform.system()).lower()
    try:
        return _SYSTEM_ALIASES[name]
    except KeyError:
        raise UnsupportedPlatformError(f"Unsupported platform: {name or '<unknown>'}") from None


def detect_architecture(machine: Optional[str] = None) -> Architecture:
    """Map ``platform.machine()`` (or the given name) to an Architecture."""
    name = (machine if machine is not None else _platform.machine()).lower()
    try:
        return _MACHINE_ALIASES[name]
    except KeyError:
        raise UnsupportedPlatformError(f"Unsupported architecture: {name or '<unknown>'}") from None


@dataclass(frozen=True)
class Artifact:
    """Naming of the release archive for one platform/architecture pair."""

    platform: Platform
    target: str
    extension: str

    @property
    def directory(self) -> str:
        return f"{Constants.TOOL_NAME}-{self.target}"

    @property
    def filename(self) -> str:
        return f"{self.directory}.{self.extension}"

    @property
    def is_zip(self) -> bool:
        return self.extension == "zip"

    def download_url(self, version: str, web_base: Optional[str] = None,
                     repository: str = Constants.REPOSITORY) -> str:
        base = (web_base or Constants.GITHUB_WEB_BASE).rstrip("/")
        return f"{base}/{repository}/releases/download/{Constants.TAG_PREFIX}{version}/{self.filename}"


def resolve_target(platform: Platform, arch: Architecture) -> str:
    """Return the target triple for a pair, failing for pairs without archives."""
    target = TARGETS.get((platform, arch))
    if target is None:
        raise UnsupportedPlatformError(
            f"No prebuilt {Constants.DISPLAY_NAME} archive for platform "
            f"'{platform.value}' and architecture '{arch.value}'"
        )
    return target


def resolve_artifact(platform: Platform, arch: Architecture) -> Artifact:
    """Combine the target and extension tables for a pair."""
    return Artifact(platform=platform, target=resolve_target(platform, arch),
                    extension=EXTENSIONS[platform])
