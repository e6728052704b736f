"""Tests for platform detection and archive naming."""

import itertools

import pytest

import platforms
from platforms import (
    EXTENSIONS,
    TARGETS,
    Architecture,
    Platform,
    detect_architecture,
    detect_platform,
    resolve_artifact,
    resolve_target,
)


class TestTargetTable:
    """The static pair-to-triple table."""

    @pytest.mark.parametrize("pair,expected", [
        ((Platform.LINUX, Architecture.ARM64), "aarch64-unknown-linux-musl"),
        ((Platform.LINUX, Architecture.ARM), "arm-unknown-linux-musleabihf"),
        ((Platform.LINUX, Architecture.LOONG64), "loongarch64-unknown-linux-musl"),
        ((Platform.LINUX, Architecture.RISCV64), "riscv64gc-unknown-linux-musl"),
        ((Platform.LINUX, Architecture.X64), "x86_64-unknown-linux-musl"),
        ((Platform.DARWIN, Architecture.ARM64), "aarch64-apple-darwin"),
        ((Platform.DARWIN, Architecture.X64), "x86_64-apple-darwin"),
        ((Platform.WINDOWS, Architecture.ARM64), "aarch64-pc-windows-msvc"),
        ((Platform.WINDOWS, Architecture.X64), "x86_64-pc-windows-msvc"),
    ])
    def test_known_pairs(self, pair, expected):
        assert resolve_target(*pair) == expected

    def test_every_pair_either_resolves_or_fails(self):
        for pair in itertools.product(Platform, Architecture):
            if pair in TARGETS:
                assert resolve_target(*pair)
            else:
                with pytest.raises(platforms.UnsupportedPlatformError):
                    resolve_target(*pair)

    def test_darwin_riscv_is_unsupported(self):
        with pytest.raises(platforms.UnsupportedPlatformError) as excinfo:
            resolve_artifact(Platform.DARWIN, Architecture.RISCV64)
        assert "darwin" in str(excinfo.value)
        assert "riscv64" in str(excinfo.value)

    def test_extensions(self):
        assert EXTENSIONS == {
            Platform.LINUX: "tar.gz",
            Platform.DARWIN: "tar.gz",
            Platform.WINDOWS: "zip",
        }


class TestArtifact:
    """File naming and download URLs."""

    def test_linux_artifact(self):
        artifact = resolve_artifact(Platform.LINUX, Architecture.X64)
        assert artifact.directory == "shiroa-x86_64-unknown-linux-musl"
        assert artifact.filename == "shiroa-x86_64-unknown-linux-musl.tar.gz"
        assert not artifact.is_zip

    def test_windows_artifact(self):
        artifact = resolve_artifact(Platform.WINDOWS, Architecture.ARM64)
        assert artifact.filename == "shiroa-aarch64-pc-windows-msvc.zip"
        assert artifact.is_zip

    def test_download_url(self):
        artifact = resolve_artifact(Platform.DARWIN, Architecture.ARM64)
        assert artifact.download_url("0.3.0") == (
            "https://github.com/Myriad-Dreamin/shiroa/releases/download/"
            "v0.3.0/shiroa-aarch64-apple-darwin.tar.gz"
        )


class TestDetection:
    """Mapping of interpreter-reported names."""

    @pytest.mark.parametrize("system,expected", [
        ("Linux", Platform.LINUX),
        ("Darwin", Platform.DARWIN),
        ("Windows", Platform.WINDOWS),
    ])
    def test_detect_platform(self, system, expected):
        assert detect_platform(system) == expected

    @pytest.mark.parametrize("machine,expected", [
        ("x86_64", Architecture.X64),
        ("AMD64", Architecture.X64),
        ("aarch64", Architecture.ARM64),
        ("arm64", Architecture.ARM64),
        ("armv7l", Architecture.ARM),
        ("loongarch64", Architecture.LOONG64),
        ("riscv64", Architecture.RISCV64),
    ])
    def test_detect_architecture(self, machine, expected):
        assert detect_architecture(machine) == expected

    def test_unknown_platform(self):
        with pytest.raises(platforms.UnsupportedPlatformError):
            detect_platform("FreeBSD")

    def test_unknown_architecture(self):
        with pytest.raises(platforms.UnsupportedPlatformError):
            detect_architecture("s390x")

    def test_detects_host(self, monkeypatch):
        monkeypatch.setattr(platforms._platform, "system", lambda: "Linux")
        monkeypatch.setattr(platforms._platform, "machine", lambda: "x86_64")
        assert detect_platform() == Platform.LINUX
        assert detect_architecture() == Architecture.X64
