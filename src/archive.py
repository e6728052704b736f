"""Archive helpers: extension normalization and extraction."""
from __future__ import annotations

import logging
import os
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Optional, Union

from common.http_client import runner_temp_dir
from errors import ExtractionError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_extension(path: PathLike, extension: str) -> Path:
    """Rename ``path`` in place so that it ends with ``.extension``.

    Extraction dispatches on the file name, while downloads are stored under
    extensionless names.
    """
    source = Path(path)
    if source.name.endswith(extension):
        return source
    target = source.with_name(f"{source.name}.{extension}")
    logger.debug("Renaming archive to include extension '%s'", extension)
    os.rename(source, target)
    return target


def _destination(dest: Optional[PathLike]) -> Path:
    if dest is not None:
        directory = Path(dest)
        directory.mkdir(parents=True, exist_ok=True)
        return directory
    base = runner_temp_dir()
    base.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(dir=base))


def _check_member(root: Path, name: str) -> None:
    resolved = (root / name).resolve()
    if resolved != root and root not in resolved.parents:
        raise ExtractionError(f"Archive member escapes extraction directory: {name}")


def extract_zip(path: PathLike, dest: Optional[PathLike] = None) -> Path:
    """Extract a zip archive and return the directory it was unpacked into."""
    directory = _destination(dest)
    logger.debug("Extracting zip archive")
    try:
        with zipfile.ZipFile(path, "r") as zip_ref:
            zip_ref.extractall(directory)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ExtractionError(f"Failed to extract zip archive {path}: {exc}") from exc
    return directory


def extract_tar(path: PathLike, dest: Optional[PathLike] = None, compression: str = "gz") -> Path:
    """Extract a tarball with an explicit compression mode.

    The mode is never guessed from the file name.
    """
    directory = _destination(dest)
    root = directory.resolve()
    logger.debug("Extracting %s tar ball", compression or "uncompressed")
    mode = f"r:{compression}" if compression else "r:"
    try:
        with tarfile.open(path, mode) as tar_ref:
            members = tar_ref.getmembers()
            for member in members:
                _check_member(root, member.name)
                if member.issym():
                    _check_member(root, os.path.join(os.path.dirname(member.name), member.linkname))
                elif member.islnk():
                    _check_member(root, member.linkname)
            if hasattr(tarfile, "data_filter"):
                tar_ref.extractall(directory, members=members, filter="data")
            else:
                tar_ref.extractall(directory, members=members)
    except (tarfile.TarError, OSError) as exc:
        raise ExtractionError(f"Failed to extract tar archive {path}: {exc}") from exc
    return directory
