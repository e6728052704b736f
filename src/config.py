"""Run configuration assembled from CLI flags, action inputs and a YAML file.

Precedence, highest first: CLI flags, action inputs, configuration file,
built-in defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from constants import ActionInputs, Constants
from common import actions
from errors import InputError

logger = logging.getLogger(__name__)

_FILE_KEYS = {
    "repository": "repository",
    "api-base": "api_base",
    "web-base": "web_base",
    "tool-cache": "tool_cache",
    "temp-dir": "temp_dir",
}


@dataclass
class SetupConfig:
    """Everything one run needs to know."""

    version: str = Constants.LATEST
    allow_prereleases: bool = False
    github_token: Optional[str] = None
    repository: str = Constants.REPOSITORY
    api_base: str = Constants.GITHUB_API_BASE
    web_base: str = Constants.GITHUB_WEB_BASE
    tool_cache: Optional[str] = None
    temp_dir: Optional[str] = None

    def __repr__(self) -> str:
        token = "<set>" if self.github_token else None
        return (
            f"SetupConfig(version={self.version!r}, allow_prereleases={self.allow_prereleases!r}, "
            f"github_token={token!r}, repository={self.repository!r}, api_base={self.api_base!r}, "
            f"web_base={self.web_base!r}, tool_cache={self.tool_cache!r}, temp_dir={self.temp_dir!r})"
        )


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load overrides from a YAML file.

    Keys may sit at the top level or under a ``setup-shiroa:`` section.
    A missing file yields no overrides.

    Raises:
        InputError: If the file is not valid YAML or not a mapping.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise InputError(f"Failed to parse config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise InputError(f"Config file {path} must contain a mapping")
    section = data.get(Constants.CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise InputError(f"Section '{Constants.CONFIG_SECTION}' in {path} must be a mapping")

    overrides = {}
    for key, value in section.items():
        field_name = _FILE_KEYS.get(str(key))
        if field_name is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        if value is not None:
            overrides[field_name] = str(value)
    return overrides


def build_config(args=None) -> SetupConfig:
    """Merge CLI arguments, action inputs and the optional config file."""
    config = SetupConfig()
    for name, value in load_config_file(getattr(args, "CONFIG", None)).items():
        setattr(config, name, value)

    version = getattr(args, "VERSION", None) or actions.get_input(ActionInputs.VERSION.value)
    if version:
        config.version = version

    allow = getattr(args, "ALLOW_PRERELEASES", None)
    if allow is None:
        allow = actions.get_boolean_input(ActionInputs.ALLOW_PRERELEASES.value)
    config.allow_prereleases = bool(allow)

    token = getattr(args, "GITHUB_TOKEN", None) or actions.get_input(ActionInputs.GITHUB_TOKEN.value)
    config.github_token = token or None

    tool_cache = getattr(args, "TOOL_CACHE", None)
    if tool_cache:
        config.tool_cache = tool_cache
    return config
