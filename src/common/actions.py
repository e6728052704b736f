"""Thin adapter over the GitHub Actions runner protocol.

Inputs arrive as ``INPUT_<NAME>`` environment variables; outputs and PATH
additions are appended to the files the runner names in ``GITHUB_OUTPUT``
and ``GITHUB_PATH``.
"""
from __future__ import annotations

import logging
import os
import uuid
from typing import Optional

from constants import Constants
from common.logging_utils import escape_data
from errors import InputError

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")


def _input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, required: bool = False) -> str:
    """Return the trimmed value of an action input ("" when unset)."""
    value = os.environ.get(_input_env_name(name), "").strip()
    if required and not value:
        raise InputError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(name: str, required: bool = False) -> bool:
    """Return an action input parsed with the YAML 1.2 core boolean schema."""
    value = get_input(name, required=required)
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES or not value:
        return False
    raise InputError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def _append_file_command(env_name: str, line: str) -> bool:
    path = os.environ.get(env_name)
    if not path:
        return False
    if not os.path.exists(path):
        raise InputError(f"Missing file at path: {path}")
    with open(path, "a", encoding="utf-8") as fh:
        fh.write(line + os.linesep)
    return True


def set_output(name: str, value: Optional[str]) -> None:
    """Publish an output variable for later workflow steps."""
    text = "" if value is None else str(value)
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    record = f"{name}<<{delimiter}{os.linesep}{text}{os.linesep}{delimiter}"
    if _append_file_command(Constants.ENV_GITHUB_OUTPUT, record):
        return
    print(f"::set-output name={name}::{escape_data(text)}")


def add_path(path: str) -> None:
    """Prepend a directory to PATH for this process and later steps."""
    if not _append_file_command(Constants.ENV_GITHUB_PATH, str(path)):
        print(f"::add-path::{escape_data(path)}")
    os.environ["PATH"] = f"{path}{os.pathsep}{os.environ.get('PATH', '')}"


def set_failed(message: str) -> None:
    """Report a step failure; the caller decides the exit code."""
    logger.error(message)
