"""Shared HTTP helpers used by the release listers and the installer.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. Failures are raised as ``DownloadError``;
deciding whether that ends the run is left to the entry point.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from errors import DownloadError

logger = logging.getLogger(__name__)


def _default_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT}
    if headers:
        merged.update(headers)
    return merged


def runner_temp_dir() -> Path:
    """Return the runner's scratch directory, falling back to the system temp dir."""
    base = os.environ.get(Constants.ENV_RUNNER_TEMP) or tempfile.gettempdir()
    return Path(base)


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces."""
    safe_target = safe_url(url)
    headers = _default_headers(kwargs.pop("headers", None))
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(
                url, timeout=Constants.REQUEST_TIMEOUT, headers=headers, **kwargs
            )
        except requests.Timeout as exc:
            raise DownloadError(
                f"{context} request timed out after {Constants.REQUEST_TIMEOUT} seconds"
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise DownloadError(f"{context} connection error: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    context: str = "github",
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a GET request and parse the JSON body.

    Args:
        url: Target URL
        headers: Optional request headers
        context: Human-readable source tag for logs

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    response = safe_get(url, context=context, headers=headers)
    response_headers = dict(response.headers)

    if not response.text:
        return response.status_code, response_headers, None
    try:
        parsed = json.loads(response.text)
    except json.JSONDecodeError:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=response.status_code,
                    target=safe_url(url)
                )
            )
        return response.status_code, response_headers, None
    return response.status_code, response_headers, parsed


def download_file(
    url: str,
    dest_dir: Optional[Union[str, Path]] = None,
    *,
    headers: Optional[Dict[str, str]] = None,
) -> Path:
    """Stream a URL to a new, extensionless file and return its path.

    Args:
        url: File to download.
        dest_dir: Directory for the file; defaults to the runner temp dir.
        headers: Optional request headers.

    Returns:
        Path: Location of the downloaded file.

    Raises:
        DownloadError: On connection failures or non-200 responses.
    """
    directory = Path(dest_dir) if dest_dir else runner_temp_dir()
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / str(uuid.uuid4())

    response = safe_get(url, context="download", headers=headers, stream=True)
    with response:
        if response.status_code != 200:
            raise DownloadError(
                f"Unexpected HTTP response {response.status_code} while downloading {safe_url(url)}"
            )
        try:
            with open(target, "wb") as fh:
                for chunk in response.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
        except (requests.RequestException, OSError) as exc:
            target.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {safe_url(url)}: {exc}") from exc

    logger.debug("Downloaded %s to %s", safe_url(url), target)
    return target
