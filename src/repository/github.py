"""GitHub release listing for the Shiroa repository.

Two listers share one interface: an authenticated client that walks every
page of the releases API, and an anonymous fallback that issues a single
unauthenticated request. The choice is made once, when the lister is built.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from requests.utils import parse_header_links

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from errors import ReleaseListError

logger = logging.getLogger(__name__)


@dataclass
class ReleaseDescriptor:
    """One published release as reported by the releases API."""

    tag_name: str
    name: Optional[str] = None
    prerelease: bool = False
    draft: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ReleaseDescriptor":
        return cls(
            tag_name=str(data.get("tag_name") or ""),
            name=data.get("name"),
            prerelease=bool(data.get("prerelease", False)),
            draft=bool(data.get("draft", False)),
            metadata=data,
        )


def _to_descriptors(payload: Any, url: str) -> List[ReleaseDescriptor]:
    if not isinstance(payload, list):
        raise ReleaseListError(
            f"Failed to parse releases from {safe_url(url)}: expected a JSON list. "
            "This may be caused by API rate limit exceeded."
        )
    return [ReleaseDescriptor.from_json(item) for item in payload if isinstance(item, dict)]


class ReleaseLister(ABC):
    """Source of the release catalog for one repository."""

    def __init__(self, repository: str = Constants.REPOSITORY, api_base: Optional[str] = None):
        self.repository = repository
        self.api_base = (api_base or Constants.GITHUB_API_BASE).rstrip("/")

    @property
    def releases_url(self) -> str:
        return f"{self.api_base}/repos/{self.repository}/releases"

    @abstractmethod
    def list_releases(self) -> List[ReleaseDescriptor]:
        """Return every release the source can see.

        Raises:
            ReleaseListError: If the catalog cannot be fetched or parsed.
        """


class AuthenticatedReleaseLister(ReleaseLister):
    """Paginated listing through the REST API using a token."""

    def __init__(self, token: str, repository: str = Constants.REPOSITORY,
                 api_base: Optional[str] = None):
        super().__init__(repository, api_base)
        self.token = token

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    @staticmethod
    def _next_page(headers: Dict[str, str]) -> Optional[str]:
        """Extract the rel="next" URL from a Link header."""
        link = headers.get("Link") or headers.get("link")
        if not link:
            return None
        for entry in parse_header_links(link):
            if entry.get("rel") == "next":
                return entry.get("url")
        return None

    def list_releases(self) -> List[ReleaseDescriptor]:
        logger.debug("Using authentication")
        logger.debug("Using repository: %s", self.repository)

        releases: List[ReleaseDescriptor] = []
        current_url: Optional[str] = f"{self.releases_url}?per_page={Constants.REPO_API_PER_PAGE}"
        page = 0
        while current_url:
            page += 1
            status, headers, data = get_json(current_url, headers=self._get_headers())
            if status != 200 or data is None:
                raise ReleaseListError(
                    f"Failed to list releases from {safe_url(current_url)} "
                    f"(HTTP {status}). This may be caused by API rate limit exceeded."
                )
            releases.extend(_to_descriptors(data, current_url))
            current_url = self._next_page(headers)

        if is_debug_enabled(logger):
            logger.debug(
                "Received %d releases",
                len(releases),
                extra=extra_context(
                    event="http_response",
                    component="github",
                    action="list_releases",
                    outcome="success",
                    count=len(releases),
                    pages=page,
                )
            )
        return releases


class AnonymousReleaseLister(ReleaseLister):
    """Single unauthenticated request against the public endpoint."""

    def list_releases(self) -> List[ReleaseDescriptor]:
        url = self.releases_url
        logger.debug("Using no authentication")
        logger.debug("Using API endpoint: %s", url)

        status, _, data = get_json(url)
        if data is None:
            raise ReleaseListError(
                f"Failed to parse releases from {url} (HTTP {status}): response was not valid JSON. "
                "This may be caused by API rate limit exceeded."
            )
        if status != 200:
            detail = data.get("message") if isinstance(data, dict) else None
            raise ReleaseListError(
                f"Failed to list releases from {url} (HTTP {status}"
                f"{': ' + detail if detail else ''}). "
                "This may be caused by API rate limit exceeded."
            )
        releases = _to_descriptors(data, url)
        logger.debug("Received %d releases", len(releases))
        return releases


def create_release_lister(token: Optional[str], repository: str = Constants.REPOSITORY,
                          api_base: Optional[str] = None) -> ReleaseLister:
    """Pick the authenticated lister when a token is present."""
    if token:
        return AuthenticatedReleaseLister(token, repository, api_base)
    return AnonymousReleaseLister(repository, api_base)
