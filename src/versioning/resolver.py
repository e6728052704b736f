"""Release resolver mapping a version specifier to one published version."""

from __future__ import annotations

import logging
import re
from typing import AbstractSet, Iterable, List, Optional, Tuple

import semantic_version
from semantic_version.base import AllOf, AnyOf, Range

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from errors import VersionResolutionError
from repository.github import ReleaseDescriptor, ReleaseLister
from .models import ResolutionMode, VersionSpec
from .parser import normalize_exact_version, parse_version_spec

logger = logging.getLogger(__name__)

_EXPLICIT_UPPER_BOUND = re.compile(
    r"(?<![<>=])<\s*v?(\d+\.\d+\.\d+)(?![-+.\w])"
)


def explicit_upper_bounds(expression: str) -> AbstractSet[semantic_version.Version]:
    """Return the targets of full ``<X.Y.Z`` comparators written in ``expression``.

    Upper bounds derived from caret, tilde and x-ranges are not included.
    """
    return frozenset(
        semantic_version.Version(match.group(1))
        for match in _EXPLICIT_UPPER_BOUND.finditer(expression)
    )


def _match_with_prereleases(
    clause,
    version: semantic_version.Version,
    explicit_bounds: AbstractSet[semantic_version.Version] = frozenset(),
) -> bool:
    """Evaluate an npm clause tree letting pre-releases of any patch match.

    NpmSpec only admits a pre-release when a comparator targets the same
    MAJOR.MINOR.PATCH. Here every comparator is evaluated by plain precedence.
    A derived ``<X.Y.Z`` bound still excludes ``X.Y.Z-*``, while one listed in
    ``explicit_bounds`` admits it since it precedes ``X.Y.Z``.
    """
    if isinstance(clause, AllOf):
        return all(_match_with_prereleases(sub, version, explicit_bounds) for sub in clause.clauses)
    if isinstance(clause, AnyOf):
        return any(_match_with_prereleases(sub, version, explicit_bounds) for sub in clause.clauses)
    if isinstance(clause, Range):
        if clause.operator == Range.OP_LT and clause.target in explicit_bounds:
            return version < clause.target
        natural = Range(
            clause.operator,
            clause.target,
            prerelease_policy=Range.PRERELEASE_NATURAL,
            build_policy=clause.build_policy,
        )
        return natural.match(version)
    return clause.match(version)


def parse_candidates(versions: Iterable[str]) -> List[Tuple[semantic_version.Version, str]]:
    """Keep only strings that are valid semantic versions."""
    parsed = []
    for raw in versions:
        try:
            parsed.append((semantic_version.Version(raw), raw))
        except ValueError:
            continue  # Skip invalid versions
    return parsed


def max_satisfying(versions: Iterable[str], spec: VersionSpec) -> Optional[str]:
    """Return the highest version satisfying ``spec``, or None.

    Ordering follows semantic-versioning precedence.

    Raises:
        VersionResolutionError: If the range expression cannot be parsed.
    """
    candidates = parse_candidates(versions)
    if not spec.include_prerelease:
        candidates = [(v, raw) for v, raw in candidates if not v.prerelease]

    if spec.mode == ResolutionMode.LATEST:
        matching = candidates
    else:
        try:
            npm_spec = semantic_version.NpmSpec(spec.range_expression)
        except ValueError as exc:
            raise VersionResolutionError(
                f"{Constants.DISPLAY_NAME} {spec.raw} could not be resolved. "
                f"Invalid version range: {exc}"
            ) from exc
        if spec.include_prerelease:
            bounds = explicit_upper_bounds(spec.range_expression)
            matching = [
                (v, raw) for v, raw in candidates
                if _match_with_prereleases(npm_spec.clause, v, bounds)
            ]
        else:
            matching = [(v, raw) for v, raw in candidates if npm_spec.match(v)]

    if not matching:
        return None
    matching.sort(key=lambda item: item[0], reverse=True)
    return matching[0][1]


class ReleaseResolver:
    """Resolve a loose specifier against the published release catalog."""

    def __init__(self, lister: ReleaseLister):
        self.lister = lister

    @staticmethod
    def candidate_versions(releases: Iterable[ReleaseDescriptor]) -> List[str]:
        """Strip the tag prefix from every release; tags without it are dropped."""
        versions = []
        for release in releases:
            tag = release.tag_name or ""
            if tag.startswith(Constants.TAG_PREFIX):
                versions.append(tag[len(Constants.TAG_PREFIX):])
        return versions

    def resolve(self, specifier: str, allow_prereleases: bool) -> str:
        """Return the exact version to install.

        Raises:
            ReleaseListError: If the catalog cannot be fetched.
            VersionResolutionError: If no release satisfies ``specifier``.
        """
        spec = parse_version_spec(specifier, allow_prereleases)
        releases = self.lister.list_releases()
        qualifier = "with" if allow_prereleases else "without"
        logger.debug(
            "Resolving version '%s' %s pre-releases from %d releases",
            spec.raw, qualifier, len(releases),
        )

        resolved = max_satisfying(self.candidate_versions(releases), spec)
        if resolved is None:
            raise VersionResolutionError(
                f"{Constants.DISPLAY_NAME} {spec.raw} could not be resolved."
            )

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved version %s from %s %s pre-releases",
                resolved, spec.raw, qualifier,
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve",
                    outcome="resolved",
                    mode=spec.mode.value,
                )
            )
        return resolved


def resolve_version(specifier: str, allow_prereleases: bool, lister: ReleaseLister) -> str:
    """Resolve ``specifier`` unless it already names an exact version.

    Exact versions are returned without consulting the catalog, so they are
    not checked for existence here.
    """
    spec = parse_version_spec(specifier, allow_prereleases)
    if spec.mode == ResolutionMode.EXACT:
        logger.debug("Using exact version %s without resolution", spec.raw)
        return normalize_exact_version(spec.raw)
    return ReleaseResolver(lister).resolve(specifier, allow_prereleases)
