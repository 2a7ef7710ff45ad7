"""Version constraint resolution against published release tags.

Tag naming differs between projects: ``v1.2.3``, ``1.2.3``, ``release-1.2.3``.
The prefix policy tells the resolver how a user-facing version relates to a
tag:

- ``None`` (unset): a tag matches the request verbatim or with a leading
  ``v``; the display form drops one leading ``v``.
- ``""``: tags are matched and displayed verbatim.
- any other string: the tag must be exactly ``prefix + version``; the
  display form has the prefix removed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from forgebin.core.result import Err, Ok, Result
from forgebin.install.errors import VersionNotFound

__all__ = [
    "LATEST",
    "Exact",
    "Latest",
    "ResolvedVersion",
    "VersionConstraint",
    "candidate_tags",
    "display_version",
    "filter_versions",
    "matches_prefix",
    "parse_constraint",
    "resolve_version",
]


@dataclass(frozen=True, slots=True)
class Latest:
    """Most recent release as ordered by the forge."""

    def __str__(self) -> str:
        return "latest"


@dataclass(frozen=True, slots=True)
class Exact:
    """A specific version, possibly already carrying its prefix."""

    version: str

    def __post_init__(self) -> None:
        if not self.version:
            raise ValueError("Version cannot be empty")

    def __str__(self) -> str:
        return self.version


LATEST = Latest()

type VersionConstraint = Latest | Exact


def parse_constraint(value: str | None) -> VersionConstraint:
    """``None``, ``""`` and ``"latest"`` mean Latest; anything else is Exact."""
    if value is None:
        return LATEST
    value = value.strip()
    if not value or value.lower() == "latest":
        return LATEST
    return Exact(value)


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """User-facing version plus the tag it was resolved to."""

    version: str
    tag: str

    def __str__(self) -> str:
        return self.version


def matches_prefix(tag: str, prefix: str | None) -> bool:
    """Prefix test used when listing and when picking Latest."""
    if not prefix:
        return True
    return tag.startswith(prefix)


def display_version(tag: str, prefix: str | None) -> str:
    if prefix is None:
        return tag.removeprefix("v")
    if prefix == "":
        return tag
    return tag.removeprefix(prefix)


def filter_versions(prefix: str | None, tags: Sequence[str]) -> list[str]:
    """Display versions for every tag passing the prefix test, in input order."""
    return [display_version(tag, prefix) for tag in tags if matches_prefix(tag, prefix)]


def candidate_tags(requested: str, prefix: str | None) -> tuple[str, ...]:
    """Tag spellings to try for ``requested``, most exact first."""
    if prefix is None:
        return (requested, f"v{requested}")
    if prefix == "":
        return (requested,)
    return (f"{prefix}{requested}",)


def resolve_version(
    constraint: VersionConstraint,
    prefix: str | None,
    tags: Sequence[str],
) -> Result[ResolvedVersion, VersionNotFound]:
    """Map ``constraint`` to one of ``tags``.

    Tags are expected newest first. For an exact request the first candidate
    spelling that appears in ``tags`` wins, so a verbatim match beats a
    ``v``-derived one and duplicates resolve to their first occurrence.

    Returns:
        Ok with ResolvedVersion, or Err with VersionNotFound
    """
    not_found = VersionNotFound(requested=str(constraint), prefix=prefix, available=tuple(tags))

    match constraint:
        case Latest():
            for tag in tags:
                if matches_prefix(tag, prefix):
                    return Ok(ResolvedVersion(version=display_version(tag, prefix), tag=tag))
            return Err(not_found)

        case Exact(version=requested):
            available = set(tags)
            for candidate in candidate_tags(requested, prefix):
                if candidate in available:
                    return Ok(
                        ResolvedVersion(version=display_version(candidate, prefix), tag=candidate)
                    )
            return Err(not_found)
