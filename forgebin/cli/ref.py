"""Tool reference parsing: ``host/owner/repo[@version]``."""

from __future__ import annotations

from dataclasses import dataclass

from forgebin.core.result import Err, Ok, Result
from forgebin.forge.models import ToolRef
from forgebin.install.version import VersionConstraint, parse_constraint

__all__ = ["ParsedRef", "RefError", "parse_ref"]


@dataclass(frozen=True, slots=True)
class RefError:
    value: str
    reason: str

    def __str__(self) -> str:
        return f"invalid tool reference {self.value!r}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ParsedRef:
    tool: ToolRef
    constraint: VersionConstraint
    version: str | None = None


def parse_ref(value: str) -> Result[ParsedRef, RefError]:
    """Parse ``codeberg.org/owner/tool@1.2.0``.

    A missing or ``latest`` version means the newest stable release. A
    leading ``https://`` and a trailing ``.git`` are tolerated.
    """
    text = value.strip()
    path, _, version = text.partition("@")
    path = path.removeprefix("https://").removeprefix("http://").rstrip("/")
    path = path.removesuffix(".git")

    parts = path.split("/")
    if len(parts) != 3 or not all(parts):
        return Err(RefError(value=value, reason="expected host/owner/repo[@version]"))
    if "@" in version:
        return Err(RefError(value=value, reason="more than one '@'"))

    try:
        tool = ToolRef(host=parts[0].lower(), owner=parts[1], repo=parts[2])
    except ValueError as e:
        return Err(RefError(value=value, reason=str(e)))

    version = version.strip()
    return Ok(
        ParsedRef(
            tool=tool,
            constraint=parse_constraint(version or None),
            version=version or None,
        )
    )
