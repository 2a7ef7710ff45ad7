"""Placeholder expansion for ``bin_path`` and ``asset_pattern``.

Recognized placeholders:

- ``{name}``    tool name (repository name)
- ``{version}`` resolved display version
- ``{os}``      ``linux``, ``macos``, ``windows``
- ``{arch}``    ``x64``, ``arm64``, ``x86``, ``arm``
- ``{ext}``     executable suffix: ``.exe`` on Windows, empty elsewhere

Anything else in braces is left untouched, so ``{foo}`` stays ``{foo}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forgebin.platform.detection import PlatformProfile

__all__ = ["PLACEHOLDERS", "TemplateContext", "expand"]

PLACEHOLDERS = ("name", "version", "os", "arch", "ext")


@dataclass(frozen=True, slots=True)
class TemplateContext:
    name: str
    version: str
    platform: PlatformProfile

    def values(self) -> dict[str, str]:
        return {
            "name": self.name,
            "version": self.version,
            "os": str(self.platform.os),
            "arch": str(self.platform.arch),
            "ext": self.platform.os.exe_suffix,
        }


def expand(template: str, context: TemplateContext) -> str:
    """Single left-to-right pass; substituted text is never re-scanned."""
    values = context.values()
    out: list[str] = []
    i = 0
    while i < len(template):
        if template[i] == "{":
            end = template.find("}", i + 1)
            if end != -1:
                key = template[i + 1 : end]
                if key in values:
                    out.append(values[key])
                    i = end + 1
                    continue
        out.append(template[i])
        i += 1
    return "".join(out)
