"""Lock state: which asset was installed for which tool and platform.

The lock lives in ``<install_dir>/lock.json``::

    {
      "codeberg.org/owner/tool": {
        "linux-x64": {"tag": "v1.2.0", "version": "1.2.0", "asset": "...", ...}
      }
    }

When the same version is installed again on the same platform with the same
options, the recorded asset name is reused instead of scoring the release
again, and its content must match the recorded digest.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from forgebin.core.structured import as_str_dict, get_str
from forgebin.platform.files import atomic_write_text

__all__ = [
    "LOCK_FILE",
    "LockEntry",
    "LockFile",
    "load_lock",
    "locked_entry",
    "record",
    "save_lock",
]

LOCK_FILE = "lock.json"

type LockFile = dict[str, dict[str, LockEntry]]


@dataclass(frozen=True, slots=True)
class LockEntry:
    """One installed asset.

    Attributes:
        tag: Release tag
        version: Display version
        asset: Asset file name
        url: Download URL used
        api_url: Forge API URL of the asset, if any
        sha256: Digest of the installed content
        installed_at: ISO timestamp
        bin_dir: Executable directory relative to the install root
        options: Fingerprint of the effective tool options used
    """

    tag: str
    version: str
    asset: str
    url: str
    sha256: str
    installed_at: str
    bin_dir: str = "."
    api_url: str | None = None
    options: str = ""

    @classmethod
    def now(
        cls,
        *,
        tag: str,
        version: str,
        asset: str,
        url: str,
        sha256: str,
        bin_dir: str = ".",
        api_url: str | None = None,
        options: str = "",
    ) -> LockEntry:
        return cls(
            tag=tag,
            version=version,
            asset=asset,
            url=url,
            sha256=sha256,
            installed_at=datetime.now().isoformat(timespec="seconds"),
            bin_dir=bin_dir,
            api_url=api_url,
            options=options,
        )

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> LockEntry | None:
        tag = get_str(data, "tag")
        version = get_str(data, "version")
        asset = get_str(data, "asset")
        url = get_str(data, "url")
        if tag is None or version is None or asset is None or url is None:
            return None
        return cls(
            tag=tag,
            version=version,
            asset=asset,
            url=url,
            sha256=_sha256(get_str(data, "sha256")),
            installed_at=get_str(data, "installed_at") or "",
            bin_dir=get_str(data, "bin_dir") or ".",
            api_url=get_str(data, "api_url"),
            options=get_str(data, "options") or "",
        )


def _sha256(value: str | None) -> str:
    """Lowercase hex digest, or "" for anything that is not one."""
    if value is None:
        return ""
    value = value.lower()
    if len(value) != 64 or any(ch not in "0123456789abcdef" for ch in value):
        return ""
    return value

def _lock_path(install_dir: Path) -> Path:
    return install_dir / LOCK_FILE


def load_lock(install_dir: Path) -> LockFile:
    """Read the lock; a missing or corrupted file reads as empty."""
    path = _lock_path(install_dir)
    if not path.exists():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        return {}

    lock: LockFile = {}
    for tool, platforms in (as_str_dict(raw) or {}).items():
        entries: dict[str, LockEntry] = {}
        for key, value in (as_str_dict(platforms) or {}).items():
            table = as_str_dict(value)
            entry = LockEntry.from_dict(table) if table is not None else None
            if entry is not None:
                entries[key] = entry
        if entries:
            lock[tool] = entries
    return lock


def save_lock(install_dir: Path, lock: LockFile) -> None:
    data = {
        tool: {key: asdict(entry) for key, entry in sorted(entries.items())}
        for tool, entries in sorted(lock.items())
    }
    atomic_write_text(_lock_path(install_dir), json.dumps(data, indent=2) + "\n")


def locked_entry(install_dir: Path, tool: str, platform_key: str) -> LockEntry | None:
    return load_lock(install_dir).get(tool, {}).get(platform_key)


def record(install_dir: Path, tool: str, platform_key: str, entry: LockEntry) -> None:
    """Store ``entry`` for ``tool`` on ``platform_key``, keeping everything else."""
    lock = load_lock(install_dir)
    lock.setdefault(tool, {})[platform_key] = entry
    save_lock(install_dir, lock)
