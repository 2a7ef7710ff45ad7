"""Typed configuration loading and access.

The config file is TOML::

    [settings]
    install_dir = "~/.local/share/forgebin/tools"
    cache_dir = "~/.cache/forgebin"
    all_pages = false

    [forges."codeberg.org"]
    api_url = "https://codeberg.org/api/v1"

    [tools."codeberg.org/owner/tool"]
    version = "1.2.0"
    asset_pattern = "tool-*-{os}-{arch}.tar.gz"

    [tools."codeberg.org/owner/tool".platforms."windows-x64"]
    asset_pattern = "tool-*-windows.zip"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from forgebin.install.options import ToolOptions

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "ForgeConfig",
    "Settings",
    "ToolConfig",
    "load_config",
    "load_config_or_default",
]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return self.message


def _expand_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(os.path.expandvars(value)).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    """``[settings]`` table."""

    install_dir: Path | None = None
    cache_dir: Path | None = None
    all_pages: bool = False


@dataclass(frozen=True, slots=True)
class ForgeConfig:
    """``[forges."<host>"]`` table."""

    api_url: str


@dataclass(frozen=True, slots=True)
class ToolConfig:
    """``[tools."<host>/<owner>/<repo>"]`` table."""

    version: str | None = None
    options: ToolOptions = field(default_factory=ToolOptions)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    settings: Settings = field(default_factory=Settings)
    forges: dict[str, ForgeConfig] = field(default_factory=dict)
    tools: dict[str, ToolConfig] = field(default_factory=dict)

    def api_url_for(self, host: str) -> str | None:
        forge = self.forges.get(host.lower())
        return forge.api_url if forge else None

    def tool(self, key: str) -> ToolConfig:
        """Configured entry for ``host/owner/repo``, or an empty one."""
        return self.tools.get(key.lower(), ToolConfig())

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: On tables of the wrong type or invalid tool options.
        """
        settings: StrDict = get_table(data, "settings") or {}

        forges: dict[str, ForgeConfig] = {}
        for host, value in (get_table(data, "forges") or {}).items():
            table = as_str_dict(value)
            api_url = get_str(table, "api_url") if table is not None else None
            if api_url is None:
                raise ValueError(f"forges.{host!r} needs an api_url")
            forges[host.lower()] = ForgeConfig(api_url=api_url.rstrip("/"))

        tools: dict[str, ToolConfig] = {}
        for key, value in (get_table(data, "tools") or {}).items():
            table = as_str_dict(value)
            if table is None:
                raise ValueError(f"tools.{key!r} must be a table")
            try:
                options = ToolOptions.from_dict(table)
            except ValueError as e:
                raise ValueError(f"tools.{key!r}: {e}") from e
            tools[key.lower()] = ToolConfig(version=get_str(table, "version"), options=options)

        return cls(
            settings=Settings(
                install_dir=_expand_path(get_str(settings, "install_dir")),
                cache_dir=_expand_path(get_str(settings, "cache_dir")),
                all_pages=get_bool(settings, "all_pages") or False,
            ),
            forges=forges,
            tools=tools,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_bytes().decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like ``load_config``, but a missing file yields the default Config.

    Malformed files are still reported.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
