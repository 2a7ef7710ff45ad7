from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from forgebin.core.config import Config, load_config_or_default
from forgebin.core.errors import ErrorCode
from forgebin.core.result import Err
from forgebin.forge.http import RealHttpClient
from forgebin.output.console import ConsoleProtocol, RichConsole
from forgebin.platform.detection import PlatformProfile, detect
from forgebin.platform.paths import user_config_dir
from forgebin.services.installer import InstallPaths, InstallService

CONFIG_ENV = "FORGEBIN_CONFIG"


def config_path() -> Path:
    """``$FORGEBIN_CONFIG`` (set by ``--config``) or the user config file."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return user_config_dir() / "config.toml"


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformProfile
    config: Config
    console: ConsoleProtocol
    paths: InstallPaths

    def service(self) -> InstallService:
        return InstallService(
            console=self.console,
            http=RealHttpClient(),
            paths=self.paths,
            platform=self.platform,
            all_pages=self.config.settings.all_pages,
        )


def build_context() -> CLIContext:
    console = RichConsole()
    path = config_path()
    config_result = load_config_or_default(path)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    return CLIContext(
        platform=detect(),
        config=config,
        console=console,
        paths=InstallPaths.from_settings(config.settings),
    )
