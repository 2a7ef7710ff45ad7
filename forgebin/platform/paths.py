"""User-level directories for config, installs and the download cache."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from .detection import Os, detect_os

__all__ = [
    "home",
    "user_config_dir",
    "user_data_dir",
    "user_cache_dir",
    "clear_caches",
]

APP_NAME = "forgebin"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, then Path.home().
    """
    if detect_os() == Os.WINDOWS:
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)
    return Path.home()


def _xdg_dir(env_var: str, default: str, windows_env: str, windows_default: str) -> Path:
    if detect_os() == Os.WINDOWS:
        base = os.environ.get(windows_env)
        if base:
            return Path(base) / APP_NAME
        return home() / windows_default / APP_NAME

    xdg = os.environ.get(env_var)
    if xdg:
        return Path(xdg) / APP_NAME
    return home() / default / APP_NAME


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """``~/.config/forgebin`` (or ``%APPDATA%\\forgebin``)."""
    return _xdg_dir("XDG_CONFIG_HOME", ".config", "APPDATA", "AppData/Roaming")


@lru_cache(maxsize=1)
def user_data_dir() -> Path:
    """Where installs and the lock file live."""
    return _xdg_dir("XDG_DATA_HOME", ".local/share", "LOCALAPPDATA", "AppData/Local")


@lru_cache(maxsize=1)
def user_cache_dir() -> Path:
    """Where downloaded assets are cached."""
    if detect_os() == Os.WINDOWS:
        return user_data_dir() / "cache"
    return _xdg_dir("XDG_CACHE_HOME", ".cache", "LOCALAPPDATA", "AppData/Local")


def clear_caches() -> None:
    """Forget cached paths; used by tests that change the environment."""
    home.cache_clear()
    user_config_dir.cache_clear()
    user_data_dir.cache_clear()
    user_cache_dir.cache_clear()
