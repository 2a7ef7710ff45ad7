"""Platform profile detection.

A ``PlatformProfile`` describes the running machine in the three dimensions
release assets are built for: operating system, CPU architecture and, on
Linux, the C library family. It is detected once per process and cached.
"""

from __future__ import annotations

import glob as _glob
import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Os",
    "Arch",
    "Libc",
    "PlatformProfile",
    "detect",
    "detect_os",
    "detect_arch",
    "detect_libc",
]


class Os(Enum):
    """Operating system family."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    OTHER = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_unix(self) -> bool:
        return self in (Os.LINUX, Os.MACOS)

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == Os.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Example: exe_name("rg") -> "rg.exe" on Windows, "rg" elsewhere."""
        if self.exe_suffix and not name.lower().endswith(self.exe_suffix):
            return f"{name}{self.exe_suffix}"
        return name


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    X86 = auto()
    ARM = auto()
    OTHER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Libc(Enum):
    """C library family the running binaries link against."""

    GNU = auto()
    MUSL = auto()
    MSVC = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class PlatformProfile:
    """Immutable description of the host a binary is installed for."""

    os: Os
    arch: Arch
    libc: Libc = Libc.UNKNOWN

    @property
    def key(self) -> str:
        """Per-platform override key, e.g. ``linux-x64``."""
        return f"{self.os}-{self.arch}"

    @property
    def is_linux(self) -> bool:
        return self.os == Os.LINUX

    @property
    def is_windows(self) -> bool:
        return self.os == Os.WINDOWS

    @property
    def is_macos(self) -> bool:
        return self.os == Os.MACOS

    def __str__(self) -> str:
        if self.os == Os.LINUX and self.libc != Libc.UNKNOWN:
            return f"{self.key}-{self.libc}"
        return self.key


@lru_cache(maxsize=1)
def detect_os() -> Os:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Os.LINUX
    if system.startswith("darwin"):
        return Os.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Os.WINDOWS
    return Os.OTHER


def _machine_to_arch(machine: str) -> Arch:
    machine = machine.lower()
    if machine in ("x86_64", "amd64", "x64"):
        return Arch.X64
    if machine in ("aarch64", "arm64", "armv8l"):
        return Arch.ARM64
    if machine in ("i386", "i486", "i586", "i686", "x86"):
        return Arch.X86
    if machine.startswith("arm"):
        return Arch.ARM
    return Arch.OTHER


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_os() == Os.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    return _machine_to_arch(machine)


def _has_musl_loader() -> bool:
    return bool(_glob.glob("/lib/ld-musl-*"))


@lru_cache(maxsize=1)
def detect_libc() -> Libc:
    """Detect the C library family (cached).

    Linux: glibc is reported by ``platform.libc_ver()``; musl systems report
    nothing there but ship an ``ld-musl`` loader. Windows is always MSVC.
    """
    current = detect_os()
    if current == Os.WINDOWS:
        return Libc.MSVC
    if current != Os.LINUX:
        return Libc.UNKNOWN

    lib, _version = _platform.libc_ver()
    if lib == "glibc":
        return Libc.GNU
    if "musl" in lib or _has_musl_loader():
        return Libc.MUSL
    return Libc.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformProfile:
    """Detect the complete platform profile (cached)."""
    return PlatformProfile(os=detect_os(), arch=detect_arch(), libc=detect_libc())
