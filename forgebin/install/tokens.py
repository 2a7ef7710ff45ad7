"""Platform tokens found in release asset names.

Asset names encode their target loosely: ``rg-14.1.0-x86_64-unknown-linux-musl``,
``tool_Darwin_arm64``, ``app-win64.zip``. These tables map the spellings seen
in the wild onto the platform enums. A token only counts when it stands
alone, i.e. is not glued to other letters or digits, so ``win`` is not found
inside ``darwin``.
"""

from __future__ import annotations

import re
from functools import lru_cache

from forgebin.platform.detection import Arch, Libc, Os

__all__ = [
    "ARCH_TOKENS",
    "LIBC_TOKENS",
    "OS_TOKENS",
    "VENDOR_TOKENS",
    "detect_arches",
    "detect_libcs",
    "detect_oses",
    "has_token",
    "is_platform_token",
    "is_universal",
    "platform_tokens",
]

OS_TOKENS: dict[Os, tuple[str, ...]] = {
    Os.LINUX: ("linux", "linux64"),
    Os.MACOS: ("darwin", "macos", "macosx", "mac", "osx", "apple"),
    Os.WINDOWS: ("windows", "win", "win32", "win64", "mingw", "mingw32", "mingw64"),
    Os.OTHER: (
        "freebsd",
        "netbsd",
        "openbsd",
        "dragonfly",
        "illumos",
        "solaris",
        "android",
        "ios",
        "aix",
        "plan9",
    ),
}

# Checked in this order; matched spans are blanked before the next arch so
# "x86" is not found again inside "x86_64" and "arm" not inside "arm64".
ARCH_TOKENS: dict[Arch, tuple[str, ...]] = {
    Arch.ARM64: ("aarch64", "arm64", "armv8"),
    Arch.X64: ("x86_64", "x86-64", "amd64", "x64", "64bit"),
    Arch.ARM: ("armv7l", "armv7", "armv6l", "armv6", "armhf", "armel", "arm"),
    Arch.X86: ("i386", "i486", "i586", "i686", "x86", "386", "ia32", "32bit"),
}

LIBC_TOKENS: dict[Libc, tuple[str, ...]] = {
    Libc.GNU: ("gnu", "glibc", "gnueabihf", "gnueabi"),
    Libc.MUSL: ("musl", "musleabihf", "musleabi"),
    Libc.MSVC: ("msvc",),
}

UNIVERSAL_TOKENS = ("universal", "universal2")

# Target-triple filler that carries no platform information of its own.
VENDOR_TOKENS = ("unknown", "pc", "static")


@lru_cache(maxsize=None)
def _token_re(token: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9]){re.escape(token)}(?![a-z0-9])")


def has_token(name: str, token: str) -> bool:
    """True if ``token`` appears in ``name`` as a standalone word."""
    return _token_re(token).search(name.lower()) is not None


def detect_oses(name: str) -> set[Os]:
    lowered = name.lower()
    found = {
        os_family
        for os_family, tokens in OS_TOKENS.items()
        if any(has_token(lowered, token) for token in tokens)
    }
    if not found and lowered.endswith((".exe", ".msi")):
        found.add(Os.WINDOWS)
    return found


def detect_arches(name: str) -> set[Arch]:
    remaining = name.lower()
    found: set[Arch] = set()
    for arch, tokens in ARCH_TOKENS.items():
        for token in tokens:
            pattern = _token_re(token)
            if pattern.search(remaining):
                found.add(arch)
                remaining = pattern.sub(" ", remaining)
    return found


def detect_libcs(name: str) -> set[Libc]:
    lowered = name.lower()
    return {
        libc
        for libc, tokens in LIBC_TOKENS.items()
        if any(has_token(lowered, token) for token in tokens)
    }


def is_universal(name: str) -> bool:
    return any(has_token(name, token) for token in UNIVERSAL_TOKENS)


@lru_cache(maxsize=1)
def platform_tokens() -> frozenset[str]:
    tokens: set[str] = set(UNIVERSAL_TOKENS) | set(VENDOR_TOKENS)
    for table in (OS_TOKENS, ARCH_TOKENS, LIBC_TOKENS):
        for values in table.values():
            tokens.update(values)
    return frozenset(tokens)


def is_platform_token(word: str) -> bool:
    """True if ``word`` on its own names an OS, arch, libc or triple vendor."""
    return word.lower() in platform_tokens()
