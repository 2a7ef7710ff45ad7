"""Platform abstraction layer."""

from .detection import (
    Arch,
    Libc,
    Os,
    PlatformProfile,
    detect,
)
from .paths import (
    home,
    user_cache_dir,
    user_config_dir,
    user_data_dir,
)

__all__ = [
    # detection
    "Arch",
    "Libc",
    "Os",
    "PlatformProfile",
    "detect",
    # paths
    "home",
    "user_cache_dir",
    "user_config_dir",
    "user_data_dir",
]
