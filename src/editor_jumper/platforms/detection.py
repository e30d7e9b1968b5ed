"""Platform detection and manager factory."""

import platform
from pathlib import Path
from typing import Optional, Union

from .base import PlatformManagerBase, SupportedPlatform


def get_current_platform() -> SupportedPlatform:
    """Get the current platform."""
    system = platform.system()

    if system == "Darwin":
        return SupportedPlatform.MACOS
    elif system == "Windows":
        return SupportedPlatform.WINDOWS
    elif system == "Linux":
        return SupportedPlatform.LINUX
    else:
        raise RuntimeError(f"Unsupported platform: {system}")


def get_platform_manager(
    target: Optional[Union[SupportedPlatform, str]] = None,
    home: Optional[Path] = None,
) -> PlatformManagerBase:
    """Get the platform manager for ``target`` (defaults to the running system)."""
    if target is None:
        current_platform = get_current_platform()
    elif isinstance(target, SupportedPlatform):
        current_platform = target
    else:
        current_platform = SupportedPlatform.from_name(target)

    if current_platform == SupportedPlatform.MACOS:
        from .macos import MacOSPlatformManager
        return MacOSPlatformManager(home=home)
    elif current_platform == SupportedPlatform.WINDOWS:
        from .windows import WindowsPlatformManager
        return WindowsPlatformManager(home=home)
    elif current_platform == SupportedPlatform.LINUX:
        from .linux import LinuxPlatformManager
        return LinuxPlatformManager(home=home)
    else:
        raise RuntimeError(f"No platform manager available for {current_platform.value}")


def is_platform_supported(platform_name: Optional[str] = None) -> bool:
    """Check if a platform is supported."""
    if platform_name is None:
        platform_name = platform.system()

    try:
        SupportedPlatform.from_name(platform_name)
        return True
    except ValueError:
        return False
