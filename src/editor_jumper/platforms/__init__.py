"""Platform-specific implementations for Editor Jumper."""

from .base import PlatformManagerBase, SupportedPlatform
from .detection import get_current_platform, get_platform_manager

__all__ = ["PlatformManagerBase", "SupportedPlatform", "get_current_platform", "get_platform_manager"]
