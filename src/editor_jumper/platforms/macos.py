"""macOS platform manager implementation."""

import platform
import sys
from pathlib import Path
from typing import List

from .base import (
    PlatformManagerBase,
    PlatformInfo,
    ApplicationPaths,
    SupportedPlatform
)


class MacOSPlatformManager(PlatformManagerBase):
    """macOS-specific platform manager."""

    def get_platform_info(self) -> PlatformInfo:
        """Get macOS platform information."""
        return PlatformInfo(
            platform=SupportedPlatform.MACOS,
            version=platform.mac_ver()[0],
            architecture=platform.machine(),
            python_version=sys.version,
            is_supported=True
        )

    def get_application_paths(self) -> ApplicationPaths:
        """Get macOS-specific application paths."""
        return ApplicationPaths(
            config_dir=self.home / "Library" / "Application Support" / "EditorJumper",
            data_dir=self.home / "Library" / "Application Support" / "EditorJumper" / "Data",
            log_dir=self.home / "Library" / "Logs" / "EditorJumper",
        )

    def get_app_bundle_dirs(self) -> List[Path]:
        """Bundles are looked up system-wide first, then per user."""
        return [Path("/Applications"), self.home / "Applications"]

    def get_command_search_dirs(self) -> List[Path]:
        return [
            Path("/usr/local/bin"),
            Path("/usr/bin"),
            Path("/opt/homebrew/bin"),
            self.home / "bin",
            self.home / ".local" / "bin",
        ]

    def get_toolbox_script_dirs(self) -> List[Path]:
        return [self.home / "Library" / "Application Support" / "JetBrains" / "Toolbox" / "scripts"]
