"""Linux platform manager implementation."""

import os
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


class LinuxPlatformManager(PlatformManagerBase):
    """Linux-specific platform manager."""

    def get_platform_info(self) -> PlatformInfo:
        """Get Linux platform information."""
        return PlatformInfo(
            platform=SupportedPlatform.LINUX,
            version=platform.release(),
            architecture=platform.machine(),
            python_version=sys.version,
            is_supported=True
        )

    def get_application_paths(self) -> ApplicationPaths:
        """Get Linux-specific application paths."""
        # Follow XDG Base Directory Specification
        xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", self.home / ".config"))
        xdg_data = Path(os.environ.get("XDG_DATA_HOME", self.home / ".local" / "share"))

        return ApplicationPaths(
            config_dir=xdg_config / "editor-jumper",
            data_dir=xdg_data / "editor-jumper",
            log_dir=xdg_data / "editor-jumper" / "logs",
        )

    def get_app_bundle_dirs(self) -> List[Path]:
        # No bundle convention on Linux
        return []

    def get_command_search_dirs(self) -> List[Path]:
        return [
            Path("/usr/local/bin"),
            Path("/usr/bin"),
            Path("/opt/homebrew/bin"),
            self.home / "bin",
            self.home / ".local" / "bin",
            Path("/snap/bin"),
        ]

    def get_toolbox_script_dirs(self) -> List[Path]:
        xdg_data = Path(os.environ.get("XDG_DATA_HOME", self.home / ".local" / "share"))
        return [xdg_data / "JetBrains" / "Toolbox" / "scripts"]
