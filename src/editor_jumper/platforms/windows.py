"""Windows platform manager implementation."""

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


class WindowsPlatformManager(PlatformManagerBase):
    """Windows-specific platform manager.

    Bare command names are never upgraded on Windows; ``cmd /c`` resolves
    them through ``PATH`` (and ``PATHEXT``) at launch time.
    """

    def get_platform_info(self) -> PlatformInfo:
        """Get Windows platform information."""
        return PlatformInfo(
            platform=SupportedPlatform.WINDOWS,
            version=platform.version(),
            architecture=platform.machine(),
            python_version=sys.version,
            is_supported=True
        )

    def _local_appdata(self) -> Path:
        return Path(os.environ.get("LOCALAPPDATA", self.home / "AppData" / "Local"))

    def get_application_paths(self) -> ApplicationPaths:
        """Get Windows-specific application paths."""
        appdata = Path(os.environ.get("APPDATA", self.home / "AppData" / "Roaming"))
        localappdata = self._local_appdata()

        return ApplicationPaths(
            config_dir=appdata / "EditorJumper",
            data_dir=localappdata / "EditorJumper" / "Data",
            log_dir=localappdata / "EditorJumper" / "Logs",
        )

    def get_app_bundle_dirs(self) -> List[Path]:
        return []

    def get_command_search_dirs(self) -> List[Path]:
        return []

    def get_toolbox_script_dirs(self) -> List[Path]:
        return [self._local_appdata() / "JetBrains" / "Toolbox" / "scripts"]
