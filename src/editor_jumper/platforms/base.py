"""Base platform manager abstract classes for cross-platform functionality."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass
from enum import Enum


class SupportedPlatform(str, Enum):
    """Supported platforms for Editor Jumper."""
    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"

    @classmethod
    def from_name(cls, name: str) -> "SupportedPlatform":
        """Parse a platform name as reported by Python, Node or a user."""
        aliases = {
            "macos": cls.MACOS,
            "darwin": cls.MACOS,
            "mac": cls.MACOS,
            "windows": cls.WINDOWS,
            "win32": cls.WINDOWS,
            "linux": cls.LINUX,
        }
        try:
            return aliases[name.strip().lower()]
        except KeyError:
            raise ValueError(f"Unsupported platform: {name}") from None


@dataclass
class PlatformInfo:
    """Information about the current platform."""
    platform: SupportedPlatform
    version: str
    architecture: str
    python_version: str
    is_supported: bool


@dataclass
class ApplicationPaths:
    """Platform-specific application paths."""
    config_dir: Path
    data_dir: Path
    log_dir: Path


class PlatformManagerBase(ABC):
    """Abstract base class for platform-specific managers.

    A manager answers the filesystem questions the command resolver asks:
    where application bundles live, which directories conventionally hold
    IDE launcher commands, and where the JetBrains Toolbox writes its
    shell scripts.
    """

    def __init__(self, home: Optional[Path] = None):
        """Initialize platform manager."""
        self.home = Path(home) if home is not None else Path.home()
        self.platform_info = self.get_platform_info()

    @property
    def platform(self) -> SupportedPlatform:
        return self.platform_info.platform

    @abstractmethod
    def get_platform_info(self) -> PlatformInfo:
        """Get information about the current platform."""
        pass

    @abstractmethod
    def get_application_paths(self) -> ApplicationPaths:
        """Get platform-specific application paths."""
        pass

    @abstractmethod
    def get_app_bundle_dirs(self) -> List[Path]:
        """Get directories searched for application bundles."""
        pass

    @abstractmethod
    def get_command_search_dirs(self) -> List[Path]:
        """Get conventional install directories for launcher commands, in order."""
        pass

    @abstractmethod
    def get_toolbox_script_dirs(self) -> List[Path]:
        """Get JetBrains Toolbox shell script directories."""
        pass

    def get_lookup_dirs(self) -> List[Path]:
        """Directories scanned for a bare command name, in priority order."""
        seen = set()
        ordered = []
        for directory in self.get_command_search_dirs() + self.get_toolbox_script_dirs():
            if directory not in seen:
                seen.add(directory)
                ordered.append(directory)
        return ordered

    def get_platform_specific_config(self) -> Dict[str, Any]:
        """Get platform-specific configuration options."""
        paths = self.get_application_paths()
        return {
            "platform": self.platform_info.platform.value,
            "version": self.platform_info.version,
            "architecture": self.platform_info.architecture,
            "paths": {
                "config": str(paths.config_dir),
                "data": str(paths.data_dir),
                "logs": str(paths.log_dir),
            },
            "lookup_dirs": [str(d) for d in self.get_lookup_dirs()],
        }
