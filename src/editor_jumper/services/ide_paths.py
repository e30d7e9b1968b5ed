"""Static IDE id to per-platform default command table."""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..models.config import STANDARD_IDE_IDS, XCODE_IDE_ID
from ..platforms.base import PlatformManagerBase, SupportedPlatform

logger = logging.getLogger(__name__)


# Launcher command shipped by each IDE (also the Toolbox script name)
IDE_COMMANDS: Dict[str, str] = {
    "IDEA": "idea",
    "WebStorm": "webstorm",
    "PyCharm": "pycharm",
    "GoLand": "goland",
    "CLion": "clion",
    "PhpStorm": "phpstorm",
    "RubyMine": "rubymine",
    "Rider": "rider",
    "Android Studio": "studio",
}

# Candidate bundle names on macOS, most specific edition first
IDE_APP_NAMES: Dict[str, List[str]] = {
    "IDEA": [
        "IntelliJ IDEA Ultimate.app",
        "IntelliJ IDEA.app",
        "IntelliJ IDEA CE.app",
        "IntelliJ IDEA Community Edition.app",
    ],
    "WebStorm": ["WebStorm.app"],
    "PyCharm": [
        "PyCharm Professional Edition.app",
        "PyCharm.app",
        "PyCharm CE.app",
        "PyCharm Community Edition.app",
    ],
    "GoLand": ["GoLand.app"],
    "CLion": ["CLion.app"],
    "PhpStorm": ["PhpStorm.app"],
    "RubyMine": ["RubyMine.app"],
    "Rider": ["Rider.app"],
    "Android Studio": ["Android Studio.app"],
}

XCODE_APP_NAME = "Xcode.app"
XCODE_DEFAULT_PATH = "/Applications/Xcode.app"


def find_app_bundle(locations: Iterable[Path], app_names: Iterable[str]) -> Optional[str]:
    """Return the first existing ``<location>/<name>.app``; non-bundle names are ignored."""
    bundle_names = [name for name in app_names if name.endswith(".app")]
    for location in locations:
        for app_name in bundle_names:
            full_path = Path(location) / app_name
            if full_path.exists():
                return str(full_path)
    return None


class DefaultPathTable:
    """Mapping ``IdeId -> {Platform: default command or bundle path}``.

    The table is read-only after construction apart from :meth:`ensure_xcode`,
    which inserts the Xcode entry once, on macOS only.
    """

    def __init__(self, entries: Dict[str, Dict[SupportedPlatform, str]]):
        self._entries = {ide_id: dict(paths) for ide_id, paths in entries.items()}

    @classmethod
    def build(cls, manager: PlatformManagerBase) -> "DefaultPathTable":
        """Build the table for the platform ``manager`` describes, probing bundles on macOS."""
        is_mac = manager.platform == SupportedPlatform.MACOS
        entries: Dict[str, Dict[SupportedPlatform, str]] = {}

        for ide_id in STANDARD_IDE_IDS:
            command = IDE_COMMANDS[ide_id]
            mac_value = command
            if is_mac:
                # No bundle installed: fall back to the command so a Toolbox script can be found
                mac_value = find_app_bundle(manager.get_app_bundle_dirs(), IDE_APP_NAMES[ide_id]) or command
            entries[ide_id] = {
                SupportedPlatform.MACOS: mac_value,
                SupportedPlatform.WINDOWS: command,
                SupportedPlatform.LINUX: command,
            }

        table = cls(entries)
        if is_mac:
            table.ensure_xcode(manager)
        logger.debug(f"Default path table built for {manager.platform.value}: {table.as_dict()}")
        return table

    def ensure_xcode(self, manager: PlatformManagerBase) -> bool:
        """Insert the Xcode entry if running on macOS and it is absent."""
        if manager.platform != SupportedPlatform.MACOS or XCODE_IDE_ID in self._entries:
            return False
        bundle = find_app_bundle(manager.get_app_bundle_dirs(), [XCODE_APP_NAME]) or XCODE_DEFAULT_PATH
        self._entries[XCODE_IDE_ID] = {SupportedPlatform.MACOS: bundle}
        logger.info(f"Registered Xcode default path: {bundle}")
        return True

    def lookup(self, ide_id: str, platform: SupportedPlatform) -> Optional[str]:
        value = self._entries.get(ide_id, {}).get(platform)
        return value or None

    def __contains__(self, ide_id: object) -> bool:
        return ide_id in self._entries

    def ids(self) -> List[str]:
        return list(self._entries)

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            ide_id: {platform.value: value for platform, value in paths.items()}
            for ide_id, paths in self._entries.items()
        }
