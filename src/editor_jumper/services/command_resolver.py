"""Resolves an IDE descriptor to an executable command for a platform."""

import logging
import os
import subprocess
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Callable, Optional

from ..models.config import IdeDescriptor
from ..models.launch import CommandKind, ResolvedCommand
from ..platforms.base import PlatformManagerBase, SupportedPlatform
from .error_handler import InvalidPlatformPathError, UnconfiguredError
from .ide_paths import DefaultPathTable

logger = logging.getLogger(__name__)


def is_bare_command(value: str) -> bool:
    """True when ``value`` is a command name rather than a path."""
    return "/" not in value and "\\" not in value


def is_executable_file(path: str) -> bool:
    return Path(path).is_file() and os.access(path, os.X_OK)


def which(command: str) -> Optional[str]:
    """Look ``command`` up with the system ``which``.

    A subprocess is used instead of this process's ``PATH`` because editors
    started from a desktop launcher often inherit a reduced environment.
    """
    try:
        result = subprocess.run(
            ["which", command],
            capture_output=True,
            text=True,
            timeout=5
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, subprocess.SubprocessError, OSError) as e:
        logger.debug(f"which {command} failed: {e}")
        return None

    if result.returncode != 0:
        return None
    found = result.stdout.strip().splitlines()
    return found[0].strip() if found else None


class CommandResolver:
    """Turns an :class:`IdeDescriptor` into a :class:`ResolvedCommand`.

    Resolution order: the descriptor's override for the platform (verbatim),
    then the default path table. Bare default command names are upgraded to
    absolute paths where possible (``which``, then conventional install and
    Toolbox script directories); Windows leaves that to ``cmd``.
    """

    def __init__(
        self,
        path_table: DefaultPathTable,
        platform_manager: PlatformManagerBase,
        which_lookup: Callable[[str], Optional[str]] = which,
    ):
        self.path_table = path_table
        self.platform_manager = platform_manager
        self._which = which_lookup

    def resolve(self, ide: IdeDescriptor, platform: Optional[SupportedPlatform] = None) -> ResolvedCommand:
        """Resolve ``ide`` for ``platform`` (defaults to the manager's platform).

        Raises:
            UnconfiguredError: neither an override nor a default exists.
            InvalidPlatformPathError: on macOS, the value is neither an
                application bundle nor an executable script.
        """
        platform = platform or self.platform_manager.platform

        override = ide.override_for(platform)
        if override:
            value, source = override, "override"
        else:
            value, source = self.path_table.lookup(ide.id, platform), "default"

        if not value:
            raise UnconfiguredError(ide.id, platform.value)

        # Lookups only describe this host, so other platforms keep the table value
        local = platform == self.platform_manager.platform
        if local and source == "default" and is_bare_command(value) and platform != SupportedPlatform.WINDOWS:
            value = self.locate_command(value) or value

        resolved = self._classify(ide, value, platform, source, local)
        logger.debug(f"Resolved {ide.id} on {platform.value}: {resolved}")
        return resolved

    def locate_command(self, command: str) -> Optional[str]:
        """Find an absolute path for a bare ``command``; first match wins."""
        if os.path.isabs(command) and Path(command).exists():
            return command

        found = self._which(command)
        if found:
            return found

        for directory in self.platform_manager.get_lookup_dirs():
            candidate = directory / command
            if is_executable_file(str(candidate)):
                return str(candidate)

        logger.debug(f"Command {command} not found, leaving it to PATH at launch time")
        return None

    def _classify(
        self, ide: IdeDescriptor, value: str, platform: SupportedPlatform, source: str, local: bool = True
    ) -> ResolvedCommand:
        if platform == SupportedPlatform.MACOS:
            if value.rstrip("/").endswith(".app"):
                return ResolvedCommand(value, os.path.isabs(value), CommandKind.BUNDLE, source)
            # A script for another platform cannot be checked from here
            is_script = is_executable_file(value) if local else PurePosixPath(value).is_absolute()
            if not is_bare_command(value) and is_script:
                return ResolvedCommand(value, os.path.isabs(value), CommandKind.SCRIPT, source)
            raise InvalidPlatformPathError(
                ide.id, value, "expected an application bundle (.app) or an executable script"
            )

        if is_bare_command(value):
            return ResolvedCommand(value, False, CommandKind.COMMAND, source)

        pure = PureWindowsPath(value) if platform == SupportedPlatform.WINDOWS else PurePosixPath(value)
        return ResolvedCommand(value, pure.is_absolute(), CommandKind.PATH, source)
