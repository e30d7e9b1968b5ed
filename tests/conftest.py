"""
Test configuration and shared fixtures for Editor Jumper tests.

Filesystem lookups run against a temporary home and explicit search
directories, and nothing here spawns a real process.
"""

import io
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from editor_jumper.models.launch import Invocation
from editor_jumper.platforms.base import ApplicationPaths, PlatformInfo, PlatformManagerBase, SupportedPlatform
from editor_jumper.services.config_manager import ConfigManager
from editor_jumper.services.error_handler import ProcessSpawnError
from editor_jumper.services.process_launcher import ProcessLauncher


class FakePlatformManager(PlatformManagerBase):
    """Platform manager whose directories all live under a temporary home."""

    def __init__(self, platform: SupportedPlatform, home: Path):
        self._platform = platform
        super().__init__(home=home)

    def get_platform_info(self) -> PlatformInfo:
        return PlatformInfo(self._platform, "test", "x86_64", "3", True)

    def get_application_paths(self) -> ApplicationPaths:
        return ApplicationPaths(self.home / "config", self.home / "data", self.home / "logs")

    def get_app_bundle_dirs(self) -> List[Path]:
        return [self.home / "Applications"]

    def get_command_search_dirs(self) -> List[Path]:
        return [self.home / "bin"]

    def get_toolbox_script_dirs(self) -> List[Path]:
        return [self.home / "Toolbox" / "scripts"]


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


class FakeProcess:
    """Stands in for ``asyncio.subprocess.Process`` and ``subprocess.Popen``."""

    def __init__(self, pid: int, returncode: Optional[int] = 0, stderr: bytes = b""):
        self.pid = pid
        self.returncode = None
        self._final_returncode = returncode
        self._stderr = stderr

    async def communicate(self):
        self.returncode = self._final_returncode
        return b"", self._stderr

    def poll(self) -> Optional[int]:
        # A final returncode of None models a process that keeps running
        self.returncode = self._final_returncode
        return self.returncode


class RecordingLauncher(ProcessLauncher):
    """ProcessLauncher that records invocations instead of spawning them.

    ``failures`` maps a program name to ``(returncode, stderr)``; an entry
    with returncode ``None`` simulates the OS refusing to start the program.
    """

    def __init__(self, running: bool = False, failures: Optional[dict] = None, **kwargs):
        self.spawned: List[Invocation] = []
        self.sleeps: List[float] = []
        self.checked: List[str] = []
        self.failures = failures or {}

        def check(name: str) -> bool:
            self.checked.append(name)
            return running

        async def sleep(delay: float) -> None:
            self.sleeps.append(delay)

        super().__init__(running_check=check, sleep=sleep, **kwargs)

    async def spawn(self, invocation: Invocation):
        returncode, stderr = self.failures.get(invocation.program, (0, b""))
        if returncode is None:
            raise ProcessSpawnError(stderr.decode(), {"argv": list(invocation.argv)})
        self.spawned.append(invocation)
        return FakeProcess(1000 + len(self.spawned), returncode, stderr)

    def start_detached(self, invocation: Invocation):
        returncode, stderr = self.failures.get(invocation.program, (0, b""))
        if returncode is None:
            raise ProcessSpawnError(stderr.decode(), {"argv": list(invocation.argv)})
        self.spawned.append(invocation)
        return FakeProcess(1000 + len(self.spawned), returncode, stderr), io.BytesIO(stderr)


@pytest.fixture
def home(tmp_path) -> Path:
    """Temporary user home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def platform_manager_factory(home) -> Callable[[SupportedPlatform], FakePlatformManager]:
    def factory(platform: SupportedPlatform) -> FakePlatformManager:
        return FakePlatformManager(platform, home)
    return factory


@pytest.fixture
def config_manager(tmp_path) -> ConfigManager:
    """ConfigManager backed by a fresh YAML file (created on first load)."""
    return ConfigManager(str(tmp_path / "config" / "editor_jumper.yaml"))


@pytest.fixture
def no_which():
    """``which`` replacement that finds nothing."""
    return lambda command: None


@pytest.fixture
def executable() -> Callable[[Path], Path]:
    """Factory writing an executable shell script at the given path."""
    return make_executable


@pytest.fixture
def launcher_factory() -> Callable[..., RecordingLauncher]:
    return RecordingLauncher
