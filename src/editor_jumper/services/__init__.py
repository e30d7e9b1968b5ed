"""Services for Editor Jumper."""

from .argument_builder import ArgumentBuilder
from .command_resolver import CommandResolver
from .config_manager import ConfigManager
from .error_handler import (
    ConfigurationError,
    ErrorHandler,
    IdeNotFoundError,
    InvalidPlatformPathError,
    JumperError,
    NoWorkspaceOpenError,
    ProcessSpawnError,
    UnconfiguredError,
)
from .ide_paths import DefaultPathTable
from .jump_service import JumpService
from .process_launcher import FixedDelay, PollOnce, ProcessLauncher

__all__ = [
    "ArgumentBuilder",
    "CommandResolver",
    "ConfigManager",
    "ConfigurationError",
    "DefaultPathTable",
    "ErrorHandler",
    "FixedDelay",
    "IdeNotFoundError",
    "InvalidPlatformPathError",
    "JumpService",
    "JumperError",
    "NoWorkspaceOpenError",
    "PollOnce",
    "ProcessLauncher",
    "ProcessSpawnError",
    "UnconfiguredError",
]
