"""Error types and the error-to-message policy for Editor Jumper."""

import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class JumperError(Exception):
    """Base exception class for Editor Jumper errors."""
    def __init__(self, message: str, error_code: str = "JUMPER_ERROR", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(JumperError):
    """Exception for configuration-related errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIG_ERROR", details)


class IdeNotFoundError(ConfigurationError):
    """The requested IDE id is not in the configuration."""
    def __init__(self, ide_id: str):
        self.ide_id = ide_id
        super().__init__(f"IDE {ide_id} is not configured", {"ide_id": ide_id})


class UnconfiguredError(JumperError):
    """No command path can be determined for the IDE on this platform."""
    def __init__(self, ide_id: str, platform: str, details: Optional[Dict[str, Any]] = None):
        self.ide_id = ide_id
        self.platform = platform
        super().__init__(
            f"Path for {ide_id} is not configured. Would you like to configure it now?",
            "UNCONFIGURED",
            {"ide_id": ide_id, "platform": platform, **(details or {})},
        )


class InvalidPlatformPathError(JumperError):
    """A path resolved but cannot be launched on this platform."""
    def __init__(self, ide_id: str, path: str, reason: str, details: Optional[Dict[str, Any]] = None):
        self.ide_id = ide_id
        self.path = path
        super().__init__(
            f"Path for {ide_id} is not usable: {path} ({reason})",
            "INVALID_PLATFORM_PATH",
            {"ide_id": ide_id, "path": path, "reason": reason, **(details or {})},
        )


class ProcessSpawnError(JumperError):
    """The OS refused to start (or failed to run) the launch process."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PROCESS_SPAWN_FAILURE", details)


class NoWorkspaceOpenError(JumperError):
    """No project root is available."""
    def __init__(self, message: str = "No workspace folder is open", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "NO_WORKSPACE_OPEN", details)


class ErrorHandler:
    """Turns launch errors into log records and user-facing messages."""

    def describe(self, error: Exception, ide_name: Optional[str] = None) -> str:
        """User-facing message for ``error``; OS error text is kept verbatim."""
        if isinstance(error, ProcessSpawnError) and ide_name:
            return f"Unable to open {ide_name}: {error.message}"
        if isinstance(error, JumperError):
            return error.message
        if ide_name:
            return f"Unable to open {ide_name}: {error}"
        return str(error)

    def error_code(self, error: Exception) -> str:
        if isinstance(error, JumperError):
            return error.error_code
        return "UNEXPECTED_ERROR"

    def handle_error(self, error: Exception, context: str = "", ide_name: Optional[str] = None) -> Dict[str, Any]:
        """Log ``error`` at a level matching its kind and return its description."""
        error_info = {
            "error_type": type(error).__name__,
            "error_code": self.error_code(error),
            "message": self.describe(error, ide_name),
            "context": context,
        }

        if isinstance(error, (UnconfiguredError, NoWorkspaceOpenError)):
            logger.info(f"{context} - {error_info['error_code']}: {error_info['message']}")
        elif isinstance(error, (InvalidPlatformPathError, ConfigurationError)):
            logger.warning(f"{context} - {error_info['error_code']}: {error_info['message']}")
        elif isinstance(error, ProcessSpawnError):
            logger.error(f"{context} - {error_info['error_code']}: {error_info['message']}")
        else:
            logger.exception(f"{context} - Unexpected error: {error_info['message']}")

        return error_info
