"""Process settings for Editor Jumper (environment and ``.env``)."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .platforms.detection import get_platform_manager

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseSettings):
    """Application settings with environment variable support (``EDITOR_JUMPER_*``)."""

    # File paths; empty means the platform config/log directory
    config_path: Optional[str] = None
    log_file: Optional[str] = None
    log_level: str = "INFO"

    # Force a platform instead of detecting it ("macos", "windows", "linux")
    platform: Optional[str] = None

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8765

    model_config = SettingsConfigDict(
        env_prefix="EDITOR_JUMPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def resolved_config_path(self) -> Path:
        if self.config_path:
            return Path(self.config_path).expanduser()
        paths = get_platform_manager(self.platform).get_application_paths()
        return paths.config_dir / "config.yaml"

    def resolved_log_file(self) -> Path:
        if self.log_file:
            return Path(self.log_file).expanduser()
        paths = get_platform_manager(self.platform).get_application_paths()
        return paths.log_dir / "editor-jumper.log"


# Global settings instance
settings = Settings()


def get_config() -> Settings:
    """Get the global configuration instance."""
    return settings


def configure_logging(app_settings: Optional[Settings] = None, log_to_file: bool = True) -> None:
    """Console logging plus a rotating log file in the platform log directory."""
    app_settings = app_settings or settings
    level = getattr(logging, app_settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if not log_to_file:
        return

    root = logging.getLogger()
    if any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        return
    log_path = app_settings.resolved_log_file()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning(f"File logging disabled, cannot open {log_path}: {e}")
        return
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)
