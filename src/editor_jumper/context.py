"""Wiring of the launch core; one context per host process."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import Settings, get_config
from .platforms.base import PlatformManagerBase, SupportedPlatform
from .platforms.detection import get_platform_manager
from .services.argument_builder import ArgumentBuilder
from .services.command_resolver import CommandResolver
from .services.config_manager import ConfigManager
from .services.error_handler import ErrorHandler
from .services.host_bridge import HostBridge, LoggingHostBridge
from .services.ide_paths import DefaultPathTable
from .services.jump_service import JumpService
from .services.process_launcher import ProcessLauncher

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a front end (HTTP API or CLI) needs."""
    settings: Settings
    platform_manager: PlatformManagerBase
    path_table: DefaultPathTable
    config_manager: ConfigManager
    resolver: CommandResolver
    builder: ArgumentBuilder
    launcher: ProcessLauncher
    host: HostBridge
    jump_service: JumpService

    @property
    def platform(self) -> SupportedPlatform:
        return self.platform_manager.platform


def create_context(
    app_settings: Optional[Settings] = None,
    host: Optional[HostBridge] = None,
    platform: Optional[Union[SupportedPlatform, str]] = None,
    home: Optional[Path] = None,
    launcher: Optional[ProcessLauncher] = None,
) -> AppContext:
    """Build the services and repair the stored configuration for this platform."""
    app_settings = app_settings or get_config()
    manager = get_platform_manager(platform or app_settings.platform, home=home)
    logger.info(f"Platform: {manager.platform.value}")

    path_table = DefaultPathTable.build(manager)
    config_manager = ConfigManager(str(app_settings.resolved_config_path()))
    config_manager.ensure_defaults(manager.platform)

    resolver = CommandResolver(path_table, manager)
    builder = ArgumentBuilder()
    launcher = launcher or ProcessLauncher()
    host = host or LoggingHostBridge()
    jump_service = JumpService(
        config_manager, resolver, builder, launcher, host, manager.platform, ErrorHandler()
    )

    return AppContext(
        settings=app_settings,
        platform_manager=manager,
        path_table=path_table,
        config_manager=config_manager,
        resolver=resolver,
        builder=builder,
        launcher=launcher,
        host=host,
        jump_service=jump_service,
    )
