"""Launch entry point: host invocation context in, launch outcome out."""

import logging
from typing import Optional

from ..models.config import IdeDescriptor
from ..models.launch import ConfigurePrompt, Invocation, InvocationContext, LaunchOutcome
from ..platforms.base import SupportedPlatform
from .argument_builder import ArgumentBuilder
from .command_resolver import CommandResolver
from .config_manager import ConfigManager
from .error_handler import ErrorHandler, JumperError, UnconfiguredError
from .host_bridge import HostBridge
from .process_launcher import ProcessLauncher, readiness_from_settings
from .workspace import build_launch_target

logger = logging.getLogger(__name__)

CONFIGURE_OPTION = "Configure"


class JumpService:
    """Resolves, builds and launches; every failure becomes a :class:`LaunchOutcome`."""

    def __init__(
        self,
        config_manager: ConfigManager,
        resolver: CommandResolver,
        builder: ArgumentBuilder,
        launcher: ProcessLauncher,
        host: HostBridge,
        platform: SupportedPlatform,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.config_manager = config_manager
        self.resolver = resolver
        self.builder = builder
        self.launcher = launcher
        self.host = host
        self.platform = platform
        self.error_handler = error_handler or ErrorHandler()
        self.launcher.on_failure = self._report_exit_failure

    def _ide_name(self, ide_id: str) -> str:
        try:
            return self.config_manager.get_ide(ide_id).name
        except JumperError:
            return ide_id

    def _report_exit_failure(self, ide_id: str, invocation: Invocation, message: str) -> None:
        self.host.show_error(f"Unable to open {self._ide_name(ide_id)}: {message}")

    def _failed(self, error: Exception, ide: Optional[IdeDescriptor], context: str) -> LaunchOutcome:
        info = self.error_handler.handle_error(error, context=context, ide_name=ide.name if ide else None)
        self.host.show_error(info["message"])
        return LaunchOutcome(
            status="failed",
            ide_id=ide.id if ide else None,
            message=info["message"],
            error_code=info["error_code"],
        )

    async def jump(self, context: InvocationContext) -> LaunchOutcome:
        """Open the selected IDE at the position described by ``context``."""
        ide: Optional[IdeDescriptor] = None
        try:
            config = self.config_manager.load_config()
            ide = config.get_ide(context.ide_id or config.selected_ide)
            if ide is None:
                message = "Please select an IDE first"
                self.host.show_error(message)
                return LaunchOutcome(status="failed", ide_id=context.ide_id, message=message,
                                     error_code="NO_IDE_SELECTED")

            target = build_launch_target(context, config.settings)
            resolved = self.resolver.resolve(ide, self.platform)
            plan = self.builder.plan(ide.id, resolved, target, self.platform)
            report = await self.launcher.launch(plan, readiness=readiness_from_settings(config.settings))

        except UnconfiguredError as e:
            return await self._prompt_configuration(ide, e)
        except Exception as e:
            # Errors reach the host as outcomes, never as exceptions
            return self._failed(e, ide, f"jump:{ide.id if ide else '-'}")

        logger.info(f"Opened {target.file_path or target.project_root} in {ide.name} (pids={report.pids})")
        return LaunchOutcome(
            status="launched",
            ide_id=ide.id,
            message=f"Opened in {ide.name}",
            invocations=[invocation.display() for invocation in plan.invocations],
        )

    async def _prompt_configuration(self, ide: IdeDescriptor, error: UnconfiguredError) -> LaunchOutcome:
        self.error_handler.handle_error(error, context=f"jump:{ide.id}", ide_name=ide.name)
        prompt = ConfigurePrompt(message=error.message, highlight_ide=ide.id)
        choice = await self.host.prompt_configure(prompt)
        if choice == CONFIGURE_OPTION:
            self.host.open_configuration(highlight_ide=ide.id)
        return LaunchOutcome(
            status="unconfigured",
            ide_id=ide.id,
            message=error.message,
            error_code=error.error_code,
            prompt=prompt,
        )
