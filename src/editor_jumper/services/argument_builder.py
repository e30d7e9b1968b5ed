"""Builds process invocations from a resolved command and a launch target."""

import logging
from pathlib import PurePosixPath
from typing import List

from ..models.config import XCODE_IDE_ID
from ..models.launch import (
    CommandKind,
    Invocation,
    LaunchPlan,
    LaunchStep,
    LaunchTarget,
    ResolvedCommand,
)
from ..platforms.base import SupportedPlatform

logger = logging.getLogger(__name__)

XCODE_FILE_OPENER = "xed"

# Characters the Windows command interpreter treats specially outside quotes
CMD_METACHARACTERS = frozenset("&|<>^()%! \t")


def _quote_segment(segment: str) -> str:
    """Double-quote ``segment`` using the MSVC runtime backslash rules."""
    out = ['"']
    backslashes = 0
    for ch in segment:
        if ch == "\\":
            backslashes += 1
            continue
        out.append("\\" * backslashes + ch)
        backslashes = 0
    # Backslashes before the closing quote must be doubled
    out.append("\\" * (backslashes * 2) + '"')
    return "".join(out)


def quote_cmd_argument(arg: str) -> str:
    """Quote one argument for a ``cmd /c`` command line.

    Quoting neutralises ``& | < > ^ ( )`` and whitespace. ``%`` and ``!`` are
    still expanded inside quotes, so they are emitted outside the quotes with
    a caret escape: ``C:\\100%`` becomes ``"C:\\100"^%""``.
    """
    if '"' in arg:
        raise ValueError(f"Argument cannot be passed through cmd: {arg!r}")
    if arg and not any(ch in CMD_METACHARACTERS for ch in arg):
        return arg

    parts = []
    segment = ""
    for ch in arg:
        if ch in "%!":
            parts.append(_quote_segment(segment))
            parts.append("^" + ch)
            segment = ""
        else:
            segment += ch
    parts.append(_quote_segment(segment))
    return "".join(parts)


def cmd_command_line(args: List[str]) -> str:
    return " ".join(quote_cmd_argument(arg) for arg in args)


class ArgumentBuilder:
    """Assembles argument arrays. Pure: same inputs, same invocation.

    Every IDE receives ``<projectRoot> [--line L --column C] [<filePath>]``.
    The prefix depends on the platform: ``open -a <bundle> --args`` on macOS,
    ``cmd /c <command>`` for bare command names on Windows, and the command
    itself everywhere else.
    """

    @staticmethod
    def trailing_arguments(target: LaunchTarget) -> List[str]:
        args = [target.project_root]
        if target.file_path:
            if target.has_position:
                # Columns and lines are 1-based, a missing half of the pair becomes 1
                args += ["--line", str(target.line or 1), "--column", str(target.column or 1)]
            args.append(target.file_path)
        return args

    def build(self, resolved: ResolvedCommand, target: LaunchTarget, platform: SupportedPlatform) -> Invocation:
        trailing = self.trailing_arguments(target)

        if platform == SupportedPlatform.MACOS:
            argv = ["open", "-a", resolved.executable_path, "--args", *trailing]
        elif platform == SupportedPlatform.WINDOWS and resolved.kind == CommandKind.COMMAND:
            command = [resolved.executable_path, *trailing]
            return Invocation(("cmd", "/c", *command), platform, shell_command=cmd_command_line(command))
        else:
            argv = [resolved.executable_path, *trailing]

        return Invocation(tuple(argv), platform)

    def plan(
        self,
        ide_id: str,
        resolved: ResolvedCommand,
        target: LaunchTarget,
        platform: SupportedPlatform,
    ) -> LaunchPlan:
        """Ordered launch steps for ``ide_id``; one step except for Xcode."""
        if ide_id == XCODE_IDE_ID and platform == SupportedPlatform.MACOS:
            return self._xcode_plan(resolved, target)
        return LaunchPlan(ide_id, (LaunchStep(self.build(resolved, target, platform)),))

    def _xcode_plan(self, resolved: ResolvedCommand, target: LaunchTarget) -> LaunchPlan:
        # Opening the project and jumping to a line are separate Xcode commands.
        bundle = resolved.executable_path
        steps = [LaunchStep(Invocation(("open", "-a", bundle, target.project_root), SupportedPlatform.MACOS))]

        if target.file_path:
            argv = [XCODE_FILE_OPENER]
            if target.line:
                argv += ["--line", str(target.line)]
            argv.append(target.file_path)
            steps.append(LaunchStep(Invocation(tuple(argv), SupportedPlatform.MACOS), requires_readiness=True))

        app_name = PurePosixPath(bundle.rstrip("/")).stem or "Xcode"
        return LaunchPlan(XCODE_IDE_ID, tuple(steps), app_process_name=app_name)
