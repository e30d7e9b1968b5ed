"""Command line front end: jump to a file, manage the IDE list, run the API server."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from .config import Settings, configure_logging
from .context import AppContext, create_context
from .models.config import STANDARD_IDE_IDS, IdeDescriptor
from .models.launch import ConfigurePrompt, EditorState, InvocationContext
from .platforms.base import SupportedPlatform
from .services.error_handler import JumperError
from .services.host_bridge import HostBridge

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNCONFIGURED = 2


class ConsoleHostBridge(HostBridge):
    """Host bridge for a terminal; prompts only when stdin is interactive."""

    def __init__(self, interactive: Optional[bool] = None):
        self.interactive = sys.stdin.isatty() if interactive is None else interactive
        self.configuration_requested: Optional[str] = None

    def show_error(self, message: str) -> None:
        err_console.print(f"[red]{escape(message)}[/red]")

    def show_info(self, message: str) -> None:
        console.print(message)

    async def prompt_configure(self, prompt: ConfigurePrompt) -> Optional[str]:
        err_console.print(f"[yellow]{escape(prompt.message)}[/yellow]")
        if not self.interactive:
            return None
        return await asyncio.to_thread(
            Prompt.ask, "Choose", choices=prompt.options, default=prompt.options[-1], console=err_console
        )

    def open_configuration(self, highlight_ide: Optional[str] = None) -> None:
        self.configuration_requested = highlight_ide
        target = highlight_ide or "<IDE>"
        err_console.print(f"Set a path with: [bold]editor-jumper set-path \"{target}\" <path>[/bold]")


def _parse_platform(name: Optional[str]) -> Optional[SupportedPlatform]:
    if not name:
        return None
    try:
        return SupportedPlatform.from_name(name)
    except ValueError as e:
        raise SystemExit(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editor-jumper",
        description="Open files at the cursor position in JetBrains IDEs and Xcode",
    )
    parser.add_argument("--config", help="Configuration file (YAML or JSON)")
    parser.add_argument("--platform", help="Act as if running on macos, windows or linux")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING for commands)")
    sub = parser.add_subparsers(dest="command", required=True)

    open_cmd = sub.add_parser("open", help="Open a project or file in the selected IDE")
    open_cmd.add_argument("file", nargs="?", help="File to open")
    open_cmd.add_argument("--ide", help="IDE id to use instead of the selected one")
    open_cmd.add_argument("--line", type=int, help="1-based line number")
    open_cmd.add_argument("--column", type=int, help="1-based column number")
    open_cmd.add_argument("--line-text", help="Text of the cursor line, for tab-expanded columns")
    open_cmd.add_argument("--workspace", action="append", default=None,
                          help="Workspace folder (repeatable, default: current directory)")
    open_cmd.add_argument("--wait", type=float, default=1.0,
                          help="Seconds to wait for an early launch failure (default: 1.0)")

    sub.add_parser("list", help="List configured IDEs")

    select_cmd = sub.add_parser("select", help="Select the IDE used by 'open'")
    select_cmd.add_argument("ide")

    set_path = sub.add_parser("set-path", help="Override the command path of an IDE")
    set_path.add_argument("ide")
    set_path.add_argument("path", nargs="?", default="", help="Command or path; omit to clear the override")
    set_path.add_argument("--for-platform", dest="for_platform", help="Platform the path applies to")

    for name, help_text in (("hide", "Hide an IDE from the selector"), ("show", "Show a hidden IDE")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("ide")

    add_cmd = sub.add_parser("add", help="Add a custom IDE")
    add_cmd.add_argument("ide")
    add_cmd.add_argument("path", help="Command or path for the current platform")
    add_cmd.add_argument("--name", help="Display name")
    add_cmd.add_argument("--replace", action="store_true", help="Update an existing standard IDE")

    remove_cmd = sub.add_parser("remove", help="Remove an IDE")
    remove_cmd.add_argument("ide")

    resolve_cmd = sub.add_parser("resolve", help="Show the command an IDE resolves to")
    resolve_cmd.add_argument("ide")
    resolve_cmd.add_argument("--for-platform", dest="for_platform")

    serve_cmd = sub.add_parser("serve", help="Run the HTTP API")
    serve_cmd.add_argument("--host")
    serve_cmd.add_argument("--port", type=int)

    return parser


def build_invocation(args: argparse.Namespace) -> InvocationContext:
    """Translate 1-based command line positions into host editor state (0-based)."""
    workspaces = [str(Path(w).resolve()) for w in (args.workspace or [os.getcwd()])]
    editor = None
    if args.file:
        editor = EditorState(
            file_path=str(Path(args.file).resolve()),
            cursor_line=args.line - 1 if args.line and args.line > 0 else None,
            cursor_character=args.column - 1 if args.column and args.column > 0 else None,
            line_text=args.line_text,
        )
    return InvocationContext(ide_id=args.ide, editor=editor, workspace_folders=workspaces)


async def _open(context: AppContext, args: argparse.Namespace) -> int:
    outcome = await context.jump_service.jump(build_invocation(args))
    if outcome.status == "launched":
        # Fire-and-forget launches report exit failures asynchronously
        await context.launcher.drain(timeout=args.wait)
        for line in outcome.invocations:
            logger.info(f"Ran: {line}")
        console.print(f"[green]{escape(outcome.message)}[/green]")
        return EXIT_OK
    if outcome.status == "unconfigured":
        return EXIT_UNCONFIGURED
    return EXIT_FAILED


def _list(context: AppContext) -> int:
    config = context.config_manager.load_config()
    table = Table(title=f"IDEs ({context.platform.value})")
    table.add_column("", style="green")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Path", style="yellow")
    table.add_column("Flags", style="magenta")

    for ide in config.ide_configurations:
        override = ide.override_for(context.platform)
        default = context.path_table.lookup(ide.id, context.platform)
        flags = [flag for flag, on in (("custom", ide.is_custom), ("hidden", ide.hidden)) if on]
        table.add_row(
            "*" if ide.id == config.selected_ide else "",
            ide.id,
            ide.name,
            override or (f"{default} (default)" if default else "[red]not configured[/red]"),
            ", ".join(flags),
        )
    console.print(table)
    return EXIT_OK


def _resolve(context: AppContext, args: argparse.Namespace) -> int:
    ide = context.config_manager.get_ide(args.ide)
    resolved = context.resolver.resolve(ide, _parse_platform(args.for_platform))
    console.print(f"{resolved.executable_path}  [dim]({resolved.kind.value}, {resolved.source})[/dim]")
    return EXIT_OK


def _add(context: AppContext, args: argparse.Namespace) -> int:
    platform = context.platform
    descriptor = IdeDescriptor(
        id=args.ide,
        display_name=args.name,
        is_custom=args.ide not in STANDARD_IDE_IDS,
        override_path_by_platform={platform: args.path},
    )
    saved = context.config_manager.save_ide(descriptor, platform, replace=args.replace)
    console.print(f"Saved {saved.name}")
    return EXIT_OK


def _serve(app_settings: Settings, args: argparse.Namespace) -> int:
    from . import serve

    serve(host=args.host, port=args.port, app_settings=app_settings)
    return EXIT_OK


def run(argv: Optional[List[str]] = None, host: Optional[HostBridge] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.config:
        overrides["config_path"] = args.config
    if args.platform:
        overrides["platform"] = _parse_platform(args.platform).value
    if args.log_level:
        overrides["log_level"] = args.log_level
    elif args.command != "serve":
        overrides["log_level"] = "WARNING"
    app_settings = Settings(**overrides)
    configure_logging(app_settings, log_to_file=args.command in ("open", "serve"))

    if args.command == "serve":
        return _serve(app_settings, args)

    try:
        context = create_context(app_settings, host=host or ConsoleHostBridge())
        manager = context.config_manager

        if args.command == "open":
            return asyncio.run(_open(context, args))
        if args.command == "list":
            return _list(context)
        if args.command == "resolve":
            return _resolve(context, args)
        if args.command == "add":
            return _add(context, args)
        if args.command == "select":
            console.print(f"Selected {manager.select_ide(args.ide).name}")
        elif args.command == "set-path":
            platform = _parse_platform(args.for_platform) or context.platform
            manager.set_override(args.ide, platform, args.path)
            console.print(f"{args.ide}: {args.path or 'using default path'} on {platform.value}")
        elif args.command in ("hide", "show"):
            manager.update_ide(args.ide, hidden=args.command == "hide")
            current = manager.get_selected_ide()
            console.print(f"{args.ide} {'hidden' if args.command == 'hide' else 'shown'}"
                          + (f", selected: {current.name}" if current else ""))
        elif args.command == "remove":
            if not manager.remove_ide(args.ide):
                err_console.print(f"[red]IDE {args.ide} is not configured[/red]")
                return EXIT_FAILED
            console.print(f"Removed {args.ide}")
        return EXIT_OK

    except JumperError as e:
        err_console.print(f"[red]{escape(e.message)}[/red]")
        return EXIT_FAILED


def main() -> None:
    """CLI entry point."""
    sys.exit(run())
