"""Turns host invocation state into a launch target."""

import logging
import os
from typing import List, Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from ..models.config import JumperSettings
from ..models.launch import InvocationContext, LaunchTarget
from .error_handler import NoWorkspaceOpenError

logger = logging.getLogger(__name__)


def uri_to_path(uri: str) -> str:
    """``file://`` URIs become filesystem paths; anything else is taken as a path."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return uri
    path = url2pathname(unquote(parsed.path))
    if parsed.netloc and parsed.netloc != "localhost":
        # UNC share
        return f"//{parsed.netloc}{path}"
    return path


def _contains(folder: str, path: str) -> bool:
    folder = os.path.normpath(folder)
    try:
        return os.path.commonpath([folder, os.path.normpath(path)]) == folder
    except ValueError:
        # Different drives on Windows
        return False


def resolve_project_root(workspace_folders: List[str], file_path: Optional[str] = None) -> str:
    """Pick the workspace folder containing ``file_path`` (deepest wins), else the first."""
    if not workspace_folders:
        raise NoWorkspaceOpenError()

    if file_path:
        containing = [folder for folder in workspace_folders if _contains(folder, file_path)]
        if containing:
            return max(containing, key=lambda folder: len(os.path.normpath(folder)))
        logger.debug(f"{file_path} is outside every workspace folder, using {workspace_folders[0]}")

    return workspace_folders[0]


def compute_column(
    character: int,
    line_text: Optional[str] = None,
    mode: str = "offset",
    tab_width: int = 4,
) -> int:
    """1-based column for a 0-based character offset.

    ``offset`` counts characters. ``tab_expanded`` counts each tab before the
    cursor as ``tab_width`` columns, which is how JetBrains IDEs number
    columns in tab-indented files.
    """
    if mode == "tab_expanded" and line_text is not None:
        prefix = line_text[:character]
        return sum(tab_width if ch == "\t" else 1 for ch in prefix) + 1
    return character + 1


def build_launch_target(context: InvocationContext, settings: JumperSettings) -> LaunchTarget:
    """Explicit URIs (explorer selection) carry no cursor; editor state does."""
    file_path = line = column = None

    if context.uri:
        file_path = uri_to_path(context.uri)
    elif context.editor is not None:
        editor = context.editor
        file_path = editor.file_path
        if editor.cursor_line is not None:
            line = editor.cursor_line + 1
        if editor.cursor_character is not None:
            column = compute_column(
                editor.cursor_character,
                editor.line_text,
                mode=settings.column_mode,
                tab_width=settings.tab_width,
            )

    project_root = resolve_project_root(context.workspace_folders, file_path)
    return LaunchTarget(project_root=project_root, file_path=file_path, line=line, column=column)
