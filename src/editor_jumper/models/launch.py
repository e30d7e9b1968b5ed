"""Launch models: what to open, how it resolved, and what was spawned."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..platforms.base import SupportedPlatform


class CommandKind(str, Enum):
    """How a resolved command value is interpreted at launch time."""
    BUNDLE = "bundle"    # macOS .app directory
    SCRIPT = "script"    # executable file, e.g. a Toolbox shim
    COMMAND = "command"  # bare name, resolved by PATH at launch
    PATH = "path"        # explicit filesystem path (Linux/Windows)


@dataclass(frozen=True)
class LaunchTarget:
    """Where to jump: project root plus an optional file position (1-based)."""
    project_root: str
    file_path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __post_init__(self):
        if self.file_path is None and (self.line is not None or self.column is not None):
            # A cursor position without a file is meaningless
            object.__setattr__(self, "line", None)
            object.__setattr__(self, "column", None)

    @property
    def has_position(self) -> bool:
        return self.file_path is not None and ((self.line or 0) > 0 or (self.column or 0) > 0)


@dataclass(frozen=True)
class ResolvedCommand:
    executable_path: str
    is_absolute_path: bool
    kind: CommandKind = CommandKind.COMMAND
    source: Literal["override", "default"] = "default"


@dataclass(frozen=True)
class Invocation:
    """A process invocation as an argument array."""
    argv: Tuple[str, ...]
    platform: SupportedPlatform
    # Line handed to the Windows command interpreter (``cmd /c <shell_command>``),
    # already quoted for it. When set, it is what gets executed.
    shell_command: Optional[str] = None

    @property
    def program(self) -> str:
        return self.argv[0]

    def display(self) -> str:
        """Quoted command line, for logs and user messages."""
        if self.shell_command is not None:
            return f"cmd /c {self.shell_command}"
        if self.platform == SupportedPlatform.WINDOWS:
            return subprocess.list2cmdline(list(self.argv))
        return shlex.join(self.argv)


@dataclass(frozen=True)
class LaunchStep:
    invocation: Invocation
    # Wait for the application to accept commands before running this step.
    requires_readiness: bool = False


@dataclass(frozen=True)
class LaunchPlan:
    ide_id: str
    steps: Tuple[LaunchStep, ...]
    # Process name checked by the readiness heuristic, if any step needs it.
    app_process_name: Optional[str] = None

    @property
    def invocations(self) -> List[Invocation]:
        return [step.invocation for step in self.steps]


@dataclass
class LaunchReport:
    """Outcome of running a plan, filled in by the launcher."""
    pids: List[int] = field(default_factory=list)
    readiness_delay: float = 0.0
    states: List[str] = field(default_factory=list)


class EditorState(BaseModel):
    """Active editor state as reported by the host (0-based cursor)."""
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    cursor_line: Optional[int] = Field(default=None, ge=0, alias="cursorLine")
    cursor_character: Optional[int] = Field(default=None, ge=0, alias="cursorCharacter")
    line_text: Optional[str] = Field(default=None, alias="lineText")


class InvocationContext(BaseModel):
    """Everything the host knows when the user asks to jump."""
    model_config = ConfigDict(populate_by_name=True)

    ide_id: Optional[str] = Field(default=None, alias="ideId")
    uri: Optional[str] = None
    editor: Optional[EditorState] = None
    workspace_folders: List[str] = Field(default_factory=list, alias="workspaceFolders")


class ConfigurePrompt(BaseModel):
    message: str
    options: List[str] = Field(default_factory=lambda: ["Configure", "Cancel"])
    highlight_ide: str = Field(alias="highlightIde")

    model_config = ConfigDict(populate_by_name=True)


class LaunchOutcome(BaseModel):
    """Result handed back to the host. Errors are data here, never exceptions."""
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["launched", "unconfigured", "failed"]
    ide_id: Optional[str] = Field(default=None, alias="ideId")
    message: Optional[str] = None
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    prompt: Optional[ConfigurePrompt] = None
    invocations: List[str] = Field(default_factory=list)
