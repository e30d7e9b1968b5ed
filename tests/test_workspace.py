"""Tests for turning host state into a launch target."""

import pytest

from editor_jumper.models.config import JumperSettings
from editor_jumper.models.launch import EditorState, InvocationContext
from editor_jumper.services.error_handler import NoWorkspaceOpenError
from editor_jumper.services.workspace import (
    build_launch_target,
    compute_column,
    resolve_project_root,
    uri_to_path,
)


class TestProjectRoot:
    def test_no_workspace(self):
        with pytest.raises(NoWorkspaceOpenError) as exc_info:
            resolve_project_root([], "/p/a.py")

        assert exc_info.value.error_code == "NO_WORKSPACE_OPEN"

    def test_deepest_containing_folder(self):
        folders = ["/ws", "/ws/services/api", "/other"]

        assert resolve_project_root(folders, "/ws/services/api/main.py") == "/ws/services/api"
        assert resolve_project_root(folders, "/ws/README.md") == "/ws"

    def test_prefix_is_not_containment(self):
        assert resolve_project_root(["/ws", "/ws-extra"], "/ws-extra/a.py") == "/ws-extra"

    def test_file_outside_workspace_uses_first(self):
        assert resolve_project_root(["/a", "/b"], "/tmp/scratch.py") == "/a"
        assert resolve_project_root(["/a", "/b"]) == "/a"


class TestColumns:
    def test_offset_mode(self):
        assert compute_column(0) == 1
        assert compute_column(4, "\t\tx = 1") == 5

    def test_tab_expanded_mode(self):
        assert compute_column(2, "\t\tx = 1", mode="tab_expanded", tab_width=4) == 9
        assert compute_column(3, "\tab", mode="tab_expanded", tab_width=2) == 5

    def test_tab_expanded_without_text_falls_back(self):
        assert compute_column(2, None, mode="tab_expanded") == 3


class TestLaunchTarget:
    def test_editor_state(self):
        context = InvocationContext(
            editor=EditorState(file_path="/ws/a.py", cursor_line=9, cursor_character=2),
            workspace_folders=["/ws"],
        )

        target = build_launch_target(context, JumperSettings())

        assert (target.project_root, target.file_path, target.line, target.column) == ("/ws", "/ws/a.py", 10, 3)

    def test_explicit_uri_has_no_cursor(self):
        context = InvocationContext(
            uri="file:///ws/docs/guide.md",
            editor=EditorState(file_path="/ws/a.py", cursor_line=9, cursor_character=2),
            workspace_folders=["/ws"],
        )

        target = build_launch_target(context, JumperSettings())

        assert target.file_path == "/ws/docs/guide.md"
        assert target.line is None
        assert target.column is None

    def test_project_only(self):
        target = build_launch_target(InvocationContext(workspace_folders=["/ws"]), JumperSettings())

        assert target.file_path is None
        assert target.project_root == "/ws"

    def test_tab_expanded_setting(self):
        context = InvocationContext(
            editor=EditorState(file_path="/ws/a.go", cursor_line=0, cursor_character=1, line_text="\treturn"),
            workspace_folders=["/ws"],
        )

        target = build_launch_target(context, JumperSettings(column_mode="tab_expanded", tab_width=4))

        assert target.column == 5


def test_uri_to_path():
    assert uri_to_path("file:///ws/my%20project/a.py") == "/ws/my project/a.py"
    assert uri_to_path("/already/a/path") == "/already/a/path"
