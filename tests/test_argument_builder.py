"""Tests for launch argument building."""

import pytest

from editor_jumper.models.launch import CommandKind, LaunchTarget, ResolvedCommand
from editor_jumper.platforms.base import SupportedPlatform
from editor_jumper.services.argument_builder import ArgumentBuilder, cmd_command_line, quote_cmd_argument
from editor_jumper.services.command_resolver import CommandResolver
from editor_jumper.services.ide_paths import DefaultPathTable
from editor_jumper.models.config import IdeDescriptor

MAC = SupportedPlatform.MACOS
LINUX = SupportedPlatform.LINUX
WINDOWS = SupportedPlatform.WINDOWS


@pytest.fixture
def builder():
    return ArgumentBuilder()


class TestTrailingArguments:
    def test_project_only(self):
        assert ArgumentBuilder.trailing_arguments(LaunchTarget("/p")) == ["/p"]

    def test_file_without_position(self):
        assert ArgumentBuilder.trailing_arguments(LaunchTarget("/p", "/p/a.go")) == ["/p", "/p/a.go"]

    def test_file_with_position(self):
        target = LaunchTarget("/p", "/p/a.go", line=10, column=3)

        assert ArgumentBuilder.trailing_arguments(target) == ["/p", "--line", "10", "--column", "3", "/p/a.go"]

    def test_missing_half_of_pair_is_one(self):
        target = LaunchTarget("/p", "/p/a.go", line=7)

        assert ArgumentBuilder.trailing_arguments(target) == ["/p", "--line", "7", "--column", "1", "/p/a.go"]

    def test_zero_position_omitted(self):
        target = LaunchTarget("/p", "/p/a.go", line=0, column=0)

        assert ArgumentBuilder.trailing_arguments(target) == ["/p", "/p/a.go"]


class TestBuild:
    @pytest.mark.parametrize("platform, resolved", [
        (MAC, ResolvedCommand("/Applications/GoLand.app", True, CommandKind.BUNDLE)),
        (LINUX, ResolvedCommand("goland", False, CommandKind.COMMAND)),
        (WINDOWS, ResolvedCommand("goland", False, CommandKind.COMMAND)),
    ])
    def test_no_file_means_no_position_flags(self, builder, platform, resolved):
        invocation = builder.build(resolved, LaunchTarget("/p", line=10, column=3), platform)

        assert "--line" not in invocation.argv
        assert "--column" not in invocation.argv
        assert invocation.argv[-1] == "/p"

    def test_build_is_idempotent(self, builder):
        resolved = ResolvedCommand("/usr/bin/idea", True, CommandKind.PATH)
        target = LaunchTarget("/p", "/p/a.py", line=2, column=5)

        assert builder.build(resolved, target, LINUX) == builder.build(resolved, target, LINUX)

    def test_macos_opens_through_launch_services(self, builder):
        resolved = ResolvedCommand("/Applications/PyCharm CE.app", True, CommandKind.BUNDLE)

        invocation = builder.build(resolved, LaunchTarget("/p", "/p/a.py", 1, 1), MAC)

        assert invocation.argv == (
            "open", "-a", "/Applications/PyCharm CE.app", "--args",
            "/p", "--line", "1", "--column", "1", "/p/a.py",
        )

    def test_macos_scanned_goland(self, builder, platform_manager_factory, home, executable):
        script = executable(home / "bin" / "goland")
        table = DefaultPathTable({"GoLand": {MAC: "goland"}})
        resolver = CommandResolver(table, platform_manager_factory(MAC), which_lookup=lambda c: None)

        resolved = resolver.resolve(IdeDescriptor(id="GoLand"))
        invocation = builder.build(resolved, LaunchTarget("/p", "/p/a.go", line=10, column=3), MAC)

        assert invocation.argv == (
            "open", "-a", str(script), "--args", "/p", "--line", "10", "--column", "3", "/p/a.go",
        )

    def test_windows_bare_command_goes_through_cmd(self, builder):
        resolved = ResolvedCommand("idea", False, CommandKind.COMMAND)

        invocation = builder.build(resolved, LaunchTarget("/p", "/p/A.java", 4, 2), WINDOWS)

        assert invocation.argv[:4] == ("cmd", "/c", "idea", "/p")

    def test_windows_ampersand_path_is_quoted_for_cmd(self, builder):
        resolved = ResolvedCommand("idea", False, CommandKind.COMMAND)
        target = LaunchTarget("C:\\R&D\\proj", "C:\\R&D\\proj\\a.py", 3, 1)

        invocation = builder.build(resolved, target, WINDOWS)

        expected = 'idea "C:\\R&D\\proj" --line 3 --column 1 "C:\\R&D\\proj\\a.py"'
        assert invocation.shell_command == expected
        assert invocation.display() == "cmd /c " + expected

    def test_windows_path_with_spaces_is_quoted_for_cmd(self, builder):
        resolved = ResolvedCommand("idea", False, CommandKind.COMMAND)

        invocation = builder.build(resolved, LaunchTarget("C:\\My Project"), WINDOWS)

        assert invocation.display() == 'cmd /c idea "C:\\My Project"'

    def test_windows_path_runs_directly(self, builder):
        resolved = ResolvedCommand("C:\\JetBrains\\idea64.exe", True, CommandKind.PATH)

        invocation = builder.build(resolved, LaunchTarget("C:\\p"), WINDOWS)

        assert invocation.argv == ("C:\\JetBrains\\idea64.exe", "C:\\p")

    def test_linux_runs_command_directly(self, builder):
        resolved = ResolvedCommand("/opt/idea/bin/idea.sh", True, CommandKind.PATH)

        invocation = builder.build(resolved, LaunchTarget("/p", "/p/a.kt"), LINUX)

        assert invocation.argv == ("/opt/idea/bin/idea.sh", "/p", "/p/a.kt")


class TestPlan:
    def test_regular_ide_has_one_step(self, builder):
        resolved = ResolvedCommand("idea", False, CommandKind.COMMAND)

        plan = builder.plan("IDEA", resolved, LaunchTarget("/p", "/p/a.py", 1, 1), LINUX)

        assert len(plan.steps) == 1
        assert plan.steps[0].requires_readiness is False
        assert plan.app_process_name is None

    def test_xcode_plan_with_file(self, builder):
        resolved = ResolvedCommand("/Applications/Xcode.app", True, CommandKind.BUNDLE)

        plan = builder.plan("Xcode", resolved, LaunchTarget("/p", "/p/main.swift", line=12, column=4), MAC)

        assert [step.invocation.argv for step in plan.steps] == [
            ("open", "-a", "/Applications/Xcode.app", "/p"),
            ("xed", "--line", "12", "/p/main.swift"),
        ]
        assert [step.requires_readiness for step in plan.steps] == [False, True]
        assert plan.app_process_name == "Xcode"

    def test_xcode_plan_without_file(self, builder):
        resolved = ResolvedCommand("/Applications/Xcode-beta.app", True, CommandKind.BUNDLE)

        plan = builder.plan("Xcode", resolved, LaunchTarget("/p"), MAC)

        assert len(plan.steps) == 1
        assert plan.app_process_name == "Xcode-beta"


class TestCmdQuoting:
    def test_plain_argument_unchanged(self):
        assert quote_cmd_argument("--line") == "--line"
        assert quote_cmd_argument("C:\\p\\a.py") == "C:\\p\\a.py"

    @pytest.mark.parametrize("arg", ["a&b", "a|b", "a<b", "a>b", "a^b", "(a)", "a b", "a\tb"])
    def test_metacharacters_quoted(self, arg):
        assert quote_cmd_argument(arg) == f'"{arg}"'

    def test_empty_argument_quoted(self):
        assert quote_cmd_argument("") == '""'

    def test_percent_escaped_outside_quotes(self):
        assert quote_cmd_argument("C:\\100%") == '"C:\\100"^%""'
        assert quote_cmd_argument("%PATH%") == '""^%"PATH"^%""'

    def test_exclamation_escaped_outside_quotes(self):
        assert quote_cmd_argument("hi!") == '"hi"^!""'

    def test_trailing_backslash_doubled(self):
        assert quote_cmd_argument("C:\\R&D\\") == '"C:\\R&D\\\\"'

    def test_double_quote_rejected(self):
        with pytest.raises(ValueError):
            quote_cmd_argument('say "hi"')

    def test_command_line_joins_quoted_arguments(self):
        assert cmd_command_line(["idea", "C:\\A B", "--line", "2"]) == 'idea "C:\\A B" --line 2'
