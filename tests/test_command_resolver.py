"""Tests for resolving IDE descriptors to commands."""

from unittest.mock import Mock

import pytest

from editor_jumper.models.config import IdeDescriptor
from editor_jumper.models.launch import CommandKind
from editor_jumper.platforms.base import SupportedPlatform
from editor_jumper.services.command_resolver import CommandResolver, is_bare_command
from editor_jumper.services.error_handler import InvalidPlatformPathError, UnconfiguredError
from editor_jumper.services.ide_paths import DefaultPathTable

MAC = SupportedPlatform.MACOS
LINUX = SupportedPlatform.LINUX
WINDOWS = SupportedPlatform.WINDOWS


@pytest.fixture
def resolver_factory(platform_manager_factory, no_which):
    def factory(platform, entries=None, which_lookup=no_which):
        table = DefaultPathTable(entries if entries is not None else {
            "GoLand": {MAC: "goland", LINUX: "goland", WINDOWS: "goland"},
            "IDEA": {MAC: "/Applications/IntelliJ IDEA.app", LINUX: "idea", WINDOWS: "idea"},
        })
        return CommandResolver(table, platform_manager_factory(platform), which_lookup=which_lookup)
    return factory


class TestResolutionOrder:
    def test_override_returned_verbatim(self, resolver_factory):
        which = Mock(return_value="/usr/bin/goland")
        resolver = resolver_factory(LINUX, which_lookup=which)
        ide = IdeDescriptor(id="GoLand", override_path_by_platform={LINUX: "goland-eap"})

        resolved = resolver.resolve(ide)

        assert resolved.executable_path == "goland-eap"
        assert resolved.source == "override"
        which.assert_not_called()

    def test_default_used_without_override(self, resolver_factory):
        resolved = resolver_factory(LINUX).resolve(IdeDescriptor(id="IDEA"))

        assert resolved.executable_path == "idea"
        assert resolved.kind == CommandKind.COMMAND
        assert resolved.is_absolute_path is False
        assert resolved.source == "default"

    def test_unknown_ide_is_unconfigured(self, resolver_factory):
        with pytest.raises(UnconfiguredError) as exc_info:
            resolver_factory(LINUX).resolve(IdeDescriptor(id="Fleet", is_custom=True))

        assert exc_info.value.error_code == "UNCONFIGURED"
        assert "Fleet" in exc_info.value.message

    def test_blank_override_falls_back_to_default(self, resolver_factory):
        ide = IdeDescriptor(id="IDEA", override_path_by_platform={LINUX: ""})

        assert resolver_factory(LINUX).resolve(ide).executable_path == "idea"


class TestCommandUpgrade:
    def test_which_result_wins(self, resolver_factory):
        which = Mock(return_value="/usr/local/bin/goland")

        resolved = resolver_factory(LINUX, which_lookup=which).resolve(IdeDescriptor(id="GoLand"))

        assert resolved.executable_path == "/usr/local/bin/goland"
        assert resolved.is_absolute_path is True
        assert resolved.kind == CommandKind.PATH
        which.assert_called_once_with("goland")

    def test_search_dirs_scanned_in_order(self, resolver_factory, home, executable):
        executable(home / "bin" / "goland")
        executable(home / "Toolbox" / "scripts" / "goland")

        resolved = resolver_factory(LINUX).resolve(IdeDescriptor(id="GoLand"))

        assert resolved.executable_path == str(home / "bin" / "goland")

    def test_toolbox_script_found(self, resolver_factory, home, executable):
        script = executable(home / "Toolbox" / "scripts" / "goland")

        resolved = resolver_factory(LINUX).resolve(IdeDescriptor(id="GoLand"))

        assert resolved.executable_path == str(script)

    def test_non_executable_file_skipped(self, resolver_factory, home):
        (home / "bin").mkdir()
        (home / "bin" / "goland").write_text("not a program")

        resolved = resolver_factory(LINUX).resolve(IdeDescriptor(id="GoLand"))

        assert resolved.executable_path == "goland"

    def test_windows_never_upgrades(self, resolver_factory):
        which = Mock(return_value="C:\\JetBrains\\idea.cmd")

        resolved = resolver_factory(WINDOWS, which_lookup=which).resolve(IdeDescriptor(id="IDEA"))

        assert resolved.executable_path == "idea"
        assert resolved.kind == CommandKind.COMMAND
        which.assert_not_called()

    def test_windows_absolute_path(self, resolver_factory):
        ide = IdeDescriptor(id="IDEA", override_path_by_platform={WINDOWS: "C:\\JetBrains\\bin\\idea64.exe"})

        resolved = resolver_factory(WINDOWS).resolve(ide)

        assert resolved.kind == CommandKind.PATH
        assert resolved.is_absolute_path is True


class TestMacOSClassification:
    def test_bundle_accepted(self, resolver_factory):
        resolved = resolver_factory(MAC).resolve(IdeDescriptor(id="IDEA"))

        assert resolved.kind == CommandKind.BUNDLE
        assert resolved.executable_path == "/Applications/IntelliJ IDEA.app"

    def test_scanned_script_accepted(self, resolver_factory, home, executable):
        script = executable(home / "bin" / "goland")

        resolved = resolver_factory(MAC).resolve(IdeDescriptor(id="GoLand"))

        assert resolved.kind == CommandKind.SCRIPT
        assert resolved.executable_path == str(script)

    def test_unresolved_bare_name_rejected(self, resolver_factory):
        with pytest.raises(InvalidPlatformPathError) as exc_info:
            resolver_factory(MAC).resolve(IdeDescriptor(id="GoLand"))

        assert exc_info.value.error_code == "INVALID_PLATFORM_PATH"

    @pytest.mark.parametrize("override", ["goland", "/usr/local/bin/missing", "/Applications/GoLand"])
    def test_override_must_be_bundle_or_script(self, resolver_factory, override):
        ide = IdeDescriptor(id="GoLand", override_path_by_platform={MAC: override})

        with pytest.raises(InvalidPlatformPathError):
            resolver_factory(MAC).resolve(ide)

    def test_override_script_accepted(self, resolver_factory, home, executable):
        script = executable(home / "scripts" / "goland")
        ide = IdeDescriptor(id="GoLand", override_path_by_platform={MAC: str(script)})

        assert resolver_factory(MAC).resolve(ide).kind == CommandKind.SCRIPT


class TestOtherPlatform:
    def test_no_lookup_for_other_platform(self, resolver_factory, home, executable):
        executable(home / "bin" / "goland")
        which = Mock(return_value="/usr/bin/goland")
        resolver = resolver_factory(LINUX, which_lookup=which)

        with pytest.raises(InvalidPlatformPathError):
            resolver.resolve(IdeDescriptor(id="GoLand"), platform=MAC)

        which.assert_not_called()

    def test_other_platform_bundle_default(self, resolver_factory):
        which = Mock(return_value=None)

        resolved = resolver_factory(LINUX, which_lookup=which).resolve(IdeDescriptor(id="IDEA"), platform=MAC)

        assert resolved.kind == CommandKind.BUNDLE
        which.assert_not_called()

    def test_other_platform_script_taken_on_trust(self, resolver_factory):
        ide = IdeDescriptor(id="GoLand", override_path_by_platform={MAC: "/usr/local/bin/goland"})

        resolved = resolver_factory(LINUX).resolve(ide, platform=MAC)

        assert resolved.kind == CommandKind.SCRIPT
        assert resolved.executable_path == "/usr/local/bin/goland"

    def test_same_platform_still_looked_up(self, resolver_factory):
        which = Mock(return_value="/usr/local/bin/goland")

        resolver_factory(LINUX, which_lookup=which).resolve(IdeDescriptor(id="GoLand"), platform=LINUX)

        which.assert_called_once_with("goland")


def test_is_bare_command():
    assert is_bare_command("idea") is True
    assert is_bare_command("/usr/bin/idea") is False
    assert is_bare_command("C:\\bin\\idea.exe") is False
