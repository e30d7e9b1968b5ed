"""Configuration models for the Editor Jumper configuration system."""

from __future__ import annotations
from typing import Dict, List, Any, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..platforms.base import SupportedPlatform


XCODE_IDE_ID = "Xcode"

# Order matters: the first entry is selected on a fresh install.
STANDARD_IDE_IDS = [
    "IDEA",
    "WebStorm",
    "PyCharm",
    "GoLand",
    "CLion",
    "PhpStorm",
    "RubyMine",
    "Rider",
    "Android Studio",
]

# Storage layout used by the original editor extension, one field per platform.
LEGACY_COMMAND_FIELDS = {
    "macCommand": SupportedPlatform.MACOS,
    "windowsCommand": SupportedPlatform.WINDOWS,
    "linuxCommand": SupportedPlatform.LINUX,
}


class IdeDescriptor(BaseModel):
    """A named external IDE entry with per-platform launch overrides."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    is_custom: bool = Field(default=False, alias="isCustom")
    hidden: bool = False
    override_path_by_platform: Dict[SupportedPlatform, Optional[str]] = Field(
        default_factory=dict, alias="overridePathByPlatform"
    )

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_record(cls, data: Any) -> Any:
        """Accept records written as ``{name, macCommand, windowsCommand, linuxCommand}``."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "id" not in data and "name" in data:
            data["id"] = data.pop("name")
        overrides = dict(data.get("overridePathByPlatform") or data.get("override_path_by_platform") or {})
        for legacy_field, target in LEGACY_COMMAND_FIELDS.items():
            value = data.pop(legacy_field, None)
            if value and target.value not in overrides and target not in overrides:
                overrides[target.value] = value
        data.pop("override_path_by_platform", None)
        data["overridePathByPlatform"] = {
            SupportedPlatform.from_name(str(getattr(key, "value", key))).value: value
            for key, value in overrides.items()
        }
        return data

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("IDE id must not be empty")
        return v

    @property
    def name(self) -> str:
        return self.display_name or self.id

    def override_for(self, platform: SupportedPlatform) -> Optional[str]:
        """Return the non-empty override for ``platform``, if any."""
        value = self.override_path_by_platform.get(platform)
        if value is None or not value.strip():
            return None
        return value


class JumperSettings(BaseModel):
    """Behaviour settings stored next to the IDE list."""
    model_config = ConfigDict(populate_by_name=True)

    # "offset": raw character offset; "tab_expanded": tabs count as tab_width columns.
    # Both conventions report 1-based columns.
    column_mode: Literal["offset", "tab_expanded"] = Field(default="offset", alias="columnMode")
    tab_width: int = Field(default=4, ge=1, le=16, alias="tabWidth")
    readiness: Literal["poll_once", "fixed_delay"] = "poll_once"
    xcode_grace_period: float = Field(default=3.0, ge=0, le=60, alias="xcodeGracePeriod")  # seconds


class EditorJumperConfig(BaseModel):
    """Complete persisted configuration."""
    model_config = ConfigDict(populate_by_name=True)

    selected_ide: Optional[str] = Field(default=None, alias="selectedIDE")
    ide_configurations: List[IdeDescriptor] = Field(default_factory=list, alias="ideConfigurations")
    settings: JumperSettings = Field(default_factory=JumperSettings)

    @field_validator("ide_configurations")
    @classmethod
    def validate_unique_ids(cls, v: List[IdeDescriptor]) -> List[IdeDescriptor]:
        seen = set()
        for ide in v:
            if ide.id in seen:
                raise ValueError(f'Duplicate IDE id "{ide.id}"')
            seen.add(ide.id)
        return v

    def get_ide(self, ide_id: Optional[str]) -> Optional[IdeDescriptor]:
        if not ide_id:
            return None
        for ide in self.ide_configurations:
            if ide.id == ide_id:
                return ide
        return None

    @property
    def selected(self) -> Optional[IdeDescriptor]:
        return self.get_ide(self.selected_ide)

    def to_storage(self) -> Dict[str, Any]:
        """Plain dict suitable for JSON/YAML dumping."""
        return self.model_dump(by_alias=True, mode="json")


class ValidationResult(BaseModel):
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


def default_config() -> EditorJumperConfig:
    """Fresh default configuration: every standard JetBrains IDE, IDEA selected."""
    return EditorJumperConfig(
        selected_ide=STANDARD_IDE_IDS[0],
        ide_configurations=[IdeDescriptor(id=ide_id) for ide_id in STANDARD_IDE_IDS],
    )
