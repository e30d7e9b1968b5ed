"""Configuration manager for the IDE list and the selected IDE."""

import json
import yaml
import logging
import threading
from pathlib import Path
from typing import Dict, Any, Optional, List, Callable

from pydantic import ValidationError

from ..models.config import (
    EditorJumperConfig,
    IdeDescriptor,
    ValidationResult,
    XCODE_IDE_ID,
    default_config,
)
from ..platforms.base import SupportedPlatform
from .error_handler import ConfigurationError, IdeNotFoundError

logger = logging.getLogger(__name__)


class ConfigManager:
    """Persists :class:`EditorJumperConfig` as YAML or JSON and edits it safely.

    Every mutation loads the current file, applies the change to a copy,
    re-validates the whole document and writes it back under a lock, so the
    selected IDE always references an existing entry.
    """

    def __init__(self, config_path: str = "editor_jumper.yaml"):
        """Initialize config manager with path to configuration file."""
        self.config_path = Path(config_path)
        self._config: Optional[EditorJumperConfig] = None
        self._last_modified: Optional[float] = None
        self._lock = threading.RLock()

    def _is_yaml(self) -> bool:
        return self.config_path.suffix.lower() in (".yaml", ".yml")

    def load_config(self) -> EditorJumperConfig:
        """Load configuration from file, creating the default one if missing."""
        try:
            if not self.config_path.exists():
                logger.info(f"Configuration file {self.config_path} not found, creating default config")
                config = default_config()
                self.save_config(config)
                return config

            # Check if file has been modified
            current_modified = self.config_path.stat().st_mtime
            if self._config is not None and self._last_modified == current_modified:
                return self._config

            raw_content = self.config_path.read_text(encoding='utf-8')

            if self._is_yaml():
                config_data = yaml.safe_load(raw_content) or {}
            else:
                config_data = json.loads(raw_content) if raw_content.strip() else {}

            logger.debug(f"Raw config data keys: {list(config_data.keys())}")

            config = EditorJumperConfig.model_validate(config_data)

            self._config = config
            self._last_modified = current_modified

            logger.info(f"Configuration loaded successfully from {self.config_path}")
            return config

        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}")
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"Configuration parsing failed: {e}")
            raise ConfigurationError(f"Invalid configuration format: {e}")

    def save_config(self, config: EditorJumperConfig, format: str = "auto") -> None:
        """Save configuration to file in specified format (json, yaml or auto by suffix)."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            config_dict = config.to_storage()

            if format.lower() == "yaml" or (format.lower() == "auto" and self._is_yaml()):
                formatted_content = yaml.safe_dump(config_dict, default_flow_style=False, indent=2,
                                                   allow_unicode=True, sort_keys=False)
            else:
                formatted_content = json.dumps(config_dict, indent=2, ensure_ascii=False)

            self.config_path.write_text(formatted_content, encoding='utf-8')

            self._config = config
            self._last_modified = self.config_path.stat().st_mtime

            logger.info(f"Configuration saved to {self.config_path}")

        except OSError as e:
            logger.error(f"Failed to save configuration: {e}")
            raise ConfigurationError(f"Failed to save configuration: {e}")

    def validate_config(self, config_data: Dict[str, Any]) -> ValidationResult:
        """Validate configuration data and return validation result."""
        errors = []
        warnings = []

        try:
            config = EditorJumperConfig.model_validate(config_data)
        except ValidationError as e:
            errors.extend([f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()])
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        if config.selected_ide and config.selected is None:
            errors.append(f"Selected IDE '{config.selected_ide}' is not configured")
        if not config.ide_configurations:
            warnings.append("No IDEs configured")
        for ide in config.ide_configurations:
            if ide.is_custom and not any(ide.override_for(p) for p in SupportedPlatform):
                warnings.append(f"Custom IDE '{ide.id}' has no command path for any platform")
        if config.selected is not None and config.selected.hidden:
            warnings.append(f"Selected IDE '{config.selected_ide}' is hidden")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)

    def _mutate(self, change: Callable[[EditorJumperConfig], Any]) -> Any:
        """Apply ``change`` to a copy of the current config, validate, save."""
        with self._lock:
            working = self.load_config().model_copy(deep=True)
            result = change(working)
            try:
                updated = EditorJumperConfig.model_validate(working.to_storage())
            except ValidationError as e:
                raise ConfigurationError(f"Invalid configuration: {e}")
            self.save_config(updated)
            return result

    def get_ide(self, ide_id: str) -> IdeDescriptor:
        ide = self.load_config().get_ide(ide_id)
        if ide is None:
            raise IdeNotFoundError(ide_id)
        return ide

    def get_selected_ide(self) -> Optional[IdeDescriptor]:
        return self.load_config().selected

    def ensure_defaults(self, platform: SupportedPlatform) -> EditorJumperConfig:
        """Activation-time repair: Xcode on macOS, and a valid selection."""
        with self._lock:
            config = self.load_config()
            needs_xcode = platform == SupportedPlatform.MACOS and config.get_ide(XCODE_IDE_ID) is None
            needs_selection = config.selected is None and bool(config.ide_configurations)
            if not (needs_xcode or needs_selection):
                return config

            def change(cfg: EditorJumperConfig) -> None:
                if needs_xcode:
                    cfg.ide_configurations.append(IdeDescriptor(id=XCODE_IDE_ID))
                    logger.info("Added Xcode to the IDE list")
                if cfg.selected is None and cfg.ide_configurations:
                    cfg.selected_ide = cfg.ide_configurations[0].id
                    logger.info(f"Selected IDE reset to {cfg.selected_ide}")

            self._mutate(change)
            return self.load_config()

    def save_ide(self, descriptor: IdeDescriptor, platform: SupportedPlatform, replace: bool = False) -> IdeDescriptor:
        """Add ``descriptor`` or update the entry with the same id.

        Only the override for ``platform`` is taken from ``descriptor`` when
        updating; overrides saved on other platforms are kept. Adding a
        standard IDE that already exists is rejected unless ``replace``.
        """
        if descriptor.is_custom and not descriptor.override_for(platform):
            raise ConfigurationError("Please provide a command path", {"ide_id": descriptor.id})

        def change(cfg: EditorJumperConfig) -> IdeDescriptor:
            existing = cfg.get_ide(descriptor.id)
            if existing is None:
                cfg.ide_configurations.append(descriptor)
                logger.info(f"Added IDE: {descriptor.id}")
                return descriptor

            if not replace and not descriptor.is_custom and not existing.is_custom:
                raise ConfigurationError(f"IDE {descriptor.id} already exists", {"ide_id": descriptor.id})

            overrides = dict(existing.override_path_by_platform)
            overrides[platform] = descriptor.override_path_by_platform.get(platform)
            updated = descriptor.model_copy(update={"override_path_by_platform": overrides})
            cfg.ide_configurations = [updated if ide.id == descriptor.id else ide for ide in cfg.ide_configurations]
            self._reselect_if_hidden(cfg, updated)
            logger.info(f"Updated IDE: {descriptor.id}")
            return updated

        return self._mutate(change)

    def update_ide(
        self,
        ide_id: str,
        *,
        hidden: Optional[bool] = None,
        display_name: Optional[str] = None,
    ) -> IdeDescriptor:
        """Change presentation fields of an existing IDE."""
        def change(cfg: EditorJumperConfig) -> IdeDescriptor:
            ide = cfg.get_ide(ide_id)
            if ide is None:
                raise IdeNotFoundError(ide_id)
            if hidden is not None:
                ide.hidden = hidden
            if display_name is not None:
                ide.display_name = display_name or None
            self._reselect_if_hidden(cfg, ide)
            return ide

        return self._mutate(change)

    def set_override(self, ide_id: str, platform: SupportedPlatform, path: Optional[str]) -> IdeDescriptor:
        """Set (or clear, with an empty ``path``) the override for one platform."""
        def change(cfg: EditorJumperConfig) -> IdeDescriptor:
            ide = cfg.get_ide(ide_id)
            if ide is None:
                raise IdeNotFoundError(ide_id)
            if path:
                ide.override_path_by_platform[platform] = path
            else:
                ide.override_path_by_platform.pop(platform, None)
            logger.info(f"Set {platform.value} path for {ide_id}: {path or '(default)'}")
            return ide

        return self._mutate(change)

    def remove_ide(self, ide_id: str) -> bool:
        """Remove an IDE. The selected IDE cannot be removed."""
        def change(cfg: EditorJumperConfig) -> bool:
            if cfg.get_ide(ide_id) is None:
                return False
            if cfg.selected_ide == ide_id:
                raise ConfigurationError(
                    "Cannot remove currently selected IDE. Please select another IDE first",
                    {"ide_id": ide_id},
                )
            cfg.ide_configurations = [ide for ide in cfg.ide_configurations if ide.id != ide_id]
            logger.info(f"Removed IDE: {ide_id}")
            return True

        return self._mutate(change)

    def select_ide(self, ide_id: str) -> IdeDescriptor:
        def change(cfg: EditorJumperConfig) -> IdeDescriptor:
            ide = cfg.get_ide(ide_id)
            if ide is None:
                raise IdeNotFoundError(ide_id)
            cfg.selected_ide = ide_id
            logger.info(f"Selected IDE: {ide_id}")
            return ide

        return self._mutate(change)

    @staticmethod
    def _reselect_if_hidden(cfg: EditorJumperConfig, ide: IdeDescriptor) -> None:
        if ide.hidden and cfg.selected_ide == ide.id:
            first_visible = next((i for i in cfg.ide_configurations if not i.hidden), None)
            if first_visible is not None:
                cfg.selected_ide = first_visible.id
                logger.info(f"Selected IDE {ide.id} was hidden, now using {first_visible.id}")

    def visible_ides(self) -> List[Dict[str, Any]]:
        """Quick-pick items for every IDE that is not hidden."""
        config = self.load_config()
        return [
            {
                "id": ide.id,
                "label": ide.name,
                "description": "(Custom)" if ide.is_custom else "",
                "selected": ide.id == config.selected_ide,
            }
            for ide in config.ide_configurations
            if not ide.hidden
        ]

    def status(self) -> Dict[str, str]:
        """Status-bar text and tooltip for the current selection."""
        current = self.get_selected_ide()
        if current is None:
            return {"text": "Select IDE", "tooltip": "Click to select IDE"}
        return {"text": current.name, "tooltip": f"Click to select IDE (Current: {current.name})"}
