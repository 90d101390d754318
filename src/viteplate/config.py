# src/viteplate/config.py
from __future__ import annotations
import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError

from .exceptions import ConfigurationError
from .models import DEFAULT_COMMIT_MESSAGE, PackageManager


class UserConfig(BaseModel):
    """User defaults for project generation."""

    default_package_manager: PackageManager = PackageManager.NPM
    install_dependencies: bool = True
    initialize_git: bool = True
    setup_environment: bool = True
    template_dir: Optional[Path] = None
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    quiet_mode: bool = False

    @classmethod
    def get_config_paths(cls) -> list[Path]:
        """Get possible configuration file locations in order of precedence."""
        paths = []

        # 1. Environment variable override
        if env_path := os.getenv("VITEPLATE_CONFIG"):
            paths.append(Path(env_path))

        # 2. Current directory (project-specific)
        paths.append(Path.cwd() / ".viteplate.yml")

        # 3. User config directory (XDG Base Directory)
        if xdg_config := os.getenv("XDG_CONFIG_HOME"):
            paths.append(Path(xdg_config) / "viteplate" / "config.yml")
        else:
            paths.append(Path.home() / ".config" / "viteplate" / "config.yml")

        # 4. Home directory fallback
        paths.append(Path.home() / ".viteplate.yml")

        return paths

    @classmethod
    def default_save_path(cls) -> Path:
        """User config directory, skipping the env override and cwd entries."""
        return cls.get_config_paths()[-2]

    @classmethod
    def load(cls) -> UserConfig:
        """Load config from standard locations."""
        for config_path in cls.get_config_paths():
            if config_path.exists():
                try:
                    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
                    if data is None:
                        continue  # Empty file
                    return cls.model_validate(data)
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}") from e
                except Exception as e:
                    raise ConfigurationError(f"Error reading config file {config_path}: {e}") from e

        # No config found, return defaults
        return cls()

    def save(self, path: Optional[Path] = None) -> Path:
        """Save config to file."""
        if path is None:
            path = self.default_save_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            config_data = self.model_dump(mode="json", exclude_none=True)
            yaml_content = yaml.dump(config_data, default_flow_style=False, sort_keys=True, indent=2)
            path.write_text(yaml_content, encoding="utf-8")
            return path

        except Exception as e:
            raise ConfigurationError(f"Failed to save config to {path}: {e}") from e

    def get_effective_config_path(self) -> Optional[Path]:
        """Get the path of the config file that would be loaded."""
        for config_path in self.get_config_paths():
            if config_path.exists():
                return config_path
        return None

    def update_setting(self, key: str, value: str) -> None:
        """Update a single configuration setting from its string form."""
        if key not in self.__class__.model_fields:
            available_keys = list(self.__class__.model_fields.keys())
            raise ConfigurationError(f"Unknown config key '{key}'. Available keys: {', '.join(available_keys)}")

        field_type = self.__class__.model_fields[key].annotation

        try:
            if field_type is bool:
                if value.lower() in ("true", "yes", "1", "on"):
                    converted_value = True
                elif value.lower() in ("false", "no", "0", "off"):
                    converted_value = False
                else:
                    raise ValueError(f"Invalid boolean value: {value}")
            elif isinstance(field_type, type) and issubclass(field_type, Enum):
                converted_value = field_type(value)
            elif key == "template_dir":
                converted_value = Path(value).expanduser() if value else None
            else:
                converted_value = value

            # Re-validate the whole model so bad values never stick
            updated = self.model_validate({**self.model_dump(), key: converted_value})
            setattr(self, key, getattr(updated, key))

        except (ValueError, ValidationError) as e:
            raise ConfigurationError(f"Invalid value '{value}' for config key '{key}': {e}") from e


class ConfigManager:
    """Manages configuration operations."""

    @staticmethod
    def initialize_config(path: Optional[Path] = None, overwrite: bool = False) -> Path:
        """Initialize a new configuration file with defaults."""
        config = UserConfig()

        if path is None:
            path = UserConfig.default_save_path()

        if path.exists() and not overwrite:
            raise ConfigurationError(f"Config file already exists: {path}")

        return config.save(path)

    @staticmethod
    def show_config_info() -> dict:
        """Show information about current configuration."""
        config = UserConfig.load()
        effective_path = config.get_effective_config_path()

        return {
            "config": config.model_dump(mode="json"),
            "config_file": str(effective_path) if effective_path else "None (using defaults)",
            "search_paths": [str(p) for p in UserConfig.get_config_paths()],
        }
