import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from js_layout.models import FormatterConfig

from .models import LayoutSettings

CONFIG_FILES = (".js-layout.toml", "pyproject.toml")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or holds invalid values"""


class LayoutConfig:
    """Handles loading and validation of the [tool.js-layout] configuration"""

    def __init__(self, config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None):
        self.path = config_path or self.discover()
        data: Dict[str, Any] = {}

        if self.path is not None:
            if not self.path.exists():
                raise ConfigError(f"Config file not found: {self.path}")
            data = self._load_from_file(self.path)

        data.update({k: v for k, v in (overrides or {}).items() if v is not None})
        try:
            self.settings = LayoutSettings(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @staticmethod
    def discover(start: Optional[Path] = None) -> Optional[Path]:
        """First config file holding a [tool.js-layout] table in `start` or its parents"""
        start = (start or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            for name in CONFIG_FILES:
                candidate = directory / name
                if candidate.is_file() and (name != "pyproject.toml" or _has_layout_table(candidate)):
                    return candidate
        return None

    def _load_from_file(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Could not read {path}: {e}") from e

        table = data.get("tool", {}).get("js-layout", {})
        return {key.replace("-", "_"): value for key, value in table.items()}

    @property
    def select(self):
        return self.settings.select

    @property
    def ignore(self):
        return self.settings.ignore

    def formatter_config(self) -> FormatterConfig:
        config = FormatterConfig(max_operands=self.settings.max_operands, max_passes=self.settings.max_passes)
        if self.settings.indent_unit is not None:
            config.indent_unit = self.settings.indent_unit
        return config

    def apply_to_registry(self, registry: Any) -> list[Any]:
        """Return list of enabled rules based on this config"""
        return registry.get_enabled_rules(select=self.select, ignore=self.ignore)


def _has_layout_table(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            return "js-layout" in tomllib.load(f).get("tool", {})
    except (OSError, tomllib.TOMLDecodeError):
        return False
