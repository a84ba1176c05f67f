"""
Configuration management for constructor generation.

Handles loading and merging configuration from JSON files and command-line
overrides, producing the immutable GenerationConfig the generator consumes.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from ..logging_config import get_logger

logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class Pattern(Enum):
    """Supported construction patterns, in emission order."""

    ALL_ARGS = "allArgs"
    BUILDER = "builder"
    OPTIONS = "options"

    @classmethod
    def parse(cls, value: Union[str, "Pattern"]) -> "Pattern":
        """Parse a pattern name, case insensitive."""
        if isinstance(value, Pattern):
            return value

        key = str(value).strip().lower()
        for pattern in cls:
            if pattern.value.lower() == key:
                return pattern

        valid = ", ".join(p.value for p in cls)
        raise ConfigurationError(
            f"Invalid constructor type '{value}'. Valid types: {valid}"
        )


def parse_patterns(value: Union[str, Iterable[Union[str, Pattern]], None]) -> FrozenSet[Pattern]:
    """
    Parse a pattern selection.

    Args:
        value: Comma-separated string ("allArgs,builder") or iterable of names

    Returns:
        Frozen set of patterns (may be empty)
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    return frozenset(Pattern.parse(item) for item in value)


@dataclass(frozen=True)
class GenerationConfig:
    """Settings for one generation run."""

    type_name: str
    patterns: FrozenSet[Pattern] = frozenset({Pattern.ALL_ARGS})
    init_hook: Optional[str] = None
    return_by_value: bool = False
    mutator_prefix: Optional[str] = None
    emit_accessors: bool = False

    def __post_init__(self):
        object.__setattr__(self, "patterns", frozenset(self.patterns))

    def ordered_patterns(self) -> list[Pattern]:
        """Requested patterns in canonical emission order."""
        return [p for p in Pattern if p in self.patterns]


@dataclass
class ToolConfig:
    """Settings that concern the command-line tool, not the generated code."""

    output_file: Optional[str] = None
    header: bool = True

    # Unrecognized keys from config files
    custom: Dict[str, Any] = field(default_factory=dict)


GENERATION_KEYS = {
    "type_name",
    "patterns",
    "init_hook",
    "return_by_value",
    "mutator_prefix",
    "emit_accessors",
}

TOOL_KEYS = {"output_file", "header"}

# camelCase flag spellings accepted for go:generate directives
KEY_ALIASES = {
    "type": "type_name",
    "constructorTypes": "patterns",
    "constructor_types": "patterns",
    "init": "init_hook",
    "returnValue": "return_by_value",
    "setterPrefix": "mutator_prefix",
    "setter_prefix": "mutator_prefix",
    "withGetter": "emit_accessors",
    "with_getter": "emit_accessors",
    "output": "output_file",
}


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {
            "patterns": [Pattern.ALL_ARGS.value],
            "init_hook": None,
            "return_by_value": False,
            "mutator_prefix": None,
            "emit_accessors": False,
            "output_file": None,
            "header": True,
        }

    @property
    def defaults(self) -> Dict[str, Any]:
        return dict(self._defaults)

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> tuple[GenerationConfig, ToolConfig]:
        """
        Get complete configuration.

        Args:
            custom_config: Overrides, typically from the command line
            config_file: Path to JSON configuration file

        Returns:
            Tuple of (GenerationConfig, ToolConfig)
        """
        merged = dict(self._defaults)

        if config_file:
            merged.update(self._normalize_keys(self._load_config_file(config_file)))

        if custom_config:
            overrides = self._normalize_keys(custom_config)
            # None means "not given on the command line"
            merged.update({k: v for k, v in overrides.items() if v is not None})

        return self._dict_to_config(merged)

    def _normalize_keys(self, config: Dict[str, Any]) -> Dict[str, Any]:
        return {KEY_ALIASES.get(key, key): value for key, value in config.items()}

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigurationError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file {path}: {e}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load configuration file {path}: {e}"
            ) from e

        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a JSON object: {path}"
            )

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(
        self, config_dict: Dict[str, Any]
    ) -> tuple[GenerationConfig, ToolConfig]:
        """Split a merged dictionary into generation and tool settings."""
        generation_args: Dict[str, Any] = {}
        tool_args: Dict[str, Any] = {}
        custom_args: Dict[str, Any] = {}

        for key, value in config_dict.items():
            if key in GENERATION_KEYS:
                generation_args[key] = value
            elif key in TOOL_KEYS:
                tool_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            logger.warning(
                "Ignoring unknown configuration keys: %s", ", ".join(sorted(custom_args))
            )

        generation_args["patterns"] = parse_patterns(generation_args.get("patterns"))
        generation_args.setdefault("type_name", "")
        generation_args["init_hook"] = generation_args.get("init_hook") or None
        generation_args["mutator_prefix"] = generation_args.get("mutator_prefix") or None
        generation_args["return_by_value"] = bool(generation_args.get("return_by_value"))
        generation_args["emit_accessors"] = bool(generation_args.get("emit_accessors"))

        return (
            GenerationConfig(**generation_args),
            ToolConfig(custom=custom_args, **tool_args),
        )

    def save_config(
        self,
        config: GenerationConfig,
        output_path: Union[str, Path],
        tool_config: Optional[ToolConfig] = None,
    ):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict: Dict[str, Any] = {
            "type_name": config.type_name,
            "patterns": [p.value for p in config.ordered_patterns()],
            "init_hook": config.init_hook,
            "return_by_value": config.return_by_value,
            "mutator_prefix": config.mutator_prefix,
            "emit_accessors": config.emit_accessors,
        }

        if tool_config is not None:
            config_dict["output_file"] = tool_config.output_file
            config_dict["header"] = tool_config.header
            config_dict.update(tool_config.custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save configuration to {path}: {e}"
            ) from e

        logger.info("Saved configuration to %s", path)


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> tuple[GenerationConfig, ToolConfig]:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Tuple of (GenerationConfig, ToolConfig)
    """
    return get_config_manager().get_config(custom_config, config_file)
