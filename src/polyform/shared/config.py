"""Configuration classes for form compilation.

This module provides configuration objects for every pipeline stage: template
rendering, tokenization and output encoding.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_OUTPUT_FORMATS = ["json", "yaml"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class RenderConfig:
    """Configuration for the template renderer."""

    # Extra directories searched after the template's own directory
    search_paths: List[str] = field(default_factory=list)
    autoescape: bool = True
    strict_undefined: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if isinstance(self.search_paths, (str, Path)):
            raise ValueError("search_paths must be a list of directories")
        self.search_paths = [str(path) for path in self.search_paths]
        if not self.encoding:
            raise ValueError("encoding cannot be empty")


@dataclass
class TokenizerConfig:
    """Configuration for the markup tokenizer."""

    strip_text: bool = False
    wildcard_language: str = "*"

    def __post_init__(self) -> None:
        """Validate tokenizer configuration."""
        if not self.wildcard_language or self.wildcard_language.strip() != (
            self.wildcard_language
        ):
            raise ValueError("wildcard_language must be a non-empty token")


@dataclass
class OutputConfig:
    """Configuration for encoding compiled forms."""

    format: str = "json"
    indent: int = 2
    single_variant: bool = False

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.format not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"format must be one of {VALID_OUTPUT_FORMATS}")
        if self.indent < 0:
            raise ValueError("indent must be >= 0")


@dataclass(frozen=True)
class CompilerConfig:
    """Complete configuration for the form compiler.

    Immutable so one instance can be shared by every compilation.
    """

    render: RenderConfig = field(default_factory=RenderConfig)
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "CompilerConfig":
        """Create a new configuration with specific overrides.

        Nested fields use a double underscore, e.g.
        ``config.override(output__format="yaml", tokenizer__strip_text=True)``.
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        try:
            for component, values in nested_overrides.items():
                if component not in ("render", "tokenizer", "output"):
                    raise ConfigValidationError(
                        f"Unknown configuration section: {component}",
                        field_name=component,
                    )
                top_level[component] = replace(getattr(self, component), **values)
            return replace(self, **top_level)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "render": {
                "search_paths": list(self.render.search_paths),
                "autoescape": self.render.autoescape,
                "strict_undefined": self.render.strict_undefined,
                "trim_blocks": self.render.trim_blocks,
                "lstrip_blocks": self.render.lstrip_blocks,
                "encoding": self.render.encoding,
            },
            "tokenizer": {
                "strip_text": self.tokenizer.strip_text,
                "wildcard_language": self.tokenizer.wildcard_language,
            },
            "output": {
                "format": self.output.format,
                "indent": self.output.indent,
                "single_variant": self.output.single_variant,
            },
            "logging_level": self.logging_level,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilerConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface.
        """
        sections = {"render": RenderConfig, "tokenizer": TokenizerConfig,
                    "output": OutputConfig}
        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in sections:
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"Section {key} must be a mapping", field_name=key
                        )
                    values[key] = sections[key](**value)
                elif key == "logging_level":
                    values[key] = str(value).upper()
                else:
                    raise ConfigValidationError(
                        f"Unknown configuration key: {key}",
                        field_name=key,
                        suggestions=sorted([*sections, "logging_level"]),
                    )
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "CompilerConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CompilerConfig":
        """Load configuration from a JSON file."""
        config_path = Path(path)
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(content)
