"""Comprehensive tests for configuration system."""

import json
from pathlib import Path

import pytest

from polyform.shared.config import (
    CompilerConfig,
    ConfigError,
    ConfigValidationError,
    OutputConfig,
    RenderConfig,
    TokenizerConfig,
)


class TestRenderConfig:
    """Test suite for RenderConfig."""

    def test_default_configuration(self):
        """Test default render configuration values."""
        config = RenderConfig()

        assert config.search_paths == []
        assert config.autoescape is True
        assert config.strict_undefined is True
        assert config.trim_blocks is True
        assert config.lstrip_blocks is True
        assert config.encoding == "utf-8"

    def test_search_paths_are_normalized(self, tmp_path: Path):
        """Test that path objects are stored as strings."""
        config = RenderConfig(search_paths=[tmp_path])

        assert config.search_paths == [str(tmp_path)]

    def test_single_search_path_string_is_rejected(self):
        """Test that a bare string is not mistaken for a list of paths."""
        with pytest.raises(ValueError, match="search_paths"):
            RenderConfig(search_paths="templates")

    def test_empty_encoding_is_rejected(self):
        """Test encoding validation."""
        with pytest.raises(ValueError, match="encoding"):
            RenderConfig(encoding="")


class TestTokenizerConfig:
    """Test suite for TokenizerConfig."""

    def test_default_configuration(self):
        """Test default tokenizer configuration values."""
        config = TokenizerConfig()

        assert config.strip_text is False
        assert config.wildcard_language == "*"

    @pytest.mark.parametrize("value", ["", " * ", "a b "])
    def test_invalid_wildcard(self, value):
        """Test wildcard validation."""
        with pytest.raises(ValueError, match="wildcard_language"):
            TokenizerConfig(wildcard_language=value)


class TestOutputConfig:
    """Test suite for OutputConfig."""

    def test_default_configuration(self):
        """Test default output configuration values."""
        config = OutputConfig()

        assert config.format == "json"
        assert config.indent == 2
        assert config.single_variant is False

    def test_invalid_format(self):
        """Test format validation."""
        with pytest.raises(ValueError, match="format must be one of"):
            OutputConfig(format="xml")

    def test_negative_indent(self):
        """Test indent validation."""
        with pytest.raises(ValueError, match="indent"):
            OutputConfig(indent=-1)


class TestCompilerConfig:
    """Test suite for CompilerConfig."""

    def test_default_configuration(self):
        """Test default compiler configuration."""
        config = CompilerConfig()

        assert config.render == RenderConfig()
        assert config.tokenizer == TokenizerConfig()
        assert config.output == OutputConfig()
        assert config.logging_level == "WARNING"

    def test_invalid_logging_level(self):
        """Test logging level validation."""
        with pytest.raises(ConfigValidationError) as exc_info:
            CompilerConfig(logging_level="LOUD")

        assert exc_info.value.field_name == "logging_level"

    def test_configuration_is_frozen(self):
        """Test that compiler configuration is immutable."""
        config = CompilerConfig()

        with pytest.raises(AttributeError):
            config.logging_level = "DEBUG"

    def test_override_nested_fields(self):
        """Test overriding section fields with double underscores."""
        config = CompilerConfig()

        updated = config.override(
            output__format="yaml", tokenizer__strip_text=True, logging_level="INFO"
        )

        assert updated.output.format == "yaml"
        assert updated.tokenizer.strip_text is True
        assert updated.logging_level == "INFO"
        # Original unchanged
        assert config.output.format == "json"
        assert config.tokenizer.strip_text is False

    def test_override_unknown_section(self):
        """Test that unknown sections are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration section"):
            CompilerConfig().override(lexer__strict=True)

    def test_override_invalid_value(self):
        """Test that overrides are validated."""
        with pytest.raises(ConfigValidationError):
            CompilerConfig().override(output__format="csv")

    def test_override_unknown_field(self):
        """Test that unknown fields within a section are rejected."""
        with pytest.raises(ConfigValidationError):
            CompilerConfig().override(output__colour=True)

    def test_dict_round_trip(self):
        """Test serialization to and from dictionaries."""
        config = CompilerConfig().override(
            render__search_paths=["shared"], output__indent=4, logging_level="DEBUG"
        )

        assert CompilerConfig.from_dict(config.to_dict()) == config

    def test_from_dict_partial(self):
        """Test that missing sections use defaults."""
        config = CompilerConfig.from_dict({"output": {"format": "yaml"}, "logging_level": "info"})

        assert config.output.format == "yaml"
        assert config.output.indent == 2
        assert config.logging_level == "INFO"

    def test_from_dict_unknown_key(self):
        """Test that unknown keys are reported with suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            CompilerConfig.from_dict({"outptu": {}})

        assert exc_info.value.field_name == "outptu"
        assert "output" in exc_info.value.suggestions

    def test_from_dict_section_must_be_mapping(self):
        """Test that sections are dictionaries."""
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            CompilerConfig.from_dict({"render": ["x"]})

    def test_from_dict_unknown_section_field(self):
        """Test that unknown fields inside a section are rejected."""
        with pytest.raises(ConfigValidationError):
            CompilerConfig.from_dict({"tokenizer": {"strip": True}})

    def test_json_round_trip(self):
        """Test JSON serialization."""
        config = CompilerConfig().override(tokenizer__wildcard_language="any")

        restored = CompilerConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["tokenizer"]["wildcard_language"] == "any"

    def test_from_json_invalid(self):
        """Test that malformed JSON is a validation error."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            CompilerConfig.from_json("{not json")

    def test_from_json_not_object(self):
        """Test that the top-level JSON value must be an object."""
        with pytest.raises(ConfigValidationError, match="must be an object"):
            CompilerConfig.from_json("[]")

    def test_from_file(self, tmp_path: Path):
        """Test loading configuration from a file."""
        path = tmp_path / "polyform.json"
        path.write_text(json.dumps({"output": {"single_variant": True}}))

        config = CompilerConfig.from_file(path)

        assert config.output.single_variant is True

    def test_from_missing_file(self, tmp_path: Path):
        """Test that an unreadable file raises ConfigError."""
        with pytest.raises(ConfigError, match="Could not read config file"):
            CompilerConfig.from_file(tmp_path / "missing.json")
