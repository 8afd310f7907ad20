"""Shared utilities for form compilation.

This module provides the error taxonomy, configuration objects and logging
helpers used across all pipeline stages.
"""

from .config import (
    CompilerConfig,
    ConfigError,
    ConfigValidationError,
    OutputConfig,
    RenderConfig,
    TokenizerConfig,
)
from .errors import (
    FormCompilerError,
    ImproperNesting,
    InvalidAttribute,
    InvalidFieldType,
    InvalidGroupType,
    MarkupError,
    MismatchedTags,
    OrphanElement,
    RenderError,
    SyntacticError,
    SyntacticErrorKind,
    UnnamedElement,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "CompilerConfig",
    "ConfigError",
    "ConfigValidationError",
    "OutputConfig",
    "RenderConfig",
    "TokenizerConfig",
    "FormCompilerError",
    "ImproperNesting",
    "InvalidAttribute",
    "InvalidFieldType",
    "InvalidGroupType",
    "MarkupError",
    "MismatchedTags",
    "OrphanElement",
    "RenderError",
    "SyntacticError",
    "SyntacticErrorKind",
    "UnnamedElement",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
