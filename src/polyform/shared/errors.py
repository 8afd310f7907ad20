"""Error taxonomy for form compilation.

Three families of failure are kept apart so callers can tell a bad template
from malformed markup from a schema violation:

- RenderError: the template renderer failed.
- MarkupError: the rendered text is not well-formed markup.
- SyntacticError (and subclasses): the markup is well-formed but violates the
  form schema (nesting, attributes, enumerations).
"""

from enum import Enum, auto
from typing import Any, Dict, Optional


class SyntacticErrorKind(Enum):
    """Tag identifying the kind of a schema violation."""

    MISMATCHED_TAGS = auto()
    INVALID_ATTRIBUTE = auto()
    INVALID_FIELD_TYPE = auto()
    INVALID_GROUP_TYPE = auto()
    ORPHAN_ELEMENT = auto()
    UNNAMED_ELEMENT = auto()
    IMPROPER_NESTING = auto()


class FormCompilerError(Exception):
    """Base class for every error raised by polyform."""


class RenderError(FormCompilerError):
    """Raised when a template cannot be rendered to markup."""

    def __init__(self, message: str, template: Optional[str] = None) -> None:
        super().__init__(message)
        self.template = template


class MarkupError(FormCompilerError):
    """Raised when rendered markup is not well-formed."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is not None:
            return f"{message} (line {self.line}, column {self.column})"
        return message


class SyntacticError(FormCompilerError):
    """Base class for schema violations found while building a form tree."""

    kind: SyntacticErrorKind

    def to_dict(self) -> Dict[str, Any]:
        """Describe the error for diagnostics output."""
        details = {
            key: value for key, value in vars(self).items() if not key.startswith("_")
        }
        return {"kind": self.kind.name, "message": str(self), **details}


class MismatchedTags(SyntacticError):
    """An end token arrived with no matching open container."""

    kind = SyntacticErrorKind.MISMATCHED_TAGS

    def __init__(self, closing_tag: str, open_tag: Optional[str] = None) -> None:
        super().__init__(
            f"expected matching opening tag for {closing_tag}, but got {open_tag!r}"
        )
        self.closing_tag = closing_tag
        self.open_tag = open_tag


class InvalidAttribute(SyntacticError):
    """An attribute name is unknown or its value cannot be parsed."""

    kind = SyntacticErrorKind.INVALID_ATTRIBUTE

    def __init__(self, attribute_name: str, context: str) -> None:
        super().__init__(
            f"encountered invalid attribute name {attribute_name} in {context}"
        )
        self.attribute_name = attribute_name
        self.context = context


class InvalidFieldType(SyntacticError):
    """A field's ``type`` attribute is missing or unrecognized."""

    kind = SyntacticErrorKind.INVALID_FIELD_TYPE

    def __init__(self, invalid_type: str) -> None:
        super().__init__(f"invalid field type {invalid_type}")
        self.invalid_type = invalid_type


class InvalidGroupType(SyntacticError):
    """A group's ``type`` attribute is unrecognized."""

    kind = SyntacticErrorKind.INVALID_GROUP_TYPE

    def __init__(self, invalid_type: str) -> None:
        super().__init__(f"invalid group type {invalid_type}")
        self.invalid_type = invalid_type


class OrphanElement(SyntacticError):
    """A container closed with no permissible parent open."""

    kind = SyntacticErrorKind.ORPHAN_ELEMENT

    def __init__(self, context: str) -> None:
        super().__init__(f"orphan element: {context}")
        self.context = context


class UnnamedElement(SyntacticError):
    """A container that requires a ``name`` attribute has none."""

    kind = SyntacticErrorKind.UNNAMED_ELEMENT

    def __init__(self, context: str) -> None:
        super().__init__(f"unnamed element: {context}")
        self.context = context


class ImproperNesting(SyntacticError):
    """A container was opened inside a container it may not nest in."""

    kind = SyntacticErrorKind.IMPROPER_NESTING

    def __init__(self, context: str) -> None:
        super().__init__(f"improper nesting: {context}")
        self.context = context
