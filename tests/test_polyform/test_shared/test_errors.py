"""Tests for the form compilation error taxonomy."""

import pytest

from polyform.shared.errors import (
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


class TestErrorHierarchy:
    """Test that error families stay distinguishable."""

    @pytest.mark.parametrize(
        "error",
        [
            RenderError("bad template"),
            MarkupError("bad markup"),
            MismatchedTags("field"),
            InvalidAttribute("x", "field"),
        ],
    )
    def test_all_errors_share_base(self, error: Exception) -> None:
        """Test the common base class."""
        assert isinstance(error, FormCompilerError)

    def test_families_are_distinct(self) -> None:
        """Test that render and markup failures are not schema violations."""
        assert not isinstance(RenderError("x"), SyntacticError)
        assert not isinstance(MarkupError("x"), SyntacticError)
        assert not isinstance(MarkupError("x"), RenderError)

    @pytest.mark.parametrize(
        "error, kind",
        [
            (MismatchedTags("section"), SyntacticErrorKind.MISMATCHED_TAGS),
            (InvalidAttribute("a", "ctx"), SyntacticErrorKind.INVALID_ATTRIBUTE),
            (InvalidFieldType("slider"), SyntacticErrorKind.INVALID_FIELD_TYPE),
            (InvalidGroupType("column"), SyntacticErrorKind.INVALID_GROUP_TYPE),
            (OrphanElement("ctx"), SyntacticErrorKind.ORPHAN_ELEMENT),
            (UnnamedElement("ctx"), SyntacticErrorKind.UNNAMED_ELEMENT),
            (ImproperNesting("ctx"), SyntacticErrorKind.IMPROPER_NESTING),
        ],
    )
    def test_kind_tags(self, error: SyntacticError, kind: SyntacticErrorKind) -> None:
        """Test that every schema violation carries its kind."""
        assert error.kind is kind


class TestErrorMessages:
    """Test messages and payloads."""

    def test_mismatched_tags_message(self) -> None:
        """Test the mismatched tag message and payload."""
        error = MismatchedTags("field", "group")

        assert str(error) == "expected matching opening tag for field, but got 'group'"
        assert error.closing_tag == "field"
        assert error.open_tag == "group"

    def test_invalid_attribute_message(self) -> None:
        """Test the invalid attribute message."""
        error = InvalidAttribute("colour", "field; attribute is unrecognized")

        assert str(error) == (
            "encountered invalid attribute name colour in field; attribute is unrecognized"
        )

    def test_markup_error_position(self) -> None:
        """Test that line and column are appended when known."""
        assert str(MarkupError("Malformed markup: oops", 3, 7)) == (
            "Malformed markup: oops (line 3, column 7)"
        )
        assert str(MarkupError("Malformed markup: oops")) == "Malformed markup: oops"

    def test_render_error_template(self) -> None:
        """Test that render errors carry the template path."""
        assert RenderError("failed", "form.xml.j2").template == "form.xml.j2"

    def test_to_dict(self) -> None:
        """Test diagnostics encoding of schema violations."""
        data = InvalidFieldType("slider").to_dict()

        assert data == {
            "kind": "INVALID_FIELD_TYPE",
            "message": "invalid field type slider",
            "invalid_type": "slider",
        }
