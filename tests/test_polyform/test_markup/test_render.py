"""Tests for Jinja2 template rendering."""

from pathlib import Path

import pytest

from polyform.markup import create_environment, render, render_string
from polyform.shared import RenderConfig, RenderError


class TestRender:
    """Test rendering template files."""

    def test_render_with_data(self, tmp_path: Path) -> None:
        """Test that data values are substituted into the template."""
        template = tmp_path / "form.xml.j2"
        template.write_text('<form><title>{{ title }}</title></form>')

        assert render(template, {"title": "Survey"}) == "<form><title>Survey</title></form>"

    def test_render_loops_over_data(self, tmp_path: Path) -> None:
        """Test that control structures render one option per item."""
        template = tmp_path / "form.xml.j2"
        template.write_text(
            "{% for topic in topics %}<option name=\"{{ topic }}\"/>{% endfor %}"
        )

        markup = render(template, {"topics": ["sales", "support"]})

        assert markup == '<option name="sales"/><option name="support"/>'

    def test_data_is_escaped(self, tmp_path: Path) -> None:
        """Test that data values cannot inject markup."""
        template = tmp_path / "form.xml.j2"
        template.write_text("<label>{{ text }}</label>")

        markup = render(template, {"text": "<b>Fish & Chips</b>"})

        assert markup == "<label>&lt;b&gt;Fish &amp; Chips&lt;/b&gt;</label>"

    def test_includes_resolve_next_to_template(self, tmp_path: Path) -> None:
        """Test that includes are looked up in the template's directory."""
        (tmp_path / "header.xml").write_text("<title>Shared</title>")
        template = tmp_path / "form.xml.j2"
        template.write_text('<form>{% include "header.xml" %}</form>')

        assert render(template) == "<form><title>Shared</title></form>"

    def test_includes_resolve_in_search_paths(self, tmp_path: Path) -> None:
        """Test that configured search paths are consulted after the template directory."""
        shared = tmp_path / "shared"
        shared.mkdir()
        (shared / "footer.xml").write_text("<unlisted/>")
        template = tmp_path / "form.xml.j2"
        template.write_text('<form>{% include "footer.xml" %}</form>')

        markup = render(template, config=RenderConfig(search_paths=[str(shared)]))

        assert markup == "<form><unlisted/></form>"

    def test_missing_template_raises_render_error(self, tmp_path: Path) -> None:
        """Test that a missing file is reported with its path."""
        missing = tmp_path / "missing.xml.j2"

        with pytest.raises(RenderError, match="Template not found") as exc_info:
            render(missing)

        assert exc_info.value.template == str(missing)

    def test_undefined_variable_raises_render_error(self, tmp_path: Path) -> None:
        """Test that strict undefined handling rejects missing data keys."""
        template = tmp_path / "form.xml.j2"
        template.write_text("<title>{{ title }}</title>")

        with pytest.raises(RenderError):
            render(template, {})

    def test_lenient_undefined_renders_empty(self, tmp_path: Path) -> None:
        """Test that strict undefined handling can be disabled."""
        template = tmp_path / "form.xml.j2"
        template.write_text("<title>{{ title }}</title>")

        markup = render(template, {}, RenderConfig(strict_undefined=False))

        assert markup == "<title></title>"

    def test_syntax_error_raises_render_error(self, tmp_path: Path) -> None:
        """Test that template syntax errors surface as RenderError."""
        template = tmp_path / "form.xml.j2"
        template.write_text("{% for x in %}")

        with pytest.raises(RenderError, match="Failed to render"):
            render(template)


class TestRenderString:
    """Test rendering in-memory template source."""

    def test_render_string_with_data(self) -> None:
        """Test rendering a template held in memory."""
        assert render_string("<title>{{ t }}</title>", {"t": "Hi"}) == "<title>Hi</title>"

    def test_render_string_without_data(self) -> None:
        """Test that plain markup renders unchanged."""
        assert render_string("<form/>") == "<form/>"

    def test_render_string_undefined_raises(self) -> None:
        """Test that missing data keys fail in memory too."""
        with pytest.raises(RenderError):
            render_string("{{ missing }}")


class TestCreateEnvironment:
    """Test Jinja2 environment configuration."""

    def test_default_environment_settings(self) -> None:
        """Test that defaults enable autoescape and block trimming."""
        env = create_environment()

        assert env.autoescape is True
        assert env.trim_blocks is True
        assert env.lstrip_blocks is True

    def test_autoescape_can_be_disabled(self) -> None:
        """Test that the autoescape setting is honored."""
        env = create_environment(config=RenderConfig(autoescape=False))

        assert env.from_string("{{ v }}").render(v="<b>") == "<b>"
