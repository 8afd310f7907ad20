"""Template rendering for form documents.

Form documents are authored as Jinja2 templates that render to markup. The
renderer is a thin wrapper over a jinja2.Environment; any failure is surfaced
as RenderError so callers never have to catch jinja2 exceptions directly.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import jinja2

from polyform.shared.config import RenderConfig
from polyform.shared.errors import RenderError
from polyform.shared.logging import get_logger


def create_environment(
    template_dir: Optional[Path] = None, config: Optional[RenderConfig] = None
) -> jinja2.Environment:
    """Build a Jinja2 environment for rendering form templates.

    Args:
        template_dir: Directory searched first for templates and includes
        config: Render configuration (defaults to RenderConfig())

    Returns:
        Configured jinja2.Environment
    """
    config = config or RenderConfig()
    search_path = [str(template_dir)] if template_dir is not None else []
    search_path.extend(config.search_paths)

    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(search_path, encoding=config.encoding),
        autoescape=config.autoescape,
        undefined=jinja2.StrictUndefined if config.strict_undefined else jinja2.Undefined,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=True,
    )


def render(
    path: Union[str, Path],
    data: Optional[Mapping[str, Any]] = None,
    config: Optional[RenderConfig] = None,
    correlation_id: Optional[str] = None,
) -> str:
    """Render a template file to markup text.

    Args:
        path: Path to the template file
        data: Optional context passed to the template unexamined
        config: Render configuration
        correlation_id: Optional correlation ID for log messages

    Returns:
        Rendered markup

    Raises:
        RenderError: If the template is missing, invalid, or fails to render
    """
    logger = get_logger(__name__, correlation_id, "template_renderer")
    template_path = Path(path)

    if not template_path.is_file():
        raise RenderError(f"Template not found: {template_path}", str(template_path))

    env = create_environment(template_path.parent, config)
    try:
        template = env.get_template(template_path.name)
        markup = template.render(dict(data or {}))
    except jinja2.TemplateError as e:
        logger.debug(
            "Template rendering failed",
            extra={"template": str(template_path), "error": str(e)},
        )
        raise RenderError(
            f"Failed to render {template_path}: {e}", str(template_path)
        ) from e

    logger.debug(
        "Template rendered",
        extra={"template": str(template_path), "markup_length": len(markup)},
    )
    return markup


def render_string(
    source: str,
    data: Optional[Mapping[str, Any]] = None,
    config: Optional[RenderConfig] = None,
) -> str:
    """Render template source held in memory.

    Includes and imports are resolved against ``config.search_paths``.

    Raises:
        RenderError: If the template is invalid or fails to render
    """
    env = create_environment(None, config)
    try:
        return env.from_string(source).render(dict(data or {}))
    except jinja2.TemplateError as e:
        raise RenderError(f"Failed to render template source: {e}") from e
