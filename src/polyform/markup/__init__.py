"""Markup layer: template rendering and event lexing.

Key Components:
    render / render_string: Jinja2 template rendering to markup text
    read_events: lxml-backed lexer producing StartElement, EndElement and
        Characters events
"""

from .events import Attributes, Characters, EndElement, MarkupEvent, StartElement
from .lexer import local_name, read_events
from .render import create_environment, render, render_string

__all__ = [
    "Attributes",
    "Characters",
    "EndElement",
    "MarkupEvent",
    "StartElement",
    "create_environment",
    "local_name",
    "read_events",
    "render",
    "render_string",
]
