"""Command-line interface module for polyform.

This module provides the ``polyform`` tool for compiling form templates,
checking batches of templates and inspecting token streams.
"""

from .main import main

__all__ = ["main"]
