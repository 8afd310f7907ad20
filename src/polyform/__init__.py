"""Polyform: multilingual form compiler.

Turns a form template into validated form trees, one per declared language,
from a single authoring source. The template is rendered, lexed and tokenized
once; the token stream is then built into a Form for the default language and
for each alternate.

Progressive API Disclosure:
- Level 1: Simple functions - compile(), compile_string(), compile_markup()
- Level 2: Configured compiler - FormCompiler class with CompilerConfig
- Level 3: Pipeline stages - FormTokenizer and FormBuilder used directly
"""

__version__ = "0.1.0"
__author__ = "Polyform Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Advanced configuration
from .api import (
    FormCompiler,
    compile,
    compile_markup,
    compile_string,
    compile_tokens,
    encode_forms,
)

# Configuration classes and errors for advanced usage
from .shared.config import CompilerConfig
from .shared.errors import FormCompilerError, MarkupError, RenderError, SyntacticError

# Level 3: Pipeline stages
from .tokenization import FormTokenizer, TokenStream

# Core result objects for all API levels
from .tree import Field, FieldOption, Form, FormBuilder, Group, Section

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple compile functions
    "compile",
    "compile_string",
    "compile_markup",
    "compile_tokens",
    "encode_forms",

    # Level 2: Configured compiler
    "FormCompiler",
    "CompilerConfig",

    # Level 3: Pipeline stages
    "FormTokenizer",
    "FormBuilder",
    "TokenStream",

    # Result objects and data structures
    "Form",
    "Section",
    "Group",
    "Field",
    "FieldOption",

    # Errors
    "FormCompilerError",
    "RenderError",
    "MarkupError",
    "SyntacticError",
]
