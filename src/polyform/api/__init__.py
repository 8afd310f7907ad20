"""Public compilation API.

Key Components:
    compile / compile_string / compile_markup / compile_tokens: One-off
        compilation at each pipeline entry point
    FormCompiler: Configured compiler for repeated use
    encode_forms: JSON or YAML encoding of compiled forms
"""

from .compiler import (
    FormCompiler,
    compile,
    compile_markup,
    compile_string,
    compile_tokens,
)
from .encoding import encode_forms, forms_to_data

__all__ = [
    "FormCompiler",
    "compile",
    "compile_markup",
    "compile_string",
    "compile_tokens",
    "encode_forms",
    "forms_to_data",
]
