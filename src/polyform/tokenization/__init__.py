"""Tokenization engine for form markup.

This module converts markup events into a flat, immutable sequence of
form-level tokens, capturing the document's default language and alternates
on the side.

Key Components:
    FormTokenizer: Main tokenizer class for processing markup events
    Token: A single form token with optional language restriction
    TokenStream: Immutable tokenization result shared by all variant builds
    TokenType: Enumeration of all form token types
    TokenizerState: Normal vs verbatim-capture dispatch modes
"""

from .tokenizer import (
    INDEX_MAX,
    LANGUAGE_ELEMENTS,
    FormTokenizer,
    Token,
    TokenizerState,
    TokenStream,
    TokenType,
    parse_index,
    serialize_start_tag,
)

__all__ = [
    "INDEX_MAX",
    "LANGUAGE_ELEMENTS",
    "FormTokenizer",
    "Token",
    "TokenStream",
    "TokenType",
    "TokenizerState",
    "parse_index",
    "serialize_start_tag",
]
