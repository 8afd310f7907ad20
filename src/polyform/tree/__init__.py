"""Tree building engine for form markup.

This module provides the document model and the builder that walks a token
stream once per target language to produce one Form per variant.

Key Components:
    FormBuilder: Builds one Form from a token sequence and a target language
    Form: Root of a compiled form with metadata and ordered sections
    Section, Group, Field, FieldOption: Containers of the form tree
    FieldType, GroupType: Closed sets of field and group kinds
"""

from .builder import FormBuilder, LanguageMatch, language_match
from .model import (
    ElementAttributes,
    Field,
    FieldOption,
    FieldType,
    Form,
    FormElement,
    Group,
    GroupType,
    Section,
    element_to_dict,
)

__all__ = [
    "ElementAttributes",
    "Field",
    "FieldOption",
    "FieldType",
    "Form",
    "FormBuilder",
    "FormElement",
    "Group",
    "GroupType",
    "LanguageMatch",
    "Section",
    "element_to_dict",
    "language_match",
]
