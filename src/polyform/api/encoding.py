"""Interchange encoding of compiled forms.

Forms are encoded field for field through ``Form.to_dict``: form elements are
externally tagged (``{"Field": {...}}``) and enum values appear by name
(``"MultiSelect"``). JSON uses the standard library; YAML uses PyYAML's safe
dumper so the output never carries Python-specific tags.
"""

import json
from typing import Any, Dict, Iterable, List

import yaml

from polyform.shared.config import VALID_OUTPUT_FORMATS
from polyform.tree import Form


def forms_to_data(forms: Iterable[Form]) -> List[Dict[str, Any]]:
    """Convert forms to plain lists and dictionaries."""
    return [form.to_dict() for form in forms]


def encode_forms(forms: Iterable[Form], format: str = "json", indent: int = 2) -> str:
    """Encode forms as a JSON or YAML document holding a list of forms.

    Args:
        forms: Forms to encode, typically every variant of one document
        format: ``"json"`` or ``"yaml"``
        indent: Indentation width

    Returns:
        Encoded document text

    Raises:
        ValueError: If ``format`` is not supported
    """
    data = forms_to_data(forms)

    if format == "json":
        return json.dumps(data, indent=indent, ensure_ascii=False)
    if format == "yaml":
        return yaml.safe_dump(
            data,
            indent=indent,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    raise ValueError(
        f"Unsupported output format: {format} (expected one of {VALID_OUTPUT_FORMATS})"
    )
