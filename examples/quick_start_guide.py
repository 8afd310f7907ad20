#!/usr/bin/env python3
"""
Quick Start Guide for polyform.

Compiles the bundled contact form template into one form per language, walks
the resulting trees and encodes them for interchange.
"""

import json
import sys
from pathlib import Path

from polyform import CompilerConfig, FormCompiler, SyntacticError, compile_markup
from polyform.api import encode_forms

TEMPLATES = Path(__file__).parent / "templates"


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - polyform")
    print("=" * 45)

    # Step 1: Compile a template with data
    print("\nStep 1: Compiling the contact form")
    print("-" * 30)

    data = json.loads((TEMPLATES / "contact_data.json").read_text(encoding="utf-8"))
    compiler = FormCompiler(correlation_id="quick-start")
    forms = compiler.compile(TEMPLATES / "contact_form.xml.j2", data)

    print(f"Built {len(forms)} variants: {[form.language for form in forms]}")

    # Step 2: Walk each variant
    print("\nStep 2: Walking the form trees")
    print("-" * 30)

    for form in forms:
        print(f"[{form.language}] {form.title} (category: {form.category})")
        for section in form.sections:
            print(f"  {section.name}: {section.title}")
            for field in section.fields:
                options = ", ".join(option.label or option.name for option in field.options)
                suffix = f" [{options}]" if options else ""
                print(f"    - {field.name} ({field.field_type.serialized_name}): "
                      f"{field.label}{suffix}")

    # Step 3: Encode for interchange
    print("\nStep 3: Encoding as YAML")
    print("-" * 30)

    print(encode_forms(forms[:1], "yaml")[:400] + "...")

    # Step 4: Schema violations
    print("\nStep 4: Handling schema violations")
    print("-" * 30)

    try:
        compile_markup('<section name="s"><field name="f" type="slider"/></section>')
    except SyntacticError as e:
        print(f"{e.kind.name}: {e}")

    # Step 5: Configuration
    print("\nStep 5: Default language only")
    print("-" * 30)

    config = CompilerConfig().override(output__single_variant=True)
    single = FormCompiler(config).compile(TEMPLATES / "contact_form.xml.j2", data)
    print(f"Built {len(single)} variant: {single[0].language}")
    print(f"Statistics: {compiler.statistics}")


if __name__ == "__main__":
    quick_start_example()
    sys.exit(0)
