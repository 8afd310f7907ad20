"""Main CLI entry point for the polyform command-line tool.

Provides commands to compile form templates into encoded Forms, check a batch
of templates for errors, and dump the token stream of a template.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from polyform import __version__
from polyform.api import FormCompiler, encode_forms
from polyform.markup import render
from polyform.shared import (
    CompilerConfig,
    ConfigError,
    FormCompilerError,
    SyntacticError,
    configure_logging,
    get_logger,
)
from polyform.tokenization import Token

logger = get_logger(__name__, None, "cli")


class DataFileError(Exception):
    """Raised when the --data file cannot be read as a JSON object."""


def load_data(path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Load the template context from a JSON file."""
    if path is None:
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataFileError(f"Could not load data file {path}: {e}") from e
    if not isinstance(data, dict):
        raise DataFileError(f"Data file {path} must contain a JSON object")
    return data


def load_config(args: argparse.Namespace) -> CompilerConfig:
    """Build the compiler configuration from --config and command-line overrides."""
    config_path = getattr(args, "config", None)
    config = CompilerConfig.from_file(config_path) if config_path else CompilerConfig()

    overrides: Dict[str, Any] = {}
    if getattr(args, "format", None):
        overrides["output__format"] = args.format
    if getattr(args, "default_only", False):
        overrides["output__single_variant"] = True
    return config.override(**overrides) if overrides else config


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="polyform",
        description="Compile multilingual form templates into validated form trees"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compile command
    compile_parser = subparsers.add_parser(
        "compile", help="Compile a template into one form per language"
    )
    compile_parser.add_argument(
        "template",
        type=Path,
        help="Form template file"
    )
    compile_parser.add_argument(
        "--data", "-d",
        type=Path,
        help="JSON file passed to the template as its context"
    )
    compile_parser.add_argument(
        "--format", "-f",
        choices=["json", "yaml"],
        help="Output format (default: from config, else json)"
    )
    compile_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    compile_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    compile_parser.add_argument(
        "--default-only",
        action="store_true",
        help="Only build the default-language form"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Check templates for errors")
    check_parser.add_argument(
        "templates",
        nargs="+",
        type=Path,
        help="Form template files to check"
    )
    check_parser.add_argument(
        "--data", "-d",
        type=Path,
        help="JSON file passed to every template as its context"
    )
    check_parser.add_argument(
        "--report",
        choices=["json", "text"],
        default="text",
        help="Report format (default: text)"
    )

    # Tokens command
    tokens_parser = subparsers.add_parser("tokens", help="Print the token stream of a template")
    tokens_parser.add_argument(
        "template",
        type=Path,
        help="Form template file"
    )
    tokens_parser.add_argument(
        "--data", "-d",
        type=Path,
        help="JSON file passed to the template as its context"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def describe_error(error: Exception) -> Dict[str, Any]:
    """Summarize a compilation error for reports."""
    if isinstance(error, SyntacticError):
        return error.to_dict()
    return {"kind": type(error).__name__, "message": str(error)}


def format_token(token: Token) -> str:
    """Render one token as a single line of the ``tokens`` listing."""
    parts = [token.type.name]
    if token.lang is not None:
        marker = "~" if token.inherited_language else ""
        parts.append(f"lang={marker}{token.lang}")
    if token.attributes:
        parts.append(" ".join(f"{name}={value!r}" for name, value in token.attributes))
    if token.number is not None:
        parts.append(str(token.number))
    if token.text is not None:
        parts.append(repr(token.text))
    return " ".join(parts)


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle compile command."""
    config = load_config(args)
    if not (args.verbose or args.quiet):
        configure_logging(config.logging_level)
    data = load_data(args.data)

    compiler = FormCompiler(config)
    forms = compiler.compile(args.template, data)
    formatted_output = encode_forms(forms, config.output.format, config.output.indent)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"{len(forms)} form(s) written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    data = load_data(args.data)
    compiler = FormCompiler()
    results = []

    for path in args.templates:
        try:
            forms = compiler.compile(path, data)
        except FormCompilerError as e:
            results.append({"template": str(path), "valid": False,
                            "error": describe_error(e)})
            continue
        results.append({
            "template": str(path),
            "valid": True,
            "variants": [form.language for form in forms],
        })

    if args.report == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Checked {len(results)} templates, {valid_count} valid")
        print("-" * 50)

        for result in results:
            if result["valid"]:
                languages = ", ".join(str(lang) for lang in result["variants"])
                print(f"✓ {result['template']} ({len(result['variants'])} variants: {languages})")
            else:
                print(f"✗ {result['template']}")
                print(f"   {result['error']['kind']}: {result['error']['message']}")

    valid_count = sum(1 for r in results if r["valid"])
    return 0 if valid_count == len(results) else 1


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle tokens command."""
    markup = render(args.template, load_data(args.data))
    stream = FormCompiler().tokenize(markup)

    print(f"language: {stream.language}")
    print(f"alternates: {' '.join(stream.alternates)}")
    for token in stream.tokens:
        print(format_token(token))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.CRITICAL)
    else:
        configure_logging(logging.WARNING)

    # Route to appropriate command handler
    try:
        if args.command == "compile":
            return cmd_compile(args)
        elif args.command == "check":
            return cmd_check(args)
        elif args.command == "tokens":
            return cmd_tokens(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except (FormCompilerError, ConfigError, DataFileError) as e:
        logger.debug("Command failed", extra={"command": args.command})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
