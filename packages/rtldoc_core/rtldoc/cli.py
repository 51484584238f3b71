"""
Command-line interface for rtldoc.

Usage:
    rtldoc types
    rtldoc generate "شهادة الحياة" --field fullName=Amina --field idNumber=77
    rtldoc generate "طلب خطي" --values values.json --output out.docx
    rtldoc inspect Templates/template.docx
    rtldoc version
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .exceptions import RtlDocError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rtldoc",
        description="rtldoc - fill right-to-left DOCX templates with field values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rtldoc types
  rtldoc generate "شهادة الحياة" --field fullName=Amina --field date=2024-01-01
  rtldoc generate "طلب خطي" --values values.json --output-dir out/
  rtldoc inspect Templates/template.docx
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    types_parser = subparsers.add_parser("types", help="List built-in document types")
    types_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )

    generate_parser = subparsers.add_parser("generate", help="Fill a template")
    generate_parser.add_argument("document_type", help="Document type label")
    generate_parser.add_argument(
        "-F", "--field",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Field value (repeatable)"
    )
    generate_parser.add_argument(
        "--values",
        help="JSON file with an object of field values"
    )
    generate_parser.add_argument(
        "--template",
        help="Template file (default: <templates>/<type>.docx)"
    )
    generate_parser.add_argument(
        "--templates",
        help="Templates directory (default: Templates)"
    )
    generate_parser.add_argument(
        "-o", "--output",
        help="Output file (default: <output-dir>/<type>_<timestamp>.docx)"
    )
    generate_parser.add_argument(
        "--output-dir",
        help="Output directory (default: Generated)"
    )
    generate_parser.add_argument(
        "--double-braces",
        action="store_true",
        help="Use {{key}} tokens instead of {key}"
    )
    generate_parser.add_argument(
        "--config",
        help="JSON configuration file"
    )

    inspect_parser = subparsers.add_parser("inspect", help="Validate a template and list its placeholders")
    inspect_parser.add_argument("template", help="Template file")
    inspect_parser.add_argument(
        "--double-braces",
        action="store_true",
        help="Look for {{key}} tokens instead of {key}"
    )
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def parse_field_arguments(items: List[str]) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` arguments.

    Raises:
        ValueError: If an item has no ``=``
    """
    values: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"Expected KEY=VALUE, got '{item}'")
        values[key.strip()] = value
    return values


def load_values_file(path: str) -> Dict[str, str]:
    """Load field values from a JSON object file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return {str(key): "" if value is None else str(value) for key, value in data.items()}


def cmd_types(args):
    """Handle types command."""
    from .catalog import list_document_types

    doc_types = list_document_types()
    if args.json:
        payload = [
            {
                "label": doc_type.label,
                "description": doc_type.description,
                "template": doc_type.template_filename,
                "fields": [{"key": spec.key, "label": spec.label} for spec in doc_type.fields],
            }
            for doc_type in doc_types
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for doc_type in doc_types:
        print(f"📄 {doc_type.label} ({doc_type.description})")
        print(f"   Template: {doc_type.template_filename}")
        for spec in doc_type.fields:
            print(f"   {{{spec.key}}}  {spec.label}")
        print()
    return 0


def cmd_generate(args, parser: argparse.ArgumentParser):
    """Handle generate command."""
    from .config import GeneratorConfig
    from .engine.placeholder_engine import PlaceholderSyntax
    from .generator import DocumentGenerator

    values: Dict[str, str] = {}
    try:
        if args.values:
            values.update(load_values_file(args.values))
        values.update(parse_field_arguments(args.field))
    except (OSError, ValueError) as e:
        parser.error(str(e))

    config = GeneratorConfig.from_json_file(args.config) if args.config else GeneratorConfig()
    config = config.with_overrides(
        templates_dir=args.templates,
        output_dir=args.output_dir,
        placeholder_syntax=PlaceholderSyntax.DOUBLE if args.double_braces else None,
    )
    generator = DocumentGenerator(config)

    if args.template:
        from . import catalog
        output = args.output or catalog.output_path(
            args.document_type, config.output_dir, timestamp_format=config.timestamp_format
        )
        print(f"📄 Template: {args.template}")
        output_path = generator.generate(args.template, output, values)
    else:
        print(f"📄 Document type: {args.document_type}")
        output_path = generator.generate_for_type(args.document_type, values,
                                                  output_path=args.output)

    print(f"✅ Saved: {output_path}")
    return 0


def cmd_inspect(args):
    """Handle inspect command."""
    from .engine.placeholder_engine import PlaceholderSyntax, extract_placeholders
    from .parser.validator import load_and_validate

    syntax = PlaceholderSyntax.DOUBLE if args.double_braces else PlaceholderSyntax.SINGLE
    with load_and_validate(args.template) as document:
        placeholders = extract_placeholders(document, syntax)
        paragraph_count = len(document.paragraphs())

    if args.json:
        print(json.dumps({
            "template": str(args.template),
            "paragraphs": paragraph_count,
            "placeholders": [{"name": p.name, "token": p.token, "count": p.count}
                             for p in placeholders],
        }, indent=2, ensure_ascii=False))
        return 0

    print(f"📄 Template: {args.template}")
    print(f"   Paragraphs: {paragraph_count}")
    print("🔖 Placeholders:")
    for info in placeholders:
        print(f"   {info.token} x{info.count}")
    return 0


def cmd_version(args=None):
    """Handle version command."""
    from .version import __version__
    print(f"rtldoc v{__version__}")
    print("Right-to-left DOCX template filling")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s - %(name)s - %(message)s',
    )

    try:
        if args.command == "types":
            return cmd_types(args)
        elif args.command == "generate":
            return cmd_generate(args, parser)
        elif args.command == "inspect":
            return cmd_inspect(args)
        elif args.command == "version":
            return cmd_version(args)
    except RtlDocError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # No command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
