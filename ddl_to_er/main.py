#!/usr/bin/env python3
"""
SQL DDL to ER Diagram Converter - Main Program
Converts CREATE TABLE / CREATE INDEX statements to Entity-Relationship diagrams
"""
import argparse
import json
import logging
import sys
from pathlib import Path

import graphviz

from .core import parse_sql, build_er_model, render_er_diagram, render_mermaid, Schema
from .core.doc_generator import generate_html, generate_docx
from .core.visualization import SUPPORTED_FORMATS


def print_issues(schema: Schema):
    for error in schema.errors:
        table_str = f" [{error.table_name}]" if error.table_name else ""
        print(f"   ❌ {error.type}{table_str}: {error.message}")
    for warning in schema.warnings:
        table_str = f" [{warning.table_name}]" if warning.table_name else ""
        print(f"   ⚠️  {warning.type}{table_str}: {warning.message}")


def sql_to_er(sql_content: str, output_name: str = "er_diagram", view: bool = True,
              fmt: str = "png", output_dir: str = "output"):
    """
    Convert SQL to ER diagram

    Args:
        sql_content: SQL string containing CREATE TABLE statements
        output_name: Output filename (without extension)
        view: Whether to open the diagram after rendering
        fmt: png, svg or pdf
        output_dir: Directory the diagram is written to
    """
    print("🔍 Parsing SQL statements...")
    schema = parse_sql(sql_content)

    if schema.errors or schema.warnings:
        print(f"⚠️  {len(schema.errors)} error(s), {len(schema.warnings)} warning(s):")
        print_issues(schema)

    if not schema.tables:
        print("❌ No CREATE TABLE statements found in the SQL")
        return None

    print(f"✅ Found {len(schema.tables)} table(s):")
    for table_name in schema.tables:
        print(f"   - {table_name}")

    print("\n🏗️  Building ER model...")
    projection = build_er_model(schema)

    print(f"   - {len(projection.entities)} entities")
    print(f"   - {len(projection.relationships)} relationships")

    print("\n🎨 Rendering ER diagram...")
    output_path = render_er_diagram(projection, output_name, view, fmt, output_dir)

    print(f"\n✅ ER diagram saved to: {output_path}")
    return output_path


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert SQL CREATE TABLE statements to ER diagrams"
    )
    parser.add_argument(
        "input",
        help="SQL file path or '-' for stdin"
    )
    parser.add_argument(
        "-o", "--output",
        default="er_diagram",
        help="Output filename (without extension)"
    )
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default="png",
        help="Diagram image format"
    )
    parser.add_argument(
        "--output-dir",
        default="output",
        help="Directory for generated files"
    )
    parser.add_argument(
        "--no-view",
        action="store_true",
        help="Don't open the diagram after rendering"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed schema and diagram projection as JSON instead of rendering"
    )
    parser.add_argument(
        "--mermaid",
        action="store_true",
        help="Print a Mermaid erDiagram instead of rendering"
    )
    parser.add_argument(
        "--doc",
        choices=("html", "docx"),
        help="Write a data dictionary document instead of rendering"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    # Read SQL content
    if args.input == "-":
        print("📝 Reading SQL from stdin (press Ctrl+D when done)...", file=sys.stderr)
        sql_content = sys.stdin.read()
    else:
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"❌ Error: File not found: {args.input}")
            sys.exit(1)

        print(f"📝 Reading SQL from: {args.input}", file=sys.stderr)
        sql_content = input_path.read_text(encoding="utf-8")

    if args.json or args.mermaid or args.doc:
        schema = parse_sql(sql_content)
        projection = build_er_model(schema)

        if args.json:
            print(json.dumps({
                "schema": schema.to_dict(),
                "diagram": projection.to_dict()
            }, indent=2, ensure_ascii=False))
        elif args.mermaid:
            print(render_mermaid(projection), end="")
        else:
            output_dir = Path(args.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            doc_path = output_dir / f"{args.output}.{args.doc}"
            if args.doc == "html":
                doc_path.write_text(generate_html(schema), encoding="utf-8")
            else:
                generate_docx(schema, str(doc_path))
            print(f"✅ Document saved to: {doc_path}")

        if not schema.success:
            sys.exit(2)
        return

    # Convert to ER diagram
    try:
        sql_to_er(sql_content, args.output, not args.no_view, args.format, args.output_dir)
    except graphviz.ExecutableNotFound as e:
        print(f"\n❌ Error: Graphviz is not installed: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
