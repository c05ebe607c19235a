#!/usr/bin/env python3
"""
MBEE - Model-Based Engineering Environment

Command line entry point for JMI conversions. Records are read from a JSON
export, the sample model or the element store, converted, and written out as
JSON.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from mbee.config import config
from mbee.database import DatabaseManager
from mbee.errors import CustomError
from mbee.jmi import build_index, convert_jmi, create_elements_tree, sort_elements_array
from mbee.loaders import BaseLoader, JSONFileLoader, MockLoader
from mbee.models import TreeNode


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def get_loader(args: argparse.Namespace) -> BaseLoader:
    """
    Select the record loader for the parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        The mock loader when --mock is given, otherwise a JSON file loader
    """
    if args.mock:
        return MockLoader()
    return JSONFileLoader(args.input)


def to_jsonable(result: Any) -> Any:
    """Convert a conversion result into plain JSON-compatible data."""
    if isinstance(result, TreeNode):
        return result.model_dump()
    if isinstance(result, dict):
        return {str(key): value for key, value in result.items()}
    return result


def write_output(result: Any, output: Optional[str] = None):
    """
    Write a conversion result as JSON.

    Args:
        result: The result to write
        output: File to write to; stdout when not given
    """
    text = json.dumps(to_jsonable(result), indent=2, ensure_ascii=False)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
        logging.info(f"Output written to {output}")
    else:
        print(text)


def run_convert(args: argparse.Namespace) -> Any:
    """Convert records from one JMI type to another."""
    records = get_loader(args).get_all_records()
    field = args.field or config.key_field
    parent_field = args.parent_field or config.parent_field

    logging.info(f"Converting {len(records)} records from JMI type {args.from_type} to type {args.to_type}")
    return convert_jmi(args.from_type, args.to_type, records, field, parent_field)


def run_sort(args: argparse.Namespace) -> List[Dict[str, Any]]:
    """Order elements depth-first so packages precede their contents."""
    records = get_loader(args).get_all_records()
    options = config.element_tree_options()
    if args.allow_non_package_parents:
        options["allow_non_package_parents"] = True

    return sort_elements_array(records, **options)


def run_import(args: argparse.Namespace, db_path: Optional[str] = None) -> int:
    """Store records in the element store under a project."""
    records = get_loader(args).get_all_records()

    with DatabaseManager(db_path or config.database_filename) as db:
        db.initialize_database()
        return db.add_elements(args.project, records, config.key_field)


def run_export(args: argparse.Namespace, db_path: Optional[str] = None) -> Any:
    """Read a project from the element store in the requested JMI type."""
    with DatabaseManager(db_path or config.database_filename) as db:
        db.initialize_database()
        records = db.get_elements(args.project)

    logging.info(f"Exporting {len(records)} elements of project {args.project} as JMI type {args.jmi}")
    if args.jmi == 2:
        return build_index(records, config.key_field)
    if args.jmi == 3:
        return create_elements_tree(records, **config.element_tree_options())
    return records


def add_source_arguments(parser: argparse.ArgumentParser):
    """Add the arguments selecting where records come from."""
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=str, help="JSON file holding the records")
    source.add_argument("--mock", action="store_true", help="Use the sample model instead of a file")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="MBEE - JMI conversion tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py convert --from 1 --to 2 --input elements.json
  python main.py convert --from 1 --to 3 --input elements.json --output tree.json
  python main.py sort --mock
  python main.py import --input elements.json --project demo
  python main.py export --project demo --jmi 3
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="MBEE 0.1.0"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert records between JMI types")
    add_source_arguments(convert)
    convert.add_argument("--from", dest="from_type", type=int, default=1, help="Current JMI type (default: 1)")
    convert.add_argument("--to", dest="to_type", type=int, required=True, help="JMI type to convert to")
    convert.add_argument("--field", type=str, help="Field records are keyed on")
    convert.add_argument("--parent-field", type=str, help="Field holding parent references")
    convert.add_argument("--output", type=str, help="Write JSON to this file instead of stdout")

    sort = commands.add_parser("sort", help="Order elements depth-first")
    add_source_arguments(sort)
    sort.add_argument("--allow-non-package-parents", action="store_true",
                      help="Detach elements contained by non-packages instead of failing")
    sort.add_argument("--output", type=str, help="Write JSON to this file instead of stdout")

    store = commands.add_parser("import", help="Store records in the element store")
    add_source_arguments(store)
    store.add_argument("--project", type=str, required=True, help="Project to store the elements under")

    export = commands.add_parser("export", help="Read a project from the element store")
    export.add_argument("--project", type=str, required=True, help="Project to read")
    export.add_argument("--jmi", type=int, choices=[1, 2, 3], default=1, help="JMI type to export (default: 1)")
    export.add_argument("--output", type=str, help="Write JSON to this file instead of stdout")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    try:
        if args.command == "convert":
            write_output(run_convert(args), args.output)
        elif args.command == "sort":
            write_output(run_sort(args), args.output)
        elif args.command == "import":
            count = run_import(args)
            print(f"Stored {count} elements in project {args.project}")
        elif args.command == "export":
            write_output(run_export(args), args.output)

    except CustomError as e:
        print(json.dumps(e.body()), file=sys.stderr)
        sys.exit(1)

    except (OSError, ValueError) as e:
        logging.error(f"{args.command} failed: {e}")
        print(f"\n{args.command} failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
