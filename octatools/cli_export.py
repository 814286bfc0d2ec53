"""CLI entry point for frontend integration.

Usage:
    py -m octatools.cli_export devices
    py -m octatools.cli_export scan "D:\\Octatrack"
    py -m octatools.cli_export metadata "E:\\MySet\\PROJECT1"
    py -m octatools.cli_export banks "E:\\MySet\\PROJECT1" [bank_index]
    py -m octatools.cli_export parts "E:\\MySet\\PROJECT1" A

Outputs one JSON document to stdout; failures print {"error": ...} and
exit with status 1. Log messages go to stderr.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from octatools.core.errors import OctaToolsError
from octatools.core.project_reader import (
    read_parts_data,
    read_project_banks,
    read_project_metadata,
    read_single_bank,
)
from octatools.discovery.devices import discover_devices, scan_directory
from octatools.export.json_export import (
    bank_to_dict,
    metadata_to_dict,
    parts_data_to_dict,
    scan_result_to_dict,
)
from octatools.utils.config import APP_NAME, APP_VERSION
from octatools.utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="octatools", description=__doc__.splitlines()[0])
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("devices", help="scan mounted volumes and home folders")

    scan = commands.add_parser("scan", help="scan one directory")
    scan.add_argument("path", type=Path)

    metadata = commands.add_parser("metadata", help="read project metadata")
    metadata.add_argument("path", type=Path)

    banks = commands.add_parser("banks", help="decode a project's banks")
    banks.add_argument("path", type=Path)
    banks.add_argument("bank_index", type=int, nargs="?")

    parts = commands.add_parser("parts", help="decode the part parameters of one bank")
    parts.add_argument("path", type=Path)
    parts.add_argument("bank_id", help="bank letter A-P")

    return parser


def run(args: argparse.Namespace):
    """Execute a parsed command and return its JSON-serializable result."""
    if args.command == "devices":
        return scan_result_to_dict(discover_devices())

    if args.command == "scan":
        if not args.path.is_dir():
            raise OctaToolsError(f"Directory not found: {args.path}")
        return scan_result_to_dict(scan_directory(args.path))

    if args.command == "metadata":
        return metadata_to_dict(read_project_metadata(args.path))

    if args.command == "parts":
        return parts_data_to_dict(read_parts_data(args.path, args.bank_id))

    if args.bank_index is None:
        return [bank_to_dict(b) for b in read_project_banks(args.path)]
    bank = read_single_bank(args.path, args.bank_index)
    return bank_to_dict(bank) if bank is not None else None


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = _build_parser().parse_args(argv)

    try:
        data = run(args)
    except (OctaToolsError, ValueError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(json.dumps({"error": str(e)}))
        return 1

    print(json.dumps(data, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
