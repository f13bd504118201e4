#!/usr/bin/env python3
"""
Property Transaction History - Entry point script

Looks up the sale history of one property address from the command line and
prints the result as JSON.
"""

import argparse
import json
import logging
import sys

from property_history.config import Settings, configure_logging
from property_history.errors import PropertyHistoryError
from property_history.main import TransactionHistoryGraph
from property_history.zip_directory import ZipDirectory

logger = logging.getLogger(__name__)


def lookup(address, settings=None, graph=None):
    """
    Look up one address and return the response payload.

    Args:
        address: Free-text property address including its ZIP code
        settings: Optional settings; read from the environment when omitted
        graph: Optional prebuilt graph, used instead of the live clients

    Returns:
        tuple: (payload dict, exit code)
    """
    if graph is None:
        settings = (settings or Settings.from_env()).require_api_keys()
        directory = ZipDirectory(settings.zip_table_path).load()
        graph = TransactionHistoryGraph.from_settings(settings, directory)

    try:
        result = graph.run(address)
    except PropertyHistoryError as e:
        logger.error(f"Lookup failed: {e.message}")
        return {"error": e.message}, 1
    except ValueError as e:
        logger.error(f"Invalid address: {e}")
        return {"error": str(e)}, 1

    return result.to_payload(), 0


def main(argv=None):
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Property Transaction History")
    parser.add_argument(
        "address",
        type=str,
        help='Property address including its ZIP code. Example: "8 Lynnbrook Road, 06824"',
    )
    parser.add_argument(
        "--indent", type=int, default=2, help="Indentation of the JSON output (default: 2)"
    )
    parser.add_argument(
        "--zip-table", type=str, help="Path to the ZIP code spreadsheet (overrides ZIP_TABLE_PATH)"
    )

    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if args.zip_table:
        settings.zip_table_path = args.zip_table
    configure_logging(settings.log_level)

    try:
        payload, exit_code = lookup(args.address, settings=settings)
    except PropertyHistoryError as e:
        # Configuration and ZIP table problems
        payload, exit_code = {"error": e.message}, 1

    print(json.dumps(payload, indent=args.indent))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
