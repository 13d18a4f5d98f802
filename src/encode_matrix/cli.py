"""Command-line interface for encode-matrix."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from encode_matrix.client import ENCODE_BASE_URL, EncodeClient
from encode_matrix.core import export_matrix, export_matrix_lite
from encode_matrix.models import ENCODE_TYPES, LITE_GROUP
from encode_matrix.output import load_tables, write_table
from encode_matrix.prepare import prepare_database


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="encode-matrix",
        description="Download ENCODE metadata tables and flatten them into one row per file.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose/debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    prepare = subparsers.add_parser(
        "prepare", help="Download the ENCODE tables into a local directory",
    )
    prepare.add_argument(
        "-d", "--directory", type=str, default="encode_tables",
        help="Directory holding one TSV per table (default: encode_tables)",
    )
    prepare.add_argument(
        "--types", nargs="+", default=ENCODE_TYPES, choices=ENCODE_TYPES,
        metavar="TYPE", help="Tables to download (default: all)",
    )
    prepare.add_argument(
        "--overwrite", action="store_true",
        help="Replace tables already present in the directory",
    )
    prepare.add_argument(
        "--base-url", type=str, default=None,
        help=f"ENCODE portal URL (env: ENCODE_BASE_URL, default: {ENCODE_BASE_URL})",
    )

    export = subparsers.add_parser(
        "export", help="Resolve the stored tables into a file metadata table",
    )
    export.add_argument(
        "-d", "--directory", type=str, default="encode_tables",
        help="Directory written by 'prepare' (default: encode_tables)",
    )
    export.add_argument(
        "-o", "--output", type=str, default="encode_df.tsv",
        help="Output file path (default: encode_df.tsv)",
    )
    export.add_argument(
        "--format", choices=["tsv", "csv"], default="tsv", dest="fmt",
        help="Output format (default: tsv)",
    )
    export.add_argument(
        "--full", action="store_true",
        help="Write every column instead of the lightweight selection",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.command == "prepare":
        _prepare(args)
    else:
        _export(parser, args)


def _prepare(args: argparse.Namespace) -> None:
    base_url = args.base_url or os.environ.get("ENCODE_BASE_URL") or ENCODE_BASE_URL
    client = EncodeClient(base_url=base_url)

    print(f"Downloading {len(args.types)} table(s) into {args.directory}...")
    tables = prepare_database(
        args.directory, types=args.types, overwrite=args.overwrite, client=client
    )
    if tables is None:
        sys.exit(1)
    print(f"Done. {len(tables)} table(s) stored.")


def _export(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    tables = load_tables(args.directory)
    if "file" not in tables:
        parser.error(
            f"No file table in {args.directory}. Run 'encode-matrix prepare' first."
        )

    if args.full:
        result = export_matrix(tables)
    else:
        result = export_matrix_lite(tables)[LITE_GROUP]

    write_table(result, args.output, fmt=args.fmt)
    print(f"Done. {len(result)} files, {result.shape[1]} columns.")
    print(f"Output: {args.output}")


if __name__ == "__main__":
    main()
