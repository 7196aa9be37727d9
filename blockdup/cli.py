#!/usr/bin/env python3
"""
Command-line interface for blockdup.
"""

import argparse
import logging
import sys

from .checksum import CHECKSUMS, DEFAULT_CHECKSUM
from .config import DEFAULT_MIN_FILE_SIZE, DEFAULT_SCAN_LEVEL, SearchConfig, split_paths
from .engine import find_duplicates
from .exceptions import ConfigurationError, SearchCancelled
from .formatter import format_json_output, format_output, format_plain_output
from .hasher import DEFAULT_BLOCK_SIZE


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="blockdup",
        description="Find groups of identical files, comparing them block by block",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--include-dir",
        type=str,
        required=True,
        help="Directories to search, separated by semicolons",
    )
    parser.add_argument(
        "--exclude-dir",
        type=str,
        default="",
        help="Directories excluded from the search, separated by semicolons",
    )
    parser.add_argument(
        "--scan-level",
        type=int,
        default=DEFAULT_SCAN_LEVEL,
        help="0 - search only the given directories, N - search N levels of subdirectories (default: 0)",
    )
    parser.add_argument(
        "--min-file-size",
        type=int,
        default=DEFAULT_MIN_FILE_SIZE,
        help="Minimum file size in bytes (default: 1)",
    )
    parser.add_argument(
        "--file-mask",
        type=str,
        default="",
        help="Case-insensitive file name pattern, e.g. '*.log' (default: all files)",
    )
    parser.add_argument(
        "--block-size",
        type=int,
        default=DEFAULT_BLOCK_SIZE,
        help="Bytes compared per file in each pass (default: 10)",
    )
    parser.add_argument(
        "--checksum",
        type=str,
        default=DEFAULT_CHECKSUM,
        help=f"Checksum algorithm: {' or '.join(CHECKSUMS)} (default: {DEFAULT_CHECKSUM})",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        choices=["text", "plain", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Manual override for reader thread count",
    )
    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_arguments()

    # Validate conflicting flags
    if args.verbose and args.quiet:
        print("Error: Cannot use both --verbose and --quiet flags", file=sys.stderr)
        sys.exit(1)

    # Setup logging based on verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(message)s')
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR, format='%(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(message)s')

    # Validate input paths
    include_dirs = split_paths(args.include_dir)
    for path in include_dirs:
        if not path.exists():
            print(f"Error: Path '{path}' does not exist", file=sys.stderr)
            sys.exit(1)
        if not path.is_dir():
            print(f"Error: Path '{path}' is not a directory", file=sys.stderr)
            sys.exit(1)

    # JSON and plain output must stay machine-readable
    quiet = args.quiet or args.output != "text"

    try:
        config = SearchConfig(
            include_dirs=include_dirs,
            exclude_dirs=split_paths(args.exclude_dir),
            scan_level=args.scan_level,
            min_file_size=args.min_file_size,
            file_mask=args.file_mask,
            block_size=args.block_size,
            checksum=args.checksum,
            workers=args.workers,
            quiet=quiet,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not quiet:
        print(f"Scanning directories: {'; '.join(str(p) for p in config.include_dirs)}")

    try:
        groups = find_duplicates(config)
    except KeyboardInterrupt:
        print("\nSearch interrupted.", file=sys.stderr)
        sys.exit(130)
    except SearchCancelled as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(130)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output == "json":
        format_json_output(groups)
    elif args.output == "plain":
        format_plain_output(groups)
    else:
        format_output(groups, quiet=args.quiet)

    sys.exit(0)


if __name__ == "__main__":
    main()
