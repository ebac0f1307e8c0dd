"""CLI entry point."""

import argparse
import logging
import os
import sys

from .config import ConfigError, load_config
from .logger import setup_logger
from .pipeline import DirectoryError, NoEligibleFilesError, run_pipeline

EXIT_OK = 0
EXIT_DIRECTORY_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-scraper",
        description="Download images linked from text files into per-file folders",
    )
    parser.add_argument("directory", nargs="?", default=None,
                        help="Directory to scan (default: current directory)")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to a YAML config file")
    parser.add_argument("--overwrite", action="store_true",
                        help="Re-download images that already exist instead of skipping them")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Per-request timeout in seconds")
    parser.add_argument("--log-dir", type=str, default=None,
                        help="Also write a rotating log file to this directory")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def print_summary(summary):
    line = f"Processed {summary.files_processed} files, downloaded {summary.images_downloaded} images"
    if summary.images_skipped or summary.images_failed or summary.invalid_links:
        line += (
            f" ({summary.images_skipped} skipped, {summary.images_failed} failed, "
            f"{summary.invalid_links} invalid links)"
        )
    print(f"\n{line}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.overwrite:
        config.download.overwrite_existing = True
    if args.timeout is not None:
        config.download.timeout = args.timeout
    if args.log_dir:
        config.log_dir = args.log_dir

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO)
    setup_logger(config.log_dir, level)

    directory = os.path.abspath(args.directory or os.getcwd())

    try:
        summary = run_pipeline(directory, config)
    except DirectoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DIRECTORY_ERROR
    except NoEligibleFilesError as e:
        print(str(e), file=sys.stderr)
        return EXIT_OK

    print_summary(summary)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
