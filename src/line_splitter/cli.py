"""Command-line interface for the line splitter."""

import argparse
import logging
import sys
from pathlib import Path

from line_splitter.config import (
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_PART_CAPACITY,
    ENCODING_ERROR_MODES,
    Polarity,
    Policy,
    SinkSettings,
    SplitConfig,
)
from line_splitter.errors import ConfigurationError
from line_splitter.runner.run import main_run

logger = logging.getLogger(__name__)

NO_SPLIT_WORD = "no-split"

EPILOG = """\
Examples:
  line-splitter /wordlists "^.{8}$" /output
  line-splitter /wordlists "^.{8}$" /output no-split
  line-splitter /wordlists "@example\\.com$" /output --mode filter --polarity exclude
"""


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="line-splitter",
        description=(
            "Classify every line of the .txt files in a folder against a regex and "
            "write matching and non-matching lines to size-capped part files."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("folder_path", type=Path, help="Folder holding the input .txt files")
    parser.add_argument("regex_pattern", help="Regular expression tested against each line")
    parser.add_argument(
        "output_path",
        type=Path,
        help="Output folder (split mode writes to matches/ and non-matches/ inside it)",
    )
    parser.add_argument(
        "extra",
        nargs="?",
        default=None,
        metavar=NO_SPLIT_WORD,
        help="Optional. Same as --no-split",
    )

    parser.add_argument(
        "--no-split",
        action="store_true",
        help="Keep all output in single files (no chunking)",
    )

    parser.add_argument(
        "--mode",
        choices=[policy.value for policy in Policy],
        default=Policy.SPLIT.value,
        help="split: matches and non-matches; filter: one selected output (default: split)",
    )

    parser.add_argument(
        "--polarity",
        choices=[polarity.value for polarity in Polarity],
        default=None,
        help="Filter mode only: keep matching (include) or non-matching (exclude) lines",
    )

    parser.add_argument(
        "--lines-per-file",
        type=int,
        default=DEFAULT_PART_CAPACITY,
        help=f"Lines per output part file (default: {DEFAULT_PART_CAPACITY:,})",
    )

    parser.add_argument(
        "--buffer-lines",
        type=int,
        default=DEFAULT_BUFFER_CAPACITY,
        help=f"Lines buffered in memory before each write (default: {DEFAULT_BUFFER_CAPACITY:,})",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Input files processed concurrently (default: 1)",
    )

    parser.add_argument(
        "--encoding-errors",
        choices=ENCODING_ERROR_MODES,
        default="replace",
        help="How undecodable input bytes are handled (default: replace)",
    )

    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first file that fails instead of skipping it",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    return parser


def build_config(args: argparse.Namespace) -> SplitConfig:
    """Turn parsed arguments into a run configuration."""
    no_split = args.no_split
    if args.extra is not None:
        if args.extra.lower() == NO_SPLIT_WORD:
            no_split = True
        else:
            logger.warning(
                "Unknown parameter '%s' ignored. Use '%s' to disable file chunking.",
                args.extra,
                NO_SPLIT_WORD,
            )

    policy = Policy(args.mode)
    polarity = Polarity(args.polarity) if args.polarity is not None else None
    if policy is Policy.SPLIT and polarity is not None:
        logger.warning("--polarity only applies to filter mode; ignored")
        polarity = None

    settings = SinkSettings(
        buffer_capacity=args.buffer_lines,
        part_capacity=None if no_split else args.lines_per_file,
        encoding_errors=args.encoding_errors,
    )
    return SplitConfig(
        input_dir=args.folder_path,
        pattern=args.regex_pattern,
        output_dir=args.output_path,
        policy=policy,
        polarity=polarity,
        settings=settings,
        workers=args.workers,
        fail_fast=args.fail_fast,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on --log-level
    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    config = build_config(args)
    try:
        return main_run(config)
    except ConfigurationError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
