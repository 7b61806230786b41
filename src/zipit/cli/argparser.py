"""Command-line argument parsing for zipit.

This module defines the ``zipit`` command with its ``zip`` and ``txt``
subcommands.
"""

import argparse
from pathlib import Path

from zipit import __version__


def _add_common_options(parser: argparse.ArgumentParser, default_output: str) -> None:
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="PATH",
        help=f"Output file path (default: {default_output} in the root directory).",
    )
    parser.add_argument(
        "-r",
        "--root",
        type=Path,
        metavar="DIR",
        help="Root directory of the project (default: current directory).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        metavar="PATTERN",
        help=(
            "Additional gitignore-style exclusion pattern, matched at any depth. Paths containing the "
            "pattern text are excluded as well. Can be specified multiple times."
        ),
    )
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        metavar="PATTERN",
        help=(
            "Force inclusion of otherwise ignored paths containing this text "
            "(e.g. -i .env.local). Can be specified multiple times."
        ),
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with zipit's subcommands.
    """
    description = """
    zipit: Create zip archives and text dumps of project code with smart exclusions.

    Dependency directories, build output, caches and editor files are skipped by
    default, as is everything matched by the project's .gitignore files (nested
    .gitignore files apply to their own directory).
    """

    epilog = """
    Examples:
      # Zip the current project into project-code.zip
      zipit zip

      # Dump another project into a single text file
      zipit txt -r ../my-app -o my-app.txt

      # Exclude fixtures but keep the ignored .env.local
      zipit zip -e fixtures -i .env.local

      # Add token counts to the text dump
      zipit txt -t gpt-4
    """

    parser = argparse.ArgumentParser(
        prog="zipit",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"zipit {__version__}", help="Show the version and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped entries and other details to stderr.")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    zip_parser = subparsers.add_parser(
        "zip", help="Create a zip archive of project code", description="Create a zip archive of project code."
    )
    _add_common_options(zip_parser, "project-code.zip")

    txt_parser = subparsers.add_parser(
        "txt",
        help="Create a text file with project structure and code",
        description="Create a text file with project structure and code.",
    )
    _add_common_options(txt_parser, "project-code.txt")
    txt_parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model to use for counting tokens (e.g., gpt-4). Specifying this enables token counting.",
    )

    return parser
