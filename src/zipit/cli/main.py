"""Command-line interface for zipit.

Exit Codes:
    0: Successful completion
    1: Runtime error while creating the artifact
    2: Command-line syntax error or missing subcommand
    130: Interrupted by SIGINT (Ctrl+C)

Example:
    # Archive the current directory
    $ zipit zip

    # Text dump of another directory with token counts
    $ zipit txt -r ../project -t gpt-4
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from zipit.archive import ArchiveResult, create_zip
from zipit.cli.argparser import create_parser
from zipit.file_info import format_file_size
from zipit.text_dump import TextDumpResult, create_txt

ERROR_PREFIXES = {
    "zip": "Error creating zip",
    "txt": "Error creating text file",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def format_archive_result(result: ArchiveResult) -> str:
    """Format the summary printed after a zip run."""
    return "\n".join(
        [
            f"✓ Zip archive created: {result.output_path}",
            f"  Files added: {result.files_added}",
            f"  Files excluded: {result.files_excluded}",
            f"  Total size: {result.archive_size} bytes",
        ]
    )


def format_text_dump_result(result: TextDumpResult) -> str:
    """Format the summary printed after a txt run."""
    lines: List[str] = [
        f"✓ Text file created: {result.output_path}",
        f"  Files included: {result.file_count}",
        f"  Total size: {format_file_size(result.total_size)}",
    ]
    if result.token_count is not None:
        lines.append(f"  Total tokens: {result.token_count}")
    return "\n".join(lines)


def run_command(args: argparse.Namespace) -> str:
    """Run the selected subcommand and return its summary text."""
    if args.command == "zip":
        return format_archive_result(
            create_zip(
                output_path=args.output,
                root_dir=args.root,
                custom_excludes=args.exclude,
                custom_includes=args.include,
            )
        )
    return format_text_dump_result(
        create_txt(
            output_path=args.output,
            root_dir=args.root,
            custom_excludes=args.exclude,
            custom_includes=args.include,
            tokenizer_model=args.tokenizer,
        )
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the zipit command-line interface.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(2)

    configure_logging(args.verbose)

    try:
        summary = run_command(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"{ERROR_PREFIXES[args.command]}: {str(e)}", file=sys.stderr)
        sys.exit(1)

    print(summary)


if __name__ == "__main__":
    main()
