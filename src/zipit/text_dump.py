"""Flattened text export of a project.

The dump starts with a header and the filtered directory tree, followed by one
block per included file (metadata plus raw content) and a closing summary. File
content is streamed in chunks, so large files never have to fit in memory.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from zipit.exceptions import TokenizationError
from zipit.exclusion_rules.file_filter import FileFilter, FilterConfiguration
from zipit.file_collector import collect_files
from zipit.file_info import FileRecord, format_file_size, iter_file_text
from zipit.file_system_tree.file_system_tree import DEFAULT_MAX_DEPTH, FileSystemTree
from zipit.io.safe_output import SafeOutputFile
from zipit.token_counter import TokenCounter, create_token_counter
from zipit.types import PathType

logger = logging.getLogger(__name__)

DEFAULT_TEXT_OUTPUT = "project-code.txt"
SEPARATOR = "=" * 80
EMPTY_TREE_PLACEHOLDER = "[Empty or all files excluded]\n"


def _timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TextDumpResult:
    """Summary of a finished text dump.

    Attributes:
        output_path: Where the dump was written.
        file_count: Number of file blocks written.
        total_size: Sum of the sizes of those files in bytes.
        token_count: Total tokens across file contents, or None if not counted.
    """

    output_path: Path
    file_count: int
    total_size: int
    token_count: Optional[int] = None


class StreamingTextDump:
    """Renders the text dump for a list of files as a stream of string chunks.

    Totals are updated while streaming and are final once stream() is exhausted.
    The dump can only be streamed once.

    Attributes:
        root_dir (Path): Project root shown in the header.
        files (Sequence[str]): Sorted root-relative paths of the files to include.
        tree (FileSystemTree): Tree rendered in the DIRECTORY STRUCTURE section.
        tokenizer (Optional[TokenCounter]): Counter for the optional token lines.

    Example:
        >>> dump = StreamingTextDump(root, files, tree)  # doctest: +SKIP
        >>> with open("dump.txt", "w") as f:  # doctest: +SKIP
        ...     for chunk in dump.stream():
        ...         f.write(chunk)
        >>> dump.file_count  # doctest: +SKIP
        12
    """

    def __init__(
        self,
        root_dir: PathType,
        files: Sequence[str],
        tree: FileSystemTree,
        tokenizer: Optional[TokenCounter] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.root_dir = Path(os.path.abspath(root_dir))
        self.files = list(files)
        self.tree = tree
        self.tokenizer = tokenizer
        self.encoding = encoding
        self.file_count = 0
        self.total_size = 0
        self._token_total = 0
        self._streamed = False

    @property
    def token_count(self) -> Optional[int]:
        if self.tokenizer is None:
            return None
        return self._token_total

    def stream(self) -> Iterator[str]:
        """Stream the complete dump.

        Raises:
            RuntimeError: If the dump has already been streamed.
        """
        if self._streamed:
            raise RuntimeError("Text dump has already been streamed")
        self._streamed = True

        yield "PROJECT CODE EXPORT\n"
        yield f"{SEPARATOR}\n"
        yield f"Generated: {_timestamp()}\n"
        yield f"Root Directory: {self.root_dir}\n"
        yield f"{SEPARATOR}\n\n"

        yield "DIRECTORY STRUCTURE\n"
        yield f"{SEPARATOR}\n"
        yield self.tree.get_tree_representation() or EMPTY_TREE_PLACEHOLDER
        yield f"\n{SEPARATOR}\n\n"

        total = len(self.files)
        for index, relative_path in enumerate(self.files):
            yield from self._stream_file(index, total, relative_path)

        yield f"\n\n{SEPARATOR}\n"
        yield "SUMMARY\n"
        yield f"{SEPARATOR}\n"
        yield f"Total Files: {self.file_count}\n"
        yield f"Total Size: {format_file_size(self.total_size)} ({self.total_size} bytes)\n"
        if self.token_count is not None:
            yield f"Total Tokens: {self.token_count}\n"
        yield f"Generated: {_timestamp()}\n"
        yield f"{SEPARATOR}\n"

    def _stream_file(self, index: int, total: int, relative_path: str) -> Iterator[str]:
        full_path = self.root_dir.joinpath(*relative_path.split("/"))
        try:
            record = FileRecord.from_path(full_path, relative_path, tokenizer=self.tokenizer, encoding=self.encoding)
        except (OSError, TokenizationError) as e:
            logger.debug("Could not process %s: %s", full_path, e)
            yield f"\n[Error processing file: {relative_path}]\n"
            yield f"Error: {e}\n"
            return

        yield f"\n{SEPARATOR}\n"
        yield f"FILE {index + 1} of {total}\n"
        yield f"{SEPARATOR}\n"
        yield f"Path: {record.relative_path}\n"
        yield f"Language: {record.language}\n"
        yield f"Size: {format_file_size(record.size)} ({record.size} bytes)\n"
        yield f"Lines: {record.line_count}\n"
        if record.token_count is not None:
            yield f"Tokens: {record.token_count}\n"
        yield f"{SEPARATOR}\n\n"

        try:
            yield from iter_file_text(full_path, encoding=self.encoding)
        except OSError as e:
            logger.debug("Could not read %s: %s", full_path, e)
            yield f"[Error reading file: {e}]"

        if index < total - 1:
            yield f"\n{SEPARATOR}\n"

        self.file_count += 1
        self.total_size += record.size
        self._token_total += record.token_count or 0


def create_txt(
    output_path: Optional[PathType] = None,
    root_dir: Optional[PathType] = None,
    custom_excludes: Optional[Iterable[str]] = None,
    custom_includes: Optional[Iterable[str]] = None,
    tokenizer_model: Optional[str] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TextDumpResult:
    """Write a text dump of a project's structure and source files.

    Args:
        output_path: Destination file. Defaults to project-code.txt in the root.
        root_dir: Project root. Defaults to the current working directory.
        custom_excludes: Additional exclusion patterns.
        custom_includes: Substrings that force inclusion of excluded paths.
        tokenizer_model: Model name enabling per-file and total token counts.
        max_depth: Directory levels shown in the tree.

    Returns:
        TextDumpResult: Where the dump went and what it contains.

    Raises:
        NotADirectoryError: If the root is not a directory.
        TokenizerNotAvailableError: If token counting is requested without tiktoken.
        OSError: If the output cannot be written.
    """
    root = Path(os.path.abspath(root_dir if root_dir is not None else os.getcwd()))
    if not root.is_dir():
        raise NotADirectoryError(f"Root path is not a directory: {root}")
    output = Path(os.path.abspath(output_path)) if output_path else root / DEFAULT_TEXT_OUTPUT

    tokenizer = create_token_counter(tokenizer_model)
    config = FilterConfiguration.from_options(custom_excludes, custom_includes)
    file_filter = FileFilter.for_project(root, config)

    # Enumerate before the output exists so neither listing picks it up
    tree = FileSystemTree(root, file_filter, max_depth=max_depth, exclude_paths=[output])
    tree.get_tree()
    collection = collect_files(root, file_filter, exclude_paths=[output])

    dump = StreamingTextDump(root, collection.files, tree, tokenizer=tokenizer)
    with SafeOutputFile(output) as out:
        for chunk in dump.stream():
            out.write(chunk)

    return TextDumpResult(
        output_path=output, file_count=dump.file_count, total_size=dump.total_size, token_count=dump.token_count
    )
