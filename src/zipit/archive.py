"""ZIP archive export of a project."""

import logging
import os
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from zipit.exclusion_rules.file_filter import FileFilter, FilterConfiguration
from zipit.file_collector import collect_files
from zipit.io.safe_output import SafeOutputFile
from zipit.types import PathType

logger = logging.getLogger(__name__)

DEFAULT_ZIP_OUTPUT = "project-code.zip"


@dataclass(frozen=True)
class ArchiveResult:
    """Summary of a finished archive.

    Attributes:
        output_path: Where the archive was written.
        files_added: Number of files stored in the archive.
        files_excluded: Number of candidates rejected by the filter.
        archive_size: Size of the archive in bytes.
    """

    output_path: Path
    files_added: int
    files_excluded: int
    archive_size: int


def create_zip(
    output_path: Optional[PathType] = None,
    root_dir: Optional[PathType] = None,
    custom_excludes: Optional[Iterable[str]] = None,
    custom_includes: Optional[Iterable[str]] = None,
) -> ArchiveResult:
    """Write a ZIP archive of a project's source files.

    Every included file is stored under its root-relative path with maximum
    DEFLATE compression. Files that vanish or become unreadable after collection
    are skipped. The archive only appears at ``output_path`` if it was written
    completely.

    Args:
        output_path: Destination file. Defaults to project-code.zip in the root.
        root_dir: Project root. Defaults to the current working directory.
        custom_excludes: Additional exclusion patterns.
        custom_includes: Substrings that force inclusion of excluded paths.

    Returns:
        ArchiveResult: Where the archive went and how many files it holds.

    Raises:
        NotADirectoryError: If the root is not a directory.
        OSError: If the output directory or archive cannot be written.
        zipfile.BadZipFile: If the archive writer fails.

    Example:
        >>> result = create_zip(root_dir="my-project")  # doctest: +SKIP
        >>> result.files_added  # doctest: +SKIP
        42
    """
    root = Path(os.path.abspath(root_dir if root_dir is not None else os.getcwd()))
    if not root.is_dir():
        raise NotADirectoryError(f"Root path is not a directory: {root}")
    output = Path(os.path.abspath(output_path)) if output_path else root / DEFAULT_ZIP_OUTPUT

    config = FilterConfiguration.from_options(custom_excludes, custom_includes)
    file_filter = FileFilter.for_project(root, config)
    collection = collect_files(root, file_filter, exclude_paths=[output])

    files_added = 0
    with SafeOutputFile(output, mode="wb") as out:
        with zipfile.ZipFile(
            out.file, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9, strict_timestamps=False
        ) as archive:
            for relative_path in collection.files:
                full_path = root.joinpath(*relative_path.split("/"))
                try:
                    archive.write(full_path, arcname=relative_path)
                except (FileNotFoundError, PermissionError, IsADirectoryError) as e:
                    logger.debug("Skipping %s: %s", full_path, e)
                    continue
                files_added += 1

    return ArchiveResult(
        output_path=output,
        files_added=files_added,
        files_excluded=collection.excluded_count,
        archive_size=output.stat().st_size,
    )
