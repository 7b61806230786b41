"""Collection of the files that go into an archive or text dump.

Candidates come from a walk below the project root, which skips hidden entries
and does not descend into symbolic links to directories, plus a fixed list of
dotfiles that usually belong to the source tree. Every candidate is normalized to
a root-relative, forward-slash path before the FileFilter sees it, and files whose
real location lies outside the root are dropped.
"""

import glob
import logging
import os
import posixpath
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from zipit.exclusion_rules.file_filter import FileFilter
from zipit.types import PathType

logger = logging.getLogger(__name__)

# Hidden files picked up in the project root in addition to the walk results.
DOTFILE_PATTERNS = (
    ".gitignore",
    ".gitattributes",
    ".eslintrc*",
    ".prettierrc*",
    ".babelrc*",
    ".env.example",
    ".env.template",
    ".dockerignore",
    ".editorconfig",
    ".nvmrc",
    ".node-version",
    ".python-version",
)

# Dropped before filtering; the FileFilter would exclude them anyway.
PREFILTER_DIRS = frozenset({".git", "node_modules"})


@dataclass(frozen=True)
class FileCollection:
    """Result of collecting project files.

    Attributes:
        files: Sorted root-relative paths of the regular files to package.
        excluded_count: Number of candidates rejected by the FileFilter.
    """

    files: Tuple[str, ...]
    excluded_count: int

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)


def normalize_candidate(candidate: str, root_dir: str) -> Optional[str]:
    """Turn an enumeration result into a root-relative, forward-slash path.

    Args:
        candidate: Path as returned by the enumeration, relative or absolute.
        root_dir: Absolute project root.

    Returns:
        The normalized path, or None if it is the root itself or lies outside it.

    Example:
        >>> normalize_candidate("src/./lib/util.py", "/work/app")
        'src/lib/util.py'
        >>> normalize_candidate("/work/app/README.md", "/work/app")
        'README.md'
        >>> normalize_candidate("../secrets.txt", "/work/app") is None
        True
    """
    text = candidate
    if os.path.isabs(text):
        try:
            text = os.path.relpath(text, root_dir)
        except ValueError:
            return None

    normalized = posixpath.normpath(text.replace("\\", "/"))
    if normalized in ("", ".") or normalized == ".." or normalized.startswith("../") or normalized.startswith("/"):
        return None
    return normalized


def _walk_candidates(root_dir: str) -> Iterator[str]:
    """Yield every non-hidden directory and file below ``root_dir``, relative to it.

    Symbolic links to directories are yielded but never descended into.
    """

    def on_error(e: OSError) -> None:
        logger.debug("Could not list %s: %s", e.filename, e)

    for dirpath, dirnames, filenames in os.walk(root_dir, onerror=on_error, followlinks=False):
        dirnames[:] = sorted(name for name in dirnames if not name.startswith(".") and name not in PREFILTER_DIRS)
        relative_dir = os.path.relpath(dirpath, root_dir)
        prefix = "" if relative_dir == os.curdir else relative_dir + os.sep
        for name in dirnames:
            yield prefix + name
        for name in sorted(filenames):
            if not name.startswith("."):
                yield prefix + name


def _is_within(path: str, real_root: str) -> bool:
    real_path = os.path.realpath(path)
    try:
        return os.path.commonpath([real_path, real_root]) == real_root
    except ValueError:
        return False


def _dotfile_candidates(root_dir: str, patterns: Iterable[str]) -> Iterator[str]:
    for pattern in patterns:
        try:
            yield from glob.glob(pattern, root_dir=root_dir)
        except OSError as e:
            logger.debug("Dotfile lookup %r failed: %s", pattern, e)


def collect_files(
    root_dir: PathType,
    file_filter: FileFilter,
    exclude_paths: Iterable[PathType] = (),
    dotfile_patterns: Iterable[str] = DOTFILE_PATTERNS,
) -> FileCollection:
    """Collect the regular files of a project that pass the filter.

    Args:
        root_dir: The project root.
        file_filter: Filter deciding which paths are included.
        exclude_paths: Paths that are never collected, typically the output artifact.
        dotfile_patterns: Glob patterns for hidden files to add from the root.

    Returns:
        FileCollection: The sorted files and the number of rejected candidates.

    Example:
        >>> from zipit.exclusion_rules.file_filter import FileFilter
        >>> collection = collect_files("my-project", FileFilter.for_project("my-project"))  # doctest: +SKIP
        >>> collection.files  # doctest: +SKIP
        ('.gitignore', 'src/a.ts')
    """
    root = os.path.abspath(root_dir)
    real_root = os.path.realpath(root)
    skipped = {os.path.normcase(os.path.abspath(p)) for p in exclude_paths}

    candidates: List[str] = list(_walk_candidates(root))
    candidates.extend(_dotfile_candidates(root, dotfile_patterns))

    files: List[str] = []
    seen: Set[str] = set()
    excluded_count = 0

    for candidate in candidates:
        relative_path = normalize_candidate(candidate, root)
        if relative_path is None or relative_path in seen:
            continue
        seen.add(relative_path)

        full_path = os.path.join(root, *relative_path.split("/"))
        if os.path.normcase(full_path) in skipped:
            continue

        if file_filter.is_excluded(relative_path):
            excluded_count += 1
            continue

        if not os.path.isfile(full_path):
            continue

        if not _is_within(full_path, real_root):
            logger.debug("Skipping %s: resolves outside %s", full_path, root)
            continue

        files.append(relative_path)

    return FileCollection(tuple(sorted(files)), excluded_count)
