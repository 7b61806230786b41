"""Filtered tree representation of a project directory.

This module provides the FileSystemTree class, which walks a project depth-first,
prunes everything the FileFilter excludes, and renders the result the way the
Unix 'tree' command does.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from zipit.exclusion_rules.file_filter import FileFilter
from zipit.file_system_tree.file_identifier import FileIdentifier
from zipit.file_system_tree.file_system_node import FileSystemNode
from zipit.types import PathType

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


class FileSystemTree:
    """A depth-limited, filtered tree of a project directory.

    At every level, entries are checked against the FileFilter and sorted with
    directories first and then by name. Entries that cannot be stat'ed and
    directories that cannot be listed are left out without failing the whole tree.
    Levels beyond ``max_depth`` are silently truncated. Symbolic links to
    directories are listed but not expanded, the same as in file collection, and
    a directory already open on the current branch is never expanded again.

    The tree is built lazily on first access.

    Attributes:
        root_path (Path): The root directory of the project.
        file_filter (Optional[FileFilter]): Filter deciding which entries are shown.
        max_depth (int): Number of directory levels listed below the root.
        exclude_paths (Set[str]): Absolute paths never shown, such as the output file.

    Example:
        >>> tree = FileSystemTree("my-project")  # doctest: +SKIP
        >>> print(tree.get_tree_representation())  # doctest: +SKIP
        ├── src
        │   └── main.py
        └── README.md
    """

    def __init__(
        self,
        root_path: PathType,
        file_filter: Optional[FileFilter] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        exclude_paths: Iterable[PathType] = (),
    ) -> None:
        self.root_path = Path(os.path.abspath(root_path))
        self.file_filter = file_filter
        self.max_depth = max_depth
        self.exclude_paths = {os.path.normcase(os.path.abspath(p)) for p in exclude_paths}
        self._tree: Optional[FileSystemNode] = None

    def get_tree(self) -> FileSystemNode:
        """Get the root node of the tree, building it on first access.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
        """
        if self._tree is None:
            self._tree = self._build_tree()
        return self._tree

    def _build_tree(self) -> FileSystemNode:
        if not self.root_path.exists():
            raise FileNotFoundError(f"Root path does not exist: {self.root_path}")
        if not self.root_path.is_dir():
            raise NotADirectoryError(f"Root path is not a directory: {self.root_path}")

        root = FileSystemNode(self.root_path.name or str(self.root_path), is_dir=True)
        visited: Set[FileIdentifier] = set()
        root_id = FileIdentifier.of(self.root_path)
        if root_id is not None:
            visited.add(root_id)
        self._add_children(root, self.root_path, 0, visited)
        return root

    def _list_entries(self, directory: Path) -> List[Tuple[str, Path, bool]]:
        """List the included entries of ``directory`` in display order."""
        try:
            names = os.listdir(directory)
        except OSError as e:
            logger.debug("Could not list %s: %s", directory, e)
            return []

        entries = []
        for name in names:
            path = directory / name
            try:
                is_dir = stat.S_ISDIR(os.stat(path).st_mode)
            except OSError as e:
                logger.debug("Could not stat %s: %s", path, e)
                continue
            if os.path.normcase(str(path)) in self.exclude_paths:
                continue
            if self.file_filter is not None and self.file_filter.is_excluded(path, self.root_path, is_dir=is_dir):
                continue
            entries.append((name, path, is_dir))

        entries.sort(key=lambda entry: (not entry[2], entry[0].lower(), entry[0]))
        return entries

    def _add_children(self, node: FileSystemNode, directory: Path, depth: int, visited: Set[FileIdentifier]) -> None:
        if depth >= self.max_depth:
            return

        for name, path, is_dir in self._list_entries(directory):
            is_symlink = path.is_symlink()
            child = FileSystemNode(name, parent=node, is_dir=is_dir, is_symlink=is_symlink)
            if not is_dir or is_symlink:
                continue

            file_id = FileIdentifier.of(path)
            if file_id is None or file_id in visited:
                continue
            visited.add(file_id)
            self._add_children(child, path, depth + 1, visited)
            visited.discard(file_id)

    def stream_tree_representation(self) -> Iterator[str]:
        """Generate the tree listing one line at a time, without trailing newlines.

        The root itself is not printed. Each entry is prefixed with a connector,
        the last entry of a level with "└── " and all others with "├── ".

        Yields:
            Lines of the tree representation.
        """

        def write_children(node: FileSystemNode, prefix: str) -> Iterator[str]:
            children = node.children
            for index, child in enumerate(children):
                is_last = index == len(children) - 1
                connector = "└── " if is_last else "├── "
                yield f"{prefix}{connector}{child.name}"
                if child.is_dir:
                    yield from write_children(child, prefix + ("    " if is_last else "│   "))

        yield from write_children(self.get_tree(), "")

    def get_tree_representation(self) -> str:
        """Get the complete tree listing, one newline-terminated line per entry.

        Returns:
            The listing, or an empty string if nothing below the root is included.
        """
        return "".join(f"{line}\n" for line in self.stream_tree_representation())
