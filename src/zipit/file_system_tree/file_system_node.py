"""Node representation for entries in the project tree."""

from typing import Any, Optional

from anytree import Node


class FileSystemNode(Node):  # type: ignore
    """Node class representing a file or directory in the project tree.

    Extends anytree.Node with the flags the tree listing needs. Children keep the
    order in which they were attached, which is the display order.

    Attributes:
        name (str): The basename of the file or directory.
        parent (Optional[FileSystemNode]): The parent node in the tree.
        is_dir (bool): True if this node represents a directory (following symlinks).
        is_symlink (bool): True if the entry itself is a symbolic link.

    Example:
        >>> root = FileSystemNode("project", is_dir=True)
        >>> child = FileSystemNode("main.py", parent=root)
        >>> [node.name for node in root.children]
        ['main.py']
        >>> child.is_dir
        False
    """

    def __init__(
        self,
        name: str,
        parent: Optional["FileSystemNode"] = None,
        is_dir: bool = False,
        is_symlink: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir
        self.is_symlink = is_symlink
