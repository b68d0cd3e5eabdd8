"""Node representation for file system elements in the tree."""

from typing import Any, Optional

from anytree import Node


class FileSystemNode(Node):  # type: ignore
    """Node class representing a file, directory or link in the filesystem tree.

    Extends anytree.Node with the facts the scanner gathers once per entry, so that
    rendering the tree and collecting files never touch the filesystem again.

    Attributes:
        name (str): The base name of the entry.
        abs_path (str): Absolute path of the entry.
        is_dir (bool): True for directories, including links that point at one.
        is_file (bool): True for regular files (links are never regular files here).
        is_symlink (bool): True for symbolic links and junctions.
        file_size (int): Size in bytes for regular files, 0 otherwise.

    Example:
        >>> root = FileSystemNode("root", abs_path="/root", is_dir=True)
        >>> child = FileSystemNode("a.txt", parent=root, abs_path="/root/a.txt", is_file=True, file_size=5)
        >>> [c.name for c in root.children]
        ['a.txt']
        >>> child.file_size
        5
    """

    def __init__(
        self,
        name: str,
        parent: Optional["FileSystemNode"] = None,
        abs_path: str = "",
        is_dir: bool = False,
        is_file: bool = False,
        is_symlink: bool = False,
        file_size: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.abs_path = abs_path
        self.is_dir = is_dir
        self.is_file = is_file
        self.is_symlink = is_symlink
        self.file_size = file_size
