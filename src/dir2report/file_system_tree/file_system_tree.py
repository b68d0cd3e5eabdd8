"""File system tree representation with configurable exclusion rules.

This module provides the FileSystemTree class which scans a directory once and
serves both the rendered tree section of a report and the list of files whose
content gets extracted, so the two always agree on what is excluded.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from anytree import ContStyle, PreOrderIter, RenderTree

from dir2report.exclusion_rules.base_rules import BaseExclusionRules
from dir2report.file_system_tree.file_entry import FileEntry
from dir2report.file_system_tree.file_system_node import FileSystemNode
from dir2report.types import PathType

logger = logging.getLogger(__name__)


def _sort_children(children: Iterable[FileSystemNode]) -> List[FileSystemNode]:
    # Directories first, then case-insensitive name; exact name breaks ties.
    return sorted(children, key=lambda n: (not n.is_dir, n.name.lower(), n.name))


class FileSystemTree:
    """A tree representation of a directory structure with support for exclusion rules.

    The tree is built lazily on first access. Every directory level is listed with
    hidden entries included; entries excluded by the rules are dropped together with
    everything beneath them. Symbolic links and junctions are recorded as leaves and
    never descended into, which guarantees termination on cyclic link graphs.

    Errors while listing or inspecting an entry below the root are treated as if the
    entry did not exist: an unreadable directory stays in the tree without children,
    an entry that cannot be inspected is skipped.

    Attributes:
        root_path (Path): The absolute path to the root directory.
        exclusion_rules (Optional[BaseExclusionRules]): Rules for excluding entries.

    Example:
        >>> tree = FileSystemTree("src")  # doctest: +SKIP
        >>> print("\\n".join(tree.render_tree()))  # doctest: +SKIP
        ├── utils
        │   └── helpers.py
        └── main.py
    """

    def __init__(self, root_path: PathType, exclusion_rules: Optional[BaseExclusionRules] = None) -> None:
        """Initialize a FileSystemTree.

        Args:
            root_path: Path to the root directory. Made absolute, symlinks are not resolved.
            exclusion_rules: Rules for excluding files and directories. Defaults to None.
        """
        self.root_path = Path(os.path.abspath(root_path))
        self.exclusion_rules = exclusion_rules
        self._tree: Optional[FileSystemNode] = None

    def get_tree(self) -> FileSystemNode:
        """Get the root node of the filesystem tree, building it on first access.

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

        root = FileSystemNode(self.root_path.name or str(self.root_path), abs_path=str(self.root_path), is_dir=True)
        self._populate(root)
        return root

    def _populate(self, node: FileSystemNode) -> None:
        """Attach the non-excluded children of a directory node, recursively."""
        try:
            with os.scandir(node.abs_path) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Skipping contents of %s: %s", node.abs_path, e)
            return

        for entry in entries:
            if self.exclusion_rules is not None and self.exclusion_rules.exclude(entry.path):
                continue

            try:
                is_link = entry.is_symlink() or entry.is_junction()
                is_dir = entry.is_dir()
                is_file = not is_link and entry.is_file(follow_symlinks=False)
                file_size = entry.stat(follow_symlinks=False).st_size if is_file else 0
            except OSError as e:
                logger.debug("Skipping %s: %s", entry.path, e)
                continue

            child = FileSystemNode(
                entry.name,
                parent=node,
                abs_path=entry.path,
                is_dir=is_dir,
                is_file=is_file,
                is_symlink=is_link,
                file_size=file_size,
            )
            if is_dir and not is_link:
                self._populate(child)

    def stream_tree_representation(self) -> Iterator[str]:
        """Generate the tree one line at a time.

        The root itself gets no line; its children start at column zero. Each level is
        sorted with directories first and then by case-insensitive name, so repeated
        runs over an unchanged directory produce identical output.

        Yields:
            Lines such as ``├── src``, ``│   └── main.py`` or ``└── README.md``.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
        """
        tree = self.get_tree()
        for prefix, _, node in RenderTree(tree, style=ContStyle(), childiter=_sort_children):
            if node is tree:
                continue
            yield f"{prefix}{node.name}"

    def render_tree(self) -> List[str]:
        """Return the complete list of tree lines."""
        return list(self.stream_tree_representation())

    def collect_files(self, accept: Optional[Callable[[FileEntry], bool]] = None) -> List[FileEntry]:
        """Collect the regular files of the tree that pass a filter.

        Symbolic links are never returned, so no content is ever read through a link.
        The order follows the scan and is not meaningful; callers sort as they need.

        Args:
            accept: Predicate deciding whether a file is eligible (for example the
                size and extension checks of a ReportConfig). None accepts every file.

        Returns:
            The eligible files.
        """
        tree = self.get_tree()
        files: List[FileEntry] = []
        for node in PreOrderIter(tree):
            if not node.is_file or node.is_symlink:
                continue
            entry = FileEntry(
                path=Path(node.abs_path),
                relative_path=os.path.relpath(node.abs_path, self.root_path),
                size=node.file_size,
            )
            if accept is None or accept(entry):
                files.append(entry)
        return files

    def get_directory_count(self) -> int:
        """Number of directories in the tree, excluding the root and links to directories."""
        tree = self.get_tree()
        return sum(1 for node in PreOrderIter(tree) if node.is_dir and not node.is_symlink and node is not tree)

    def get_symlink_count(self) -> int:
        """Number of symbolic links and junctions in the tree."""
        return sum(1 for node in PreOrderIter(self.get_tree()) if node.is_symlink)
