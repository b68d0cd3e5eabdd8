"""File system tree representation with configurable exclusion rules.

This package builds an anytree-based model of a directory, renders it with
box-drawing branches, and enumerates the files eligible for content extraction.
"""

from .file_entry import FileEntry
from .file_system_node import FileSystemNode
from .file_system_tree import FileSystemTree

__all__ = ["FileEntry", "FileSystemNode", "FileSystemTree"]
