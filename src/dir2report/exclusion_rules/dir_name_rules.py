"""Exclusion of entries that live beneath directories with given names."""

import os
from typing import FrozenSet, Iterable

from .base_rules import BaseExclusionRules


class DirectoryNameExclusionRules(BaseExclusionRules):
    """Exclusion rules matching directory *names* at any depth.

    An entry is excluded when any directory on its path, from the entry itself (if it
    is a directory) or its parent (if it is a file) all the way up to the filesystem
    root, has a base name contained in the rule set. Names are compared
    case-insensitively, so ``NODE_MODULES`` matches a ``node_modules`` rule.

    Note that the walk does not stop at the directory being scanned: a scan rooted
    inside an excluded directory excludes everything, root included.

    Attributes:
        names (FrozenSet[str]): Lowercase directory names to exclude.

    Example:
        >>> rules = DirectoryNameExclusionRules([".git", "Node_Modules"])
        >>> sorted(rules.names)
        ['.git', 'node_modules']
        >>> rules.matches_name("NODE_MODULES")
        True
        >>> rules.matches_name("src")
        False
    """

    def __init__(self, names: Iterable[str]):
        """Initialize the rules.

        Args:
            names: Directory names to exclude. Surrounding whitespace is stripped,
                empty names are ignored, and case is folded to lowercase.
        """
        self.names: FrozenSet[str] = frozenset(n.strip().lower() for n in names if n and n.strip())

    def matches_name(self, name: str) -> bool:
        """Check a single directory base name against the rule set."""
        return bool(name) and name.lower() in self.names

    def exclude(self, path: str) -> bool:
        """Check if a path lies beneath (or is) an excluded directory.

        Args:
            path: Path of the entry to check. Relative paths are made absolute against
                the current working directory; symbolic links are not resolved.

        Returns:
            True on the first ancestor whose name matches, False once the walk
            reaches the filesystem root (a directory that is its own parent).
        """
        if not self.names:
            return False

        current = os.path.abspath(path)
        if not os.path.isdir(current):
            current = os.path.dirname(current)

        while True:
            if self.matches_name(os.path.basename(current)):
                return True
            parent = os.path.dirname(current)
            if parent == current:
                return False
            current = parent

    def has_rules(self) -> bool:
        """Check if any directory names are configured."""
        return bool(self.names)
