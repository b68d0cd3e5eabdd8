"""Implementation of exclusion rules using .gitignore pattern syntax."""

import os
from typing import List, Optional, Sequence

from pathspec import PathSpec

from dir2report.types import PathType

from .base_rules import BaseExclusionRules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Implementation of exclusion rules using .gitignore pattern syntax.

    Patterns are matched with the pathspec library the same way Git matches them
    (globs, ``**``, directory-only patterns ending in ``/``, negation with ``!``).
    Paths are evaluated relative to ``base_dir``; entries outside of it are never
    excluded. Directories are matched with a trailing slash so that ``build/`` style
    patterns apply to them.

    Attributes:
        base_dir (Optional[str]): Directory patterns are anchored to, or None when the
            paths passed to exclude() are already relative.
        spec (PathSpec): Compiled pattern matcher.

    Example:
        >>> rules = GitIgnoreExclusionRules(["*.log"])
        >>> rules.exclude("app.log")
        True
        >>> rules.add_rule("!keep.log")
        >>> rules.exclude("keep.log")
        False
    """

    def __init__(self, patterns: Optional[Sequence[str]] = None, base_dir: Optional[PathType] = None):
        """Initialize GitIgnoreExclusionRules.

        Args:
            patterns: Initial gitignore-style patterns, in order.
            base_dir: Directory the patterns are anchored to. When given, absolute paths
                passed to exclude() are made relative to it.
        """
        self.base_dir = os.path.abspath(base_dir) if base_dir is not None else None
        self._lines: List[str] = []
        self.spec = PathSpec.from_lines("gitwildmatch", self._lines)
        for pattern in patterns or ():
            self.add_rule(pattern)

    def exclude(self, path: str) -> bool:
        """Check if a path matches the loaded patterns.

        Args:
            path: Absolute path (when base_dir is set) or a path relative to the
                pattern root using forward slashes.

        Returns:
            True if the last matching pattern excludes the path.
        """
        if not self._lines:
            return False

        if self.base_dir is not None:
            relative = os.path.relpath(os.path.abspath(path), self.base_dir)
            if relative == os.curdir or relative.startswith(os.pardir):
                return False
        else:
            relative = path

        relative = relative.replace(os.sep, "/")
        if self.base_dir is not None and os.path.isdir(path) and not os.path.islink(path):
            relative += "/"
        return bool(self.spec.match_file(relative))

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern (e.g. ``"*.pyc"``, ``"dist/"``, ``"!keep.txt"``)."""
        self._lines.append(rule)
        self.spec = PathSpec.from_lines("gitwildmatch", self._lines)

    def has_rules(self) -> bool:
        """Check if any patterns are loaded."""
        return bool(self._lines)
