"""Exclusion rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .composite_rules import CompositeExclusionRules
from .dir_name_rules import DirectoryNameExclusionRules
from .git_rules import GitIgnoreExclusionRules

__all__ = [
    "BaseExclusionRules",
    "CompositeExclusionRules",
    "DirectoryNameExclusionRules",
    "GitIgnoreExclusionRules",
]
