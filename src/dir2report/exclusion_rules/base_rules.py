from abc import ABC, abstractmethod


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for file/directory exclusion rules.

    This class serves as a contract for the rule types that decide which filesystem
    entries are left out of a report (directory-name rules, .gitignore-style rules and
    combinations of them). The scanner calls ``exclude`` with the absolute path of
    every entry it encounters; an excluded directory is not descended into.

    Example:
        >>> from dir2report.exclusion_rules.dir_name_rules import DirectoryNameExclusionRules
        >>> rules = DirectoryNameExclusionRules(["node_modules"])
        >>> rules.has_rules()
        True
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded.

        Args:
            path (str): Absolute path of the file or directory to check.

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def has_rules(self) -> bool:
        """
        Check whether this rule set can exclude anything at all.

        Returns:
            bool: True if at least one rule is configured. The default implementation
                returns True; subclasses override it when they can be empty.
        """
        return True
