"""Composite exclusion rules for combining multiple rule types."""

from typing import List, Sequence

from .base_rules import BaseExclusionRules


class CompositeExclusionRules(BaseExclusionRules):
    """Exclusion rules that combine several rule objects with a logical OR.

    A path is excluded as soon as any constituent rule excludes it. The report
    generator uses this to stack directory-name rules and optional .gitignore-style
    patterns behind the single interface the scanner consumes.

    Attributes:
        rules (List[BaseExclusionRules]): Constituent rules, evaluated in order.

    Example:
        >>> from dir2report.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> temporary, backups = GitIgnoreExclusionRules(["*.tmp"]), GitIgnoreExclusionRules(["*.bak"])
        >>> composite = CompositeExclusionRules([temporary, backups])
        >>> composite.exclude("notes.bak")
        True
        >>> composite.exclude("notes.txt")
        False
    """

    def __init__(self, rules: Sequence[BaseExclusionRules]):
        """Initialize composite exclusion rules.

        Args:
            rules: Rules to combine. Place cheap rules first; evaluation short-circuits.

        Raises:
            ValueError: If rules is empty.
            TypeError: If any rule doesn't implement BaseExclusionRules.
        """
        if not rules:
            raise ValueError("At least one exclusion rule must be provided")

        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseExclusionRules):
                raise TypeError(f"Rule at index {i} must implement BaseExclusionRules, got {type(rule)}")

        self.rules: List[BaseExclusionRules] = list(rules)

    def exclude(self, path: str) -> bool:
        """Return True if ANY constituent rule excludes the path."""
        return any(rule.exclude(path) for rule in self.rules)

    def has_rules(self) -> bool:
        """Return True if ANY constituent rule has rules configured."""
        return any(rule.has_rules() for rule in self.rules)

    def add_rule_object(self, rule: BaseExclusionRules) -> None:
        """Append another rule object to the composite.

        Raises:
            TypeError: If rule doesn't implement BaseExclusionRules.
        """
        if not isinstance(rule, BaseExclusionRules):
            raise TypeError(f"Rule must implement BaseExclusionRules, got {type(rule)}")
        self.rules.append(rule)
