"""Ordered include/exclude rules for template paths.

Rules are regular expressions matched against whole relative paths.
The last matching rule decides. When nothing matches, the decision is
the opposite of the first rule's polarity, so a list that starts with
an include keeps nothing else and a list that starts with an exclude
keeps everything else. An empty list includes every path.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class PatternError(ValueError):
    """Raised when a rule pattern is not a valid regular expression."""


@dataclass(frozen=True, slots=True)
class InclusionRule:
    """A compiled rule.

    Attributes:
        regex: Compiled pattern, matched against the whole path.
        include: True for include rules, False for exclude rules.
    """

    regex: re.Pattern[str]
    include: bool


class InclusionFilter:
    """Decides which template paths are kept in sync.

    Example:
        >>> inclusion = InclusionFilter()
        >>> inclusion.add_rule(r".*\\.txt", include=True)
        >>> inclusion.add_rule(r"secret/.*\\.txt", include=False)
        >>> inclusion.decide("secret/a.txt")
        False
    """

    def __init__(self) -> None:
        self._rules: list[InclusionRule] = []

    def __len__(self) -> int:
        return len(self._rules)

    def add_rule(self, pattern: str, include: bool) -> None:
        """Append a rule.

        Args:
            pattern: Regular expression matched against whole paths.
            include: Polarity of the rule.

        Raises:
            PatternError: If the pattern does not compile. The rule is
                not added.
        """
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise PatternError(f"Invalid pattern {pattern!r}: {e}") from e
        self._rules.append(InclusionRule(regex=regex, include=include))

    def decide(self, path: str) -> bool:
        """Check whether a path is kept in sync.

        Args:
            path: Relative, forward-slash template path.

        Returns:
            True if the path is included.
        """
        if not self._rules:
            return True

        included = not self._rules[0].include
        for rule in self._rules:
            if rule.regex.fullmatch(path):
                included = rule.include
        return included


def build_filter(rules: Iterable[tuple[str, bool]]) -> tuple[InclusionFilter, list[str]]:
    """Build a filter, skipping rules whose patterns do not compile.

    Args:
        rules: ``(pattern, include)`` pairs in declaration order.

    Returns:
        Tuple of (filter with the valid rules, error messages for the rest).
    """
    inclusion = InclusionFilter()
    errors: list[str] = []
    for pattern, include in rules:
        try:
            inclusion.add_rule(pattern, include)
        except PatternError as e:
            logger.warning("Skipping rule: %s", e)
            errors.append(str(e))
    return inclusion, errors
