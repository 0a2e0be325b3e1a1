"""
Title matching against configured rules.
"""

import logging
import re
from collections.abc import Iterable
from functools import lru_cache

from gcal_bulk.models import ConfigError
from gcal_bulk.models import MatchType
from gcal_bulk.models import Rule

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


def _equals(summary: str, pattern: str) -> bool:
    return summary.casefold() == pattern.casefold()


def _contains(summary: str, pattern: str) -> bool:
    return pattern.casefold() in summary.casefold()


def _regex(summary: str, pattern: str) -> bool:
    return _compile(pattern).search(summary) is not None


_MATCHERS = {
    MatchType.EQUALS: _equals,
    MatchType.CONTAINS: _contains,
    MatchType.REGEX: _regex,
}


def matches(summary: str | None, rule: Rule) -> bool:
    """Return True if ``summary`` satisfies ``rule``.

    Blank summaries never match. A rule whose match type is not one of
    ``equals``/``contains``/``regex`` never matches either.
    """
    if summary is None or not summary.strip():
        return False
    matcher = _MATCHERS.get(rule.kind)
    if matcher is None:
        return False
    return matcher(summary, rule.pattern or "")


def select_first_match(summary: str | None, rules: Iterable[Rule]) -> Rule | None:
    """First rule in list order that matches, or None."""
    for rule in rules:
        if matches(summary, rule):
            return rule
    return None


def any_match(summary: str | None, rules: Iterable[Rule]) -> bool:
    return any(matches(summary, rule) for rule in rules)


def validate_rules(
    rules: Iterable[Rule],
    *,
    require_color: bool = False,
    strict_types: bool = True,
) -> None:
    """Raise ConfigError for rules that could only fail at match time.

    Every regex pattern is compiled up front. Unknown match types are
    rejected unless ``strict_types`` is False, in which case they are kept
    and logged since they can never fire.
    """
    for rule in rules:
        kind = rule.kind
        if kind is None:
            if strict_types:
                raise ConfigError(
                    f"Rule {rule.describe()}: unknown match_type {rule.match_type!r} "
                    f"(expected one of: {', '.join(m.value for m in MatchType)})"
                )
            logger.warning("Rule %s has unknown match_type and will never match", rule.describe())
            continue
        if kind is MatchType.REGEX:
            try:
                _compile(rule.pattern)
            except re.error as e:
                raise ConfigError(f"Rule {rule.describe()}: invalid regex: {e}") from e
        if require_color and not rule.color_id:
            logger.warning(
                "Color rule %s has no color_id; matches will be ignored", rule.describe()
            )
