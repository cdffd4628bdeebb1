"""
Tag and attribute blacklists

Compiles caller-supplied blacklist entries once per invocation and layers
them over a fixed policy that can't be switched off:

- the <script> tag (any case) is always dropped
- attribute names of the event-handler family (onClick, onchange, ...) are
  always dropped

Entry semantics:
- "foo"              plain string, exact case-sensitive equality
- "prefixed[a-z]*"   string with regex metacharacters, compiled, re.search
- re.compile(...)    used as given, re.search (anchors honoured)

Example:
    >>> blacklist = blacklist_compile(['Foo'], ['foo', 'prefixed[a-z]*'])
    >>> blacklist.tag_isBlacklisted('Foo'), blacklist.tag_isBlacklisted('foo')
    (True, False)
    >>> blacklist.attr_isBlacklisted('prefixedBar')
    True
    >>> blacklist.attr_isBlacklisted('onClick')
    True
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Pattern, Tuple, Union

from .log import LOG

BlacklistEntry = Union[str, Pattern[str]]

FIXED_TAGS: FrozenSet[str] = frozenset({'script'})
FIXED_ATTR_PATTERN: Pattern[str] = re.compile(r'^on.+', re.IGNORECASE)

_REGEX_METACHARACTERS = re.compile(r'[.^$*+?{}\[\]\\|()]')


class BlacklistPatternError(ValueError):
    """Raised when a blacklist entry is not a valid regular expression"""
    pass


@dataclass(frozen=True)
class PatternSet:
    """
    One compiled group of blacklist entries

    Attributes:
        exact: Names matched by equality
        patterns: Compiled expressions matched by re.search
    """
    exact: FrozenSet[str] = frozenset()
    patterns: Tuple[Pattern[str], ...] = ()

    def matches(self, name: str) -> bool:
        if name in self.exact:
            return True
        return any(pattern.search(name) for pattern in self.patterns)


@dataclass(frozen=True)
class Blacklist:
    """
    Compiled tag and attribute blacklists for one invocation

    Built by blacklist_compile(); read-only afterwards so it can be shared
    across every node of the tree being built.
    """
    tags: PatternSet
    attrs: PatternSet

    def tag_isBlacklisted(self, name: str) -> bool:
        """True if the element (and its subtree) must be omitted"""
        if name.lower() in FIXED_TAGS:
            return True
        return self.tags.matches(name)

    def attr_isBlacklisted(self, name: str) -> bool:
        """True if the attribute must be absent from props"""
        if FIXED_ATTR_PATTERN.search(name):
            return True
        return self.attrs.matches(name)


def patternSet_compile(entries: Optional[Iterable[BlacklistEntry]]) -> PatternSet:
    """
    Split entries into exact names and compiled patterns

    Args:
        entries: Strings and/or compiled patterns; None means no entries

    Returns:
        PatternSet ready for matching

    Raises:
        BlacklistPatternError: If a string entry is an invalid expression
        TypeError: If an entry is neither str nor a compiled pattern
    """
    exact = set()
    patterns = []

    for entry in entries or ():
        if isinstance(entry, re.Pattern):
            patterns.append(entry)
        elif isinstance(entry, str):
            if not _REGEX_METACHARACTERS.search(entry):
                exact.add(entry)
                continue
            try:
                patterns.append(re.compile(entry))
            except re.error as e:
                raise BlacklistPatternError(f"Invalid blacklist pattern {entry!r}: {e}") from e
        else:
            raise TypeError(
                f"Blacklist entries must be str or re.Pattern, got {type(entry).__name__}"
            )

    return PatternSet(exact=frozenset(exact), patterns=tuple(patterns))


def blacklist_compile(
    tag_patterns: Optional[Iterable[BlacklistEntry]] = None,
    attr_patterns: Optional[Iterable[BlacklistEntry]] = None,
) -> Blacklist:
    """
    Compile tag and attribute blacklist entries, unioned with the fixed policy

    Args:
        tag_patterns: Extra tag-name entries
        attr_patterns: Extra attribute-name entries

    Returns:
        Blacklist for use by the tag resolver and attribute processor
    """
    blacklist = Blacklist(
        tags=patternSet_compile(tag_patterns),
        attrs=patternSet_compile(attr_patterns),
    )
    LOG(
        f"Blacklist compiled: {len(blacklist.tags.exact) + len(blacklist.tags.patterns)} tag, "
        f"{len(blacklist.attrs.exact) + len(blacklist.attrs.patterns)} attribute entries",
        level=3,
    )
    return blacklist
