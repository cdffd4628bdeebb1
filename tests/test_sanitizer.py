"""
Sanitizer tests

Tests the fixed policy and caller-supplied blacklist entries.
"""

import re

import pytest

from markuptree.lib.sanitizer import (
    BlacklistPatternError,
    blacklist_compile,
    patternSet_compile,
)


class TestFixedPolicy:
    """The fixed policy applies without any caller entries"""

    def test_script_always_blacklisted(self):
        blacklist = blacklist_compile()
        assert blacklist.tag_isBlacklisted("script")
        assert blacklist.tag_isBlacklisted("SCRIPT")

    def test_ordinary_tags_allowed(self):
        blacklist = blacklist_compile()
        assert not blacklist.tag_isBlacklisted("div")
        assert not blacklist.tag_isBlacklisted("Custom")

    @pytest.mark.parametrize("name", ["onClick", "onChange", "onclick", "ONLOAD", "onMouseOver"])
    def test_event_handlers_always_blacklisted(self, name):
        assert blacklist_compile().attr_isBlacklisted(name)

    @pytest.mark.parametrize("name", ["class", "href", "data-on", "button", "on"])
    def test_other_attributes_allowed(self, name):
        assert not blacklist_compile().attr_isBlacklisted(name)

    def test_caller_entries_cannot_remove_fixed_rules(self):
        """Caller entries are added to the fixed rules, never replace them"""
        blacklist = blacklist_compile(["iframe"], ["style"])
        assert blacklist.tag_isBlacklisted("script")
        assert blacklist.tag_isBlacklisted("iframe")
        assert blacklist.attr_isBlacklisted("onClick")
        assert blacklist.attr_isBlacklisted("style")


class TestCallerEntries:
    """Exact and pattern entries"""

    def test_exact_entry_is_case_sensitive_equality(self):
        blacklist = blacklist_compile(["Foo"], ["foo"])
        assert blacklist.tag_isBlacklisted("Foo")
        assert not blacklist.tag_isBlacklisted("foo")
        assert not blacklist.tag_isBlacklisted("FooBar")
        assert blacklist.attr_isBlacklisted("foo")
        assert not blacklist.attr_isBlacklisted("prefixedFoo")

    def test_string_pattern_entry(self):
        """Strings with regex metacharacters are searched as patterns"""
        blacklist = blacklist_compile(attr_patterns=["foo", "prefixed[a-z]*"])
        assert blacklist.attr_isBlacklisted("prefixedFoo")
        assert blacklist.attr_isBlacklisted("prefixedBar")
        assert blacklist.attr_isBlacklisted("foo")
        assert not blacklist.attr_isBlacklisted("bar")

    def test_compiled_pattern_entry(self):
        """Compiled patterns are used as given, anchors honoured"""
        blacklist = blacklist_compile([re.compile(r"^x-")], [re.compile(r"secret$", re.I)])
        assert blacklist.tag_isBlacklisted("x-widget")
        assert not blacklist.tag_isBlacklisted("my-x-widget")
        assert blacklist.attr_isBlacklisted("dataSECRET")
        assert not blacklist.attr_isBlacklisted("secretive")

    def test_invalid_pattern_raises(self):
        with pytest.raises(BlacklistPatternError, match="Invalid blacklist pattern"):
            blacklist_compile(attr_patterns=["bad[pattern"])

    def test_wrong_entry_type_raises(self):
        with pytest.raises(TypeError):
            blacklist_compile([42])

    def test_pattern_set_split(self):
        """Entries are sorted into exact names and compiled patterns once"""
        pattern_set = patternSet_compile(["a", "b.*", re.compile("c")])
        assert pattern_set.exact == frozenset({"a"})
        assert len(pattern_set.patterns) == 2

    def test_none_entries(self):
        pattern_set = patternSet_compile(None)
        assert not pattern_set.matches("anything")
