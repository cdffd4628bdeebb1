"""
Tag resolver tests

Tests classification order: blacklist, registry, void table,
whitespace table, unrecognized, ordinary.
"""

import pytest

from markuptree.lib.resolver import tag_classify, tag_isStructuralWrapper
from markuptree.lib.sanitizer import blacklist_compile
from markuptree.models.tags import TagKind


def Row(props, children):
    return children


@pytest.fixture
def blacklist():
    return blacklist_compile(["Foo"])


class TestClassification:
    """Test each classification outcome"""

    @pytest.mark.parametrize("name, kind", [
        ("div", TagKind.NATIVE_ORDINARY),
        ("span", TagKind.NATIVE_ORDINARY),
        ("img", TagKind.NATIVE_VOID),
        ("IMG", TagKind.NATIVE_VOID),
        ("hr", TagKind.NATIVE_VOID),
        ("tr", TagKind.NATIVE_WHITESPACE_INSIGNIFICANT),
        ("Table", TagKind.NATIVE_WHITESPACE_INSIGNIFICANT),
        ("Unrecognized", TagKind.UNRECOGNIZED),
        ("Div", TagKind.UNRECOGNIZED),
        ("my-element", TagKind.UNRECOGNIZED),
        ("script", TagKind.BLACKLISTED),
        ("Foo", TagKind.BLACKLISTED),
    ])
    def test_kind(self, name, kind, blacklist):
        assert tag_classify(name, {}, blacklist).kind is kind

    def test_component_carries_definition(self, blacklist):
        tag_class = tag_classify("Custom", {"Custom": Row}, blacklist)
        assert tag_class.kind is TagKind.COMPONENT
        assert tag_class.definition is Row


class TestPrecedence:
    """Test the order in which rules apply"""

    @pytest.mark.parametrize("name", ["link", "tr", "img", "table"])
    def test_registry_beats_native_tables(self, name, blacklist):
        tag_class = tag_classify(name, {name: Row}, blacklist)
        assert tag_class.kind is TagKind.COMPONENT
        assert tag_class.children_allowed
        assert tag_class.whitespace_significant

    def test_registry_is_case_sensitive(self, blacklist):
        registry = {"CustomContent": Row}
        assert tag_classify("CustomContent", registry, blacklist).kind is TagKind.COMPONENT
        assert tag_classify("customcontent", registry, blacklist).kind is TagKind.UNRECOGNIZED
        assert tag_classify("CuStomContent", registry, blacklist).kind is TagKind.UNRECOGNIZED

    def test_blacklist_beats_registry(self, blacklist):
        assert tag_classify("Foo", {"Foo": Row}, blacklist).kind is TagKind.BLACKLISTED

    def test_registered_lowercase_native_name_differs_by_case(self, blacklist):
        """Registering 'tr' leaves 'TR' a native whitespace-insignificant tag"""
        assert tag_classify("TR", {"tr": Row}, blacklist).kind is TagKind.NATIVE_WHITESPACE_INSIGNIFICANT


class TestPolicies:
    """Test the policy flags derived from a classification"""

    def test_void_disallows_children(self, blacklist):
        assert not tag_classify("br", {}, blacklist).children_allowed

    def test_whitespace_insignificant(self, blacklist):
        assert not tag_classify("ul", {}, blacklist).whitespace_significant

    @pytest.mark.parametrize("name", ["html", "HEAD", "body"])
    def test_structural_wrappers(self, name):
        assert tag_isStructuralWrapper(name)

    def test_div_is_not_wrapper(self):
        assert not tag_isStructuralWrapper("div")
