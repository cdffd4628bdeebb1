"""
Attribute processor tests

Tests value resolution, style parsing, name normalization, blacklist
filtering and binding precedence.
"""

import math

import pytest

from markuptree.lib.attributes import (
    cssProperty_camelCase,
    props_resolve,
    style_parse,
)
from markuptree.lib.expressions import ExpressionError
from markuptree.lib.sanitizer import blacklist_compile
from markuptree.models.nodes import ABSENT, ExpressionSource, RawAttribute, StringLiteral


def attrs(**values):
    result = []
    for name, value in values.items():
        if value is ABSENT:
            result.append(RawAttribute(name, ABSENT))
        elif isinstance(value, ExpressionSource):
            result.append(RawAttribute(name, value))
        else:
            result.append(RawAttribute(name, StringLiteral(value)))
    return tuple(result)


@pytest.fixture
def blacklist():
    return blacklist_compile()


class TestValueResolution:
    """Test each kind of raw value"""

    def test_absent_is_true(self, blacklist):
        props = props_resolve(attrs(shouldBeTrue=ABSENT), None, blacklist, is_component=True)
        assert props == {"shouldBeTrue": True}

    def test_expression_is_evaluated(self, blacklist):
        props = props_resolve(
            attrs(shouldBeFalse=ExpressionSource("false"), obj=ExpressionSource('{ foo: "bar" }')),
            None, blacklist, is_component=True,
        )
        assert props["shouldBeFalse"] is False
        assert props["obj"] == {"foo": "bar"}

    def test_failed_expression_drops_only_that_attribute(self, blacklist):
        props = props_resolve(
            attrs(bad=ExpressionSource("someVariable"), good=ExpressionSource("1 + 1"), text="ok"),
            None, blacklist, is_component=True,
        )
        assert props == {"good": 2, "text": "ok"}

    def test_custom_evaluator(self, blacklist):
        """An injected evaluator replaces the sandbox"""
        def evaluator(source):
            if source == "boom":
                raise ExpressionError("boom")
            return source.upper()

        props = props_resolve(
            attrs(a=ExpressionSource("x"), b=ExpressionSource("boom")),
            None, blacklist, is_component=True, evaluator=evaluator,
        )
        assert props == {"a": "X"}

    def test_string_value_passes_through(self, blacklist):
        props = props_resolve(attrs(title="Test Text"), None, blacklist)
        assert props == {"title": "Test Text"}

    def test_string_value_entities_decoded(self, blacklist):
        props = props_resolve(attrs(title="a&amp;b&nbsp;c"), None, blacklist)
        assert props == {"title": "a&b\u00a0c"}


class TestStyle:
    """Test inline style parsing"""

    def test_style_becomes_map(self, blacklist):
        props = props_resolve(attrs(style="margin: 0 1px 2px 3px;"), None, blacklist)
        assert props == {"style": {"margin": "0 1px 2px 3px"}}

    def test_style_order_and_camel_case(self, blacklist):
        props = props_resolve(attrs(style="padding-left: 45px; padding-right: 1em;"), None, blacklist)
        assert list(props["style"].items()) == [("paddingLeft", "45px"), ("paddingRight", "1em")]

    def test_empty_and_malformed_declarations_skipped(self):
        assert style_parse(" ; color: red;; nonsense ; :novalue; ") == {"color": "red"}

    def test_value_with_colon(self):
        """Only the first ':' separates property and value"""
        assert style_parse("background: url(http://x/y.png)") == {"background": "url(http://x/y.png)"}

    def test_expression_style_kept_as_given(self, blacklist):
        props = props_resolve(attrs(style=ExpressionSource("{ color: 'red' }")), None, blacklist)
        assert props == {"style": {"color": "red"}}

    @pytest.mark.parametrize("name, expected", [
        ("color", "color"),
        ("padding-left", "paddingLeft"),
        ("border-top-left-radius", "borderTopLeftRadius"),
        ("-webkit-transition", "WebkitTransition"),
        ("--brand-color", "--brand-color"),
    ])
    def test_camel_case(self, name, expected):
        assert cssProperty_camelCase(name) == expected


class TestNames:
    """Test prop name normalization"""

    def test_native_class_and_for(self, blacklist):
        props = props_resolve(attrs(**{"class": "foo", "for": "field"}), None, blacklist)
        assert props == {"className": "foo", "htmlFor": "field"}

    def test_component_names_as_written(self, blacklist):
        props = props_resolve(attrs(**{"class": "foo"}), None, blacklist, is_component=True)
        assert props == {"class": "foo"}


class TestBlacklist:
    """Test attribute blacklist filtering"""

    def test_event_handlers_dropped(self, blacklist):
        props = props_resolve(attrs(onClick="handleClick()", id="x"), None, blacklist)
        assert props == {"id": "x"}

    def test_custom_entries_dropped(self):
        blacklist = blacklist_compile(attr_patterns=["foo", "prefixed[a-z]*"])
        props = props_resolve(
            attrs(foo="bar", prefixedFoo="foo", prefixedBar="bar", keep="yes"), None, blacklist,
        )
        assert props == {"keep": "yes"}

    def test_normalized_name_checked(self):
        """Blacklisting className also removes class on native elements"""
        blacklist = blacklist_compile(attr_patterns=["className"])
        assert props_resolve(attrs(**{"class": "x"}), None, blacklist) == {}

    def test_blacklisted_binding_dropped(self, blacklist):
        props = props_resolve((), {"onLoad": "x", "lang": "en"}, blacklist)
        assert props == {"lang": "en"}


class TestBindings:
    """Test binding precedence"""

    def test_markup_overrides_binding(self, blacklist):
        props = props_resolve(attrs(foo="Fu"), {"foo": "Foo", "bar": "Bar"}, blacklist)
        assert props == {"foo": "Fu", "bar": "Bar"}

    def test_bindings_not_mutated(self, blacklist):
        bindings = {"foo": "Foo"}
        props_resolve(attrs(foo="Fu"), bindings, blacklist)
        assert bindings == {"foo": "Foo"}

    def test_no_attributes_gives_bindings(self, blacklist):
        assert props_resolve((), {"a": 1}, blacklist) == {"a": 1}

    def test_binding_names_normalized(self):
        """A 'class' binding is overridden by markup 'class' on native elements"""
        props = props_resolve(attrs(**{"class": "b"}), {"class": "a", "for": "f"}, blacklist_compile())
        assert props == {"className": "b", "htmlFor": "f"}

    def test_component_binding_names_as_written(self):
        props = props_resolve((), {"class": "a"}, blacklist_compile(), is_component=True)
        assert props == {"class": "a"}

    def test_arithmetic_edge_cases_keep_other_attributes(self, blacklist):
        props = props_resolve(
            attrs(a=ExpressionSource("Infinity % 2"), b=ExpressionSource("9" * 400 + " / 3"), c="ok"),
            None, blacklist,
        )
        assert math.isnan(props["a"])
        assert props["b"] == math.inf
        assert props["c"] == "ok"
