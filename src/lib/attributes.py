"""
Attribute processing

Turns one element's raw attribute list into its final props mapping:

1. valueless attributes become True
2. {expr} values are evaluated in the sandbox; a failing expression drops
   only that attribute
3. string style values become an ordered style map with camelCased keys
4. other string values pass through with character references decoded
5. blacklisted names are dropped
6. bindings supply defaults; markup values win on shared keys

Example:
    >>> props_resolve(
    ...     (RawAttribute('class', StringLiteral('foo')),
    ...      RawAttribute('style', StringLiteral('padding-left: 4px'))),
    ...     bindings={'lang': 'en'},
    ...     blacklist=blacklist_compile(),
    ... )
    {'lang': 'en', 'className': 'foo', 'style': {'paddingLeft': '4px'}}
"""

from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ..config import appsettings
from ..models.nodes import ABSENT, ExpressionSource, RawAttribute, StringLiteral
from .entities import text_normalize
from .expressions import ExpressionError, expression_evaluate
from .log import LOG
from .sanitizer import Blacklist

Evaluator = Callable[[str], Any]

# Markup attribute names that map to different prop names on native elements
NATIVE_PROP_NAMES: Dict[str, str] = {
    'class': 'className',
    'for': 'htmlFor',
}


def propName_normalize(name: str, is_component: bool) -> str:
    """
    Prop key for an attribute name

    Native elements use the host's property names (class -> className);
    components receive names exactly as written.
    """
    if is_component:
        return name
    return NATIVE_PROP_NAMES.get(name, name)


def cssProperty_camelCase(name: str) -> str:
    """
    camelCase a CSS property name

    Example:
        >>> cssProperty_camelCase('padding-left')
        'paddingLeft'
        >>> cssProperty_camelCase('-webkit-transition')
        'WebkitTransition'
        >>> cssProperty_camelCase('--brand-color')
        '--brand-color'
    """
    if name.startswith('--'):
        return name
    parts = [part for part in name.split('-') if part]
    if not parts:
        return name
    first = parts[0].capitalize() if name.startswith('-') else parts[0]
    return first + ''.join(part.capitalize() for part in parts[1:])


def style_parse(text: str) -> Dict[str, str]:
    """
    Parse inline CSS text into an ordered style map

    Declarations are split on ';' and then on the first ':'. Empty and
    malformed declarations (no ':' or empty property) are skipped. A later
    declaration of the same property replaces the earlier value.

    Example:
        >>> style_parse('margin: 0 1px 2px 3px; ;padding-left:45px;')
        {'margin': '0 1px 2px 3px', 'paddingLeft': '45px'}
    """
    style: Dict[str, str] = {}
    for declaration in text.split(';'):
        if ':' not in declaration:
            continue
        prop, value = declaration.split(':', 1)
        prop = prop.strip()
        if not prop:
            continue
        style[cssProperty_camelCase(prop)] = value.strip()
    return style


def attributeValue_resolve(
    attribute: RawAttribute,
    evaluator: Evaluator,
) -> Any:
    """
    Resolve one raw attribute value

    Raises:
        ExpressionError: If a bound expression fails to evaluate
    """
    value = attribute.value

    if value is ABSENT:
        return True

    if isinstance(value, ExpressionSource):
        return evaluator(value.source)

    if isinstance(value, StringLiteral):
        text = text_normalize(value.text)
        if attribute.name == appsettings.style_attribute:
            return style_parse(text)
        return text

    raise TypeError(f"Unsupported attribute value {value!r}")


def props_resolve(
    attributes: Iterable[RawAttribute],
    bindings: Optional[Mapping[str, Any]],
    blacklist: Blacklist,
    is_component: bool = False,
    evaluator: Optional[Evaluator] = None,
) -> Dict[str, Any]:
    """
    Build the props mapping for one element

    Args:
        attributes: Raw attributes in markup order
        bindings: Default values, lowest precedence
        blacklist: Compiled blacklist for this invocation
        is_component: True for registry matches (no prop-name mapping)
        evaluator: Expression evaluator, defaults to the sandbox

    Returns:
        New dict: surviving bindings overlaid by surviving markup values
    """
    evaluate = evaluator or expression_evaluate
    props: Dict[str, Any] = {}

    for name, value in (bindings or {}).items():
        key = propName_normalize(name, is_component)
        if not (blacklist.attr_isBlacklisted(name) or blacklist.attr_isBlacklisted(key)):
            props[key] = value

    for attribute in attributes:
        key = propName_normalize(attribute.name, is_component)
        if blacklist.attr_isBlacklisted(attribute.name) or blacklist.attr_isBlacklisted(key):
            LOG(f"Dropped blacklisted attribute '{attribute.name}'", level=2)
            continue

        try:
            props[key] = attributeValue_resolve(attribute, evaluate)
        except ExpressionError as e:
            LOG(f"Dropped attribute '{attribute.name}': {e}", level=3)

    return props
