"""
Tag classification

Decides, for one element name, which children/whitespace policy the tree
builder applies. Checks run in a fixed order:

1. blacklist                      -> BLACKLISTED (wins over the registry)
2. exact registry key             -> COMPONENT
3. void table (any case)          -> NATIVE_VOID
4. whitespace table (any case)    -> NATIVE_WHITESPACE_INSIGNIFICANT
5. not a lowercase native name    -> UNRECOGNIZED
6. otherwise                      -> NATIVE_ORDINARY
"""

from typing import Any, Mapping

from ..models.tags import (
    NATIVE_ELEMENTS,
    STRUCTURAL_WRAPPERS,
    VOID_ELEMENTS,
    WHITESPACE_INSIGNIFICANT_ELEMENTS,
    TagClass,
    TagKind,
)
from .sanitizer import Blacklist

_BLACKLISTED = TagClass(TagKind.BLACKLISTED)
_VOID = TagClass(TagKind.NATIVE_VOID)
_WHITESPACE_INSIGNIFICANT = TagClass(TagKind.NATIVE_WHITESPACE_INSIGNIFICANT)
_ORDINARY = TagClass(TagKind.NATIVE_ORDINARY)
_UNRECOGNIZED = TagClass(TagKind.UNRECOGNIZED)


def tag_classify(name: str, registry: Mapping[str, Any], blacklist: Blacklist) -> TagClass:
    """
    Classify an element name

    Args:
        name: Tag name exactly as written
        registry: Component name -> definition (exact, case-sensitive keys)
        blacklist: Compiled blacklist for this invocation

    Returns:
        TagClass; COMPONENT results carry the registry definition

    Example:
        >>> tag_classify('tr', {'tr': Row}, blacklist).kind
        <TagKind.COMPONENT: 'component'>
        >>> tag_classify('TR', {'tr': Row}, blacklist).kind
        <TagKind.NATIVE_WHITESPACE_INSIGNIFICANT: 'native-ws'>
    """
    if blacklist.tag_isBlacklisted(name):
        return _BLACKLISTED

    if name in registry:
        return TagClass(TagKind.COMPONENT, registry[name])

    lowered = name.lower()
    if lowered in VOID_ELEMENTS:
        return _VOID
    if lowered in WHITESPACE_INSIGNIFICANT_ELEMENTS:
        return _WHITESPACE_INSIGNIFICANT

    # <Div> is not <div>: native names are recognized only as lowercase
    if name not in NATIVE_ELEMENTS:
        return _UNRECOGNIZED

    return _ORDINARY


def tag_isStructuralWrapper(name: str) -> bool:
    """True for html/head/body framing that the builder walks through"""
    return name.lower() in STRUCTURAL_WRAPPERS
