"""
Tag classification model and fixed native tag tables

Defines the categories a tag name can resolve to and the fixed tables the
Tag Resolver consults for native (non-component) elements.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional


class TagKind(Enum):
    """
    Classification of a raw element name

    Used by the tree builder to pick a children/whitespace policy.
    """
    BLACKLISTED = "blacklisted"                      # omitted with its subtree
    COMPONENT = "component"                          # registry match
    NATIVE_VOID = "native-void"                      # <img>, <br>, <hr>
    NATIVE_WHITESPACE_INSIGNIFICANT = "native-ws"    # <table>, <tr>, <ul>
    NATIVE_ORDINARY = "native"                       # <div>, <span>
    UNRECOGNIZED = "unrecognized"                    # <Foo> without registry entry


@dataclass(frozen=True)
class TagClass:
    """
    Result of classifying one element name

    Attributes:
        kind: Resolved TagKind
        definition: Component definition from the registry (COMPONENT only)
    """
    kind: TagKind
    definition: Optional[Any] = None

    @property
    def children_allowed(self) -> bool:
        return self.kind is not TagKind.NATIVE_VOID

    @property
    def whitespace_significant(self) -> bool:
        return self.kind is not TagKind.NATIVE_WHITESPACE_INSIGNIFICANT


# Elements that structurally cannot contain content
VOID_ELEMENTS: FrozenSet[str] = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input', 'keygen',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
})

# Elements whose pure-whitespace text children carry no meaning
WHITESPACE_INSIGNIFICANT_ELEMENTS: FrozenSet[str] = frozenset({
    'table', 'thead', 'tbody', 'tfoot', 'tr', 'colgroup',
    'ul', 'ol', 'dl', 'select', 'optgroup', 'datalist',
})

# Document framing emitted around full-document markup, skipped transparently
STRUCTURAL_WRAPPERS: FrozenSet[str] = frozenset({'html', 'head', 'body'})

NATIVE_ELEMENTS: FrozenSet[str] = VOID_ELEMENTS | WHITESPACE_INSIGNIFICANT_ELEMENTS | STRUCTURAL_WRAPPERS | frozenset({
    # Metadata and scripting
    'title', 'style', 'script', 'noscript', 'template', 'slot',
    # Sections
    'address', 'article', 'aside', 'footer', 'header', 'h1', 'h2', 'h3',
    'h4', 'h5', 'h6', 'hgroup', 'main', 'nav', 'section', 'search',
    # Grouping
    'blockquote', 'dd', 'div', 'dt', 'figcaption', 'figure', 'li', 'menu',
    'p', 'pre',
    # Text-level
    'a', 'abbr', 'b', 'bdi', 'bdo', 'cite', 'code', 'data', 'dfn', 'em',
    'i', 'kbd', 'mark', 'q', 'rp', 'rt', 'ruby', 's', 'samp', 'small',
    'span', 'strong', 'sub', 'sup', 'time', 'u', 'var',
    # Edits
    'del', 'ins',
    # Embedded content
    'audio', 'canvas', 'iframe', 'map', 'object', 'picture', 'video', 'svg',
    'math',
    # Tables
    'caption', 'td', 'th',
    # Forms
    'button', 'fieldset', 'form', 'label', 'legend', 'meter', 'option',
    'output', 'progress', 'textarea',
    # Interactive
    'details', 'dialog', 'summary',
})
