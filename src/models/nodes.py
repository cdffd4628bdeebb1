"""
Raw syntax tree models

Abstract node shapes produced by the grammar parser and consumed by the tree
builder. Any grammar implementation is an adapter that must produce these
types; the builder never looks at anything else.

Example:
    For markup '<div class="a">Hi {1 + 1}</div>':
    RawElement(
        name="div",
        attributes=(RawAttribute("class", StringLiteral("a")),),
        children=(RawText("Hi "), RawExpression("1 + 1")),
        line_number=1
    )
"""

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class StringLiteral:
    """Quoted attribute value, e.g. class="foo" """
    text: str


@dataclass(frozen=True)
class ExpressionSource:
    """Braced attribute value, e.g. obj={{ foo: "bar" }} (source excludes the outer braces)"""
    source: str


class _Absent:
    """Marker for an attribute written without a value, e.g. <input disabled>"""

    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

AttributeValue = Union[StringLiteral, ExpressionSource, _Absent]


@dataclass(frozen=True)
class RawAttribute:
    name: str
    value: AttributeValue = ABSENT


@dataclass(frozen=True)
class RawText:
    """Literal text run, entity references still encoded"""
    raw: str
    kind = "text"


@dataclass(frozen=True)
class RawExpression:
    """{...} child container"""
    source: str
    kind = "expression"


@dataclass(frozen=True)
class RawComment:
    text: str
    kind = "comment"


@dataclass(frozen=True)
class RawDoctype:
    text: str
    kind = "doctype"


@dataclass(frozen=True)
class RawElement:
    """
    Element node with case-preserved name

    Attributes:
        name: Tag name exactly as written (e.g. "Custom", "div", "tr")
        attributes: Ordered attribute list, duplicates preserved
        children: Ordered child nodes
        line_number: Source line of the opening tag (for error reporting)
        self_closing: True when written as <name ... />
    """
    name: str
    attributes: Tuple[RawAttribute, ...] = ()
    children: Tuple["RawNode", ...] = ()
    line_number: int = 1
    self_closing: bool = field(default=False, compare=False)
    kind = "element"


RawNode = Union[RawElement, RawText, RawExpression, RawComment, RawDoctype]

# Name of the synthetic element the grammar parser returns as document root
ROOT_NAME = "#root"
