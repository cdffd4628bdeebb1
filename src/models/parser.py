"""
Parser-specific data models

Type-safe structures for grammar parser operations and return values.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .nodes import RawAttribute, RawNode


@dataclass
class TagMatch:
    """
    Result of scanning one tag from markup source

    Returned by Parser.tag_scan() when a '<' introduces an opening or
    closing tag.

    Attributes:
        name: Tag name exactly as written
        attributes: Parsed attributes in source order
        closing: True for </name>
        self_closing: True for <name ... />
        end: Position just past the terminating '>'

    Example:
        For source '<img src="/a.png" />' at position 0:
        TagMatch(name="img", attributes=(RawAttribute("src", ...),),
                 closing=False, self_closing=True, end=20)
    """
    name: str
    attributes: Tuple[RawAttribute, ...]
    closing: bool
    self_closing: bool
    end: int


@dataclass
class OpenElement:
    """
    Element on the parser's open-element stack

    Children accumulate here until the matching closing tag is seen, at which
    point the frame is frozen into a RawElement.

    Attributes:
        name: Tag name as written
        attributes: Parsed attributes
        line_number: Line of the opening tag
        children: Child nodes collected so far
    """
    name: str
    attributes: Tuple[RawAttribute, ...]
    line_number: int
    children: List[RawNode] = field(default_factory=list)
