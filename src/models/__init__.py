"""
Models package for markuptree

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .tags import TagKind, TagClass, VOID_ELEMENTS, WHITESPACE_INSIGNIFICANT_ELEMENTS
from .nodes import (
    RawNode,
    RawElement,
    RawText,
    RawExpression,
    RawComment,
    RawDoctype,
    RawAttribute,
    StringLiteral,
    ExpressionSource,
    ABSENT,
)
from .output import OutputNode, TextLeaf, NativeElement, ComponentInstance, tree_toDict
from .parser import TagMatch, OpenElement

__all__ = [
    "ProgramState",
    "pipeline",
    "TagKind",
    "TagClass",
    "VOID_ELEMENTS",
    "WHITESPACE_INSIGNIFICANT_ELEMENTS",
    "RawNode",
    "RawElement",
    "RawText",
    "RawExpression",
    "RawComment",
    "RawDoctype",
    "RawAttribute",
    "StringLiteral",
    "ExpressionSource",
    "ABSENT",
    "OutputNode",
    "TextLeaf",
    "NativeElement",
    "ComponentInstance",
    "tree_toDict",
    "TagMatch",
    "OpenElement",
]
