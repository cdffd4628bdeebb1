"""
Grammar parser for HTML/JSX-style markup

Transforms markup text into the abstract raw tree consumed by the tree
builder (see models/nodes.py).

The parser is a single forward scan with an explicit open-element stack,
so arbitrarily deep markup never exhausts the Python call stack here; depth
policy belongs to the tree builder.

Accepted syntax:
- <Name attr="v" attr='v' attr={expr} attr unquoted=v> ... </Name>
- <Name ... />  (self-closing)
- <!DOCTYPE ...> and <!-- comments -->
- {expr} child expression containers
- raw text; <script> and <style> bodies are taken verbatim

Tag names keep their case: <Custom> and <custom> are different names.

Example:
    >>> root = Parser('<h1>Hi</h1><Custom flag />').parse()
    >>> [child.name for child in root.children]
    ['h1', 'Custom']
"""

import re
from typing import List, Tuple

from ..models.nodes import (
    ABSENT,
    ROOT_NAME,
    ExpressionSource,
    RawAttribute,
    RawComment,
    RawDoctype,
    RawElement,
    RawExpression,
    RawNode,
    RawText,
    StringLiteral,
)
from ..models.parser import OpenElement, TagMatch
from .log import LOG

_TAG_NAME = re.compile(r'[A-Za-z][\w.:\-]*')
_ATTR_NAME = re.compile(r'''[^\s"'<>/={}]+''')
_UNQUOTED_VALUE = re.compile(r'''(?:[^\s"'=<>`/{}]|/(?!>))+''')
_DOCTYPE = re.compile(r'<!doctype', re.IGNORECASE)

# Elements whose body is taken as one literal text run
RAW_TEXT_ELEMENTS = frozenset({'script', 'style'})


class MarkupSyntaxError(SyntaxError):
    """
    Raised when markup can't be turned into a raw tree

    Fatal for the whole compilation: no partial tree is ever returned.
    """

    def __init__(self, message: str, line_number: int = 0, position: int = 0):
        super().__init__(message)
        self.lineno = line_number
        self.line_number = line_number
        self.position = position


class Parser:
    """
    Parser for markup text

    Handles:
    - Case-preserving element names
    - Quoted, unquoted, braced and valueless attributes
    - Self-closing tags, comments, doctype declarations
    - Brace matching for {expr} that ignores braces inside string literals
    - Error reporting with line numbers and source context
    """

    def __init__(self, source: str, debug: bool = False):
        """
        Initialize parser with source text

        Args:
            source: Markup text
            debug: Enable debug logging of scanned tags

        Attributes:
            source: Source text being parsed (surrounding whitespace stripped)
            position: Current character position in source
            stack: Open elements, root first
        """
        self.source = source.strip()
        self.debug = debug
        self.position = 0
        self.stack: List[OpenElement] = []

    @property
    def line_number(self) -> int:
        return self.source.count('\n', 0, self.position) + 1

    def parse(self) -> RawElement:
        """
        Parse source text into a raw tree

        Returns:
            Synthetic root element (name '#root') whose children are the
            document's top-level nodes. Empty source yields a root with no
            children.

        Raises:
            MarkupSyntaxError: On unclosed or mismatched tags, unterminated
                               attribute values, comments or expressions
        """
        self.position = 0
        self.stack = [OpenElement(name=ROOT_NAME, attributes=(), line_number=1)]

        while self.position < len(self.source):
            if self.source.startswith('<!--', self.position):
                self.comment_parse()
            elif _DOCTYPE.match(self.source, self.position):
                self.doctype_parse()
            elif self.tag_startsAt(self.position):
                self.tag_parse()
            elif self.source[self.position] == '{':
                end = self.brace_findMatching(self.position)
                self.node_append(RawExpression(self.source[self.position + 1:end]))
                self.position = end + 1
            else:
                self.text_parse()

        if len(self.stack) > 1:
            unclosed = self.stack[-1]
            self.position = len(self.source)
            self.error(
                f"Unclosed tag <{unclosed.name}> opened at line {unclosed.line_number}",
                line_number=unclosed.line_number,
            )

        root = self.stack.pop()
        LOG(f"Parsed {len(root.children)} top-level raw nodes", level=3)
        return RawElement(name=ROOT_NAME, children=tuple(root.children), line_number=1)

    def tag_startsAt(self, pos: int) -> bool:
        """True if '<' at pos begins an opening or closing tag"""
        if self.source[pos] != '<':
            return False
        next_pos = pos + 2 if self.source.startswith('</', pos) else pos + 1
        return bool(_TAG_NAME.match(self.source, next_pos))

    def node_append(self, node: RawNode) -> None:
        self.stack[-1].children.append(node)

    def text_parse(self) -> None:
        """Consume a text run up to the next tag, comment or expression"""
        start = self.position
        pos = start + 1
        while pos < len(self.source):
            char = self.source[pos]
            if char == '{' or (char == '<' and (
                self.tag_startsAt(pos) or self.source.startswith('<!', pos)
            )):
                break
            pos += 1
        self.node_append(RawText(self.source[start:pos]))
        self.position = pos

    def comment_parse(self) -> None:
        end = self.source.find('-->', self.position + 4)
        if end == -1:
            self.error("Unterminated comment")
        self.node_append(RawComment(self.source[self.position + 4:end]))
        self.position = end + 3

    def doctype_parse(self) -> None:
        end = self.source.find('>', self.position)
        if end == -1:
            self.error("Unterminated DOCTYPE declaration")
        self.node_append(RawDoctype(self.source[self.position + 2:end].strip()))
        self.position = end + 1

    def tag_parse(self) -> None:
        """
        Scan one tag at the current position and update the element stack

        Opening tags push a frame (or append directly when self-closing);
        closing tags pop the matching frame and freeze it into a RawElement.
        """
        line_number = self.line_number
        tag = self.tag_scan(self.position)

        if self.debug:
            LOG(f"Tag {'/' if tag.closing else ''}{tag.name} at line {line_number}", level=3)

        if tag.closing:
            current = self.stack[-1]
            if len(self.stack) == 1:
                self.error(f"Unexpected closing tag </{tag.name}>")
            if current.name != tag.name:
                self.error(
                    f"Expected closing tag </{current.name}> (opened at line "
                    f"{current.line_number}), found </{tag.name}>"
                )
            self.stack.pop()
            self.node_append(RawElement(
                name=current.name,
                attributes=current.attributes,
                children=tuple(current.children),
                line_number=current.line_number,
            ))
            self.position = tag.end
            return

        if tag.self_closing:
            self.node_append(RawElement(
                name=tag.name,
                attributes=tag.attributes,
                line_number=line_number,
                self_closing=True,
            ))
            self.position = tag.end
            return

        if tag.name.lower() in RAW_TEXT_ELEMENTS:
            self.position = tag.end
            self.rawTextElement_parse(tag, line_number)
            return

        self.stack.append(OpenElement(
            name=tag.name, attributes=tag.attributes, line_number=line_number
        ))
        self.position = tag.end

    def rawTextElement_parse(self, tag: TagMatch, line_number: int) -> None:
        """Take everything up to </name> verbatim as the element's only child"""
        closing = re.compile(r'</' + re.escape(tag.name) + r'\s*>', re.IGNORECASE)
        match = closing.search(self.source, self.position)
        if not match:
            self.error(f"Unclosed tag <{tag.name}> opened at line {line_number}", line_number)
        body = self.source[self.position:match.start()]
        self.node_append(RawElement(
            name=tag.name,
            attributes=tag.attributes,
            children=(RawText(body),) if body else (),
            line_number=line_number,
        ))
        self.position = match.end()

    def tag_scan(self, start: int) -> TagMatch:
        """
        Scan a tag starting at '<'

        Args:
            start: Position of '<'

        Returns:
            TagMatch with name, attributes and end position

        Raises:
            MarkupSyntaxError: On malformed attributes or a missing '>'
        """
        closing = self.source.startswith('</', start)
        pos = start + (2 if closing else 1)
        name_match = _TAG_NAME.match(self.source, pos)
        name = name_match.group()
        pos = name_match.end()

        if closing:
            pos = self.whitespace_skip(pos)
            if not self.source.startswith('>', pos):
                self.position = pos
                self.error(f"Expected '>' to end closing tag </{name}>")
            return TagMatch(name=name, attributes=(), closing=True, self_closing=False, end=pos + 1)

        attributes, pos, self_closing = self.attributes_scan(pos, name)
        return TagMatch(
            name=name, attributes=attributes, closing=False,
            self_closing=self_closing, end=pos,
        )

    def attributes_scan(self, pos: int, tag_name: str) -> Tuple[Tuple[RawAttribute, ...], int, bool]:
        """
        Scan attributes up to and including the tag's closing '>' or '/>'

        Returns:
            (attributes, position past the tag end, self_closing flag)
        """
        attributes: List[RawAttribute] = []

        while True:
            pos = self.whitespace_skip(pos)
            if pos >= len(self.source):
                self.position = pos
                self.error(f"Unterminated tag <{tag_name}>")
            if self.source.startswith('/>', pos):
                return tuple(attributes), pos + 2, True
            if self.source[pos] == '>':
                return tuple(attributes), pos + 1, False

            name_match = _ATTR_NAME.match(self.source, pos)
            if not name_match:
                self.position = pos
                self.error(f"Malformed attribute in tag <{tag_name}>")
            attr_name = name_match.group()
            pos = self.whitespace_skip(name_match.end())

            if not self.source.startswith('=', pos):
                attributes.append(RawAttribute(attr_name, ABSENT))
                continue

            pos = self.whitespace_skip(pos + 1)
            value, pos = self.attributeValue_scan(pos, attr_name)
            attributes.append(RawAttribute(attr_name, value))

    def attributeValue_scan(self, pos: int, attr_name: str):
        """Scan a quoted, braced or unquoted attribute value"""
        char = self.source[pos] if pos < len(self.source) else ''

        if char in ('"', "'"):
            end = self.source.find(char, pos + 1)
            if end == -1:
                self.position = pos
                self.error(f"Unterminated value for attribute '{attr_name}'")
            return StringLiteral(self.source[pos + 1:end]), end + 1

        if char == '{':
            end = self.brace_findMatching(pos)
            return ExpressionSource(self.source[pos + 1:end]), end + 1

        value_match = _UNQUOTED_VALUE.match(self.source, pos)
        if not value_match:
            self.position = pos
            self.error(f"Missing value for attribute '{attr_name}'")
        return StringLiteral(value_match.group()), value_match.end()

    def whitespace_skip(self, pos: int) -> int:
        while pos < len(self.source) and self.source[pos].isspace():
            pos += 1
        return pos

    def brace_findMatching(self, start_pos: int) -> int:
        """
        Find the '}' closing the '{' at start_pos

        Tracks nesting depth and skips over quoted strings so that
        obj={{ s: "}" }} closes at the right brace.

        Raises:
            MarkupSyntaxError: If the source ends first
        """
        depth = 1
        pos = start_pos + 1

        while pos < len(self.source):
            char = self.source[pos]
            if char in ('"', "'", '`'):
                pos = self.string_skip(pos)
                continue
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    return pos
            pos += 1

        self.position = start_pos
        self.error("Unterminated expression: unmatched '{'")

    def string_skip(self, start: int) -> int:
        """Position just past the string literal opening at start"""
        quote = self.source[start]
        pos = start + 1
        while pos < len(self.source):
            if self.source[pos] == '\\':
                pos += 2
                continue
            if self.source[pos] == quote:
                return pos + 1
            pos += 1
        self.position = start
        self.error("Unterminated string inside expression")

    def error(self, message: str, line_number: int = 0) -> None:
        """
        Report a syntax error with source context

        Raises:
            MarkupSyntaxError: Always

        Example output:
            Expected closing tag </div> (opened at line 1), found </span>
            Line 1, position 14
            Context: ...<div><p>x</p></span>...
                                       ^
        """
        line_number = line_number or self.line_number
        context_start = max(0, self.position - 40)
        context_end = min(len(self.source), self.position + 40)
        context = self.source[context_start:context_end].replace('\n', ' ')

        raise MarkupSyntaxError(
            f"\n{message}\n"
            f"Line {line_number}, position {self.position}\n"
            f"Context: ...{context}...\n"
            f"            {' ' * (self.position - context_start)}^",
            line_number=line_number,
            position=self.position,
        )


def markup_parse(source: str) -> RawElement:
    """Parse markup into a raw tree rooted at a synthetic '#root' element"""
    return Parser(source).parse()
