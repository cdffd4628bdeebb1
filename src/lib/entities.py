"""
Entity normalization for text content

Decodes character references into the codepoints they name, before the tree
builder makes any whitespace decision. The three space characters stay
distinct after decoding:

    U+0020  ordinary space       ' '
    U+00A0  no-break space       &nbsp;  &#160;  &#xA0;  literal
    U+202F  narrow no-break      &#8239; &#x202F;        literal

Unresolvable references (e.g. "&notanentity;") pass through unchanged.
"""

import html
import re
from html.entities import html5

# HTML's notion of inter-element whitespace. U+00A0 and U+202F are content.
HTML_WHITESPACE = frozenset(' \t\n\f\r')

# Only semicolon-terminated references are decoded; "&copy" alone is text
_REFERENCE = re.compile(r'&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);')


def reference_decode(match: re.Match) -> str:
    reference = match.group()
    if reference.startswith('&#'):
        return html.unescape(reference)
    return html5.get(reference[1:], reference)


def text_normalize(raw: str) -> str:
    """
    Decode named and numeric character references in raw text

    Args:
        raw: Text run as written in markup

    Returns:
        Text with references replaced by their codepoints; references
        without a terminating ';' or with an unknown name are kept as written

    Example:
        >>> text_normalize("a&nbsp;b") == text_normalize("a&#160;b") == "a\\u00a0b"
        True
        >>> text_normalize("x&#8239;y")
        'x\\u202fy'
        >>> text_normalize("AT&T &copy 2020 &notanentity;")
        'AT&T &copy 2020 &notanentity;'
    """
    if '&' not in raw:
        return raw
    return _REFERENCE.sub(reference_decode, raw)


def text_isWhitespace(text: str) -> bool:
    """
    True for non-empty text made only of HTML whitespace

    No-break spaces are not whitespace here: a paragraph holding only
    '&nbsp;' keeps its content.
    """
    return bool(text) and all(char in HTML_WHITESPACE for char in text)
