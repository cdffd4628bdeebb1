"""
Custom Pygments lexer for markuptree source

Provides syntax highlighting for markup sources when the CLI echoes them at
debug verbosity or points at a syntax error.

Token types:
- Name.Tag: native tag names (div, img)
- Name.Class: capitalized names, the usual spelling of components
- Name.Attribute: attribute names
- String: quoted attribute values
- Punctuation: < > /> = and expression braces
- Name.Entity: character references (&nbsp; &#160;)
- Comment: <!-- --> and <!DOCTYPE>
"""

from pygments.lexer import RegexLexer, bygroups, default, include
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Comment,
    Number,
    Operator,
    Whitespace,
)


class MarkupLexer(RegexLexer):
    """
    Lexer for HTML/JSX-style markup with {expression} values

    Example:
        <Custom className="blah" obj={{ foo: "bar" }} />

    Tokens:
        < → Punctuation
        Custom → Name.Class
        className → Name.Attribute
        "blah" → String
        { → Punctuation (expression state)
    """

    name = 'Markuptree'
    aliases = ['markuptree', 'mkt']
    filenames = ['*.jsx', '*.mkt']

    tokens = {
        'root': [
            (r'(?s)<!--.*?-->', Comment.Multiline),
            (r'(?i)<!doctype[^>]*>', Comment.Preproc),

            # Closing tags
            (r'(</)([A-Z][\w.:\-]*)(\s*)(>)',
             bygroups(Punctuation, Name.Class, Whitespace, Punctuation)),
            (r'(</)([a-z][\w.:\-]*)(\s*)(>)',
             bygroups(Punctuation, Name.Tag, Whitespace, Punctuation)),

            # Opening tags enter the attribute state
            (r'(<)([A-Z][\w.:\-]*)', bygroups(Punctuation, Name.Class), 'tag'),
            (r'(<)([a-z][\w.:\-]*)', bygroups(Punctuation, Name.Tag), 'tag'),

            (r'\{', Punctuation, 'expression'),
            include('entities'),
            (r'[^<{&]+', Text),
            (r'[<&]', Text),
        ],

        'entities': [
            (r'&(#\d+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);', Name.Entity),
        ],

        'tag': [
            (r'\s+', Whitespace),
            (r'/?>', Punctuation, '#pop'),
            (r'([^\s"\'<>/={}]+)(\s*)(=)(\s*)',
             bygroups(Name.Attribute, Whitespace, Operator, Whitespace), 'value'),
            (r'[^\s"\'<>/={}]+', Name.Attribute),
            (r'.', Text),
        ],

        'value': [
            (r'"[^"]*"', String.Double, '#pop'),
            (r"'[^']*'", String.Single, '#pop'),
            (r'\{', Punctuation, ('#pop', 'expression')),
            (r'[^\s"\'=<>`/{}]+', String, '#pop'),
            default('#pop'),
        ],

        'expression': [
            (r'\s+', Whitespace),
            (r'\{', Punctuation, '#push'),
            (r'\}', Punctuation, '#pop'),
            (r'"(\\\\|\\[^\\]|[^"\\])*"', String.Double),
            (r"'(\\\\|\\[^\\]|[^'\\])*'", String.Single),
            (r'`[^`]*`', String.Backtick),
            (r'\b(true|false|null|undefined|NaN|Infinity)\b', Keyword.Constant),
            (r'0[xX][0-9a-fA-F]+|(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?', Number),
            (r'[A-Za-z_$][\w$]*', Name),
            (r'===|!==|==|!=|<=|>=|&&|\|\||[-+*/%!<>?:]', Operator),
            (r'[\[\](),]', Punctuation),
            (r'.', Text),
        ],
    }


def get_lexer() -> MarkupLexer:
    """
    Get the MarkupLexer instance

    Returns:
        MarkupLexer instance ready for use with Pygments
    """
    return MarkupLexer()


def source_highlight(source: str) -> str:
    """
    Highlight markup source for a terminal

    Args:
        source: Markup text

    Returns:
        Text with ANSI color sequences
    """
    from pygments import highlight
    from pygments.formatters import TerminalFormatter

    return highlight(source, get_lexer(), TerminalFormatter())
