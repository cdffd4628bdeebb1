"""
Compiler for markup text to output trees

Ties the grammar parser and the tree builder together: one compile() call
parses the markup, compiles the blacklist, and builds a fresh output tree.
"""

from typing import Any, Callable, Iterable, List, Mapping, Optional

from ..models.output import OutputNode
from .builder import TreeBuilder
from .grammar import Parser
from .log import LOG
from .sanitizer import BlacklistEntry, blacklist_compile


class Compiler:
    """
    Compiles markup text to sanitized output trees

    Responsibilities:
    - Parse markup into a raw tree (MarkupSyntaxError propagates unchanged)
    - Compile blacklist entries once per call
    - Build the output tree with the configured registry and bindings

    The instance only stores configuration; compile() may be called any
    number of times and from several threads.
    """

    def __init__(
        self,
        registry: Optional[Mapping[str, Any]] = None,
        bindings: Optional[Mapping[str, Any]] = None,
        blacklisted_tags: Optional[Iterable[BlacklistEntry]] = None,
        blacklisted_attrs: Optional[Iterable[BlacklistEntry]] = None,
        max_depth: Optional[int] = None,
        on_unrecognized: Optional[Callable[[str], None]] = None,
        debug: bool = False,
    ) -> None:
        """
        Initialize compiler

        Args:
            registry: Component name -> definition
            bindings: Default props for every element and component
            blacklisted_tags: Extra tag blacklist entries (str or re.Pattern)
            blacklisted_attrs: Extra attribute blacklist entries
            max_depth: Nesting limit override
            on_unrecognized: Callback receiving unrecognized tag names
            debug: Log scanned tags while parsing
        """
        self.registry = dict(registry or {})
        self.bindings = dict(bindings or {})
        self.blacklisted_tags = tuple(blacklisted_tags or ())
        self.blacklisted_attrs = tuple(blacklisted_attrs or ())
        self.max_depth = max_depth
        self.on_unrecognized = on_unrecognized
        self.debug = debug

    def compile(self, markup: str) -> List[OutputNode]:
        """
        Compile markup to an output tree

        Args:
            markup: Markup text; surrounding whitespace is ignored

        Returns:
            Ordered list of top-level output nodes

        Raises:
            MarkupSyntaxError: If the markup is malformed
            NestingDepthError: If the markup nests deeper than max_depth
        """
        LOG(f"Compiling {len(markup)} characters of markup", level=2)

        raw = Parser(markup, debug=self.debug).parse()
        blacklist = blacklist_compile(self.blacklisted_tags, self.blacklisted_attrs)

        builder = TreeBuilder(
            registry=self.registry,
            bindings=self.bindings,
            blacklist=blacklist,
            max_depth=self.max_depth,
            on_unrecognized=self.on_unrecognized,
        )
        nodes = builder.build(raw)
        LOG(f"Compiled {len(nodes)} top-level nodes", level=2)
        return nodes


def markup_compile(markup: str, **config: Any) -> List[OutputNode]:
    """
    Compile markup in one call

    Example:
        >>> nodes = markup_compile('<div foo="Fu"></div>', bindings={'foo': 'Foo', 'bar': 'Bar'})
        >>> nodes[0].props
        {'foo': 'Fu', 'bar': 'Bar'}
    """
    return Compiler(**config).compile(markup)
