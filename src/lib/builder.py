"""
Tree builder

Recursive-descent walk over a raw tree that produces the sanitized output
tree. At each element the tag resolver picks a policy and the attribute
processor resolves props:

    BLACKLISTED                       -> nothing (subtree omitted)
    COMPONENT                         -> ComponentInstance, ordinary children
    NATIVE_VOID                       -> NativeElement, children = []
    NATIVE_WHITESPACE_INSIGNIFICANT   -> NativeElement, whitespace text dropped
    NATIVE_ORDINARY / UNRECOGNIZED    -> NativeElement, ordinary children

Comments, doctypes and html/head/body framing produce no nodes of their own;
the framing's children are spliced into the surrounding list.

The builder holds only per-invocation configuration. Registry and bindings
are snapshotted on construction, so a caller mutating its own dicts later
can't change a build in progress.
"""

from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..config import appsettings
from ..models.nodes import (
    ROOT_NAME,
    RawComment,
    RawDoctype,
    RawElement,
    RawExpression,
    RawNode,
    RawText,
)
from ..models.output import ComponentInstance, NativeElement, OutputNode, TextLeaf
from ..models.tags import TagKind
from .attributes import Evaluator, props_resolve
from .entities import text_isWhitespace, text_normalize
from .expressions import ExpressionError, expression_evaluate, value_toString
from .log import LOG
from .resolver import tag_classify, tag_isStructuralWrapper
from .sanitizer import Blacklist, blacklist_compile


class NestingDepthError(RecursionError):
    """Raised when markup nests deeper than the configured limit"""

    def __init__(self, max_depth: int, tag_name: str, line_number: int):
        super().__init__(
            f"Markup nesting exceeds {max_depth} levels at <{tag_name}> (line {line_number})"
        )
        self.max_depth = max_depth
        self.tag_name = tag_name
        self.line_number = line_number


class TreeBuilder:
    """
    Builds output trees from raw trees

    Responsibilities:
    - Classify each element and apply its children policy
    - Resolve props through the attribute processor
    - Decode text entities and apply whitespace suppression
    - Evaluate {expr} child containers in the sandbox
    - Flag unrecognized tag names for the host
    """

    def __init__(
        self,
        registry: Optional[Mapping[str, Any]] = None,
        bindings: Optional[Mapping[str, Any]] = None,
        blacklist: Optional[Blacklist] = None,
        evaluator: Optional[Evaluator] = None,
        max_depth: Optional[int] = None,
        on_unrecognized: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Initialize builder

        Args:
            registry: Component name -> definition, exact-match keys
            bindings: Default props, overridden by markup attributes
            blacklist: Compiled blacklist (fixed policy only when omitted)
            evaluator: Expression evaluator, defaults to the sandbox
            max_depth: Element nesting limit, defaults to settings.max_depth
            on_unrecognized: Called with the tag name each time an
                             unrecognized element is built
        """
        self.registry: Mapping[str, Any] = MappingProxyType(dict(registry or {}))
        self.bindings: Mapping[str, Any] = MappingProxyType(dict(bindings or {}))
        self.blacklist = blacklist if blacklist is not None else blacklist_compile()
        self.evaluator = evaluator or expression_evaluate
        self.max_depth = appsettings.max_depth if max_depth is None else max_depth
        self.on_unrecognized = on_unrecognized

    def build(self, raw: RawNode) -> List[OutputNode]:
        """
        Build the output sibling list for a raw tree

        Args:
            raw: Raw tree; a '#root' element contributes only its children,
                 any other node is built as a single top-level node

        Returns:
            Ordered list of output nodes. Whether to wrap it in a container
            is left to the renderer.

        Raises:
            NestingDepthError: If nesting exceeds max_depth
        """
        if isinstance(raw, RawElement) and raw.name == ROOT_NAME:
            nodes = self.children_build(raw.children, whitespace_significant=True, depth=0)
        else:
            nodes = self.children_build((raw,), whitespace_significant=True, depth=0)
        LOG(f"Built {len(nodes)} top-level output nodes", level=3)
        return nodes

    def children_build(
        self,
        children: Sequence[RawNode],
        whitespace_significant: bool,
        depth: int,
    ) -> List[OutputNode]:
        """Build a filtered, policy-applied child list"""
        result: List[OutputNode] = []
        for child in children:
            result.extend(self.node_build(child, whitespace_significant, depth))
        return result

    def node_build(
        self,
        raw: RawNode,
        whitespace_significant: bool,
        depth: int,
    ) -> List[OutputNode]:
        """
        Build one raw node

        Returns a list because a node can contribute zero nodes (blacklisted,
        comment, suppressed whitespace), one node, or many (spliced framing,
        list-valued expressions).
        """
        if isinstance(raw, RawText):
            text = text_normalize(raw.raw)
            if not text or (not whitespace_significant and text_isWhitespace(text)):
                return []
            return [TextLeaf(text)]

        if isinstance(raw, (RawComment, RawDoctype)):
            return []

        if isinstance(raw, RawExpression):
            return self.expression_build(raw)

        if isinstance(raw, RawElement):
            return self.element_build(raw, depth + 1, whitespace_significant)

        raise TypeError(f"Unsupported raw node {raw!r}")

    def expression_build(self, raw: RawExpression) -> List[OutputNode]:
        """
        Evaluate a {expr} child container

        Strings and numbers become text; null, booleans and failed
        evaluations contribute nothing; lists contribute one leaf per item.
        """
        if not raw.source.strip():
            return []
        try:
            value = self.evaluator(raw.source)
        except ExpressionError as e:
            LOG(f"Dropped expression child '{{{raw.source}}}': {e}", level=3)
            return []

        values = value if isinstance(value, list) else [value]
        leaves: List[OutputNode] = []
        for item in values:
            if item is None or isinstance(item, (bool, dict, list)):
                continue
            text = value_toString(item)
            if text:
                leaves.append(TextLeaf(text))
        return leaves

    def element_build(
        self,
        raw: RawElement,
        depth: int,
        whitespace_significant: bool = True,
    ) -> List[OutputNode]:
        if depth > self.max_depth:
            raise NestingDepthError(self.max_depth, raw.name, raw.line_number)

        tag_class = tag_classify(raw.name, self.registry, self.blacklist)
        kind = tag_class.kind

        if kind is TagKind.BLACKLISTED:
            LOG(f"Omitted blacklisted <{raw.name}> at line {raw.line_number}", level=2)
            return []

        if kind is TagKind.COMPONENT:
            props = props_resolve(
                raw.attributes, self.bindings, self.blacklist,
                is_component=True, evaluator=self.evaluator,
            )
            children = self.children_build(raw.children, whitespace_significant=True, depth=depth)
            return [ComponentInstance(
                component_name=raw.name,
                definition=tag_class.definition,
                props=props,
                children=children,
            )]

        if tag_isStructuralWrapper(raw.name):
            # framing is transparent: its children follow the enclosing policy
            return self.children_build(
                raw.children, whitespace_significant=whitespace_significant, depth=depth - 1
            )

        props = props_resolve(
            raw.attributes, self.bindings, self.blacklist,
            is_component=False, evaluator=self.evaluator,
        )

        if kind is TagKind.NATIVE_VOID:
            if raw.children:
                LOG(f"Discarded children of void <{raw.name}> at line {raw.line_number}", level=2)
            return [NativeElement(tag_name=raw.name, props=props, children=[])]

        unrecognized = kind is TagKind.UNRECOGNIZED
        if unrecognized and self.on_unrecognized is not None:
            self.on_unrecognized(raw.name)

        children = self.children_build(
            raw.children,
            whitespace_significant=tag_class.whitespace_significant,
            depth=depth,
        )
        return [NativeElement(
            tag_name=raw.name,
            props=props,
            children=children,
            unrecognized=unrecognized,
        )]


def tree_build(
    raw: RawNode,
    registry: Optional[Mapping[str, Any]] = None,
    bindings: Optional[Mapping[str, Any]] = None,
    blacklist: Optional[Blacklist] = None,
    **kwargs: Any,
) -> List[OutputNode]:
    """Build an output tree in one call; see TreeBuilder for arguments"""
    return TreeBuilder(registry, bindings, blacklist, **kwargs).build(raw)
