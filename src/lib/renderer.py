"""
Reference renderer for output trees

Materializes an output tree as HTML text. This is the host side of the
compiler: it calls component definitions, decides whether to wrap the
sibling list, and owns the wording of diagnostics for unrecognized tags.

Component definitions are callables taking (props, children) and returning
an output node, a list of output nodes, or an HTML string (inserted as-is).
Whatever a definition raises propagates out of render() unchanged.

Example:
    >>> def Custom(props, children):
    ...     return NativeElement('div', {'className': props.get('className')}, children)
    >>> nodes = markup_compile('<Custom className="x">Hi</Custom>', registry={'Custom': Custom})
    >>> Renderer(render_in_wrapper=False).render(nodes)
    '<div class="x">Hi</div>'
"""

import html
import json
from typing import Any, Callable, Dict, List, Optional

from ..config import appsettings
from ..models.output import ComponentInstance, NativeElement, OutputNode, TextLeaf
from ..models.tags import NATIVE_ELEMENTS, VOID_ELEMENTS
from .expressions import value_toString
from .grammar import RAW_TEXT_ELEMENTS
from .log import WARN

# Prop names that map back to different HTML attribute names
HTML_ATTRIBUTE_NAMES: Dict[str, str] = {
    'className': 'class',
    'htmlFor': 'for',
}


def styleMap_toCss(style: Dict[str, Any]) -> str:
    """
    Serialize a style map back to inline CSS text

    Example:
        >>> styleMap_toCss({'paddingLeft': '45px', 'WebkitTransition': 'none'})
        'padding-left: 45px; -webkit-transition: none'
    """
    declarations = []
    for prop, value in style.items():
        if prop.startswith('--'):
            name = prop
        else:
            name = ''.join('-' + char.lower() if char.isupper() else char for char in prop)
        declarations.append(f"{name}: {value}")
    return '; '.join(declarations)


def attribute_render(name: str, value: Any) -> str:
    """Render one prop as an HTML attribute; '' for props that render nothing"""
    if value is None or value is False or callable(value):
        return ''
    html_name = HTML_ATTRIBUTE_NAMES.get(name, name)
    if value is True:
        return f' {html_name}'
    if name == 'style' and isinstance(value, dict):
        text = styleMap_toCss(value)
    elif isinstance(value, (dict, list)):
        text = json.dumps(value, separators=(',', ':'))
    elif isinstance(value, (int, float)):
        text = value_toString(value)
    else:
        text = str(value)
    return f' {html_name}="{html.escape(text, quote=True)}"'


class Renderer:
    """
    Renders output nodes to HTML text

    Attributes:
        render_in_wrapper: Wrap output in <div class="{wrapper_class}">
        wrapper_class: CSS class of the wrapper
        on_diagnostic: Receives host diagnostics; falls back to WARN()
        diagnostics: Messages emitted during the last render() call
    """

    def __init__(
        self,
        render_in_wrapper: Optional[bool] = None,
        wrapper_class: Optional[str] = None,
        on_diagnostic: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.render_in_wrapper = (
            appsettings.render_in_wrapper if render_in_wrapper is None else render_in_wrapper
        )
        self.wrapper_class = wrapper_class or appsettings.wrapper_class
        self.on_diagnostic = on_diagnostic
        self.diagnostics: List[str] = []

    def render(self, nodes: List[OutputNode]) -> str:
        """
        Render a sibling list

        Args:
            nodes: Output of the tree builder

        Returns:
            HTML text, wrapped when render_in_wrapper is set
        """
        self.diagnostics = []
        body = self.nodes_render(nodes)
        if not self.render_in_wrapper:
            return body
        return f'<div class="{html.escape(self.wrapper_class, quote=True)}">{body}</div>'

    def nodes_render(self, nodes: List[Any]) -> str:
        return ''.join(self.node_render(node) for node in nodes)

    def node_render(self, node: Any) -> str:
        if isinstance(node, TextLeaf):
            return html.escape(node.text, quote=False)
        if isinstance(node, NativeElement):
            return self.element_render(node)
        if isinstance(node, ComponentInstance):
            return self.component_render(node)
        if isinstance(node, list):
            return self.nodes_render(node)
        if isinstance(node, str):
            return node
        if node is None or isinstance(node, bool):
            return ''
        raise TypeError(f"Cannot render {type(node).__name__}")

    def element_render(self, node: NativeElement) -> str:
        if node.unrecognized:
            self.diagnostic_emit(node.tag_name)

        attributes = ''.join(
            attribute_render(name, value)
            for name, value in node.props.items()
            if name != 'children'
        )
        if node.tag_name.lower() in VOID_ELEMENTS:
            return f'<{node.tag_name}{attributes} />'
        if node.tag_name.lower() in RAW_TEXT_ELEMENTS:
            # raw-text bodies are emitted verbatim; only a closing-tag opener is neutralized
            children = ''.join(
                child.text.replace('</', '<\\/') for child in node.children if isinstance(child, TextLeaf)
            )
        else:
            children = self.nodes_render(node.children)
        return f'<{node.tag_name}{attributes}>{children}</{node.tag_name}>'

    def component_render(self, node: ComponentInstance) -> str:
        definition = node.definition
        if not callable(definition):
            raise TypeError(f"Component '{node.component_name}' definition is not callable")
        return self.node_render(definition(dict(node.props), list(node.children)))

    def diagnostic_emit(self, tag_name: str) -> None:
        """Report an unrecognized tag in the host's own words"""
        if tag_name.lower() in NATIVE_ELEMENTS:
            message = (
                f"<{tag_name} /> is using uppercase HTML. Always use lowercase "
                f"HTML tags, or register a component named '{tag_name}'."
            )
        else:
            message = f"The tag <{tag_name}> is unrecognized in this renderer."
        self.diagnostics.append(message)
        if self.on_diagnostic is not None:
            self.on_diagnostic(message)
        else:
            WARN(message)
