"""
Output tree models

The compiled, sanitized render instructions handed to a renderer. Closed
tagged union: every node is exactly one of TextLeaf, NativeElement or
ComponentInstance.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


@dataclass(frozen=True)
class TextLeaf:
    """Text content with character references already decoded"""
    text: str
    kind = "text"

    def node_toDict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": self.text}


@dataclass(frozen=True)
class NativeElement:
    """
    Host element (div, img, ...) or an unrecognized tag name

    Attributes:
        tag_name: Tag name exactly as written in markup
        props: Resolved property mapping (markup over bindings)
        children: Filtered, policy-applied child list
        unrecognized: True when tag_name is neither registered nor a known
                      native tag; the renderer decides what to report
    """
    tag_name: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["OutputNode"] = field(default_factory=list)
    unrecognized: bool = False
    kind = "element"

    def node_toDict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind,
            "tagName": self.tag_name,
            "props": dict(self.props),
            "children": [child.node_toDict() for child in self.children],
        }
        if self.unrecognized:
            result["unrecognized"] = True
        return result


@dataclass(frozen=True)
class ComponentInstance:
    """
    Instance of a registered component

    Attributes:
        component_name: Registry key that matched (case preserved)
        definition: Registry value, opaque to the builder
        props: Resolved property mapping
        children: Child list, always built with ordinary whitespace handling
    """
    component_name: str
    definition: Any = field(compare=False, repr=False)
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["OutputNode"] = field(default_factory=list)
    kind = "component"

    def node_toDict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "componentName": self.component_name,
            "props": dict(self.props),
            "children": [child.node_toDict() for child in self.children],
        }


OutputNode = Union[TextLeaf, NativeElement, ComponentInstance]


def tree_toDict(nodes: List[OutputNode]) -> List[Dict[str, Any]]:
    """JSON-friendly view of a sibling list"""
    return [node.node_toDict() for node in nodes]
