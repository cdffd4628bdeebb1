"""
markuptree - Markup-to-tree compiler with integrated sanitization

Turns HTML/JSX-style markup into sanitized trees of render instructions,
ready for a host renderer.
"""

__version__ = "1.0.0"

from .lib import Compiler, markup_compile, Renderer, MarkupSyntaxError, LOG, state_connectToLogger
from .models import TextLeaf, NativeElement, ComponentInstance

__all__ = [
    "Compiler",
    "markup_compile",
    "Renderer",
    "MarkupSyntaxError",
    "TextLeaf",
    "NativeElement",
    "ComponentInstance",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
