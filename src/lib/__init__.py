"""
markuptree - Markup-to-tree compiler with integrated sanitization

Compiles HTML/JSX-style markup into filtered trees of render instructions.
"""

__version__ = "1.0.0"

from .grammar import Parser, MarkupSyntaxError
from .compiler import Compiler, markup_compile
from .builder import TreeBuilder, NestingDepthError, tree_build
from .renderer import Renderer
from .sanitizer import Blacklist, BlacklistPatternError, blacklist_compile
from .expressions import ExpressionError, expression_evaluate
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "MarkupSyntaxError",
    "Compiler",
    "markup_compile",
    "TreeBuilder",
    "NestingDepthError",
    "tree_build",
    "Renderer",
    "Blacklist",
    "BlacklistPatternError",
    "blacklist_compile",
    "ExpressionError",
    "expression_evaluate",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
