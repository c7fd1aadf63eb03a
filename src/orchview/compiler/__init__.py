"""orchview compiler - turns directive templates into rendered text."""

from orchview.compiler.compiler import DirectiveCompiler
from orchview.compiler.output import escape_html
from orchview.compiler.resolver import (
    DEFAULT_EXTENSIONS,
    FileLoader,
    Loader,
    Resolver,
    ViewFinder,
)

__all__ = [
    "DirectiveCompiler",
    "escape_html",
    "DEFAULT_EXTENSIONS",
    "FileLoader",
    "Loader",
    "Resolver",
    "ViewFinder",
]
