"""orchview - Blade-style directive templates for Python.

    @extends / @section / @yield    layout inheritance
    @include('view', {k: v})        partials
    @if / @elseif / @else / @endif  conditionals
    @foreach(items as item, key)    loops
    {{ expr }} / {!! expr !!}       escaped / raw output
"""

from orchview._version import __version__
from orchview.compiler import (
    DirectiveCompiler,
    FileLoader,
    Loader,
    Resolver,
    ViewFinder,
    escape_html,
)
from orchview.engines import FileEngine, TemplateEngine, ViewEngine
from orchview.exceptions import (
    ConfigError,
    ExpressionError,
    LayoutCycleError,
    OrchviewError,
    ResolverNotConfiguredError,
    TemplateLoadError,
    ViewExistsError,
    ViewNotFoundError,
)

__all__ = [
    "__version__",
    # Compiler
    "DirectiveCompiler",
    "escape_html",
    # Collaborators
    "Resolver",
    "Loader",
    "ViewFinder",
    "FileLoader",
    # Engines
    "ViewEngine",
    "TemplateEngine",
    "FileEngine",
    # Errors
    "OrchviewError",
    "ResolverNotConfiguredError",
    "ViewNotFoundError",
    "TemplateLoadError",
    "LayoutCycleError",
    "ExpressionError",
    "ConfigError",
    "ViewExistsError",
]
