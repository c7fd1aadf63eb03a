"""Compiler - renders directive templates against a data context."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from orchview.exceptions import ResolverNotConfiguredError
from orchview.compiler.conditionals import resolve_conditionals
from orchview.compiler.includes import expand_includes
from orchview.compiler.layout import resolve_layout
from orchview.compiler.loops import expand_loops
from orchview.compiler.output import Fragments, render_escaped, render_raw
from orchview.compiler.resolver import FileLoader, Loader, Resolver

log = logging.getLogger(__name__)


class DirectiveCompiler:
    """Compiles template text with @directives and {{ }} output.

    Processing order, fixed for every compile:
        1. @extends / @section / @yield   (layout assembly, reads files)
        2. @include                        (reads files, compiles recursively)
        3. @if / @elseif / @else / @endif
        4. @foreach / @endforeach
        5. {{ expr }}    HTML-escaped
        6. {!! expr !!}  raw

    Steps 3-6 are the synchronous stage. Loop bodies go through that stage
    only, so includes always see the context from before any loop ran.

    Text a stage has produced (included views, loop blocks, emitted values)
    is held out of the later stages and put back at the end, so data is
    never read as template syntax.

    The compiler keeps no per-render state; one instance can serve
    concurrent compiles.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        loader: Optional[Loader] = None,
    ):
        """Initialize compiler with its collaborators.

        Args:
            resolver: Maps view names to files for @include and @extends.
                Without one, those directives raise ResolverNotConfiguredError.
            loader: Reads resolved files. Defaults to FileLoader.
        """
        self.resolver = resolver
        self.loader = loader or FileLoader()

    async def compile(
        self, source: str, context: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Compile template text against ``context``.

        Args:
            source: Template text.
            context: Variable bindings. Never modified.

        Returns:
            Rendered output.

        Raises:
            ResolverNotConfiguredError: @include/@extends without a resolver.
            ViewNotFoundError: A referenced view does not exist.
            TemplateLoadError: A referenced view cannot be read.
            LayoutCycleError: A layout chain loops back on itself.
        """
        data: Mapping[str, Any] = context if context is not None else {}

        fragments = Fragments()
        assembled = await resolve_layout(source, self.load_view)
        expanded = await expand_includes(
            assembled, data, self.load_view, self.compile, fragments.hold
        )
        return fragments.restore(self._render(expanded, data, fragments))

    def render_sync(self, source: str, context: Mapping[str, Any]) -> str:
        """Run the synchronous stage: conditionals, loops, then output."""
        fragments = Fragments()
        return fragments.restore(self._render(source, context, fragments))

    def _render(
        self, source: str, context: Mapping[str, Any], fragments: Fragments
    ) -> str:
        def render_body(body: str, frame: Mapping[str, Any]) -> str:
            return self._render(body, frame, fragments)

        output = resolve_conditionals(source, context)
        output = expand_loops(output, context, render_body, fragments.hold)
        output = render_escaped(output, context, fragments.hold)
        output = render_raw(output, context, fragments.hold)
        return output

    async def load_view(self, name: str) -> str:
        """Resolve a view name and read its text."""
        if self.resolver is None:
            raise ResolverNotConfiguredError(name)
        path = self.resolver.resolve(name)
        return await self.loader.read(path)
