"""View engines - turn a template file plus data into output.

A ViewEngine is what a view layer calls once it knows which file to render:

- TemplateEngine: compiles the file's directives
- FileEngine: returns the file as-is
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional

from orchview.compiler import DirectiveCompiler, FileLoader, Loader, Resolver
from orchview.exceptions import ResolverNotConfiguredError


class ViewEngine(ABC):
    """Contract for template engines."""

    @abstractmethod
    async def get(self, path: Path, data: Mapping[str, Any]) -> str:
        """Get the evaluated contents of the view at ``path``."""
        pass


class TemplateEngine(ViewEngine):
    """Engine that runs files through the directive compiler."""

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        loader: Optional[Loader] = None,
    ):
        self.loader = loader or FileLoader()
        self.compiler = DirectiveCompiler(resolver=resolver, loader=self.loader)

    @property
    def resolver(self) -> Optional[Resolver]:
        return self.compiler.resolver

    async def get(self, path: Path, data: Mapping[str, Any]) -> str:
        source = await self.loader.read(path)
        return await self.compiler.compile(source, data)

    async def compile(self, source: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Compile template text that did not come from a file."""
        return await self.compiler.compile(source, data)

    async def render(self, name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Resolve a view name and render it.

        Raises:
            ResolverNotConfiguredError: If the engine has no resolver.
            ViewNotFoundError: If the view does not exist.
        """
        if self.resolver is None:
            raise ResolverNotConfiguredError(name)
        path = self.resolver.resolve(name)
        return await self.get(path, data or {})


class FileEngine(ViewEngine):
    """Engine that returns file contents without any processing."""

    def __init__(self, loader: Optional[Loader] = None):
        self.loader = loader or FileLoader()

    async def get(self, path: Path, data: Mapping[str, Any]) -> str:
        return await self.loader.read(path)
