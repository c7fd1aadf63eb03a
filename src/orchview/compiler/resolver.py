"""Resolver - maps dotted view names to template files and reads them.

The compiler only talks to the two abstract collaborators below:

- Resolver.resolve(name) -> Path    ('layouts.app' -> .../layouts/app.html)
- Loader.read(path) -> str          (coroutine; the only place a compile waits)

ViewFinder and FileLoader are the filesystem implementations.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from orchview.exceptions import TemplateLoadError, ViewNotFoundError

log = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".html", ".orchestr.html")


class Resolver(ABC):
    """Maps a view name to a loadable location."""

    @abstractmethod
    def resolve(self, name: str) -> Path:
        """Return the location of view ``name``.

        Raises:
            ViewNotFoundError: If no template matches.
        """
        pass


class Loader(ABC):
    """Reads the text of a resolved location."""

    @abstractmethod
    async def read(self, location: Path) -> str:
        """Return template text.

        Raises:
            TemplateLoadError: If the location cannot be read.
        """
        pass


class ViewFinder(Resolver):
    """Finds view files under a list of base directories.

    Dots in a view name become directory separators; each base path is
    searched in order, trying each extension in order:

        'welcome'        -> {path}/welcome.html
        'layouts.app'    -> {path}/layouts/app.html
        'emails.invoice' -> {path}/emails/invoice.html
    """

    def __init__(
        self,
        paths: Iterable[str | Path],
        extensions: Optional[Sequence[str]] = None,
    ):
        self._paths: List[Path] = [Path(p) for p in paths]
        self._extensions: List[str] = list(extensions or DEFAULT_EXTENSIONS)

    @property
    def paths(self) -> List[Path]:
        return list(self._paths)

    @property
    def extensions(self) -> List[str]:
        return list(self._extensions)

    def add_location(self, path: str | Path) -> None:
        """Append a base directory to the search paths."""
        self._paths.append(Path(path))

    def resolve(self, name: str) -> Path:
        relative = name.replace(".", "/")

        for base in self._paths:
            for ext in self._extensions:
                candidate = base / f"{relative}{ext}"
                if candidate.is_file():
                    log.debug("Resolved view [%s] to %s", name, candidate)
                    return candidate

        raise ViewNotFoundError(name, self._paths, self._extensions)

    def exists(self, name: str) -> bool:
        """Check whether a view name resolves to a file."""
        try:
            self.resolve(name)
            return True
        except ViewNotFoundError:
            return False


class FileLoader(Loader):
    """Reads UTF-8 template files in a worker thread.

    Unreadable files and undecodable bytes both raise TemplateLoadError.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def read(self, location: Path) -> str:
        try:
            return await asyncio.to_thread(Path(location).read_text, encoding=self.encoding)
        except OSError as exc:
            raise TemplateLoadError(Path(location), exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise TemplateLoadError(
                Path(location), f"not valid {self.encoding}: {exc.reason}"
            ) from exc
