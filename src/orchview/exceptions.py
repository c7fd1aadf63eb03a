"""orchview Exceptions

Custom exceptions for the orchview template compiler.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class OrchviewError(Exception):
    """Base exception for all orchview errors."""

    pass


class ResolverNotConfiguredError(OrchviewError):
    """Raised when @include or @extends needs a resolver and none was given."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"No resolver configured. Cannot resolve view [{name}]. "
            f"Pass a resolver to the compiler before using @include or @extends."
        )


class ViewNotFoundError(OrchviewError):
    """Raised when a view name does not match any template file."""

    def __init__(
        self,
        name: str,
        paths: Sequence[Path] = (),
        extensions: Sequence[str] = (),
    ):
        self.name = name
        self.paths = list(paths)
        self.extensions = list(extensions)
        searched = ", ".join(str(p) for p in self.paths) or "(no paths)"
        exts = ", ".join(self.extensions) or "(no extensions)"
        super().__init__(
            f"View [{name}] not found. Searched in: {searched} with extensions: {exts}"
        )


class TemplateLoadError(OrchviewError):
    """Raised when a resolved template location cannot be read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        message = f"Could not read template: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class LayoutCycleError(OrchviewError):
    """Raised when a layout chain extends a layout it already went through."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(f"Layout cycle detected: {' -> '.join(self.chain)}")


class ExpressionError(OrchviewError):
    """Raised when an expression cannot be parsed or evaluated."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"{reason} in expression: {expression!r}")


class ConfigError(OrchviewError):
    """Raised when a configuration file is invalid."""

    pass


class ViewExistsError(OrchviewError):
    """Raised when scaffolding a view whose file already exists."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"View already exists: {path}")
