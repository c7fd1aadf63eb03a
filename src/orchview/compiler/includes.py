"""Include expansion for @include('view'[, {key: value, ...}]).

Every included view goes through the whole compiler with the outer context
plus the inline data, and its output replaces the directive in place.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from orchview.compiler.output import Hold, keep
from orchview.compiler.syntax import INCLUDE_RE

log = logging.getLogger(__name__)

LoadView = Callable[[str], Awaitable[str]]
CompileSource = Callable[[str, Mapping[str, Any]], Awaitable[str]]

_VALUE = r"""'[^']*'|"[^"]*"|true|false|-?\d+(?:\.\d+)?"""
_PAIR = rf"""\w+\s*:\s*(?:{_VALUE})"""

PAIR_RE = re.compile(rf"""(\w+)\s*:\s*({_VALUE})""")
RECORD_RE = re.compile(rf"""\{{\s*(?:{_PAIR}(?:\s*,\s*{_PAIR})*\s*,?\s*)?\}}""")


def _literal(raw: str) -> Any:
    if raw[0] in "'\"":
        return raw[1:-1]
    if raw == "true":
        return True
    if raw == "false":
        return False
    if "." in raw:
        return float(raw)
    return int(raw)


def parse_inline_data(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse the inline record of an @include.

    Only ``{key: value, ...}`` with quoted strings, true/false and numbers
    is understood. Returns None for anything else.
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not raw or RECORD_RE.fullmatch(raw) is None:
        return None
    return {key: _literal(value) for key, value in PAIR_RE.findall(raw)}


async def expand_includes(
    source: str,
    context: Mapping[str, Any],
    load_view: LoadView,
    compile_source: CompileSource,
    hold: Hold = keep,
) -> str:
    """Replace every @include directive with its compiled view.

    Args:
        source: Template text after layout assembly.
        context: Outer context shared by all includes of this text.
        load_view: Resolves and reads a view by name.
        compile_source: Full compiler entry point for the included text.
        hold: Takes each compiled view so later stages leave it alone.

    Raises:
        ResolverNotConfiguredError, ViewNotFoundError, TemplateLoadError:
            Propagated from ``load_view``.
    """
    parts = []
    last = 0

    for match in INCLUDE_RE.finditer(source):
        name = match.group("name")
        raw_data = match.group("data")

        include_context: Dict[str, Any] = dict(context)
        extra = parse_inline_data(raw_data)
        if extra is not None:
            include_context.update(extra)
        elif raw_data and raw_data.strip():
            log.debug("Ignoring malformed data for @include('%s'): %s", name, raw_data)

        log.debug("Including view [%s]", name)
        included = await load_view(name)
        rendered = await compile_source(included, include_context)

        parts.append(source[last : match.start()])
        parts.append(hold(rendered))
        last = match.end()

    if not parts:
        return source

    parts.append(source[last:])
    return "".join(parts)
