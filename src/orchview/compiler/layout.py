"""Layout inheritance: @extends, @section ... @endsection and @yield."""

from __future__ import annotations

import logging
import re
from typing import Awaitable, Callable, Dict, List

from orchview.exceptions import LayoutCycleError
from orchview.compiler.syntax import EXTENDS_RE, SECTION_RE, YIELD_RE

log = logging.getLogger(__name__)

LoadView = Callable[[str], Awaitable[str]]


def extract_sections(source: str) -> Dict[str, str]:
    """Collect section bodies by name; a repeated name keeps the last body."""
    sections: Dict[str, str] = {}
    for match in SECTION_RE.finditer(source):
        sections[match.group(1)] = match.group(2).strip()
    return sections


def fill_yields(layout: str, sections: Dict[str, str]) -> str:
    """Replace every @yield in ``layout`` with its section or default."""

    def replace(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        if name in sections:
            return sections[name]
        return default or ""

    return YIELD_RE.sub(replace, layout)


async def resolve_layout(source: str, load_view: LoadView) -> str:
    """Assemble a child template into the layout it extends.

    Text without @extends is returned unchanged. When the assembled layout
    extends another layout, the chain is followed until a layout without
    @extends is reached.

    Raises:
        LayoutCycleError: If a layout in the chain is extended twice.
        ResolverNotConfiguredError, ViewNotFoundError, TemplateLoadError:
            Propagated from ``load_view``.
    """
    chain: List[str] = []
    text = source

    while True:
        match = EXTENDS_RE.search(text)
        if match is None:
            return text

        name = match.group(1)
        if name in chain:
            raise LayoutCycleError(chain + [name])
        chain.append(name)

        sections = extract_sections(text)
        log.debug("Extending layout [%s] with sections %s", name, sorted(sections))
        layout = await load_view(name)
        text = fill_yields(layout, sections)
