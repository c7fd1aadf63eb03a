"""Loop expansion for @foreach(expr as value[, key]) ... @endforeach.

Each block runs to the nearest @endforeach, so loops do not nest.
"""

from __future__ import annotations

import logging
import re
from collections import ChainMap
from typing import Any, Callable, List, Mapping, Optional, Tuple

from orchview.exceptions import ExpressionError
from orchview.expression import evaluate
from orchview.compiler.output import Hold, keep
from orchview.compiler.syntax import FOREACH_RE

log = logging.getLogger(__name__)

RenderBody = Callable[[str, Mapping[str, Any]], str]


def iteration_pairs(value: Any) -> Optional[List[Tuple[Any, Any]]]:
    """(key, value) pairs for a loop source, or None if it cannot be iterated.

    Lists and tuples are keyed by position, mappings by their own keys in
    insertion order. Strings, numbers and other scalars are not iterable here.
    """
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, (list, tuple)):
        return list(enumerate(value))
    return None


def expand_loops(
    source: str,
    context: Mapping[str, Any],
    render_body: RenderBody,
    hold: Hold = keep,
) -> str:
    """Expand every @foreach block in ``source``.

    Args:
        source: Template text.
        context: Context of the enclosing frame; never modified.
        render_body: Renders one iteration's body against its frame
            (the compiler's synchronous stage).
        hold: Takes each finished block so the outer output stages
            do not scan it again.
    """

    def replace(match: re.Match[str]) -> str:
        expression, value_var, key_var, body = match.groups()

        try:
            items = evaluate(expression.strip(), context)
        except ExpressionError as exc:
            log.debug("Loop source rendered empty: %s", exc)
            return ""

        pairs = iteration_pairs(items)
        if pairs is None:
            log.debug("Loop source %r is not iterable", expression.strip())
            return ""

        rendered = []
        for key, value in pairs:
            frame = {value_var: value}
            if key_var:
                frame[key_var] = key
            rendered.append(render_body(body, ChainMap(frame, context)))
        return hold("".join(rendered))

    return FOREACH_RE.sub(replace, source)
