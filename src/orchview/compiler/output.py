"""Output emitters for ``{{ expr }}`` and ``{!! expr !!}``.

Emitted values are handed to a ``hold`` callback before they go back into
the text, so a later stage never reads them as template syntax.
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Any, Callable, List, Mapping

from orchview.exceptions import ExpressionError
from orchview.expression import evaluate, to_text
from orchview.compiler.syntax import ESCAPED_RE, RAW_RE

log = logging.getLogger(__name__)

Hold = Callable[[str], str]

# Ampersand goes first so later entities are not escaped twice
HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text: str) -> str:
    for char, entity in HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def keep(text: str) -> str:
    return text


class Fragments:
    """Finished output set aside while the remaining stages run.

    ``hold`` swaps a piece of rendered text for an opaque token that no
    directive pattern matches; ``restore`` puts every piece back. Tokens
    carry a random marker, so text from the data cannot forge one.
    """

    def __init__(self):
        marker = secrets.token_hex(8)
        self._prefix = f"\x00{marker}:"
        self._token_re = re.compile(rf"\x00{marker}:(\d+)\x00")
        self._pieces: List[str] = []

    def hold(self, text: str) -> str:
        if not text:
            return text
        self._pieces.append(text)
        return f"{self._prefix}{len(self._pieces) - 1}\x00"

    def restore(self, text: str) -> str:
        """Replace every token in ``text``, including tokens inside held pieces."""

        def replace(match: re.Match[str]) -> str:
            return self.restore(self._pieces[int(match.group(1))])

        return self._token_re.sub(replace, text)


def interpolate(expression: str, context: Mapping[str, Any]) -> str:
    """Evaluate an expression to text; failures render as the empty string."""
    try:
        return to_text(evaluate(expression, context))
    except ExpressionError as exc:
        log.debug("Interpolation rendered empty: %s", exc)
        return ""


def render_escaped(source: str, context: Mapping[str, Any], hold: Hold = keep) -> str:
    """Replace every ``{{ expr }}`` with its HTML-escaped value."""

    def replace(match: re.Match[str]) -> str:
        return hold(escape_html(interpolate(match.group(1), context)))

    return ESCAPED_RE.sub(replace, source)


def render_raw(source: str, context: Mapping[str, Any], hold: Hold = keep) -> str:
    """Replace every ``{!! expr !!}`` with its value, unescaped."""

    def replace(match: re.Match[str]) -> str:
        return hold(interpolate(match.group(1), context))

    return RAW_RE.sub(replace, source)
