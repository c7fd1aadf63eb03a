"""Conditional block resolution for @if / @elseif / @else / @endif.

Blocks are found by scanning, not by a grammar. For the first unresolved
``@if(`` the scanner walks forward from directive keyword to directive
keyword with a nesting counter, so ``@elseif``/``@else`` markers of an
inner block are never taken as branches of the outer one. The chosen
branch is spliced in place of the whole block and scanning restarts at
the splice point, which resolves the inner blocks the branch carried in.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Tuple

from orchview.exceptions import ExpressionError
from orchview.expression import evaluate, is_truthy
from orchview.compiler.syntax import ELSE, IF_KEYWORD_RE, IF_OPEN, Segment

log = logging.getLogger(__name__)


def find_closing_paren(text: str, start: int) -> Optional[int]:
    """Return the index of the ``)`` balancing an already-open ``(``.

    ``start`` is the first character after the opening parenthesis.
    Returns None when the parenthesis is never closed.
    """
    depth = 1
    for index in range(start, len(text)):
        char = text[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def scan_block(
    text: str, condition: str, body_start: int
) -> Optional[Tuple[List[Segment], int]]:
    """Split an @if block into segments.

    Args:
        text: Full template text.
        condition: Condition of the opening @if.
        body_start: Index just after the condition's closing parenthesis.

    Returns:
        The segments in source order and the index just after the closing
        ``@endif``, or None when the block is never closed.
    """
    segments: List[Segment] = []
    selector: Any = condition
    segment_start = body_start
    nesting = 1
    pos = body_start

    while True:
        match = IF_KEYWORD_RE.search(text, pos)
        if match is None:
            return None

        keyword = match.group()
        if keyword == IF_OPEN:
            nesting += 1
            pos = match.end()
        elif keyword == "@endif":
            nesting -= 1
            if nesting == 0:
                segments.append(Segment(selector, text[segment_start : match.start()]))
                return segments, match.end()
            pos = match.end()
        elif nesting == 1 and keyword == "@elseif(":
            segments.append(Segment(selector, text[segment_start : match.start()]))
            close = find_closing_paren(text, match.end())
            if close is None:
                return None
            selector = text[match.end() : close]
            segment_start = pos = close + 1
        elif nesting == 1 and keyword == "@else":
            segments.append(Segment(selector, text[segment_start : match.start()]))
            selector = ELSE
            segment_start = pos = match.end()
        else:
            pos = match.end()


def select_branch(segments: List[Segment], context: Mapping[str, Any]) -> str:
    """Body of the first segment that is an else or has a truthy condition."""
    for segment in segments:
        if segment.is_else:
            return segment.body
        try:
            if is_truthy(evaluate(str(segment.selector), context)):
                return segment.body
        except ExpressionError as exc:
            log.debug("Condition treated as false: %s", exc)
    return ""


def resolve_conditionals(source: str, context: Mapping[str, Any]) -> str:
    """Resolve every @if block in ``source``.

    Unterminated blocks (and conditions whose parenthesis never closes)
    are left in the output as literal text.
    """
    text = source
    cursor = 0

    while True:
        start = text.find(IF_OPEN, cursor)
        if start == -1:
            return text

        condition_start = start + len(IF_OPEN)
        condition_end = find_closing_paren(text, condition_start)
        if condition_end is None:
            cursor = condition_start
            continue

        block = scan_block(text, text[condition_start:condition_end], condition_end + 1)
        if block is None:
            log.debug("Unterminated @if at offset %d left as text", start)
            cursor = condition_start
            continue

        segments, end = block
        replacement = select_branch(segments, context)
        text = text[:start] + replacement + text[end:]
        cursor = start
