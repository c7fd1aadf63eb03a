"""Directive syntax - the patterns the stages match and the records they pass around."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any


# Selector of an @else segment
ELSE: Any = object()


@dataclass(frozen=True)
class Segment:
    """One branch of an @if block: a condition (or ELSE) and its body text."""

    selector: Any  # condition text, or ELSE
    body: str

    @property
    def is_else(self) -> bool:
        return self.selector is ELSE


# Layout inheritance
EXTENDS_RE = re.compile(r"""@extends\(\s*['"]([^'"]+)['"]\s*\)""")
SECTION_RE = re.compile(
    r"""@section\(\s*['"]([^'"]+)['"]\s*\)(.*?)@endsection""", re.DOTALL
)
YIELD_RE = re.compile(
    r"""@yield\(\s*['"]([^'"]+)['"]\s*(?:,\s*['"]([^'"]*)['"]\s*)?\)"""
)

# File inclusion; the second argument is anything up to the closing paren
INCLUDE_RE = re.compile(
    r"""@include\(\s*['"](?P<name>[^'"]+)['"]\s*(?:,\s*(?P<data>\{[^}]*\}|[^)]*?))?\s*\)"""
)

# Conditionals
IF_OPEN = "@if("
IF_KEYWORD_RE = re.compile(r"@(?:if\(|elseif\(|endif|else)")

# Loops; the first @endforeach closes the block
FOREACH_RE = re.compile(
    r"@foreach\(([^)]+)\s+as\s+(\w+)(?:\s*,\s*(\w+))?\s*\)(.*?)@endforeach",
    re.DOTALL,
)

# Interpolation
ESCAPED_RE = re.compile(r"\{\{\s*(.+?)\s*\}\}", re.DOTALL)
RAW_RE = re.compile(r"\{!!\s*(.+?)\s*!!\}", re.DOTALL)
