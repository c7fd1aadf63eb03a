"""Expression tree nodes produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List


@dataclass(frozen=True)
class Node:
    pass


@dataclass(frozen=True)
class Literal(Node):
    """A number, string, boolean or null constant."""

    value: Any


@dataclass(frozen=True)
class Name(Node):
    """A bare identifier looked up in the context."""

    name: str


@dataclass(frozen=True)
class Member(Node):
    """Property access: ``target.key`` or ``target[key]``."""

    target: Node
    key: Node
    computed: bool = False


@dataclass(frozen=True)
class ArrayLiteral(Node):
    items: List[Node] = field(default_factory=list)


@dataclass(frozen=True)
class Unary(Node):
    op: str
    operand: Node


@dataclass(frozen=True)
class Binary(Node):
    """Arithmetic, comparison and equality operators."""

    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Logical(Node):
    """Short-circuit operators: ``&&``, ``||`` and ``??``."""

    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Conditional(Node):
    """Ternary ``test ? consequent : alternate``."""

    test: Node
    consequent: Node
    alternate: Node
