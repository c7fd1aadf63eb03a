"""Evaluator - walks an expression tree against a context mapping.

Only the names present in the context are visible. This is not a sandbox:
templates are trusted code and attribute access reaches into whatever
objects the caller put in the context.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from orchview.exceptions import ExpressionError
from orchview.expression.nodes import (
    ArrayLiteral,
    Binary,
    Conditional,
    Literal,
    Logical,
    Member,
    Name,
    Node,
    Unary,
)
from orchview.expression.parser import parse


def is_truthy(value: Any) -> bool:
    """Truthiness used by @if, ``!``, ``&&``, ``||`` and ``?:``.

    Empty lists and mappings count as true; only None, False, zero, NaN
    and the empty string are false.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_text(value: Any) -> str:
    """String coercion used for interpolation and string concatenation."""
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


class Evaluator:
    """Evaluates one parsed expression against one context."""

    def __init__(self, source: str, context: Mapping[str, Any]):
        self.source = source
        self.context = context

    def fail(self, reason: str) -> ExpressionError:
        return ExpressionError(self.source, reason)

    def evaluate(self, node: Node) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Name):
            return self._lookup(node.name)
        if isinstance(node, Member):
            return self._member(node)
        if isinstance(node, ArrayLiteral):
            return [self.evaluate(item) for item in node.items]
        if isinstance(node, Unary):
            return self._unary(node.op, self.evaluate(node.operand))
        if isinstance(node, Logical):
            return self._logical(node)
        if isinstance(node, Binary):
            return self._binary(
                node.op, self.evaluate(node.left), self.evaluate(node.right)
            )
        if isinstance(node, Conditional):
            if is_truthy(self.evaluate(node.test)):
                return self.evaluate(node.consequent)
            return self.evaluate(node.alternate)
        raise self.fail(f"Unsupported node {type(node).__name__}")

    # Names and properties

    def _lookup(self, name: str) -> Any:
        if name not in self.context:
            raise self.fail(f"Undefined variable '{name}'")
        return self.context[name]

    def _member(self, node: Member) -> Any:
        target = self.evaluate(node.target)
        key = self.evaluate(node.key)

        if target is None:
            raise self.fail(f"Cannot read property '{to_text(key)}' of null")

        if isinstance(target, Mapping):
            if key in target:
                return target[key]
            if not isinstance(key, str) and to_text(key) in target:
                return target[to_text(key)]
            return None

        if isinstance(target, (list, tuple, str)):
            if key == "length":
                return len(target)
            if _is_number(key) and float(key).is_integer():
                index = int(key)
                if 0 <= index < len(target):
                    return target[index]
            return None

        if isinstance(key, str) and not key.startswith("_"):
            return getattr(target, key, None)
        return None

    # Operators

    def _logical(self, node: Logical) -> Any:
        left = self.evaluate(node.left)
        if node.op == "&&":
            return self.evaluate(node.right) if is_truthy(left) else left
        if node.op == "||":
            return left if is_truthy(left) else self.evaluate(node.right)
        # ??
        return self.evaluate(node.right) if left is None else left

    def _unary(self, op: str, value: Any) -> Any:
        if op == "!":
            return not is_truthy(value)
        number = self._to_number(value)
        return -number if op == "-" else number

    def _binary(self, op: str, left: Any, right: Any) -> Any:
        if op in ("===", "!=="):
            same = self._strict_equals(left, right)
            return same if op == "===" else not same
        if op in ("==", "!="):
            same = self._loose_equals(left, right)
            return same if op == "==" else not same
        if op in ("<", "<=", ">", ">="):
            return self._compare(op, left, right)
        if op == "+":
            return self._add(left, right)

        a = self._to_number(left)
        b = self._to_number(right)
        if op == "-":
            return a - b
        if op == "*":
            return a * b
        if b == 0:
            raise self.fail("Division by zero")
        if op == "/":
            return a / b
        # % keeps the sign of the dividend
        if isinstance(a, int) and isinstance(b, int):
            remainder = abs(a) % abs(b)
            return -remainder if a < 0 else remainder
        return math.fmod(a, b)

    def _add(self, left: Any, right: Any) -> Any:
        textual = (str, list, tuple)
        if isinstance(left, textual) or isinstance(right, textual):
            return to_text(left) + to_text(right)
        if isinstance(left, (int, float)) and isinstance(right, (int, float)):
            return self._to_number(left) + self._to_number(right)
        raise self.fail(
            f"Unsupported operands for '+': {_kind(left)} and {_kind(right)}"
        )

    def _compare(self, op: str, left: Any, right: Any) -> bool:
        if not (isinstance(left, str) and isinstance(right, str)):
            left = self._to_number(left)
            right = self._to_number(right)
        if op == "<":
            return left < right
        if op == "<=":
            return left <= right
        if op == ">":
            return left > right
        return left >= right

    def _strict_equals(self, left: Any, right: Any) -> bool:
        if _kind(left) != _kind(right):
            return False
        return left == right

    def _loose_equals(self, left: Any, right: Any) -> bool:
        if left is None or right is None:
            return left is None and right is None
        kinds = {_kind(left), _kind(right)}
        if kinds <= {"number", "string", "bool"} and len(kinds) > 1:
            try:
                return self._to_number(left) == self._to_number(right)
            except ExpressionError:
                return False
        return self._strict_equals(left, right)

    def _to_number(self, value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        if _is_number(value):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                return float(text)
            except ValueError:
                pass
        raise self.fail(f"Expected a number but got {_kind(value)}")


def evaluate(expression: str, context: Mapping[str, Any]) -> Any:
    """Evaluate ``expression`` against ``context``.

    Args:
        expression: Expression text, e.g. ``user.name`` or ``count > 1``.
        context: Variable bindings visible to the expression.

    Returns:
        The value of the expression.

    Raises:
        ExpressionError: If the expression is malformed or fails to evaluate.
    """
    evaluator = Evaluator(expression, context)
    try:
        return evaluator.evaluate(parse(expression))
    except RecursionError as exc:
        raise evaluator.fail("Expression nested too deeply") from exc
    except (TypeError, ValueError, ArithmeticError, LookupError) as exc:
        raise evaluator.fail(str(exc) or type(exc).__name__) from exc
