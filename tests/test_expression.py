"""Tests for the expression language."""

from types import SimpleNamespace

import pytest

from orchview.exceptions import ExpressionError
from orchview.expression import evaluate, is_truthy, parse, to_text, tokenize
from orchview.expression.nodes import Binary, Literal, Member, Name


def test_arithmetic_over_context():
    assert evaluate("x + y", {"x": 2, "y": 3}) == 5
    assert evaluate("price * qty - 1", {"price": 4, "qty": 3}) == 11


def test_operator_precedence():
    assert evaluate("2 + 3 * 4", {}) == 14
    assert evaluate("(2 + 3) * 4", {}) == 20
    assert evaluate("10 - 4 - 3", {}) == 3
    assert evaluate("1 + 2 > 2 && 3 < 4", {}) is True


def test_division_and_remainder():
    assert evaluate("7 / 2", {}) == 3.5
    assert evaluate("-7 % 3", {}) == -1
    assert evaluate("7 % -3", {}) == 1
    assert evaluate("7.5 % 2", {}) == 1.5


def test_division_by_zero_fails():
    with pytest.raises(ExpressionError):
        evaluate("1 / 0", {})
    with pytest.raises(ExpressionError):
        evaluate("1 % 0", {})


def test_string_concatenation():
    assert evaluate("'a' + 1", {}) == "a1"
    assert evaluate("greeting + ', ' + name", {"greeting": "Hi", "name": "Ann"}) == "Hi, Ann"
    assert evaluate("'n=' + 2.0", {}) == "n=2"


def test_strict_equality_distinguishes_types():
    assert evaluate('type === "a"', {"type": "a"}) is True
    assert evaluate("1 === 1.0", {}) is True
    assert evaluate("true === 1", {}) is False
    assert evaluate("'1' === 1", {}) is False
    assert evaluate("x !== null", {"x": 0}) is True


def test_loose_equality_coerces_numbers():
    assert evaluate("'1' == 1", {}) is True
    assert evaluate("true == 1", {}) is True
    assert evaluate("null == undefined", {}) is True
    assert evaluate("0 == null", {}) is False
    assert evaluate("'abc' != 1", {}) is True


def test_comparisons():
    assert evaluate("count >= 3", {"count": 3}) is True
    assert evaluate("'apple' < 'banana'", {}) is True
    assert evaluate("'10' > 9", {}) is True


def test_incomparable_values_fail():
    with pytest.raises(ExpressionError):
        evaluate("items < 3", {"items": [1, 2]})


def test_logical_operators_return_operands():
    assert evaluate("a && b", {"a": 1, "b": "x"}) == "x"
    assert evaluate("a && b", {"a": 0, "b": "x"}) == 0
    assert evaluate("name || 'Guest'", {"name": ""}) == "Guest"
    assert evaluate("value ?? 'none'", {"value": None}) == "none"
    assert evaluate("value ?? 'none'", {"value": 0}) == 0


def test_short_circuit_skips_failing_operand():
    # The right side would fail on an undefined name if it were evaluated
    assert evaluate("false && missing", {}) is False
    assert evaluate("true || missing", {}) is True


def test_unary_operators():
    assert evaluate("!show", {"show": False}) is True
    assert evaluate("!!items", {"items": []}) is True
    assert evaluate("-x", {"x": 4}) == -4
    assert evaluate("+'5'", {}) == 5


def test_ternary():
    template = "count > 1 ? 'many' : count === 1 ? 'one' : 'none'"
    assert evaluate(template, {"count": 5}) == "many"
    assert evaluate(template, {"count": 1}) == "one"
    assert evaluate(template, {"count": 0}) == "none"


def test_property_access_on_mappings():
    ctx = {"user": {"name": "Ann", "address": {"city": "Oslo"}}}
    assert evaluate("user.name", ctx) == "Ann"
    assert evaluate("user['name']", ctx) == "Ann"
    assert evaluate("user.address.city", ctx) == "Oslo"
    assert evaluate("user.email", ctx) is None


def test_property_access_on_sequences():
    ctx = {"items": ["a", "b"], "word": "hello"}
    assert evaluate("items[1]", ctx) == "b"
    assert evaluate("items.length", ctx) == 2
    assert evaluate("word.length", ctx) == 5
    assert evaluate("items[5]", ctx) is None


def test_property_access_on_objects():
    user = SimpleNamespace(name="Ann", _secret="x")
    assert evaluate("user.name", {"user": user}) == "Ann"
    assert evaluate("user._secret", {"user": user}) is None
    assert evaluate("user.missing", {"user": user}) is None


def test_property_access_on_null_fails():
    with pytest.raises(ExpressionError, match="of null"):
        evaluate("user.name", {"user": None})


def test_undefined_variable_fails():
    with pytest.raises(ExpressionError, match="Undefined variable 'missing'"):
        evaluate("missing", {})


def test_no_ambient_bindings():
    """Only the context is visible; Python builtins are not."""
    for name in ("len", "print", "__import__", "open"):
        with pytest.raises(ExpressionError):
            evaluate(name, {})


def test_malformed_expressions_fail():
    for source in ("", "1 +", "a b", "(1", "user.", "a ? b", "#"):
        with pytest.raises(ExpressionError):
            evaluate(source, {"a": 1, "b": 2, "user": {}})


def test_array_literal():
    assert evaluate("[1, 'two', x]", {"x": 3}) == [1, "two", 3]
    assert evaluate("[]", {}) == []


def test_string_escapes():
    assert evaluate(r"'it\'s'", {}) == "it's"
    assert evaluate(r'"a\nb"', {}) == "a\nb"


def test_parse_builds_tree():
    node = parse("user.age + 1")
    assert isinstance(node, Binary)
    assert node.op == "+"
    assert isinstance(node.left, Member)
    assert node.left.target == Name("user")
    assert node.right == Literal(1)


def test_tokenize_operators():
    kinds = [(t.kind, t.value) for t in tokenize("a === 'b'")]
    assert kinds == [("name", "a"), ("op", "==="), ("string", "'b'"), ("end", "")]


def test_truthiness():
    assert is_truthy([]) is True
    assert is_truthy({}) is True
    assert is_truthy("0") is True
    assert is_truthy(0) is False
    assert is_truthy(0.0) is False
    assert is_truthy(float("nan")) is False
    assert is_truthy("") is False
    assert is_truthy(None) is False


def test_to_text():
    assert to_text(None) == ""
    assert to_text(True) == "true"
    assert to_text(False) == "false"
    assert to_text(5.0) == "5"
    assert to_text(2.5) == "2.5"
    assert to_text([1, None, "x"]) == "1,,x"
    assert to_text("plain") == "plain"


def test_deep_nesting_fails_cleanly():
    source = "(" * 2000 + "1" + ")" * 2000
    with pytest.raises(ExpressionError, match="nested too deeply"):
        evaluate(source, {})
