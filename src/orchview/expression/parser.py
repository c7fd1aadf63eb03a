"""Parser - turns expression text into a tree of nodes.

Recursive descent, one method per precedence level (lowest first):

    ternary   a ? b : c
    nullish   a ?? b
    or        a || b
    and       a && b
    equality  ===  !==  ==  !=
    relation  <  <=  >  >=
    additive  +  -
    multiply  *  /  %
    unary     !  -  +
    postfix   a.b  a[b]
    primary   literals, names, (groups), [arrays]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

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


TOKEN_RE = re.compile(
    r"""
    (?P<number>\d+\.\d+|\d+|\.\d+)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
    |(?P<op>===|!==|==|!=|<=|>=|&&|\|\||\?\?|[-+*/%<>!?:.,()\[\]])
    """,
    re.VERBOSE | re.DOTALL,
)

KEYWORDS = {"true": True, "false": False, "null": None, "undefined": None}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}

EQUALITY_OPS = ("===", "!==", "==", "!=")
RELATIONAL_OPS = ("<", "<=", ">", ">=")
ADDITIVE_OPS = ("+", "-")
MULTIPLICATIVE_OPS = ("*", "/", "%")
UNARY_OPS = ("!", "-", "+")


@dataclass(frozen=True)
class Token:
    kind: str  # number | string | name | op | end
    value: str
    pos: int


def tokenize(source: str) -> List[Token]:
    """Split expression text into tokens, ending with an ``end`` token."""
    tokens: List[Token] = []
    pos = 0
    length = len(source)

    while pos < length:
        if source[pos].isspace():
            pos += 1
            continue

        match = TOKEN_RE.match(source, pos)
        if match is None:
            raise ExpressionError(
                source, f"Unexpected character {source[pos]!r} at position {pos}"
            )

        kind = match.lastgroup or "op"
        tokens.append(Token(kind, match.group(), pos))
        pos = match.end()

    tokens.append(Token("end", "", length))
    return tokens


def _unquote(raw: str) -> str:
    """Strip the quotes of a string token and resolve backslash escapes."""
    body = raw[1:-1]
    if "\\" not in body:
        return body

    out = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append(ESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


def _number(raw: str):
    if "." in raw:
        return float(raw)
    return int(raw)


class Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0

    # Token helpers

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "end":
            self.index += 1
        return token

    def _match(self, *ops: str) -> Optional[Token]:
        token = self.current
        if token.kind == "op" and token.value in ops:
            return self._advance()
        return None

    def _expect(self, op: str) -> Token:
        token = self._match(op)
        if token is None:
            self._error(f"Expected {op!r}")
        return token  # type: ignore[return-value]

    def _error(self, message: str) -> None:
        token = self.current
        found = "end of expression" if token.kind == "end" else repr(token.value)
        raise ExpressionError(
            self.source, f"{message} but found {found} at position {token.pos}"
        )

    # Grammar

    def parse(self) -> Node:
        if self.current.kind == "end":
            raise ExpressionError(self.source, "Empty expression")
        node = self._ternary()
        if self.current.kind != "end":
            self._error("Expected end of expression")
        return node

    def _ternary(self) -> Node:
        test = self._nullish()
        if self._match("?"):
            consequent = self._ternary()
            self._expect(":")
            alternate = self._ternary()
            return Conditional(test, consequent, alternate)
        return test

    def _nullish(self) -> Node:
        node = self._or()
        while self._match("??"):
            node = Logical("??", node, self._or())
        return node

    def _or(self) -> Node:
        node = self._and()
        while self._match("||"):
            node = Logical("||", node, self._and())
        return node

    def _and(self) -> Node:
        node = self._equality()
        while self._match("&&"):
            node = Logical("&&", node, self._equality())
        return node

    def _equality(self) -> Node:
        node = self._relational()
        while True:
            token = self._match(*EQUALITY_OPS)
            if token is None:
                return node
            node = Binary(token.value, node, self._relational())

    def _relational(self) -> Node:
        node = self._additive()
        while True:
            token = self._match(*RELATIONAL_OPS)
            if token is None:
                return node
            node = Binary(token.value, node, self._additive())

    def _additive(self) -> Node:
        node = self._multiplicative()
        while True:
            token = self._match(*ADDITIVE_OPS)
            if token is None:
                return node
            node = Binary(token.value, node, self._multiplicative())

    def _multiplicative(self) -> Node:
        node = self._unary()
        while True:
            token = self._match(*MULTIPLICATIVE_OPS)
            if token is None:
                return node
            node = Binary(token.value, node, self._unary())

    def _unary(self) -> Node:
        token = self._match(*UNARY_OPS)
        if token is not None:
            return Unary(token.value, self._unary())
        return self._postfix()

    def _postfix(self) -> Node:
        node = self._primary()
        while True:
            if self._match("."):
                token = self.current
                if token.kind != "name":
                    self._error("Expected property name after '.'")
                self._advance()
                node = Member(node, Literal(token.value))
            elif self._match("["):
                key = self._ternary()
                self._expect("]")
                node = Member(node, key, computed=True)
            else:
                return node

    def _primary(self) -> Node:
        token = self.current

        if token.kind == "number":
            self._advance()
            return Literal(_number(token.value))

        if token.kind == "string":
            self._advance()
            return Literal(_unquote(token.value))

        if token.kind == "name":
            self._advance()
            if token.value in KEYWORDS:
                return Literal(KEYWORDS[token.value])
            return Name(token.value)

        if self._match("("):
            node = self._ternary()
            self._expect(")")
            return node

        if self._match("["):
            items: List[Node] = []
            if not self._match("]"):
                items.append(self._ternary())
                while self._match(","):
                    items.append(self._ternary())
                self._expect("]")
            return ArrayLiteral(items)

        self._error("Unexpected token")
        raise AssertionError("unreachable")


@lru_cache(maxsize=512)
def parse(source: str) -> Node:
    """Parse expression text into a node tree.

    Results are cached per expression string; templates tend to repeat
    the same handful of expressions across loop iterations.

    Raises:
        ExpressionError: If the text is not a valid expression.
    """
    return Parser(source.strip()).parse()
