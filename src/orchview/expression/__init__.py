"""Expression language for directive conditions, loop sources and output."""

from orchview.expression.evaluator import evaluate, is_truthy, to_text
from orchview.expression.parser import parse, tokenize

__all__ = ["evaluate", "is_truthy", "to_text", "parse", "tokenize"]
