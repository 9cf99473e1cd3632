"""Constraint expressions over item tags.

Grammar (loosest binding first)::

    expr   := and ('||' and)*
    and    := unary ('&&' unary)*
    unary  := '!' unary | '(' expr ')' | atom
    atom   := Tag(`value`) | TagRegex(`regex`) | tag==value | tag!=value

An empty expression matches every item.
"""

import re

from catalog2traefik.pacts.errors import ConstraintError

_TOKEN_RE = re.compile(
    r'\s*(?:'
    r'(?P<func>TagRegex|Tag)\(`(?P<arg>[^`]*)`\)'      # Tag(`x`), TagRegex(`x`)
    r'|tag\s*(?P<cmp>==|!=)\s*(?P<val>[^\s()&|]+)'      # tag==x, tag!=x
    r'|(?P<op>&&|\|\||!|\(|\))'                         # operators
    r')'
)


def _tokenize(expression: str) -> list[tuple]:
    tokens = []
    pos = 0
    end = len(expression.rstrip())
    while pos < end:
        m = _TOKEN_RE.match(expression, pos)
        if not m or m.end() == pos:
            raise ConstraintError(
                f"unexpected input at position {pos} in {expression!r}")
        if m.group("func"):
            tokens.append((m.group("func"), m.group("arg")))
        elif m.group("cmp"):
            tokens.append((m.group("cmp"), m.group("val")))
        else:
            tokens.append((m.group("op"), None))
        pos = m.end()
    return tokens


class _Parser:
    """Recursive-descent evaluator; tags are matched while parsing."""

    def __init__(self, tokens: list[tuple], tags: set[str]):
        self.tokens = tokens
        self.pos = 0
        self.tags = tags

    def _peek(self):
        return self.tokens[self.pos][0] if self.pos < len(self.tokens) else None

    def _take(self):
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def parse(self) -> bool:
        result = self._or()
        if self.pos != len(self.tokens):
            raise ConstraintError(f"unexpected token {self._peek()!r}")
        return result

    def _or(self) -> bool:
        result = self._and()
        while self._peek() == "||":
            self._take()
            rhs = self._and()
            result = result or rhs
        return result

    def _and(self) -> bool:
        result = self._unary()
        while self._peek() == "&&":
            self._take()
            rhs = self._unary()
            result = result and rhs
        return result

    def _unary(self) -> bool:
        kind = self._peek()
        if kind is None:
            raise ConstraintError("unexpected end of expression")
        if kind == "!":
            self._take()
            return not self._unary()
        if kind == "(":
            self._take()
            result = self._or()
            if self._peek() != ")":
                raise ConstraintError("missing closing parenthesis")
            self._take()
            return result
        return self._atom()

    def _atom(self) -> bool:
        kind, arg = self._take()
        if kind in ("Tag", "=="):
            return arg in self.tags
        if kind == "!=":
            return arg not in self.tags
        if kind == "TagRegex":
            try:
                pattern = re.compile(arg)
            except re.error as exc:
                raise ConstraintError(f"invalid TagRegex {arg!r}: {exc}") from exc
            return any(pattern.fullmatch(t) for t in self.tags)
        raise ConstraintError(f"unexpected token {kind!r}")


def match_tags(tags, expression: str) -> bool:
    """Evaluate *expression* against *tags*. Raises ConstraintError if malformed."""
    if not expression or not expression.strip():
        return True
    return _Parser(_tokenize(expression), set(tags)).parse()
