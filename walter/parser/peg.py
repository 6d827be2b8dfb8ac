"""
Ordered-choice (PEG) matcher over a token stream.

A grammar is a dict of rule name -> expression built from the combinators
below. Alternatives of a `Choice` are tried in declaration order and the
first one that matches is committed; a failing alternative rewinds only to
the start of that choice. Once a rule has matched, callers never retry it.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from ..errors import ParseError, Span

Match = Optional[Tuple[int, list]]


class ParseNode:
    """One rule application: tag, matched span and ordered children."""

    __slots__ = ("rule", "span", "children")

    def __init__(self, rule: str, span: Span, children: list):
        self.rule = rule
        self.span = span
        self.children = children

    def __repr__(self):
        return f"ParseNode({self.rule}, {self.children})"


class MatchState:
    """Per-parse bookkeeping of the furthest failure."""

    def __init__(self, grammar, silent, tokens):
        self.grammar = grammar
        self.silent = silent
        self.tokens = tokens
        self.furthest = -1
        self.reached = 0  # furthest token any rule looked at
        self.expected = set()
        self.rules = set()

    def fail_token(self, pos: int, label: str):
        if pos > self.furthest:
            self.furthest = pos
            self.expected = set()
            self.rules = set()
        if pos == self.furthest:
            self.expected.add(label)

    def fail_rule(self, pos: int, rule: str):
        if pos == self.furthest:
            self.rules.add(rule)

    def span_between(self, start: int, end: int) -> Span:
        first = self.tokens[start].span
        if end <= start:
            return Span(first.start, first.start, first.line, first.column)
        return first.merge(self.tokens[end - 1].span)


class Expr(ABC):
    @abstractmethod
    def match(self, state: MatchState, pos: int) -> Match:
        """Tries the expression at 'pos': (next position, children) or None."""


class Tok(Expr):
    def __init__(self, type: str, label: Optional[str] = None):
        self.type = type
        self.label = label or type

    def match(self, state, pos):
        if pos > state.reached:
            state.reached = pos
        tok = state.tokens[pos]
        if tok.type == self.type:
            return pos + 1, [tok]
        state.fail_token(pos, self.label)
        return None

    def __repr__(self):
        return self.label


class Ref(Expr):
    def __init__(self, rule: str):
        self.rule = rule

    def match(self, state, pos):
        result = state.grammar[self.rule].match(state, pos)
        if result is None:
            state.fail_rule(pos, self.rule)
            return None
        end, children = result
        if self.rule in state.silent:
            return end, children
        return end, [ParseNode(self.rule, state.span_between(pos, end), children)]

    def __repr__(self):
        return self.rule


class Seq(Expr):
    def __init__(self, *items: Expr):
        self.items = items

    def match(self, state, pos):
        children = []
        for item in self.items:
            result = item.match(state, pos)
            if result is None:
                return None
            pos, matched = result
            children.extend(matched)
        return pos, children


class Choice(Expr):
    def __init__(self, *alternatives: Expr):
        self.alternatives = alternatives

    def match(self, state, pos):
        for alt in self.alternatives:
            result = alt.match(state, pos)
            if result is not None:
                return result
        return None


class Many(Expr):
    def __init__(self, item: Expr):
        self.item = item

    def match(self, state, pos):
        children = []
        while True:
            result = self.item.match(state, pos)
            if result is None or result[0] == pos:
                return pos, children
            pos, matched = result
            children.extend(matched)


class Opt(Expr):
    def __init__(self, item: Expr):
        self.item = item

    def match(self, state, pos):
        result = self.item.match(state, pos)
        if result is None:
            return pos, []
        return result


class PegParser:
    def __init__(self, grammar: Dict[str, Expr], start: str, silent=frozenset()):
        missing = [r.rule for r in _refs(grammar) if r.rule not in grammar]
        if missing:
            raise KeyError(f"Grammar references undefined rule(s): {', '.join(sorted(set(missing)))}")
        if start in silent:
            raise ValueError("The start rule cannot be silent.")
        self.grammar = grammar
        self.start = start
        self.silent = frozenset(silent)

    def parse(self, tokens: List) -> ParseNode:
        state = MatchState(self.grammar, self.silent, tokens)
        try:
            result = Ref(self.start).match(state, 0)
        except RecursionError:
            raise ParseError(
                "Program is nested too deeply", tokens[state.reached].span,
            ) from None
        if result is not None:
            return result[1][0]

        bad = tokens[max(state.furthest, 0)]
        if bad.type == "EOF":
            message = "Unexpected end of file"
        else:
            message = f"Unexpected '{bad.value}'"
        raise ParseError(message, bad.span, expected=state.expected, rules=state.rules)


def _refs(grammar):
    stack = list(grammar.values())
    while stack:
        expr = stack.pop()
        if isinstance(expr, Ref):
            yield expr
        elif isinstance(expr, (Seq,)):
            stack.extend(expr.items)
        elif isinstance(expr, Choice):
            stack.extend(expr.alternatives)
        elif isinstance(expr, (Many, Opt)):
            stack.append(expr.item)
