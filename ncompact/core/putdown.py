"""
A small reader and writer for the tree notation used throughout the package.

    x                       Symbol
    (f a b)                 Application
    (∀ x y , body)          Binding (a comma separates bound variables from body)
    { A :B C }              Environment; ':' marks the next concept as given
    [Let x]                 Let declaration (always given)
    [ForSome c , body]      ForSome declaration with a body
    [Declare = + ∀]         global constants
    { ... } <<              the environment is a blatant instantiation hint
    // ...                  comment to end of line

Only what the package itself needs; shorthand rewriting is not handled here.
"""

import re

from .concepts import (
    BIH, GIVEN, DECLARATION_KINDS, EFA_SYMBOL, LAMBDA_SYMBOL, METAVARIABLE,
    Application, Binding, Declaration, Environment, Symbol,
)


class PutdownError(ValueError):
    """Raised when text cannot be read as putdown notation."""


_TOKEN = re.compile(r"//[^\n]*|<<|[{}()\[\],:]|[^\s{}()\[\],:]+")


def tokenize(text: str) -> list:
    return [t for t in _TOKEN.findall(text) if not t.startswith("//")]


class _Reader:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self):
        token = self.peek()
        if token is None:
            raise PutdownError("Unexpected end of input")
        self.pos += 1
        return token

    def expect(self, token):
        found = self.next()
        if found != token:
            raise PutdownError(f"Expected {token!r} but found {found!r}")

    def item(self):
        token = self.next()
        if token == ":":
            return self.item().make_into_a(GIVEN)
        if token == "{":
            result = Environment(*self.items_until("}"))
            self.expect("}")
            if self.peek() == "<<":
                self.next()
                result.make_into_a(BIH)
            return result
        if token == "(":
            return self.parenthesized()
        if token == "[":
            return self.declaration()
        if token in ("}", ")", "]", ",", "<<"):
            raise PutdownError(f"Unexpected {token!r}")
        return Symbol(token)

    def items_until(self, *closers):
        result = []
        while self.peek() is not None and self.peek() not in closers:
            result.append(self.item())
        return result

    def parenthesized(self):
        parts = self.items_until(")", ",")
        if not parts:
            raise PutdownError("Empty application")
        if self.peek() == ",":
            self.next()
            body = self.item()
            self.expect(")")
            if len(parts) < 2:
                raise PutdownError("A binding needs a head and at least one bound variable")
            if not all(isinstance(v, Symbol) for v in parts[1:]):
                raise PutdownError("Bound variables must be symbols")
            return Binding(*parts, body)
        self.expect(")")
        return Application(*parts)

    def declaration(self):
        kind = self.next()
        if kind not in DECLARATION_KINDS:
            raise PutdownError(f"Unknown declaration kind {kind!r}")
        symbols = self.items_until("]", ",")
        if not all(isinstance(s, Symbol) for s in symbols):
            raise PutdownError("Declarations declare symbols only")
        body = None
        if self.peek() == ",":
            self.next()
            body = self.item()
        self.expect("]")
        return Declaration(kind, symbols, body)


def read(text: str, metavariables=()):
    """
    Read putdown text. Returns a single concept, or a list if the text
    holds several top-level concepts. Symbols whose text is listed in
    metavariables are marked as metavariables.
    """
    reader = _Reader(tokenize(text))
    result = reader.items_until()
    if reader.peek() is not None:
        raise PutdownError(f"Unexpected {reader.peek()!r}")
    if metavariables:
        names = set(metavariables.split() if isinstance(metavariables, str) else metavariables)
        for lc in result:
            mark_metavariables(lc, names)
    if len(result) == 1:
        return result[0]
    return result


def mark_metavariables(lc, names):
    for d in lc.descendants():
        if isinstance(d, Symbol) and d.text in names \
                and d.text not in (EFA_SYMBOL, LAMBDA_SYMBOL):
            d.make_into_a(METAVARIABLE)
    return lc


def write(lc) -> str:
    """Render a concept back into putdown notation."""
    prefix = ":" if lc.is_given() and not (
        isinstance(lc, Declaration) and lc.is_a_let()) else ""
    if isinstance(lc, Symbol):
        text = lc.text
    elif isinstance(lc, Binding):
        variables = " ".join(write(v) for v in lc.bound_variables())
        text = f"({write(lc.head())} {variables} , {write(lc.body())})"
    elif isinstance(lc, Application):
        text = "(" + " ".join(write(c) for c in lc.children()) + ")"
    elif isinstance(lc, Declaration):
        symbols = " ".join(write(s) for s in lc.symbols())
        text = f"[{lc.kind} {symbols}" if symbols else f"[{lc.kind}"
        if lc.body() is not None:
            text += f" , {write(lc.body())}"
        text += "]"
    elif isinstance(lc, Environment):
        inner = " ".join(write(c) for c in lc.children())
        text = "{ " + inner + " }" if inner else "{ }"
        if lc.is_a(BIH):
            text += " <<"
    else:
        text = f"<{type(lc).__name__}>"
    return prefix + text
