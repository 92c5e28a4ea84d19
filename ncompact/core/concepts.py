"""
Logic concepts: the node taxonomy documents, rules and patterns are built from.

    Symbol("x")                          an atomic expression
    Application(f, a, b)                 (f a b)
    Binding(∀, x, body)                  (∀ x , body)
    Environment(A, B, C)                 { A B C }
    Declaration("Let", [x])              [Let x]
    Declaration("ForSome", [c], body)    [ForSome c , body]
    Declaration("Declare", [=, +])       [Declare = +]

Roles are string tags (is_a / make_into_a). Two special shapes:

    (@ P a1 ... ak)         expression-function application (EFA)
    (𝝺 v1 ... vk , body)     expression function (lambda)

Three per-node stores with different copy policies:
    roles       copied by copy()
    attributes  copied by copy()      (proper_name, original_name, ...)
    scratch     never copied          (domain, weenies, finished, creators,
                                       rule, pass, validation results, ...)
"""

from typing import Callable, Optional

from .structure import Structure


GIVEN = "given"
RULE = "Rule"
PART = "Part"
INST = "Inst"
BIH = "BIH"
DECLARE = "Declare"
METAVARIABLE = "LDE MV"

EFA_SYMBOL = "@"
LAMBDA_SYMBOL = "𝝺"

LET = "Let"
FOR_SOME = "ForSome"
DECLARATION_KINDS = (LET, FOR_SOME, DECLARE)


class LogicConcept(Structure):
    """Base class of every node in a document."""

    def __init__(self, *children):
        self.roles = set()
        self.attributes = {}
        self.scratch = {}
        super().__init__(*children)

    # ── roles ────────────────────────────────────────────────────────────

    def is_a(self, role: str) -> bool:
        return role in self.roles

    def make_into_a(self, role: str):
        self.roles.add(role)
        return self

    def unmake_into_a(self, role: str):
        self.roles.discard(role)
        return self

    def as_a(self, role: str):
        """A copy of this concept with the role added."""
        return self.copy().make_into_a(role)

    def is_given(self) -> bool:
        return GIVEN in self.roles

    def toggle_given(self):
        if self.is_given():
            self.unmake_into_a(GIVEN)
        else:
            self.make_into_a(GIVEN)
        return self

    @property
    def ignore(self) -> bool:
        return self.scratch.get("ignore", False)

    @ignore.setter
    def ignore(self, value: bool):
        self.scratch["ignore"] = value

    # ── copying and comparison ───────────────────────────────────────────

    def _blank(self):
        return type(self)()

    def copy(self):
        """Deep copy of the subtree: roles and attributes go along, scratch does not."""
        result = self._blank()
        result.roles = set(self.roles)
        result.attributes = dict(self.attributes)
        for child in self._children:
            result.push_child(child.copy())
        return result

    def _same_node(self, other) -> bool:
        return self.is_given() == other.is_given()

    def equals(self, other) -> bool:
        """Structural equality: class, node data, given status, children."""
        if type(self) is not type(other):
            return False
        if not self._same_node(other):
            return False
        if len(self._children) != len(other._children):
            return False
        return all(a.equals(b) for a, b in zip(self._children, other._children))

    def __repr__(self):
        from .putdown import write
        return write(self)

    # ── navigation ───────────────────────────────────────────────────────

    def ancestors(self) -> list:
        """This node, its parent, grandparent, ... up to the root."""
        result = []
        walk = self
        while walk is not None:
            result.append(walk)
            walk = walk.parent()
        return result

    def has_ancestor_satisfying(self, pred: Callable) -> bool:
        return any(pred(a) for a in self.ancestors())

    def descendants(self):
        """Pre-order walk of the subtree, this node first."""
        yield self
        for child in self._children:
            yield from child.descendants()

    def descendants_satisfying(self, pred: Callable) -> list:
        return [d for d in self.descendants() if pred(d)]

    def has_descendant_satisfying(self, pred: Callable) -> bool:
        return any(pred(d) for d in self.descendants())

    def is_accessible_to(self, target) -> bool:
        """
        A node is accessible to target if it is an earlier sibling of
        target or of one of target's ancestors.
        """
        parent = self.parent()
        if parent is None:
            return False
        for walk in target.ancestors():
            if walk.parent() is parent:
                return self.index_in_parent() < walk.index_in_parent()
        return False

    def accessibles(self) -> list:
        """Everything accessible to this node, in document order."""
        result = []
        for walk in reversed(self.ancestors()):
            parent = walk.parent()
            if parent is None:
                continue
            result.extend(parent.children()[:walk.index_in_parent()])
        return result

    # ── classification ───────────────────────────────────────────────────

    def is_a_statement(self) -> bool:
        """An expression that is not nested in another expression or a declaration."""
        return isinstance(self, Expression) and (
            self.parent() is None or isinstance(self.parent(), Environment))

    def is_a_proposition(self) -> bool:
        if isinstance(self, Declaration):
            return not self.is_a(DECLARE)
        return self.is_a_statement()

    def is_a_formula(self) -> bool:
        return self.is_a(RULE) or self.is_a(PART)

    def propositions(self) -> list:
        return self.descendants_satisfying(lambda d: d.is_a_proposition())

    def statements(self) -> list:
        return self.descendants_satisfying(lambda d: d.is_a_statement())

    def _claim_children(self):
        for child in self._children:
            if child.is_given() or child.ignore or child.is_a(DECLARE):
                continue
            yield child

    def conclusions(self) -> list:
        """Claim propositions reachable without passing through a given."""
        if not isinstance(self, Environment):
            return [self] if self.is_a_proposition() and not self.is_given() else []
        result = []
        for child in self._claim_children():
            if isinstance(child, Environment):
                result.extend(child.conclusions())
            elif child.is_a_proposition():
                result.append(child)
        return result

    def inferences(self) -> list:
        """Claim environments and conclusions inside this node (not the node itself)."""
        result = []
        for child in self._claim_children():
            result.append(child)
            if isinstance(child, Environment):
                result.extend(child.inferences())
        return result


class Expression(LogicConcept):
    """Symbols, applications and bindings."""

    def _same_node(self, other) -> bool:
        # given status only matters for environments and declarations
        return True

    def free_symbols(self) -> list:
        """Symbol occurrences in this expression not bound inside it."""
        return [d for d in self.descendants()
                if isinstance(d, Symbol) and d.binder(within=self) is None]

    def free_symbol_names(self) -> set:
        return {s.text for s in self.free_symbols()}

    def is_free_in(self, other) -> bool:
        """
        True if a copy of this expression occurs in other with none of its
        free symbols captured by a binding in other.
        """
        names = self.free_symbol_names()
        for d in other.descendants():
            if not d.equals(self):
                continue
            if all(s.binder(within=other) is None
                   for s in d.free_symbols() if s.text in names):
                return True
        return False


class Symbol(Expression):
    def __init__(self, text: str = ""):
        super().__init__()
        self.text = str(text)

    def _blank(self):
        return Symbol(self.text)

    def _same_node(self, other) -> bool:
        return self.text == other.text and self.is_metavariable() == other.is_metavariable()

    def is_metavariable(self) -> bool:
        return METAVARIABLE in self.roles

    def binder(self, within: Optional[LogicConcept] = None):
        """
        The Binding that binds this occurrence, looking no higher than
        within (inclusive). None if the occurrence is free there.
        """
        if self is within:
            return None
        came_from = self
        walk = self.parent()
        while walk is not None:
            if isinstance(walk, Binding) and came_from is not walk.head() \
                    and self.text in walk.bound_variable_names():
                return walk
            if walk is within:
                break
            came_from = walk
            walk = walk.parent()
        return None

    def proper_name(self) -> str:
        return self.attributes.get("proper_name", self.text)


class Application(Expression):
    """(operator arg1 arg2 ...). Also used for EFAs, with operator @."""

    def operator(self):
        return self.child(0)

    def arguments(self) -> list:
        return self.children()[1:]


class Binding(Expression):
    """(head v1 ... vk , body): children are head, bound variables, body."""

    def head(self):
        return self.child(0)

    def body(self):
        return self.last_child()

    def bound_variables(self) -> list:
        return self.children()[1:-1]

    def bound_variable_names(self) -> set:
        return {v.text for v in self.bound_variables() if isinstance(v, Symbol)}


class Environment(LogicConcept):
    """{ ... }: a context whose givens are hypotheses for the claims after them."""


class Declaration(LogicConcept):
    """
    [kind s1 ... sk] or [kind s1 ... sk , body].

    Let declarations are always given; Declare declarations introduce
    global constants and have no propositional form.
    """

    def __init__(self, kind: str = LET, symbols=(), body=None):
        if kind not in DECLARATION_KINDS:
            raise ValueError(f"Unknown declaration kind: {kind!r}")
        self.kind = kind
        self._has_body = body is not None
        children = list(symbols) + ([body] if body is not None else [])
        super().__init__(*children)
        if kind == LET:
            self.make_into_a(GIVEN)
        elif kind == DECLARE:
            self.make_into_a(DECLARE)

    def _blank(self):
        result = Declaration(self.kind)
        result._has_body = self._has_body
        return result

    def _same_node(self, other) -> bool:
        return (self.kind == other.kind and self._has_body == other._has_body
                and super()._same_node(other))

    def symbols(self) -> list:
        children = self.children()
        return children[:-1] if self._has_body else children

    def symbol_names(self) -> list:
        return [s.text for s in self.symbols()]

    def body(self):
        return self.last_child() if self._has_body else None

    def is_a_let(self) -> bool:
        return self.kind == LET


# ── constructors for expression-function shapes ─────────────────────────────

def metavariable(text: str) -> Symbol:
    return Symbol(text).make_into_a(METAVARIABLE)


def efa(head, *args) -> Application:
    """(@ head a1 ... ak)"""
    return Application(Symbol(EFA_SYMBOL), head, *args)


def is_an_efa(lc) -> bool:
    return (isinstance(lc, Application) and lc.num_children() > 2
            and isinstance(lc.child(0), Symbol) and lc.child(0).text == EFA_SYMBOL
            and not lc.child(0).is_metavariable())


def lambda_expression(variables, body) -> Binding:
    """(𝝺 v1 ... vk , body)"""
    return Binding(Symbol(LAMBDA_SYMBOL), *variables, body)


def is_a_lambda(lc) -> bool:
    return (isinstance(lc, Binding) and isinstance(lc.head(), Symbol)
            and lc.head().text == LAMBDA_SYMBOL)
