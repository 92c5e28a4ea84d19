"""
Propositional form of a document region, and satisfiability.

Every expression and every Let or ForSome declaration is an atom,
identified by its canonical text: bound variables are written as binder
depth markers and local constants by their proper names. Environments
fold from the right, a given child turning into a hypothesis and a claim
into a conjunct:

    { :A B :C D }   ->   A → (B ∧ (C → (D ∧ ⊤)))

Formulas are nested tuples:
    ("atom", text)  ("not", f)  ("and", f, g)  ("or", f, g)
    ("implies", f, g)  ("true",)  ("false",)

To check a target, everything accessible to it is taken as given; the
target is valid when the negation of that implication is unsatisfiable.
Satisfiability is decided by ground resolution in the saturation loop.
"""

from ..core.concepts import (
    DECLARE, INST, PART, RULE, Application, Binding, Declaration,
    Environment, Expression, Symbol,
)
from ..core.scoping import declared_by
from ..matching.debruijn import marker_text
from .engine import (
    Clause, SaturationState, found_empty_clause, saturate, shortest_first,
)
from .resolve import clause_subsumes, is_tautology, resolve


TRUE = ("true",)
FALSE = ("false",)


class PropositionalError(RuntimeError):
    """A region could not be reduced to a decision (e.g. the step limit ran out)."""


# ── canonical text ─────────────────────────────────────────────────────────

class _Naming:
    """How symbols are written: proper names, or preemie-mode names."""

    def __init__(self, check_preemies: bool = False, deleted=()):
        self.check_preemies = check_preemies
        self.deleted = {id(d) for d in deleted}

    def name(self, symbol: Symbol) -> str:
        if not self.check_preemies:
            return symbol.proper_name()
        declaration = declared_by(symbol)
        if declaration is not None and id(declaration) in self.deleted:
            return symbol.text
        if declaration is None and symbol.has_ancestor_satisfying(lambda a: a.is_a(INST)):
            return symbol.text
        return symbol.proper_name()


def prop_text(lc, check_preemies: bool = False, deleted=()) -> str:
    """
    The canonical text of an expression or declaration: alpha-equivalent
    expressions get the same text, differently declared symbols with the
    same text do not.
    """
    return _text(lc, _Naming(check_preemies, deleted), {}, 0)


def _text(lc, naming: _Naming, bound: dict, depth: int) -> str:
    if isinstance(lc, Symbol):
        if lc.text in bound:
            return bound[lc.text]
        if lc.is_metavariable():
            return "?" + lc.text
        return naming.name(lc)
    if isinstance(lc, Binding):
        head = _text(lc.head(), naming, bound, depth)
        inner = dict(bound)
        names = []
        for offset, v in enumerate(lc.bound_variables()):
            if isinstance(v, Symbol):
                inner[v.text] = marker_text(depth + offset)
                names.append(inner[v.text])
            else:
                names.append(_text(v, naming, bound, depth))
        body = _text(lc.body(), naming, inner, depth + len(names))
        return f"({head} {' '.join(names)} , {body})"
    if isinstance(lc, Application):
        return "(" + " ".join(_text(c, naming, bound, depth) for c in lc.children()) + ")"
    if isinstance(lc, Declaration):
        symbols = " ".join(_text(s, naming, bound, depth) for s in lc.symbols())
        if lc.body() is None:
            return f"[{lc.kind} {symbols}]"
        return f"[{lc.kind} {symbols} , {_text(lc.body(), naming, bound, depth)}]"
    raise PropositionalError(f"No propositional text for {lc!r}")


# ── propositional form ─────────────────────────────────────────────────────

def skipped(lc, deleted=()) -> bool:
    """Children that contribute nothing to a propositional form."""
    return (lc.is_a(RULE) or lc.is_a(PART) or lc.is_a(DECLARE) or lc.ignore
            or any(lc is d for d in deleted))


def _form(lc, naming: _Naming, deleted):
    if isinstance(lc, Environment):
        return _fold(lc.children(), naming, deleted)
    if isinstance(lc, (Expression, Declaration)):
        return ("atom", _text(lc, naming, {}, 0))
    raise PropositionalError(f"No propositional form for {lc!r}")


def _fold(children, naming: _Naming, deleted):
    result = TRUE
    for child in reversed(children):
        if skipped(child, deleted):
            continue
        f = _form(child, naming, deleted)
        result = ("implies", f, result) if child.is_given() else ("and", f, result)
    return result


def deleted_lets(target) -> list:
    """The Lets erased for a preemie check: those in scope, and target's own."""
    found = [a for a in target.accessibles()
             if isinstance(a, Declaration) and a.is_a_let()]
    if isinstance(target, Environment):
        found += [c for c in target.children()
                  if isinstance(c, Declaration) and c.is_a_let()]
    return found


def prop_form(target, check_preemies: bool = False):
    """
    The implication whose validity means target is justified: everything
    accessible to target implies target (read as a claim).
    """
    deleted = deleted_lets(target) if check_preemies else []
    naming = _Naming(check_preemies, deleted)
    if isinstance(target, Environment):
        result = _fold(target.children(), naming, deleted)
    else:
        result = _form(target, naming, deleted)
    for hypothesis in reversed(target.accessibles()):
        if skipped(hypothesis, deleted):
            continue
        result = ("implies", _form(hypothesis, naming, deleted), result)
    return result


# ── CNF ────────────────────────────────────────────────────────────────────

def nnf(f, positive: bool = True):
    """Negation normal form, with ⊤/⊥ folded away where possible."""
    tag = f[0]
    if tag == "atom":
        return f if positive else ("not", f)
    if tag == "true":
        return TRUE if positive else FALSE
    if tag == "false":
        return FALSE if positive else TRUE
    if tag == "not":
        return nnf(f[1], not positive)
    if tag == "implies":
        return nnf(("or", ("not", f[1]), f[2]), positive)
    if tag in ("and", "or"):
        a, b = nnf(f[1], positive), nnf(f[2], positive)
        is_and = (tag == "and") == positive
        if is_and:
            if a == FALSE or b == FALSE:
                return FALSE
            if a == TRUE:
                return b
            if b == TRUE:
                return a
            return ("and", a, b)
        if a == TRUE or b == TRUE:
            return TRUE
        if a == FALSE:
            return b
        if b == FALSE:
            return a
        return ("or", a, b)
    raise PropositionalError(f"Unknown connective: {tag!r}")


def _cnf_of_nnf(f) -> list:
    tag = f[0]
    if tag == "true":
        return []
    if tag == "false":
        return [frozenset()]
    if tag == "atom":
        return [frozenset({(True, f[1])})]
    if tag == "not":
        return [frozenset({(False, f[1][1])})]
    if tag == "and":
        return _reduce(_cnf_of_nnf(f[1]) + _cnf_of_nnf(f[2]))
    left, right = _cnf_of_nnf(f[1]), _cnf_of_nnf(f[2])
    return _reduce([a | b for a in left for b in right])


def _reduce(clauses: list) -> list:
    """Drop tautologies, duplicates and subsumed clauses."""
    kept = []
    for c in sorted(set(clauses), key=len):
        if any((not lit[0], lit[1]) in c for lit in c):
            continue
        if any(k <= c for k in kept):
            continue
        kept.append(c)
    return kept


def to_cnf(f) -> list:
    """A list of clauses (frozensets of (sign, atom) literals) equivalent to f."""
    return _cnf_of_nnf(nnf(f))


def is_satisfiable(cnf: list, max_steps: int = 10000, verbose: bool = False) -> bool:
    """
    Saturate the clauses under ground resolution. Unsatisfiable exactly
    when the empty clause is derived; satisfiable when the set of support
    runs dry without it.
    """
    state = SaturationState.from_clauses(Clause(literals=frozenset(c)) for c in cnf)
    state = saturate(
        state, resolve,
        max_steps=max_steps,
        stop_fn=found_empty_clause,
        choose_focus_fn=shortest_first,
        subsumes_fn=clause_subsumes,
        prune_fn=lambda clause, _: is_tautology(clause),
        verbose=verbose,
    )
    if found_empty_clause(state):
        return False
    if not state.halted:
        raise PropositionalError(
            f"Saturation did not finish within {max_steps} steps")
    return True


def is_valid(f, **kwargs) -> bool:
    return not is_satisfiable(to_cnf(("not", f)), **kwargs)
