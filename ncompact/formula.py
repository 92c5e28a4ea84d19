"""
Formulas: rules and their partial instantiations.

A formula is a given environment from a library whose free symbols (other
than declared constants) are metavariables. Matching one of its
propositions against a user proposition yields a solution; applying the
solution to a copy of the formula yields an instantiation, complete (an
Inst) when no metavariables remain and partial (a Part) otherwise.
"""

from .core.concepts import (
    DECLARE, EFA_SYMBOL, LAMBDA_SYMBOL, METAVARIABLE,
    Declaration, Environment, Expression, Symbol,
)
from .core.scoping import assign_proper_names, rename_bindings
from .matching import MatchingError, Problem


def domain(lc) -> set:
    """Names of the metavariables occurring free in lc."""
    return {d.text for d in lc.descendants()
            if isinstance(d, Symbol) and d.is_metavariable()
            and d.binder(within=lc) is None}


def declared_constants(*concepts) -> set:
    """Every symbol name declared by a Declare anywhere in the concepts."""
    names = set()
    for lc in concepts:
        for d in lc.descendants_satisfying(lambda x: x.is_a(DECLARE)):
            names.update(d.symbol_names())
    return names


def mark_metavariables(rule, constants=()):
    """
    Mark as metavariables the free symbols of rule that are not declared
    constants. Returns rule.
    """
    constants = set(constants) | {EFA_SYMBOL, LAMBDA_SYMBOL}
    for d in rule.descendants():
        if isinstance(d, Symbol) and d.text not in constants \
                and d.binder(within=rule) is None:
            d.make_into_a(METAVARIABLE)
    return rule


def instantiate(formula, solution):
    """
    A copy of formula with the solution applied and beta reduced, its
    bound variables given readable names and its local constants proper
    names. Scratch data is not copied.
    """
    result = solution.applied_to(formula)
    rename_bindings(result)
    assign_proper_names(result)
    return result


def add_cached_instantiation(formula, inst):
    """Insert inst right after formula."""
    formula.parent().insert_child(inst, formula.index_in_parent() + 1)
    assign_proper_names(inst)
    return inst


def match_propositions(pattern, expression) -> Problem:
    """
    The matching problem for one formula proposition against one user
    proposition. Declarations match declarations of the same kind with
    the same number of symbols and the same body status; anything else
    that is not expression against expression is a MatchingError.
    """
    if isinstance(pattern, Expression) and isinstance(expression, Expression):
        return Problem(pattern, expression)
    if isinstance(pattern, Declaration) and isinstance(expression, Declaration):
        if pattern.kind != expression.kind \
                or len(pattern.symbols()) != len(expression.symbols()) \
                or (pattern.body() is None) != (expression.body() is None):
            return None
        return Problem(list(zip(pattern.children(), expression.children())))
    raise MatchingError(f"Cannot match {pattern} against {expression}")


def _environment_pairs(pattern, candidate, outermost=True) -> list:
    """
    Pattern/expression pairs for matching a whole environment against a
    formula of the same shape, or None if the shapes differ. Given status
    must agree child by child; the outermost one is not compared.
    """
    if not outermost and pattern.is_given() != candidate.is_given():
        return None
    if isinstance(pattern, Environment):
        if not isinstance(candidate, Environment) \
                or pattern.num_children() != candidate.num_children():
            return None
        pairs = []
        for p, c in zip(pattern.children(), candidate.children()):
            inner = _environment_pairs(p, c, outermost=False)
            if inner is None:
                return None
            pairs.extend(inner)
        return pairs
    if isinstance(pattern, Declaration):
        if not isinstance(candidate, Declaration) or pattern.kind != candidate.kind \
                or pattern.num_children() != candidate.num_children() \
                or (pattern.body() is None) != (candidate.body() is None):
            return None
        return list(zip(pattern.children(), candidate.children()))
    if isinstance(pattern, Expression) and isinstance(candidate, Expression):
        return [(pattern, candidate)]
    return None


def all_possible_instantiations(formula, candidate):
    """Every solution matching the whole formula against candidate, lazily."""
    pairs = _environment_pairs(formula, candidate)
    if pairs is None:
        return
    yield from Problem(pairs).solutions()
