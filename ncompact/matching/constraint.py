"""
A matching constraint: a (pattern, expression) pair.

The pattern may contain metavariables; the expression may not. Each
constraint has a complexity that tells the solver how hard it is:

    0  cannot be satisfied, whatever the metavariables become
    1  already satisfied (no metavariables, pattern equals expression)
    2  the pattern is a lone metavariable (a direct instantiation)
    3  both sides compound with the same shape: split into child pairs
    4  the pattern is an EFA (@ M a1 ... ak): needs higher-order imitation

Problems keep their constraints sorted by this number so that the
cheapest deterministic step is always taken first.
"""

from ..core.concepts import (
    Application, Binding, Expression, LogicConcept, Symbol, is_an_efa,
)
from .errors import MatchingError


IMPOSSIBLE = 0
SATISFIED = 1
INSTANTIATION = 2
DECOMPOSABLE = 3
EFA = 4


def has_metavariables(lc) -> bool:
    return lc.has_descendant_satisfying(
        lambda d: isinstance(d, Symbol) and d.is_metavariable())


class Constraint:
    """An immutable (pattern, expression) pair. Neither side is copied."""

    def __init__(self, pattern: LogicConcept, expression: LogicConcept):
        if not isinstance(pattern, LogicConcept) or not isinstance(expression, LogicConcept):
            raise MatchingError("A constraint needs a pattern and an expression")
        if has_metavariables(expression):
            raise MatchingError(f"Expressions may not contain metavariables: {expression}")
        self.pattern = pattern
        self.expression = expression
        self._complexity = None

    def copy(self) -> "Constraint":
        return Constraint(self.pattern.copy(), self.expression.copy())

    def equals(self, other: "Constraint") -> bool:
        return self.pattern.equals(other.pattern) and self.expression.equals(other.expression)

    def is_an_instantiation(self) -> bool:
        """Can this constraint be applied as a substitution?"""
        return isinstance(self.pattern, Symbol) and self.pattern.is_metavariable()

    def complexity(self) -> int:
        if self._complexity is None:
            self._complexity = self._compute_complexity()
        return self._complexity

    def _compute_complexity(self) -> int:
        pattern, expression = self.pattern, self.expression
        if not has_metavariables(pattern):
            return SATISFIED if pattern.equals(expression) else IMPOSSIBLE
        if self.is_an_instantiation():
            return INSTANTIATION if isinstance(expression, Expression) else IMPOSSIBLE
        if is_an_efa(pattern):
            return EFA
        if type(pattern) is not type(expression):
            return IMPOSSIBLE
        if not isinstance(pattern, (Application, Binding)):
            return IMPOSSIBLE
        if pattern.num_children() != expression.num_children():
            return IMPOSSIBLE
        return DECOMPOSABLE

    def children(self) -> list:
        """One constraint per pair of corresponding children (complexity 3 only)."""
        return [Constraint(p, e) for p, e in
                zip(self.pattern.children(), self.expression.children())]

    def __repr__(self):
        return f"({self.pattern},{self.expression})"
