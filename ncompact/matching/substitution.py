"""
Substitutions: metavariable := expression.

Substituting never leaves a redex behind: wherever an expression function
lands in the head of an EFA the result is beta reduced.
"""

from ..core.concepts import GIVEN, LogicConcept, Symbol
from .capture import CaptureConstraint, CaptureConstraints
from .constraint import Constraint
from .errors import MatchingError
from .expression_functions import full_beta_reduce, has_redex


def _replace(lc, mapping: dict):
    if isinstance(lc, Symbol) and lc.is_metavariable() and lc.text in mapping:
        result = mapping[lc.text].copy()
        # given status belongs to the position, not to the value
        result.unmake_into_a(GIVEN)
        if lc.is_given():
            result.make_into_a(GIVEN)
        return result
    result = lc._blank()
    result.roles = set(lc.roles)
    result.attributes = dict(lc.attributes)
    for child in lc.children():
        result.push_child(_replace(child, mapping))
    return result


def instantiate_metavariables(lc, mapping: dict):
    """
    A copy of lc with every metavariable whose text is a key of mapping
    replaced, simultaneously, by a copy of its value, then beta reduced.
    """
    result = _replace(lc, mapping)
    return full_beta_reduce(result) if has_redex(result) else result


class Substitution:
    """Substitution(metavariable, expression) or Substitution(constraint)."""

    def __init__(self, *args):
        if len(args) == 1 and isinstance(args[0], Constraint):
            args = (args[0].pattern, args[0].expression)
        if len(args) != 2:
            raise MatchingError("A substitution needs a metavariable and an expression")
        metavariable, expression = args
        if not isinstance(metavariable, Symbol) or not metavariable.is_metavariable():
            raise MatchingError(f"Not a metavariable: {metavariable}")
        if not isinstance(expression, LogicConcept):
            raise MatchingError(f"Not an expression: {expression!r}")
        self.metavariable = metavariable.copy()
        self.expression = expression.copy()

    def mapping(self) -> dict:
        return {self.metavariable.text: self.expression}

    def applied_to(self, target):
        """Non-destructive: the target with this substitution applied."""
        if isinstance(target, LogicConcept):
            return instantiate_metavariables(target, self.mapping())
        if isinstance(target, Constraint):
            return Constraint(self.applied_to(target.pattern), target.expression)
        if isinstance(target, CaptureConstraint):
            return CaptureConstraint(target.bound.copy(), self.applied_to(target.free))
        if isinstance(target, CaptureConstraints):
            result = CaptureConstraints()
            result.constraints = [self.applied_to(c) for c in target.constraints]
            return result
        if isinstance(target, (list, tuple)):
            return [self.applied_to(item) for item in target]
        raise MatchingError(f"Cannot apply a substitution to {target!r}")

    def apply_to(self, target):
        """
        In place where the target allows it: a concept with a parent is
        replaced in that parent, capture constraints are updated. Returns
        the result either way.
        """
        if isinstance(target, CaptureConstraint):
            target.free = self.applied_to(target.free)
            return target
        if isinstance(target, CaptureConstraints):
            for c in target.constraints:
                self.apply_to(c)
            return target
        result = self.applied_to(target)
        if isinstance(target, LogicConcept) and target.parent() is not None:
            target.replace_with(result)
        return result

    def __repr__(self):
        return f"{self.metavariable}:={self.expression}"
