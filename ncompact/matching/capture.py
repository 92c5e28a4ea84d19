"""
Capture constraints.

A pattern such as (∀ x , (P A)) may only match if whatever A becomes does
not mention x freely: otherwise the binder would capture it. Each such
obligation is a CaptureConstraint(bound=x, free=A). As metavariables get
instantiated, the substitution is applied to the free side too, and the
obligation is violated as soon as x occurs free in the (beta reduced)
result.
"""

from ..core.concepts import Binding, Symbol
from .expression_functions import full_beta_reduce


def _free_plain_names(lc) -> set:
    return {d.text for d in lc.descendants()
            if isinstance(d, Symbol) and not d.is_metavariable()
            and d.binder(within=lc) is None}


class CaptureConstraint:
    def __init__(self, bound: Symbol, free):
        self.bound = bound
        self.free = free

    def copy(self) -> "CaptureConstraint":
        return CaptureConstraint(self.bound.copy(), self.free.copy())

    def equals(self, other: "CaptureConstraint") -> bool:
        return self.bound.equals(other.bound) and self.free.equals(other.free)

    def violated(self) -> bool:
        return self.bound.text in _free_plain_names(full_beta_reduce(self.free))

    def __repr__(self):
        return f"({self.bound},{self.free})"


class CaptureConstraints:
    """All the capture obligations implied by a collection of patterns."""

    def __init__(self, *patterns):
        self.constraints = []
        for pattern in patterns:
            for binding in pattern.descendants_satisfying(
                    lambda d: isinstance(d, Binding)):
                self._add_for(binding)

    def _add_for(self, binding: Binding):
        metavariables = binding.body().descendants_satisfying(
            lambda d: isinstance(d, Symbol) and d.is_metavariable())
        for variable in binding.bound_variables():
            if not isinstance(variable, Symbol) or variable.is_metavariable():
                continue
            for mv in metavariables:
                candidate = CaptureConstraint(variable.copy(), mv.copy())
                if not any(candidate.equals(c) for c in self.constraints):
                    self.constraints.append(candidate)

    def copy(self) -> "CaptureConstraints":
        result = CaptureConstraints()
        result.constraints = [c.copy() for c in self.constraints]
        return result

    def violated(self) -> bool:
        return any(c.violated() for c in self.constraints)

    def __len__(self):
        return len(self.constraints)

    def __repr__(self):
        return "{" + ",".join(repr(c) for c in self.constraints) + "}"
