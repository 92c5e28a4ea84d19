"""
Matching problems and the higher-order solver.

A Problem is a set of Constraints kept sorted by complexity, ties broken
by insertion order. all_solutions() always works on the first (cheapest)
constraint:

    0  no solutions
    1  drop it and go on
    2  remove it, substitute it into the rest, go on, then add it back
       to every solution found
    3  replace it by its child constraints
    4  (@ M a1 ... ak) against e: try, each as its own branch,
         M := 𝝺 x1..xk , e                 (constant)
         M := 𝝺 x1..xk , xi                (one per projection)
         M := 𝝺 x1..xk , (e-shaped, children (@ Hj x1..xk))
                                           (imitation, fresh Hj; only
                                            when e has children)

A solution is itself a Problem all of whose constraints are
instantiations (complexity 2) of metavariables by metavariable-free
expressions.

Raw pattern/expression pairs added to a Problem are stored with their
bound variables canonically renamed (see debruijn), so that matching is
up to alpha equivalence and capture shows up as a free marker.
"""

from typing import Iterator, Optional

from ..core.concepts import METAVARIABLE, LogicConcept, Symbol
from .capture import CaptureConstraints
from .constraint import (
    DECOMPOSABLE, EFA, IMPOSSIBLE, INSTANTIATION, SATISFIED, Constraint,
)
from .debruijn import alpha_equivalent, encode, has_free_bound_markers
from .errors import InvariantViolation, MatchingError
from .expression_functions import (
    application_ef, constant_ef, full_beta_reduce, has_redex, projection_ef,
)
from .substitution import Substitution, instantiate_metavariables
from .symbols import NewSymbolStream


class Problem:
    """
    Problem(p1, e1, p2, e2, ...), Problem(c1, c2, ...), Problem(other), or
    any mix of those and lists of them.
    """

    def __init__(self, *args):
        self.constraints = []
        self._capture_constraints: Optional[CaptureConstraints] = None
        self._stream: Optional[NewSymbolStream] = None
        self._insert(*args)

    # ── the constraint set ───────────────────────────────────────────────

    def _insert(self, *args):
        items = list(args)
        i = 0
        while i < len(items):
            item = items[i]
            if isinstance(item, Constraint):
                self._insert_constraint(item)
            elif isinstance(item, Problem):
                for c in item.constraints:
                    self._insert_constraint(c)
            elif isinstance(item, (list, tuple)):
                self._insert(*item)
            elif isinstance(item, LogicConcept):
                if i + 1 >= len(items) or not isinstance(items[i + 1], LogicConcept):
                    raise MatchingError(f"Pattern {item} has no expression to match")
                self._insert_constraint(
                    Constraint(encode(item), encode(items[i + 1])))
                i += 1
            else:
                raise MatchingError(f"Cannot add this to a Problem: {item!r}")
            i += 1

    def _insert_constraint(self, constraint: Constraint):
        if any(c.equals(constraint) for c in self.constraints):
            return
        complexity = constraint.complexity()
        index = next((i for i, c in enumerate(self.constraints)
                      if c.complexity() > complexity), len(self.constraints))
        self.constraints.insert(index, constraint)

    def _delete(self, to_remove):
        if isinstance(to_remove, Constraint):
            to_remove = next((i for i, c in enumerate(self.constraints)
                              if c.equals(to_remove)), None)
        if isinstance(to_remove, int) and 0 <= to_remove < len(self.constraints):
            del self.constraints[to_remove]

    def add(self, *args):
        self._insert(*args)
        self.clear_capture_constraints()

    def plus(self, *args) -> "Problem":
        result = self.copy()
        result.add(*args)
        return result

    def remove(self, to_remove):
        """Remove a constraint given by value or by index."""
        self._delete(to_remove)
        self.clear_capture_constraints()

    def without(self, to_remove) -> "Problem":
        result = self.copy()
        result.remove(to_remove)
        return result

    def __len__(self):
        return len(self.constraints)

    @property
    def length(self) -> int:
        return len(self.constraints)

    def empty(self) -> bool:
        return not self.constraints

    def copy(self) -> "Problem":
        result = Problem()
        result.constraints = list(self.constraints)
        if self._capture_constraints is not None:
            result._capture_constraints = self._capture_constraints.copy()
        if self._stream is not None:
            result._stream = self._stream.copy()
        return result

    def equals(self, other: "Problem") -> bool:
        """Same constraints, in any order. Caches are not compared."""
        if len(self.constraints) != len(other.constraints):
            return False
        return all(any(a.equals(b) for b in other.constraints) for a in self.constraints)

    def alpha_equals(self, other: "Problem") -> bool:
        if len(self.constraints) != len(other.constraints):
            return False
        return all(any(a.pattern.equals(b.pattern)
                       and alpha_equivalent(a.expression, b.expression)
                       for b in other.constraints)
                   for a in self.constraints)

    # ── using a solution ─────────────────────────────────────────────────

    def can_be_applied(self) -> bool:
        return all(c.is_an_instantiation() for c in self.constraints)

    def mapping(self) -> dict:
        return {c.pattern.text: c.expression
                for c in self.constraints if c.is_an_instantiation()}

    def value_of(self, metavariable) -> Optional[LogicConcept]:
        text = metavariable.text if isinstance(metavariable, Symbol) else metavariable
        return self.mapping().get(text)

    def applied_to(self, target):
        """
        Non-destructive simultaneous substitution of every instantiation in
        this problem into a concept, a Constraint or another Problem.
        """
        if isinstance(target, LogicConcept):
            return instantiate_metavariables(target, self.mapping())
        if isinstance(target, Constraint):
            return Constraint(self.applied_to(target.pattern), target.expression)
        if isinstance(target, Problem):
            return target.after_substituting(
                *[Substitution(c) for c in self.constraints if c.is_an_instantiation()])
        raise MatchingError(f"Cannot apply a Problem to {target!r}")

    def apply_to(self, target):
        """
        Like applied_to, but a concept with a parent is replaced in place
        and a Problem is altered in place. Returns the result.
        """
        if isinstance(target, Problem):
            target.substitute(
                *[Substitution(c) for c in self.constraints if c.is_an_instantiation()])
            return target
        result = self.applied_to(target)
        if isinstance(target, LogicConcept) and target.parent() is not None:
            target.replace_with(result)
        return result

    # ── solver support ───────────────────────────────────────────────────

    def substitute(self, *subs):
        """
        Apply substitutions in place. Only constraints whose patterns
        mention a substituted metavariable are rebuilt; the capture
        constraints are carried along with the substitutions applied.
        """
        flat = []
        for s in subs:
            flat.extend(s if isinstance(s, (list, tuple)) else [s])
        saved = self._capture_constraints
        targets = {s.metavariable.text for s in flat}
        affected = [c for c in self.constraints if c.pattern.has_descendant_satisfying(
            lambda d: isinstance(d, Symbol) and d.is_metavariable() and d.text in targets)]
        for c in affected:
            self._delete(c)
        mapping = {}
        for s in flat:
            mapping.update(s.mapping())
        for c in affected:
            self._insert_constraint(
                Constraint(instantiate_metavariables(c.pattern, mapping), c.expression))
        if saved is not None:
            for s in flat:
                s.apply_to(saved)
        self._capture_constraints = saved

    def after_substituting(self, *subs) -> "Problem":
        result = self.copy()
        result.substitute(*subs)
        return result

    def capture_constraints(self) -> CaptureConstraints:
        if self._capture_constraints is None:
            self._capture_constraints = CaptureConstraints(
                *[c.pattern for c in self.constraints])
        return self._capture_constraints

    def clear_capture_constraints(self):
        self._capture_constraints = None

    def avoids_capture(self) -> bool:
        return not self.capture_constraints().violated()

    def beta_reduce(self):
        """Replace every pattern containing a redex by its beta normal form."""
        for c in list(self.constraints):
            if has_redex(c.pattern):
                self._delete(c)
                self._insert_constraint(Constraint(full_beta_reduce(c.pattern), c.expression))

    # ── solving ──────────────────────────────────────────────────────────

    def all_solutions(self) -> Iterator["Problem"]:
        """
        Every solution of this problem, lazily. Consumes the receiver: work
        on a copy if it is needed afterwards. Alpha-equivalent solutions
        and solutions that would capture a bound variable through an
        expression function may both appear; see solutions().
        """
        if self._stream is None:
            self._stream = NewSymbolStream(
                *[c.pattern for c in self.constraints],
                *[c.expression for c in self.constraints], prefix="H")
        self.capture_constraints()

        if self.empty():
            yield Problem()
            return

        constraint = self.constraints[0]
        complexity = constraint.complexity()

        if complexity == IMPOSSIBLE:
            return

        if complexity == SATISFIED:
            self._delete(0)
            yield from self.all_solutions()
            return

        if complexity == INSTANTIATION:
            self._delete(0)
            self.substitute(Substitution(constraint))
            if not self.avoids_capture():
                return
            for solution in self.all_solutions():
                yield solution.plus(constraint)
            return

        if complexity == DECOMPOSABLE:
            self._delete(0)
            for child in constraint.children():
                self._insert_constraint(child)
            yield from self.all_solutions()
            return

        if complexity == EFA:
            head = constraint.pattern.child(1)
            arguments = constraint.pattern.children()[2:]
            expression = constraint.expression
            if not isinstance(head, Symbol) or not head.is_metavariable():
                raise InvariantViolation(
                    f"Head of expression function application is not a metavariable: "
                    f"{constraint.pattern}")
            if not arguments:
                raise InvariantViolation(
                    f"Expression function application with no arguments: {constraint.pattern}")
            n = len(arguments)

            yield from self._try_function(head, constant_ef(n, expression))
            for i in range(n):
                yield from self._try_function(head, projection_ef(n, i))
            if expression.num_children() > 0:
                fresh = [s.make_into_a(METAVARIABLE)
                         for s in self._stream.next_n(expression.num_children())]
                yield from self._try_function(
                    head, application_ef(n, fresh, like=expression), fresh)
            return

        raise InvariantViolation(f"Invalid constraint complexity: {complexity}")

    def _try_function(self, head: Symbol, function, fresh=()):
        """
        One branch of the EFA case: head := function. Fresh metavariables
        used by an imitation function are resolved by the recursive
        solutions and folded back into the function before it is recorded.
        """
        branch = self.after_substituting(Substitution(head, function))
        branch.beta_reduce()
        if not branch.avoids_capture():
            return
        for solution in branch.all_solutions():
            value = function
            for symbol in fresh:
                found = next((c for c in solution.constraints
                              if c.pattern.equals(symbol)), None)
                if found is not None:
                    solution._delete(found)
                    value = Substitution(found).applied_to(value)
            yield solution.plus(Constraint(head.copy(), full_beta_reduce(value)))

    def solutions(self) -> Iterator["Problem"]:
        """
        The distinct capture-free solutions: all_solutions() of a copy,
        without those whose values mention a bound variable of the
        expression outside its binder, and without repeats up to alpha
        equivalence.
        """
        seen = []
        for solution in self.copy().all_solutions():
            if any(has_free_bound_markers(c.expression) for c in solution.constraints):
                continue
            if any(solution.alpha_equals(s) for s in seen):
                continue
            seen.append(solution)
            yield solution

    def __repr__(self):
        return "{" + ",".join(repr(c) for c in self.constraints) + "}"
