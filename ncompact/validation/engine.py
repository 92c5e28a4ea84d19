"""
The given-clause saturation loop.

Pick a focus from set_of_support, combine it with everything in usable,
add new results back to set_of_support. Run to exhaustion on a finite
set of ground clauses this decides satisfiability: the clauses are
unsatisfiable exactly when the empty clause shows up.

Clauses:
    A Clause is a frozenset of ground literals (sign, atom), read as a
    disjunction. The empty clause [] is a contradiction.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class Clause:
    """A disjunction of ground literals."""
    literals: frozenset
    source: tuple = ()
    step: int = 0

    @property
    def name(self):
        if self.is_empty:
            return "[]"
        ordered = sorted(self.literals, key=lambda lit: (lit[1], not lit[0]))
        return " | ".join(atom if sign else "~" + atom for sign, atom in ordered)

    @property
    def is_empty(self):
        return not self.literals

    def __hash__(self):
        return hash(self.literals)

    def __eq__(self, other):
        if not isinstance(other, Clause):
            return NotImplemented
        return self.literals == other.literals

    def __repr__(self):
        return f"Clause({self.name})"


@dataclass
class SaturationState:
    """
    set_of_support: clauses not yet focused on (the frontier)
    usable:         clauses already focused on
    seen:           every clause ever kept, so regenerated ones are skipped
    history:        one record per step
    """
    set_of_support: deque = field(default_factory=deque)
    usable: list = field(default_factory=list)
    seen: set = field(default_factory=set)
    history: list = field(default_factory=list)
    step: int = 0
    halted: bool = False
    halt_reason: str = ""

    @classmethod
    def from_clauses(cls, clauses) -> "SaturationState":
        state = cls()
        for clause in clauses:
            if clause not in state.seen:
                state.seen.add(clause)
                state.set_of_support.append(clause)
        return state

    def clauses(self) -> list:
        return list(self.set_of_support) + self.usable

    def discard(self, clause: Clause):
        if clause in self.set_of_support:
            self.set_of_support.remove(clause)
        if clause in self.usable:
            self.usable.remove(clause)


def found_empty_clause(state: SaturationState) -> bool:
    """Has the empty clause been derived?"""
    return any(c.is_empty for c in state.clauses())


def shortest_first(set_of_support) -> Clause:
    """Unit preference: focus on the clause with the fewest literals."""
    return min(set_of_support, key=lambda c: len(c.literals))


def _pick_focus(state: SaturationState, choose_focus_fn) -> Clause:
    if choose_focus_fn is None:
        return state.set_of_support.popleft()
    focus = choose_focus_fn(state.set_of_support)
    state.set_of_support.remove(focus)
    return focus


def saturation_step(
    state: SaturationState,
    combine_fn: Callable,
    choose_focus_fn: Optional[Callable] = None,
    subsumes_fn: Optional[Callable] = None,
    prune_fn: Optional[Callable] = None,
    verbose: bool = False,
) -> SaturationState:
    """
    One step of the loop: pick a focus, combine it with every usable
    clause, keep the results that are new, move the focus to usable.

    Args:
        state:            current SaturationState
        combine_fn:       combine_fn(x, y) -> list[Clause]
        choose_focus_fn:  choose_focus_fn(set_of_support) -> Clause.
                          Default: FIFO (breadth-first).
        subsumes_fn:      subsumes_fn(a, b) -> bool, a subsumes b.
                          Used forwards on each result and backwards on
                          the clauses already kept.
        prune_fn:         prune_fn(clause, state) -> bool, discard it.
        verbose:          print each step.
    """
    if not state.set_of_support:
        state.halted = True
        state.halt_reason = "set_of_support empty"
        return state

    focus = _pick_focus(state, choose_focus_fn)
    state.step += 1
    if verbose:
        print(f"\nStep {state.step}: focus {focus.name}")

    kept = []
    for partner in state.usable:
        for result in combine_fn(focus, partner):
            if result in state.seen:
                continue
            if subsumes_fn and any(subsumes_fn(k, result)
                                   for k in [focus] + state.clauses() + kept):
                if verbose:
                    print(f"  subsumed  {result.name}")
                continue
            if prune_fn and prune_fn(result, state):
                if verbose:
                    print(f"  pruned    {result.name}")
                continue
            result.step = state.step
            state.seen.add(result)
            kept.append(result)
            if verbose:
                print(f"  kept      {result.name}   ({focus.name} with {partner.name})")

    if subsumes_fn:
        for new in kept:
            for old in [c for c in state.clauses() if subsumes_fn(new, c)]:
                state.discard(old)
                if verbose:
                    print(f"  dropped   {old.name}, subsumed by {new.name}")

    state.usable.append(focus)
    state.set_of_support.extend(kept)
    state.history.append({
        "step": state.step,
        "focus": focus.name,
        "produced": [c.name for c in kept],
        "sos": len(state.set_of_support),
        "usable": len(state.usable),
    })
    if verbose:
        print(f"  {len(state.set_of_support)} in set of support, {len(state.usable)} usable")
    return state


def saturate(
    state: SaturationState,
    combine_fn: Callable,
    max_steps: Optional[int] = 10000,
    stop_fn: Optional[Callable] = None,
    **kwargs,
) -> SaturationState:
    """
    Step until the state halts, stop_fn(state) holds, or max_steps steps
    have been taken (None for no limit). Running out of steps leaves
    state.halted False. Other keyword arguments go to saturation_step.
    """
    while not state.halted and (max_steps is None or state.step < max_steps):
        if stop_fn is not None and stop_fn(state):
            state.halted = True
            state.halt_reason = "stop condition met"
            break
        state = saturation_step(state, combine_fn, **kwargs)
    return state
