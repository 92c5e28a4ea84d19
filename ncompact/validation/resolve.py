"""
Ground binary resolution: the inference rule of the saturation loop.

Literals are (sign, atom) pairs: (True, "p") is p, (False, "p") is ~p.
With no variables there is nothing to unify: two clauses resolve on every
atom that occurs positively in one and negatively in the other.

If a resolvent is empty, a contradiction has been found.
"""

from .engine import Clause


def complement(lit: tuple) -> tuple:
    return (not lit[0], lit[1])


def is_tautology(clause: Clause) -> bool:
    """Contains some atom both positively and negatively."""
    return any(complement(lit) in clause.literals for lit in clause.literals)


def resolve(c1: Clause, c2: Clause) -> list:
    """
    All non-tautologous binary resolvents of two ground clauses.
    """
    results = []
    for lit in c1.literals:
        if complement(lit) not in c2.literals:
            continue
        resolvent = Clause(
            literals=(c1.literals - {lit}) | (c2.literals - {complement(lit)}),
            source=(c1.name, c2.name),
        )
        if not is_tautology(resolvent):
            results.append(resolvent)
    return results


def clause_subsumes(c1: Clause, c2: Clause) -> bool:
    """c1 subsumes c2 if c1's literals are a proper subset of c2's."""
    if len(c1.literals) >= len(c2.literals):
        return False
    return c1.literals.issubset(c2.literals)
