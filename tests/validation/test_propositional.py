"""
Unit tests for propositional forms and validity.

Core claims:
    - Alpha-equivalent expressions have the same propositional text;
      differently declared symbols with the same text do not
    - Environments fold from the right: givens are hypotheses, claims conjuncts
    - Rules, partial instantiations, Declares and ignored nodes contribute nothing
    - In preemie mode the erased Lets' symbols are written by their plain text
"""

import pytest

from ncompact.core.concepts import RULE
from ncompact.core.putdown import read
from ncompact.core.scoping import assign_proper_names
from ncompact.validation import results
from ncompact.validation.propositional import (
    FALSE, TRUE, PropositionalError, deleted_lets, is_satisfiable, is_valid,
    nnf, prop_form, prop_text, to_cnf,
)


A, B, C = ("atom", "A"), ("atom", "B"), ("atom", "C")


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestPropText:
    def test_alpha_equivalent_expressions_agree(self):
        assert prop_text(read("(∀ x , (P x))")) == prop_text(read("(∀ y , (P y))"))
        assert prop_text(read("(∀ x , (P x))")) == "(∀ ⟨0⟩ , (P ⟨0⟩))"

    def test_proper_names(self):
        env = read("{ :[Let c] (P c) }")
        assign_proper_names(env)
        assert prop_text(env.child(1)) == "(P c')"
        assert prop_text(env.child(0)) == "[Let c']"

    def test_preemie_mode_erases_deleted_lets(self):
        env = read("{ :[Let c] (P c) }")
        assign_proper_names(env)
        let = env.child(0)
        assert prop_text(env.child(1), check_preemies=True, deleted=[let]) == "(P c)"
        assert prop_text(env.child(1), check_preemies=True) == "(P c')"

    def test_metavariables_are_marked(self):
        assert prop_text(read("(P X)", "X")) == "(P ?X)"

    def test_environment_has_no_text(self):
        with pytest.raises(PropositionalError):
            prop_text(read("{ A }"))


class TestPropForm:
    def test_fold(self):
        form = prop_form(read("{ :A B :C D }"))
        assert form == ("implies", A, ("and", B, ("implies", C, ("and", ("atom", "D"), TRUE))))

    def test_accessibles_are_hypotheses(self):
        env = read("{ :A B C }")
        form = prop_form(env.child(2))
        assert form == ("implies", A, ("implies", B, C))

    def test_skipped_children(self):
        env = read("{ [Declare f] :{ :A B } C D }")
        env.child(1).make_into_a(RULE)
        env.child(3).ignore = True
        assert prop_form(env) == ("and", C, TRUE)

    def test_deleted_lets(self):
        env = read("{ :[Let a] { :[Let b] (P a b) } }")
        inner = env.child(1)
        assert [d.symbol_names() for d in deleted_lets(inner)] == [["a"], ["b"]]
        assert [d.symbol_names() for d in deleted_lets(inner.child(1))] == [["a"], ["b"]]

    def test_preemie_form_drops_the_lets(self):
        env = read("{ :[Let c] (P c) }")
        assign_proper_names(env)
        assert prop_form(env, check_preemies=True) == ("and", ("atom", "(P c)"), TRUE)


class TestCnf:
    def test_nnf_pushes_negation(self):
        assert nnf(("not", ("and", A, B))) == ("or", ("not", A), ("not", B))
        assert nnf(("not", ("implies", A, B))) == ("and", A, ("not", B))

    def test_constants_fold(self):
        assert nnf(("and", A, TRUE)) == A
        assert nnf(("or", A, TRUE)) == TRUE
        assert nnf(("not", TRUE)) == FALSE

    def test_distribution(self):
        cnf = to_cnf(("or", A, ("and", B, C)))
        assert sorted(sorted(c) for c in cnf) == [
            [(True, "A"), (True, "B")], [(True, "A"), (True, "C")]]

    def test_tautologies_removed(self):
        assert to_cnf(("or", A, ("not", A))) == []

    def test_false_is_the_empty_clause(self):
        assert to_cnf(FALSE) == [frozenset()]


class TestValidity:
    @pytest.mark.parametrize("formula, expected", [
        (("implies", A, A), True),
        (A, False),
        (("implies", A, ("implies", ("implies", A, B), B)), True),
        (("implies", ("implies", A, B), B), False),
        (("or", A, ("not", A)), True),
        (TRUE, True),
        (FALSE, False),
    ])
    def test_is_valid(self, formula, expected):
        assert is_valid(formula) == expected

    def test_satisfiable(self):
        assert is_satisfiable([frozenset({(True, "A")})])
        assert not is_satisfiable([frozenset({(True, "A")}), frozenset({(False, "A")})])
        assert is_satisfiable([])

    def test_step_limit_raises(self):
        cnf = [frozenset({(s, "A"), (t, "B")}) for s in (True, False) for t in (True, False)]
        with pytest.raises(PropositionalError):
            is_satisfiable(cnf, max_steps=1)
