"""
Property-based and unit tests for matching problems.

Core claims:
    - Constraints are kept sorted by complexity, ties by insertion order,
      without duplicates
    - Every solution, applied to the pattern, gives back the expression
      (up to alpha equivalence): soundness
    - No solution lets a binder capture a variable of the expression
    - f(x,y) against k+3 has exactly one solution, P(3) against 3=3 four
    - Malformed input is a MatchingError, impossible states an
      InvariantViolation
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ncompact.core.concepts import (
    METAVARIABLE, Application, Binding, Symbol, efa, metavariable,
)
from ncompact.core.putdown import read, write
from ncompact.matching import (
    Constraint, InvariantViolation, MatchingError, Problem, Substitution,
    alpha_equivalent,
)


# ── Helpers ──────────────────────────────────────────────────────────────────

def solve(pattern_text, expression_text, metavariables):
    pattern = read(pattern_text, metavariables)
    expression = read(expression_text)
    return pattern, expression, list(Problem(pattern, expression).solutions())


def values(solutions, name):
    return [s.value_of(name) for s in solutions]


# ── Generators ───────────────────────────────────────────────────────────────

LEAVES = ["a", "b", "c"]
OPERATORS = ["f", "g"]


@st.composite
def expression(draw, depth=2):
    if depth == 0 or draw(st.booleans()):
        return Symbol(draw(st.sampled_from(LEAVES)))
    operator = Symbol(draw(st.sampled_from(OPERATORS)))
    arity = draw(st.integers(1, 2))
    return Application(operator, *[draw(expression(depth - 1)) for _ in range(arity)])


@st.composite
def first_order_pair(draw):
    """An expression, and a pattern made from it by turning some leaves into metavariables."""
    e = draw(expression())
    chosen = draw(st.sets(st.sampled_from(LEAVES)))
    pattern = e.copy()
    for d in list(pattern.descendants()):
        if isinstance(d, Symbol) and d.text in chosen:
            d.text = "M" + d.text
            d.make_into_a(METAVARIABLE)
    return pattern, e


@st.composite
def binding_expression(draw):
    """(∀ v , e) for a generated e, v one of the leaves."""
    variable = Symbol(draw(st.sampled_from(LEAVES)))
    return Binding(Symbol("∀"), variable, draw(expression()))


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestConstraintSet:
    def test_sorted_by_complexity(self):
        p = Problem(
            read("(f A)", "A"), read("(f b)"),
            read("A", "A"), read("c"),
            read("a"), read("a"),
        )
        assert [c.complexity() for c in p.constraints] == [1, 2, 3]

    def test_ties_keep_insertion_order(self):
        p = Problem(read("A", "A"), read("x"), read("B", "B"), read("y"))
        assert [c.pattern.text for c in p.constraints] == ["A", "B"]

    def test_no_duplicates(self):
        p = Problem(read("A", "A"), read("x"), read("A", "A"), read("x"))
        assert len(p) == 1
        assert p.length == 1

    def test_mixed_arguments(self):
        c = Constraint(metavariable("A"), Symbol("x"))
        q = Problem(metavariable("B"), Symbol("y"))
        p = Problem(c, q, [metavariable("C"), Symbol("z")])
        assert len(p) == 3

    def test_remove_by_value_and_index(self):
        c = Constraint(metavariable("A"), Symbol("x"))
        p = Problem(c, metavariable("B"), Symbol("y"))
        p.remove(c)
        assert len(p) == 1
        p.remove(0)
        assert p.empty()

    def test_plus_and_without_leave_receiver_alone(self):
        p = Problem(metavariable("A"), Symbol("x"))
        bigger = p.plus(metavariable("B"), Symbol("y"))
        smaller = p.without(0)
        assert len(p) == 1 and len(bigger) == 2 and len(smaller) == 0

    def test_equals_ignores_order(self):
        a = Problem(metavariable("A"), Symbol("x"), metavariable("B"), Symbol("y"))
        b = Problem(metavariable("B"), Symbol("y"), metavariable("A"), Symbol("x"))
        assert a.equals(b)
        assert not a.equals(b.without(0))

    def test_copy_is_independent(self):
        p = Problem(metavariable("A"), Symbol("x"))
        q = p.copy()
        q.add(metavariable("B"), Symbol("y"))
        assert len(p) == 1


class TestComplexity:
    @pytest.mark.parametrize("pattern, expression, mvs, expected", [
        ("(f a)", "(g a)", "", 0),
        ("(f A)", "x", "A", 0),
        ("(f A)", "(f a b)", "A", 0),
        ("(f a)", "(f a)", "", 1),
        ("A", "(f a)", "A", 2),
        ("(f A)", "(f a)", "A", 3),
        ("(∀ x , A)", "(∀ y , b)", "A", 3),
        ("(@ P a)", "(f a)", "P", 4),
    ])
    def test_complexity(self, pattern, expression, mvs, expected):
        assert Constraint(read(pattern, mvs), read(expression)).complexity() == expected

    def test_metavariable_against_environment_is_impossible(self):
        assert Constraint(metavariable("A"), read("{ a }")).complexity() == 0

    def test_children(self):
        c = Constraint(read("(f A b)", "A"), read("(f a b)"))
        assert [c2.complexity() for c2 in c.children()] == [1, 2, 1]


class TestUsingSolutions:
    def test_applied_to_is_simultaneous(self):
        p = Problem(metavariable("A"), read("B"), metavariable("B"), read("A"))
        assert p.can_be_applied()
        result = p.applied_to(read("(f A B)", "A B"))
        assert write(result) == "(f B A)"
        assert not any(d.is_metavariable() for d in result.descendants()
                       if isinstance(d, Symbol))

    def test_apply_to_replaces_in_place(self):
        env = read("{ (f A) }", "A")
        target = env.child(0)
        Problem(metavariable("A"), read("b")).apply_to(target)
        assert write(env) == "{ (f b) }"

    def test_apply_to_keeps_given_status_of_the_position(self):
        env = read("{ :A B }", "A B")
        result = Problem(metavariable("A"), read("x"), metavariable("B"), read("y")).applied_to(env)
        assert write(result) == "{ :x y }"

    def test_applied_to_a_problem(self):
        solution = Problem(metavariable("A"), read("b"))
        target = Problem(read("(f A)", "A"), read("(f b)"))
        assert solution.applied_to(target).constraints[0].complexity() == 1

    def test_value_of(self):
        p = Problem(metavariable("A"), read("(g b)"))
        assert write(p.value_of("A")) == "(g b)"
        assert write(p.value_of(metavariable("A"))) == "(g b)"
        assert p.value_of("B") is None

    def test_cannot_apply_to_garbage(self):
        with pytest.raises(MatchingError):
            Problem().applied_to(42)


class TestFirstOrder:
    def test_f_of_x_y_against_k_plus_3(self):
        pattern, expression, solutions = solve("(f x y)", "(+ k 3)", "f x y")
        assert len(solutions) == 1
        assert {name: write(solutions[0].value_of(name)) for name in "fxy"} == \
            {"f": "+", "x": "k", "y": "3"}
        assert solutions[0].applied_to(pattern).equals(expression)

    def test_simple(self):
        _, _, solutions = solve("(f A (g B))", "(f a (g b))", "A B")
        assert len(solutions) == 1
        assert write(solutions[0].value_of("A")) == "a"
        assert write(solutions[0].value_of("B")) == "b"

    def test_repeated_metavariable_must_agree(self):
        assert len(solve("(f A A)", "(f a a)", "A")[2]) == 1
        assert solve("(f A A)", "(f a b)", "A")[2] == []

    def test_no_match_is_empty_not_an_error(self):
        assert solve("(f A)", "(g a)", "A")[2] == []

    def test_bindings_match_up_to_alpha(self):
        _, _, solutions = solve("(∀ x , (P x A))", "(∀ y , (P y b))", "A")
        assert len(solutions) == 1
        assert write(solutions[0].value_of("A")) == "b"


class TestHigherOrder:
    def test_constant_function_of_two_arguments(self):
        _, _, solutions = solve("(@ f x y)", "(+ k 3)", "f")
        assert len(solutions) == 1
        assert alpha_equivalent(solutions[0].value_of("f"), read("(𝝺 u v , (+ k 3))"))

    def test_p_of_3_against_3_equals_3(self):
        _, _, solutions = solve("(@ P 3)", "(= 3 3)", "P")
        assert len(solutions) == 4
        expected = ["(𝝺 v , (= 3 3))", "(𝝺 v , (= v 3))",
                    "(𝝺 v , (= 3 v))", "(𝝺 v , (= v v))"]
        for text in expected:
            assert sum(alpha_equivalent(v, read(text))
                       for v in values(solutions, "P")) == 1

    def test_efa_against_a_binding(self):
        pattern, expression, solutions = solve("(@ P a)", "(∀ y , (Q y a))", "P")
        assert len(solutions) == 2
        for text in ["(𝝺 v , (∀ y , (Q y a)))", "(𝝺 v , (∀ y , (Q y v)))"]:
            assert sum(alpha_equivalent(v, read(text))
                       for v in values(solutions, "P")) == 1
        for s in solutions:
            assert alpha_equivalent(s.applied_to(pattern), expression)

    def test_raw_solutions_include_repeats(self):
        p = Problem(read("(@ P 3)", "P"), read("(= 3 3)"))
        assert len(list(p.copy().all_solutions())) == 5

    def test_solutions_are_sound(self):
        pattern, expression, solutions = solve("(@ P 3)", "(= 3 3)", "P")
        for s in solutions:
            assert alpha_equivalent(s.applied_to(pattern), expression)


class TestCapture:
    def test_bound_variable_cannot_escape(self):
        assert solve("(∀ x , A)", "(∀ y , y)", "A")[2] == []

    def test_closed_body_is_fine(self):
        _, _, solutions = solve("(∀ x , A)", "(∀ y , c)", "A")
        assert [write(s.value_of("A")) for s in solutions] == ["c"]

    def test_efa_under_binder_keeps_the_dependency(self):
        pattern, expression, solutions = solve("(∀ x , (@ P x))", "(∀ y , (= y 0))", "P")
        assert len(solutions) == 1
        assert alpha_equivalent(solutions[0].value_of("P"), read("(𝝺 v , (= v 0))"))
        assert alpha_equivalent(solutions[0].applied_to(pattern), expression)

    def test_capture_constraints_are_collected(self):
        p = Problem(read("(∀ x , (P A B))", "A B"), read("(∀ y , (P c d))"))
        assert len(p.capture_constraints()) == 2
        assert p.avoids_capture()

    def test_substitute_carries_capture_constraints(self):
        p = Problem(read("(∀ x , (P A))", "A"), read("(∀ y , (P c))"))
        p.capture_constraints()
        bad = p.constraints[0].expression.child(1)
        p.substitute(Substitution(metavariable("A"), bad.copy()))
        assert not p.avoids_capture()
        # a public add starts the capture constraints over from the patterns
        p.add(metavariable("Z"), read("z"))
        assert len(p.capture_constraints()) == 0


class TestErrors:
    def test_pattern_without_expression(self):
        with pytest.raises(MatchingError):
            Problem(read("A", "A"))

    def test_not_a_constraint(self):
        with pytest.raises(MatchingError):
            Problem(42)
        with pytest.raises(MatchingError):
            Problem().add("A")

    def test_metavariable_in_expression(self):
        with pytest.raises(MatchingError):
            Constraint(read("A"), read("B", "B"))

    def test_bad_substitution(self):
        with pytest.raises(MatchingError):
            Substitution(read("a"), read("b"))
        with pytest.raises(MatchingError):
            Substitution(read("a"))

    def test_efa_head_must_be_a_metavariable(self):
        p = Problem(read("(@ f A)", "A"), read("b"))
        with pytest.raises(InvariantViolation):
            list(p.solutions())


# ── Property-based tests ─────────────────────────────────────────────────────

class TestMatchingProperties:

    @given(first_order_pair())
    @settings(max_examples=100, deadline=None)
    def test_first_order_has_exactly_one_sound_solution(self, pair):
        pattern, e = pair
        solutions = list(Problem(pattern, e).solutions())
        assert len(solutions) == 1
        assert solutions[0].applied_to(pattern).equals(e)

    @given(expression(), st.sampled_from(LEAVES))
    @settings(max_examples=40, deadline=None)
    def test_efa_solutions_are_sound(self, e, argument):
        pattern = efa(metavariable("P"), Symbol(argument))
        solutions = list(Problem(pattern, e).solutions())
        assert solutions
        for s in solutions:
            assert alpha_equivalent(s.applied_to(pattern), e)

    @given(expression())
    @settings(max_examples=40, deadline=None)
    def test_solutions_never_repeat(self, e):
        pattern = efa(metavariable("P"), Symbol("a"))
        solutions = list(Problem(pattern, e).solutions())
        for i, s in enumerate(solutions):
            assert not any(s.alpha_equals(t) for t in solutions[i + 1:])

    @given(binding_expression(), st.sampled_from(LEAVES))
    @settings(max_examples=40, deadline=None)
    def test_efa_solutions_against_bindings_are_sound(self, e, argument):
        pattern = efa(metavariable("P"), Symbol(argument))
        solutions = list(Problem(pattern, e).solutions())
        assert solutions
        for s in solutions:
            assert alpha_equivalent(s.applied_to(pattern), e)
