"""
Unit tests for declaration scopes.

Core claims:
    - A Let declares its symbols from itself to the end of its environment
    - Let-declared symbols get a ticked proper name; others keep their text
    - Redeclaring a symbol in scope is a scope error
    - Canonical bound-variable markers are renamed back, avoiding clashes
"""

from ncompact.core.concepts import Symbol
from ncompact.core.putdown import read, write
from ncompact.core.scoping import (
    assign_proper_names, declared_by, lets, lets_in_scope, rename_bindings, rename_like,
    validate,
)
from ncompact.matching.debruijn import encode
from ncompact.validation import results


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestDeclaredBy:
    def test_let_declares_later_siblings(self):
        env = read("{ (P c) :[Let c] (P c) }")
        before, let, after = env.children()
        assert declared_by(before.child(1)) is None
        assert declared_by(after.child(1)) is let
        assert declared_by(let.child(0)) is let

    def test_scope_reaches_into_nested_environments(self):
        env = read("{ :[Let c] { { (P c) } } }")
        inner = env.child(1).child(0).child(0)
        assert declared_by(inner.child(1)) is env.child(0)

    def test_innermost_declaration_wins(self):
        env = read("{ :[Let c] { :[Let c] (P c) } }")
        inner_let = env.child(1).child(0)
        assert declared_by(env.child(1).child(1).child(1)) is inner_let

    def test_bound_symbols_are_not_declared(self):
        env = read("{ :[Let x] (∀ x , (P x)) }")
        body = env.child(1).body()
        assert declared_by(body.child(1)) is None

    def test_metavariables_are_not_declared(self):
        env = read("{ :[Let X] (P X) }", "X")
        assert declared_by(env.child(1).child(1)) is None


class TestLets:
    def test_lets_and_lets_in_scope(self):
        env = read("{ :[Let a] { :[Let b] (P a b) } [Declare f] }")
        assert [write(x) for x in lets(env)] == ["[Let a]", "[Let b]"]
        target = env.child(1).child(1)
        assert [write(x) for x in lets_in_scope(target)] == ["[Let a]", "[Let b]"]
        assert lets_in_scope(env.child(0)) == []


class TestProperNames:
    def test_let_symbols_get_ticks(self):
        env = read("{ :[Let c] (P c d) }")
        assign_proper_names(env)
        p = env.child(1)
        assert p.child(1).proper_name() == "c'"
        assert p.child(2).proper_name() == "d"
        assert p.child(0).proper_name() == "P"

    def test_proper_names_survive_copying(self):
        env = read("{ :[Let c] (P c) }")
        assign_proper_names(env)
        assert env.child(1).copy().child(1).proper_name() == "c'"


class TestRenameBindings:
    def test_original_names_come_back(self):
        e = encode(read("(∀ x , (P x))"))
        assert write(e) == "(∀ ⟨0⟩ , (P ⟨0⟩))"
        rename_bindings(e)
        assert write(e) == "(∀ x , (P x))"

    def test_clashing_name_is_replaced(self):
        e = encode(read("(∀ x , (P x z))"))
        e.child(1).attributes["original_name"] = "z"
        rename_bindings(e)
        assert write(e) == "(∀ z1 , (P z1 z))"

    def test_plain_variables_are_left_alone(self):
        e = read("(∀ x , (P x))")
        rename_bindings(e)
        assert write(e) == "(∀ x , (P x))"


class TestRenameLike:
    def test_names_follow_the_model(self):
        e = read("(∀ y , (∃ z , (P y z)))")
        rename_like(e, read("(∀ x , (∃ w , (P x w)))"))
        assert write(e) == "(∀ x , (∃ w , (P x w)))"

    def test_clashing_name_is_kept(self):
        e = read("(∀ y , (P y x))")
        rename_like(e, read("(∀ x , (P x c))"))
        assert write(e) == "(∀ y , (P y x))"

    def test_different_shapes_are_left_alone(self):
        e = read("(∀ y , (P y))")
        rename_like(e, read("(∀ x y , (P x))"))
        rename_like(None, e)
        assert write(e) == "(∀ y , (P y))"


class TestValidate:
    def test_redeclaration_is_flagged(self):
        env = read("{ :[Let c] { :[Let c] (P c) } }")
        offenders = validate(env)
        inner_let = env.child(1).child(0)
        assert offenders == [inner_let]
        assert inner_let.scratch["scope_errors"] == ["c is already declared"]
        r = results.result(inner_let)
        assert r.result == results.INVALID and r.reason == results.SCOPE
        assert results.result(env.child(0)) is None

    def test_sibling_scopes_do_not_clash(self):
        env = read("{ { :[Let c] (P c) } { :[Let c] (Q c) } }")
        assert validate(env) == []

    def test_implicit_declarations(self):
        env = read("{ :[Let c] (P c d) (∀ x , (Q x)) }")
        validate(env)
        assert env.scratch["implicitly_declared"] == {"d"}

    def test_symbol_text_is_untouched(self):
        env = read("{ :[Let c] (P c) }")
        validate(env)
        assert isinstance(env.child(1).child(1), Symbol)
        assert write(env) == "{ [Let c] (P c) }"
