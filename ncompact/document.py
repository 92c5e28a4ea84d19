"""
A document: library content followed by the user's content.

    root = { lib1 contents ... libk contents  { user content } }

Given environments at the top level of a library are rules. The caches
user_propositions and domains_processed belong to the Document; they are
filled once and only a new Document starts over.
"""

from .core.concepts import (
    FOR_SOME, GIVEN, INST, PART, RULE, Declaration, Environment,
)
from .core.scoping import assign_proper_names
from .formula import declared_constants, mark_metavariables


class Document:
    def __init__(self, user, libs=()):
        libs = [Environment(*[lc.copy() for lc in lib]) if isinstance(lib, list)
                else lib.copy() for lib in libs]
        self.user = user.copy() if isinstance(user, Environment) else Environment(user.copy())
        self.root = Environment()
        constants = declared_constants(*libs, self.user)
        for lib in libs:
            contents = lib.children() if isinstance(lib, Environment) \
                and not lib.is_given() else [lib]
            for lc in contents:
                self.root.push_child(lc)
                if isinstance(lc, Environment) and lc.is_given():
                    lc.make_into_a(RULE)
                    mark_metavariables(lc, constants)
        self.root.push_child(self.user)
        self.constants = constants
        self.user_propositions = None
        self.domains_processed = False
        self._insert_for_some_bodies()
        assign_proper_names(self.root)

    def _insert_for_some_bodies(self):
        """After [ForSome c , P(c)] the body P(c) holds: insert a given copy."""
        for d in self.root.descendants_satisfying(
                lambda x: isinstance(x, Declaration) and x.kind == FOR_SOME
                and x.body() is not None):
            if d.has_ancestor_satisfying(lambda a: a.is_a(RULE)):
                continue
            d.parent().insert_child(d.body().copy().make_into_a(GIVEN),
                                    d.index_in_parent() + 1)

    def formulas(self) -> list:
        """Rules and partial instantiations, in document order."""
        return self.root.descendants_satisfying(lambda d: d.is_a_formula())

    def instantiations(self) -> list:
        return self.root.descendants_satisfying(lambda d: d.is_a(INST) or d.is_a(PART))

    def __repr__(self):
        return repr(self.root)
