"""
Scopes of declarations.

A declaration's scope is the declaration itself plus everything after it
in its parent environment. Symbols inside the scope of a Let declaring
them are local constants; they get a proper name (the text with a tick,
c -> c') so that they are never confused with a symbol of the same text
used elsewhere.
"""

from .concepts import (
    FOR_SOME, LET, Binding, Declaration, Environment, Symbol,
)
from ..matching.debruijn import is_bound_marker
from ..matching.symbols import NewSymbolStream


def lets(lc) -> list:
    """Every Let declaration inside lc, in document order."""
    return lc.descendants_satisfying(
        lambda d: isinstance(d, Declaration) and d.is_a_let())


def lets_in_scope(lc) -> list:
    """The Lets whose scope contains lc (other than lc itself)."""
    return [a for a in lc.accessibles()
            if isinstance(a, Declaration) and a.is_a_let()]


def declared_by(symbol: Symbol):
    """
    The innermost Let or ForSome declaration whose scope contains this
    symbol and which declares its text, or None. Bound and metavariable
    occurrences are never declared.
    """
    if symbol.is_metavariable() or symbol.binder() is not None:
        return None
    for a in symbol.ancestors()[1:]:
        if isinstance(a, Declaration) and a.kind in (LET, FOR_SOME) \
                and symbol.text in a.symbol_names():
            return a
    for a in reversed(symbol.accessibles()):
        if isinstance(a, Declaration) and a.kind in (LET, FOR_SOME) \
                and symbol.text in a.symbol_names():
            return a
    return None


def assign_proper_names(root):
    """
    Give every symbol declared by a Let its proper name. Symbols that are
    not declared by a Let keep any proper name they already carry.
    """
    for d in root.descendants():
        if not isinstance(d, Symbol):
            continue
        declaration = declared_by(d)
        if declaration is not None and declaration.is_a_let():
            d.attributes["proper_name"] = d.text + "'"


def rename_bindings(root):
    """
    Give canonically named bound variables (see matching.debruijn) their
    original names back, or a fresh name where the original would clash
    with a symbol already used in the body.
    """
    for binding in root.descendants_satisfying(lambda d: isinstance(d, Binding)):
        for variable in binding.bound_variables():
            if not isinstance(variable, Symbol) or not is_bound_marker(variable):
                continue
            occurrences = [d for d in binding.body().descendants()
                           if isinstance(d, Symbol) and d.text == variable.text
                           and d.binder(within=binding) is binding]
            others = {d.text for d in binding.descendants()
                      if isinstance(d, Symbol) and d is not variable
                      and not any(d is o for o in occurrences)}
            wanted = variable.attributes.get("original_name", "x")
            if wanted in others or is_bound_marker(Symbol(wanted)):
                wanted = NewSymbolStream(binding, prefix=wanted).next().text
            for s in occurrences + [variable]:
                s.text = wanted


def rename_like(lc, model):
    """
    Give the bound variables of lc the names model uses in the same
    places, wherever the two have the same shape and the name is free
    in that binding.
    """
    if type(lc) is not type(model) or lc.num_children() != model.num_children():
        return
    if isinstance(lc, Binding):
        for variable, wanted in zip(lc.bound_variables(), model.bound_variables()):
            if not isinstance(variable, Symbol) or not isinstance(wanted, Symbol) \
                    or variable.text == wanted.text:
                continue
            occurrences = [d for d in lc.body().descendants()
                           if isinstance(d, Symbol) and d.text == variable.text
                           and d.binder(within=lc) is lc]
            others = {d.text for d in lc.descendants()
                      if isinstance(d, Symbol) and d is not variable
                      and not any(d is o for o in occurrences)}
            if wanted.text in others:
                continue
            for s in occurrences + [variable]:
                s.text = wanted.text
    for a, b in zip(lc.children(), model.children()):
        rename_like(a, b)


def validate(root) -> list:
    """
    Check the declarations under root. Redeclaring a symbol that is
    already declared in that place is an error: the offending declaration
    gets a "scope_errors" list and an invalid/scope result. Free symbols
    that nothing declares are collected on root as implicitly declared.
    Returns the offending declarations.
    """
    from ..validation import results

    offenders = []
    for declaration in root.descendants_satisfying(
            lambda d: isinstance(d, Declaration) and d.kind in (LET, FOR_SOME)):
        earlier = [a for a in declaration.accessibles()
                   if isinstance(a, Declaration) and a.kind in (LET, FOR_SOME)]
        for name in declaration.symbol_names():
            if any(name in a.symbol_names() for a in earlier):
                declaration.scratch.setdefault("scope_errors", []).append(
                    f"{name} is already declared")
        if declaration.scratch.get("scope_errors"):
            results.set_result(declaration, results.INVALID, results.SCOPE)
            offenders.append(declaration)
    implicit = set()
    for d in root.descendants():
        if isinstance(d, Symbol) and not d.is_metavariable() and d.binder() is None \
                and not _is_operator(d) and declared_by(d) is None:
            implicit.add(d.text)
    root.scratch["implicitly_declared"] = implicit
    return offenders


def _is_operator(symbol: Symbol) -> bool:
    parent = symbol.parent()
    return parent is not None and not isinstance(parent, (Environment, Declaration)) \
        and symbol.index_in_parent() == 0
