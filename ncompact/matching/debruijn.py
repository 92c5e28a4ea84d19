"""
Canonical names for bound variables.

Matching compares bindings structurally, so two alpha-equivalent
expressions must look identical to it. encode() renames every variable
bound by a Binding to a marker naming its binder depth:

    (∀ x , (∃ y , (P x y)))   ->   (∀ ⟨0⟩ , (∃ ⟨1⟩ , (P ⟨0⟩ ⟨1⟩)))

A binder binding several variables uses consecutive levels. The name a
variable had before encoding is kept in its "original_name" attribute so
that instantiations can be given readable names again afterwards.
"""

import re

from ..core.concepts import Binding, Symbol


_MARKER = re.compile(r"^⟨\d+⟩$")


def marker_text(level: int) -> str:
    return f"⟨{level}⟩"


def is_bound_marker(symbol) -> bool:
    return isinstance(symbol, Symbol) and bool(_MARKER.match(symbol.text))


def encode(lc):
    """A copy of lc with every bound variable renamed by binder depth."""
    result = lc.copy()
    _encode(result, {}, 0)
    return result


def _encode(lc, names: dict, depth: int):
    if isinstance(lc, Symbol):
        if not lc.is_metavariable() and lc.text in names:
            lc.text = names[lc.text]
        return
    if not isinstance(lc, Binding):
        for child in lc.children():
            _encode(child, names, depth)
        return
    _encode(lc.head(), names, depth)
    inner = dict(names)
    variables = lc.bound_variables()
    for offset, variable in enumerate(variables):
        if isinstance(variable, Symbol) and not variable.is_metavariable():
            variable.attributes.setdefault("original_name", variable.text)
            inner[variable.text] = marker_text(depth + offset)
            variable.text = inner[variable.text]
        else:
            _encode(variable, names, depth)
    _encode(lc.body(), inner, depth + len(variables))


def alpha_equivalent(a, b) -> bool:
    return encode(a).equals(encode(b))


def has_free_bound_markers(lc) -> bool:
    """True if a marker occurs in lc outside every binder of lc that binds it."""
    return any(is_bound_marker(d) and d.binder(within=lc) is None
               for d in lc.descendants() if isinstance(d, Symbol))
