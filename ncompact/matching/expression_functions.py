"""
Expression functions and beta reduction.

An expression function is a lambda (𝝺 x1 ... xn , body); applying one to
arguments with an EFA (@ (𝝺 x1 ... xn , body) a1 ... an) and beta
reducing replaces each free xi in body by ai, renaming bound variables
of body where needed so that no free symbol of an ai gets captured.

The three kinds of function the higher-order matcher tries for a
metavariable head applied to n arguments:

    constant_ef(n, e)         𝝺 x1..xn , e
    projection_ef(n, i)       𝝺 x1..xn , xi
    application_ef(n, Hs, e)  𝝺 x1..xn , (same shape as e whose children are
                              (@ H1 x1..xn) ... (@ Hk x1..xn))
"""

from ..core.concepts import (
    GIVEN, Application, Binding, Symbol,
    efa, is_a_lambda, is_an_efa, lambda_expression,
)
from .errors import InvariantViolation
from .symbols import NewSymbolStream


def _parameters(n: int, *avoid) -> list:
    return NewSymbolStream(*avoid, prefix="x").next_n(n)


def constant_ef(n: int, expression) -> Binding:
    return lambda_expression(_parameters(n, expression), expression.copy())


def projection_ef(n: int, i: int) -> Binding:
    if not 0 <= i < n:
        raise InvariantViolation(f"Projection index {i} out of range for arity {n}")
    parameters = _parameters(n)
    return lambda_expression(parameters, parameters[i].copy())


def application_ef(n: int, metavariables: list, like=None) -> Binding:
    """
    The imitation function: its body has one child per metavariable,
    each applied to all the parameters. The body is a Binding if like is
    one, otherwise an Application.
    """
    parameters = _parameters(n, *metavariables)
    children = [efa(m.copy(), *[p.copy() for p in parameters]) for m in metavariables]
    body = Binding(*children) if isinstance(like, Binding) else Application(*children)
    return lambda_expression(parameters, body)


def is_a_redex(lc) -> bool:
    return is_an_efa(lc) and is_a_lambda(lc.child(1))


def substitute_free(lc, mapping: dict):
    """
    A copy of lc with every free, non-metavariable occurrence of a symbol
    whose text is a key of mapping replaced by a copy of its value.
    Bound variables are renamed where a value would otherwise be captured.
    """
    if not mapping:
        return lc.copy()
    if isinstance(lc, Symbol):
        if not lc.is_metavariable() and lc.text in mapping:
            return mapping[lc.text].copy()
        return lc.copy()
    result = lc._blank()
    result.roles = set(lc.roles)
    result.attributes = dict(lc.attributes)
    if not isinstance(lc, Binding):
        for child in lc.children():
            result.push_child(substitute_free(child, mapping))
        return result
    bound = lc.bound_variable_names()
    body_free = {s.text for s in _free_plain_symbols(lc.body())}
    needed = {k: v for k, v in mapping.items() if k not in bound and k in body_free}
    variables = [v.copy() if isinstance(v, Symbol) else substitute_free(v, mapping)
                 for v in lc.bound_variables()]
    body = lc.body()
    captured = set()
    for value in needed.values():
        captured |= {s.text for s in _free_plain_symbols(value)} & bound
    if captured:
        stream = NewSymbolStream(lc, *needed.values(), prefix="y")
        renaming = {name: stream.next() for name in sorted(captured)}
        for i, v in enumerate(variables):
            if isinstance(v, Symbol) and v.text in renaming:
                fresh = renaming[v.text].copy()
                fresh.attributes = dict(v.attributes)
                variables[i] = fresh
        body = substitute_free(body, renaming)
    result.push_child(substitute_free(lc.head(), mapping))
    for v in variables:
        result.push_child(v)
    result.push_child(substitute_free(body, needed))
    return result


def _free_plain_symbols(lc) -> list:
    return [d for d in lc.descendants()
            if isinstance(d, Symbol) and not d.is_metavariable()
            and d.binder(within=lc) is None]


def beta_reduce(redex):
    """One beta step on (@ (𝝺 x1..xn , body) a1..an)."""
    function = redex.child(1)
    arguments = redex.children()[2:]
    parameters = function.bound_variables()
    if len(parameters) != len(arguments):
        raise InvariantViolation(
            f"Expression function of arity {len(parameters)} applied to "
            f"{len(arguments)} arguments: {redex}")
    mapping = {p.text: a for p, a in zip(parameters, arguments)}
    return substitute_free(function.body(), mapping)


def full_beta_reduce(lc):
    """
    A copy of lc with no redexes left anywhere in it. A reduced redex
    keeps its given status.
    """
    result = lc._blank()
    result.roles = set(lc.roles)
    result.attributes = dict(lc.attributes)
    for child in lc.children():
        result.push_child(full_beta_reduce(child))
    if not is_a_redex(result):
        return result
    while is_a_redex(result):
        result = full_beta_reduce(beta_reduce(result))
    result.unmake_into_a(GIVEN)
    if lc.is_given():
        result.make_into_a(GIVEN)
    return result


def has_redex(lc) -> bool:
    return lc.has_descendant_satisfying(is_a_redex)
