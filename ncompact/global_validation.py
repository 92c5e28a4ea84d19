"""
Global n-compact validation.

    load(user, libs, n)
      1. Document(user, libs)           rules marked, proper names assigned
      2. process_domains(doc)           domain, weenies, finished per formula
      3. process_hints(doc)             blatant instantiation hints
      4. instantiate(doc, n)            n passes of weeny matching
      5. validateall(doc)               propositional check, localized
      6. validateall(doc, check_preemies=True)
                                        Let scopes that only work because
                                        of the Let are marked preemies

Formula scratch keys:
    domain      set of metavariable names free in the formula (or, on a
                proposition, in that proposition; None if forbidden)
    weenies     non-forbidden propositions with the most metavariables
    is_weeny    the formula's whole domain is covered by one weeny
    finished    no more matching will be done against this formula
    creators    user propositions (or hints) that produced an instantiation
    rule        the rule an instantiation ultimately comes from
    pass        passes remaining when the instantiation was made
"""

from typing import Optional

from .core import putdown, scoping
from .core.concepts import (
    BIH, DECLARE, GIVEN, INST, PART, RULE, Environment, Symbol, is_an_efa,
)
from .document import Document
from .formula import (
    add_cached_instantiation, all_possible_instantiations, domain,
    instantiate as instantiate_formula, match_propositions,
)
from .matching import MatchingError
from .validation import results
from .validation.propositional import PropositionalError, is_valid, prop_form, prop_text


# ── formula domain cache ───────────────────────────────────────────────────

def forbidden_weeny(lc) -> bool:
    """Environments, lone symbols and whole EFAs match too much to drive search."""
    return isinstance(lc, (Environment, Symbol)) or is_an_efa(lc)


def cache_formula_domain_info(f):
    largest = 0
    propositions = f.propositions()
    for p in propositions:
        if forbidden_weeny(p):
            p.scratch["domain"] = None
        else:
            p.scratch["domain"] = domain(p)
            largest = max(largest, len(p.scratch["domain"]))
    f.scratch["domain"] = domain(f)
    if largest == 0:
        f.scratch["finished"] = True
    f.scratch["is_weeny"] = len(f.scratch["domain"]) == largest and largest > 0
    f.scratch["weenies"] = [p for p in propositions if largest > 0
                            and p.scratch["domain"] is not None
                            and len(p.scratch["domain"]) == largest]


def _make_complete(f):
    f.unmake_into_a(RULE)
    f.unmake_into_a(PART)
    f.make_into_a(INST)


def process_domains(doc: Document):
    """Cache domain info on every formula; one with no metavariables is an Inst."""
    for f in doc.formulas():
        cache_formula_domain_info(f)
        if not f.scratch["domain"]:
            _make_complete(f)
    doc.domains_processed = True


# ── hints ──────────────────────────────────────────────────────────────────

def process_hints(doc: Document):
    """
    Match every BIH environment against every formula. Each match becomes
    a complete instantiation; a hint that matches nothing gets bad_bih.
    """
    if not doc.domains_processed:
        process_domains(doc)
    formulas = doc.formulas()
    for hint in doc.root.descendants_satisfying(lambda d: d.is_a(BIH)):
        found = False
        for f in formulas:
            try:
                solutions = list(all_possible_instantiations(f, hint))
            except MatchingError:
                continue
            for solution in solutions:
                found = True
                inst = instantiate_formula(f, solution)
                inst.make_into_a(GIVEN)
                _make_complete(inst)
                inst.scratch["creators"] = [hint]
                inst.scratch["rule"] = f.scratch.get("rule") or f
                inst.scratch["domain"] = domain(inst)
                inst.scratch["finished"] = True
                add_cached_instantiation(f, inst)
        if not found:
            hint.scratch["bad_bih"] = True


# ── instantiation ──────────────────────────────────────────────────────────

def get_user_propositions(doc: Document) -> list:
    """The user's propositions, one per propositional text, cached on doc."""
    if doc.user_propositions is not None:
        return doc.user_propositions
    seen = set()
    found = []
    for e in doc.user.propositions():
        text = prop_text(e)
        if text not in seen:
            seen.add(text)
            found.append(e)
    doc.user_propositions = found
    return found


def _already_there(f, inst) -> bool:
    walk = f.next_sibling()
    while walk is not None and (walk.is_a(INST) or walk.is_a(PART)):
        if walk.equals(inst):
            return True
        walk = walk.next_sibling()
    return False


def _add_instantiation(f, weeny, solution, creator, n: int) -> bool:
    inst = instantiate_formula(f, solution)
    inst.make_into_a(GIVEN)
    # the matched proposition reads the way the user wrote it
    scoping.rename_like(inst.index(weeny.address(f)), creator)
    if _already_there(f, inst):
        return False
    inst.scratch["creators"] = list(f.scratch.get("creators", [])) + [creator]
    inst.scratch["rule"] = f.scratch.get("rule") or f
    inst.scratch["pass"] = n
    cache_formula_domain_info(inst)
    inst.unmake_into_a(RULE)
    if inst.scratch["domain"]:
        inst.make_into_a(PART)
        inst.ignore = True
    else:
        _make_complete(inst)
    add_cached_instantiation(f, inst)
    return True


def instantiate(doc: Document, n: int = 1, verbose: bool = False):
    """
    n passes of instantiation. On each pass every unfinished eligible
    formula has each of its weenies matched against each user
    proposition, then is finished. The last pass (n == 1) only uses
    formulas that one weeny can instantiate completely.
    """
    if n <= 0:
        return
    if not doc.domains_processed:
        process_domains(doc)
    propositions = get_user_propositions(doc)
    eligible = [f for f in doc.formulas() if not f.scratch.get("finished") and (
        f.scratch.get("is_weeny") if n == 1 else bool(f.scratch.get("weenies")))]
    added = 0
    for f in eligible:
        for p in f.scratch["weenies"]:
            for e in propositions:
                try:
                    problem = match_propositions(p, e)
                    solutions = list(problem.solutions()) if problem is not None else []
                except MatchingError:
                    continue
                for solution in solutions:
                    if _add_instantiation(f, p, solution, e, n):
                        added += 1
        f.scratch["finished"] = True
    if verbose:
        print(f"Pass {n}: {len(eligible)} formulas, {added} new instantiations")
    instantiate(doc, n - 1, verbose=verbose)


# ── validation ─────────────────────────────────────────────────────────────

def _sat_check(target, check_preemies: bool) -> Optional[bool]:
    try:
        return is_valid(prop_form(target, check_preemies))
    except PropositionalError as e:
        kind = "preemies" if check_preemies else "prop"
        print(f"\nError validating the following for {kind}:\n")
        print(putdown.write(target))
        print(f"at address: {target.address()}")
        print(f"  ({e})")
        return None


def validate(doc: Document, target=None, check_preemies: bool = False) -> Optional[bool]:
    """
    Check one target and record the result on it. Everything accessible to
    target counts as given. With check_preemies, a propositionally valid
    target is checked again with the Lets in scope (and its own) erased.
    Returns None if the check could not be carried out.
    """
    target = doc.root if target is None else target
    current = results.result(target)
    if current is not None and current.reason == results.SCOPE:
        return False

    if not check_preemies:
        if current is not None and current.reason == results.N_COMPACT:
            return current.is_valid
        answer = _sat_check(target, False)
        if answer is not None:
            results.set_result(target, results.VALID if answer else results.INDETERMINATE,
                               results.N_COMPACT)
        return answer

    if current is not None and current.reason == results.PREEMIE:
        return False
    if current is None or current.reason != results.N_COMPACT:
        if validate(doc, target) is None:
            return None
    if not results.result(target).is_valid:
        return False
    if results.was_checked(target, results.PREEMIES):
        return True
    answer = _sat_check(target, True)
    if answer is None:
        return None
    if answer:
        results.set_result(target, results.VALID, results.N_COMPACT)
    else:
        results.set_result(target, results.INVALID, results.PREEMIE)
    results.mark_checked(target, results.PREEMIES)
    return answer


def _mark_preemie(lc):
    for a in lc.ancestors():
        results.set_result(a, results.INVALID, results.PREEMIE)


def validateall(doc: Document, target=None, check_preemies: bool = False):
    """
    Without check_preemies: validate target; if it is valid every inference
    inside it is valid too, otherwise recurse into its claim children.

    With check_preemies (after the propositional pass): check each Let's
    environment, innermost first. An environment that is not
    propositionally valid keeps its result. A preemie one is marked along
    with its ancestors, then its valid conclusions are checked one by one
    to find the ones at fault.
    """
    target = doc.root if target is None else target

    if not check_preemies:
        answer = validate(doc, target)
        if not isinstance(target, Environment):
            return
        if answer:
            for c in target.inferences():
                results.set_result(c, results.VALID, results.N_COMPACT)
            return
        for kid in target.children():
            if kid.is_given() or kid.ignore or kid.is_a(DECLARE) or kid.is_a(PART):
                continue
            validateall(doc, kid)
        return

    lets = [L for L in scoping.lets(target)
            if not L.parent().has_ancestor_satisfying(lambda a: a.is_given())]
    lets.sort(key=lambda L: len(scoping.lets(L.parent())))
    for L in lets:
        env = L.parent()
        if validate(doc, env, check_preemies=True) is not False \
                or results.result(env).reason != results.PREEMIE:
            continue
        _mark_preemie(env)
        for conclusion in env.conclusions():
            current = results.result(conclusion)
            if conclusion.ignore or current is None or not current.is_valid:
                continue
            if validate(doc, conclusion, check_preemies=True) is False:
                _mark_preemie(conclusion)


# ── all in one ─────────────────────────────────────────────────────────────

def _as_environment(source):
    if isinstance(source, str):
        source = putdown.read(source)
    if isinstance(source, (list, tuple)):
        items = []
        for s in source:
            s = putdown.read(s) if isinstance(s, str) else s
            items.extend(s if isinstance(s, list) else [s])
        return Environment(*items)
    return source


def process_document(doc: Document) -> Document:
    process_domains(doc)
    process_hints(doc)
    scoping.validate(doc.user)
    return doc


def load(user, libs=(), n: int = 4, check_preemies: bool = True,
         verbose: bool = False) -> Document:
    """
    Build, instantiate and fully validate a document. user and each
    library may be putdown text, a concept, or a list of either.
    """
    libs = [libs] if isinstance(libs, str) else libs
    doc = Document(_as_environment(user), [_as_environment(lib) for lib in libs])
    process_document(doc)
    instantiate(doc, n, verbose=verbose)
    validateall(doc)
    if check_preemies:
        validateall(doc, check_preemies=True)
    return doc
