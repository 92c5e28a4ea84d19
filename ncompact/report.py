"""
Feedback printing.
"""

from .core.concepts import INST, PART
from .core.putdown import write
from .document import Document
from .validation import results


def _label(lc) -> str:
    r = results.result(lc)
    if r is None:
        return "unchecked"
    return str(r)


def print_feedback(doc: Document):
    """Print every inference in the user's content with its result."""
    print(f"\n{'='*60}")
    print(f"Document: {_label(doc.user)}")
    print(f"{'='*60}")
    for lc in doc.user.inferences():
        indent = "  " * (len(lc.address(doc.user)) - 1)
        print(f"  {indent}{write(lc)}  [{_label(lc)}]")
    hints = doc.user.descendants_satisfying(lambda d: d.scratch.get("bad_bih"))
    for hint in hints:
        print(f"  [bad hint] {write(hint)}")
    for d in doc.user.descendants_satisfying(lambda d: d.scratch.get("scope_errors")):
        print(f"  [scope] {write(d)}: {'; '.join(d.scratch['scope_errors'])}")
    print(f"{'='*60}")


def print_instantiations(doc: Document):
    """Print each instantiation with the rule, creators and pass that made it."""
    print(f"\n{'='*60}")
    print("Instantiations:")
    print(f"{'='*60}")
    for inst in doc.instantiations():
        kind = PART if inst.is_a(PART) else INST
        creators = ", ".join(write(c) for c in inst.scratch.get("creators", []))
        pass_ = inst.scratch.get("pass")
        print(f"  {kind} {write(inst)}")
        if creators:
            print(f"      from: {creators}   pass: {pass_}")
