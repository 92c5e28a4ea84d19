"""
ncompact: global n-compact validation of proofs written as nested
environments of logic concepts.

Rules from the libraries are instantiated by matching their weenies
against the user's propositions (higher-order matching with expression
functions), then every inference is checked propositionally against
everything accessible to it. A second pass flags preemies: conclusions
that only follow because a Let's variable was treated as a constant
outside its scope.

Usage:
    python -m ncompact --list
    python -m ncompact --demo modus_ponens
    python -m ncompact --demo preemie
    python -m ncompact --demo universal --passes 3
"""

from .core import read, write
from .document import Document
from .matching import Problem, MatchingError, InvariantViolation
from .global_validation import (
    process_domains, process_hints, instantiate, validate, validateall,
    process_document, load,
)
from .report import print_feedback, print_instantiations
from .validation import ValidationResult, result

__all__ = [
    "read", "write",
    "Document",
    "Problem", "MatchingError", "InvariantViolation",
    "process_domains", "process_hints", "instantiate", "validate", "validateall",
    "process_document", "load",
    "print_feedback", "print_instantiations",
    "ValidationResult", "result",
]
