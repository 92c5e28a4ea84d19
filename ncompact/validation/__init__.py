from .results import (
    ValidationResult, result, set_result, clear,
    VALID, INDETERMINATE, INVALID, N_COMPACT, PREEMIE, SCOPE,
)
from .engine import Clause, SaturationState, saturation_step, saturate, found_empty_clause
from .resolve import resolve, clause_subsumes, is_tautology
from .propositional import (
    PropositionalError, prop_text, prop_form, to_cnf, is_satisfiable, is_valid,
)

__all__ = [
    "ValidationResult", "result", "set_result", "clear",
    "VALID", "INDETERMINATE", "INVALID", "N_COMPACT", "PREEMIE", "SCOPE",
    "Clause", "SaturationState", "saturation_step", "saturate", "found_empty_clause",
    "resolve", "clause_subsumes", "is_tautology",
    "PropositionalError", "prop_text", "prop_form", "to_cnf", "is_satisfiable", "is_valid",
]
