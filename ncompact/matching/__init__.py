from .errors import MatchingError, InvariantViolation
from .constraint import Constraint, has_metavariables
from .substitution import Substitution, instantiate_metavariables
from .capture import CaptureConstraint, CaptureConstraints
from .expression_functions import (
    constant_ef, projection_ef, application_ef,
    beta_reduce, full_beta_reduce, is_a_redex,
)
from .symbols import NewSymbolStream
from .debruijn import encode, alpha_equivalent, is_bound_marker
from .problem import Problem

__all__ = [
    "MatchingError", "InvariantViolation",
    "Constraint", "has_metavariables",
    "Substitution", "instantiate_metavariables",
    "CaptureConstraint", "CaptureConstraints",
    "constant_ef", "projection_ef", "application_ef",
    "beta_reduce", "full_beta_reduce", "is_a_redex",
    "NewSymbolStream",
    "encode", "alpha_equivalent", "is_bound_marker",
    "Problem",
]
