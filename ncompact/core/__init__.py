from .structure import Structure
from .concepts import (
    LogicConcept, Expression, Symbol, Application, Binding, Environment, Declaration,
    metavariable, efa, is_an_efa, lambda_expression, is_a_lambda,
    GIVEN, RULE, PART, INST, BIH, DECLARE, METAVARIABLE, LET, FOR_SOME,
)
from .putdown import PutdownError, read, write
from .scoping import lets, lets_in_scope, declared_by, assign_proper_names

__all__ = [
    "Structure",
    "LogicConcept", "Expression", "Symbol", "Application", "Binding",
    "Environment", "Declaration",
    "metavariable", "efa", "is_an_efa", "lambda_expression", "is_a_lambda",
    "GIVEN", "RULE", "PART", "INST", "BIH", "DECLARE", "METAVARIABLE", "LET", "FOR_SOME",
    "PutdownError", "read", "write",
    "lets", "lets_in_scope", "declared_by", "assign_proper_names",
]
