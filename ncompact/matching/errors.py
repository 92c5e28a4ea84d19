"""
The two ways matching can go wrong (a plain no-match is not one of them:
it is just an empty solution stream).
"""


class MatchingError(TypeError):
    """Malformed use of the matching API, e.g. adding a non-constraint to a Problem."""


class InvariantViolation(RuntimeError):
    """
    Something that upstream elaboration should have made impossible:
    an unknown complexity, an EFA with a non-metavariable head or with
    no arguments. Never caught inside the package.
    """
