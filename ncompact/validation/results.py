"""
Per-node validation results.

Results live in the node's scratch store, so they belong to that node
alone: copies of a node start unchecked.
"""

from dataclasses import dataclass
from typing import Optional


VALID = "valid"
INDETERMINATE = "indeterminate"
INVALID = "invalid"

N_COMPACT = "n-compact"
PREEMIE = "preemie"
SCOPE = "scope"

PROP = "prop"
PREEMIES = "preemies"


@dataclass
class ValidationResult:
    result: str
    reason: str

    @property
    def is_valid(self) -> bool:
        return self.result == VALID

    def __str__(self):
        return f"{self.result}/{self.reason}"


def result(lc) -> Optional[ValidationResult]:
    return lc.scratch.get("validation")


def set_result(lc, result: str, reason: str) -> ValidationResult:
    lc.scratch["validation"] = ValidationResult(result, reason)
    return lc.scratch["validation"]


def clear(lc):
    lc.scratch.pop("validation", None)
    lc.scratch.pop("checked", None)


def mark_checked(lc, kind: str):
    lc.scratch.setdefault("checked", set()).add(kind)


def was_checked(lc, kind: str) -> bool:
    return kind in lc.scratch.get("checked", ())
