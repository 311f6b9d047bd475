from __future__ import annotations

from dataclasses import dataclass
from typing import List


class CligptError(Exception):
    """Base class for every failure that aborts a chat turn."""

    kind = "error"


class InputError(CligptError, ValueError):
    """Raised when the message to send is empty or whitespace only."""

    kind = "input"


@dataclass(frozen=True)
class FieldViolation:
    """A single rejected field.

    Fields:
        field: Name of the offending setting (e.g. ``temperature``).
        value: The rejected value, already masked when it is a secret.
        constraint: Human readable description of what was expected.
    """
    field: str
    value: str
    constraint: str

    def describe(self) -> str:
        return f"invalid {self.field} '{self.value}': expected {self.constraint}"


class ValidationError(CligptError, ValueError):
    """Raised when one or more settings fail validation."""

    kind = "validation"

    def __init__(self, violations: List[FieldViolation]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(v.describe() for v in self.violations))


class TransportError(CligptError, RuntimeError):
    """Raised when a remote call is rejected or its stream breaks."""

    kind = "transport"


class ContractError(CligptError, ValueError):
    """Raised when a remote response violates its documented contract (e.g., embedding size)."""

    kind = "contract"


class StorageError(CligptError, RuntimeError):
    """Raised when the transcript file cannot be read, parsed or written."""

    kind = "storage"


class PartitionInvariantError(CligptError, RuntimeError):
    """Raised when the similarity ranking contradicts itself."""

    kind = "internal"
