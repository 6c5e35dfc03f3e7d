"""
Dix Mille - Error Taxonomy

Validation errors are user-correctable and surfaced to the caller.
State-not-found is the expected first-run condition. Persistence errors
come from the store and are propagated unchanged.
"""

from dixmille.engine.validators import ValidationErrorCode, ValidationResult


class DixMilleError(Exception):
    """Base class for all Dix Mille errors."""


class ValidationError(DixMilleError):
    """A game action was rejected by the rules."""

    def __init__(self, code: ValidationErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationError":
        return cls(result.code, result.message)


class StateNotFoundError(DixMilleError):
    """No saved game (or rules) exists yet."""


class PersistenceError(DixMilleError):
    """A store operation failed; the previous snapshot is left intact."""


def raise_for_result(result: ValidationResult) -> None:
    """Raise ValidationError if the result is invalid."""
    if result.is_invalid:
        raise ValidationError.from_result(result)
