"""
Preset-specific error types.

All errors inherit from PresetError for easy catching.
Errors are explicit and provide actionable messages.
"""

from typing import List, Optional, Sequence


class PresetError(Exception):
    """Base exception for all preset, collection and theme failures."""
    pass


class ValidationError(PresetError):
    """
    Raised when a record fails validation.

    Carries every problem found, not just the first one.
    Warnings are informational and never cause this error on their own.
    """

    def __init__(self, errors: Sequence[str], warnings: Optional[Sequence[str]] = None):
        self.errors: List[str] = list(errors)
        self.warnings: List[str] = list(warnings or [])
        super().__init__(f"Validation failed: {'; '.join(self.errors)}")


class NotFoundError(PresetError):
    """Raised when a referenced preset, collection or theme does not exist."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} not found: {resource_id}")


class ImmutableResourceError(PresetError):
    """Raised on any attempt to update or delete a built-in preset or theme."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"Cannot modify built-in {resource}: {resource_id}")


class ImportBatchError(ValidationError):
    """
    Raised when an import payload is structurally unusable.

    The whole batch is rejected; record_errors lists the offending indices.
    """

    def __init__(self, record_errors):
        self.record_errors = list(record_errors)
        super().__init__([str(err) for err in self.record_errors])
