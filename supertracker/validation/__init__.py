"""Import validation package."""

from supertracker.validation.validator import (
    IMPORT_FORMAT_EXAMPLE,
    ImportValidator,
    ValidationError,
)

__all__ = ["IMPORT_FORMAT_EXAMPLE", "ImportValidator", "ValidationError"]
