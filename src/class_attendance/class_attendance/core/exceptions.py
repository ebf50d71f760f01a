class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a list or a student entry does not exist."""


class DuplicateStudentError(ValidationError):
    """Raised when a student with the same name is already in the list."""


class UnreadableSpreadsheetError(DomainError):
    """Raised when an upload cannot be decoded as tabular data at all."""


class ExportError(DomainError):
    """Raised when a roster cannot be rendered to the requested format."""
