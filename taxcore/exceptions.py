"""Custom exceptions for taxcore."""


class TaxComputationError(Exception):
    """Base exception for tax computation errors."""


class DataValidationError(TaxComputationError):
    """Raised when input data fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")


class InputFileError(TaxComputationError):
    """Raised when an input file cannot be read."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"Input error for {file_path}: {message}")
