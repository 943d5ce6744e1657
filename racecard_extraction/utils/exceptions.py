"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the race card
extraction system. Using specific exceptions allows the document parser
to turn acquisition failures into informative error messages.

Exception Hierarchy:
    RaceCardExtractionError (base)
    ├── ConfigurationError
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── InputFileNotFoundError
    │   ├── FileTooLargeError
    │   └── CorruptedFileError
    └── OCRError
        ├── OCREngineNotAvailableError
        └── OCRProcessingError

Field extraction and race assembly never raise: an unmatched line is
simply skipped, so there is no parsing branch in this hierarchy.
"""


class RaceCardExtractionError(Exception):
    """
    Base exception for all race card extraction errors.

    All custom exceptions in this system inherit from this class,
    allowing for easy catching of all system-specific errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(RaceCardExtractionError):
    """Raised when configuration cannot be loaded."""
    pass


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(RaceCardExtractionError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when an unsupported file kind is provided.

    Example:
        >>> raise UnsupportedFileTypeError("doc", ["pdf", "jpg"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: {file_type}"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class InputFileNotFoundError(InputError):
    """Raised when input file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class FileTooLargeError(InputError):
    """Raised when an input file exceeds the configured size limit."""

    def __init__(self, filepath: str, size: str, limit: str):
        message = f"File too large: {filepath} ({size}, limit {limit})"
        details = {"filepath": filepath, "size": size, "limit": limit}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when a file appears to be corrupted or unreadable."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Corrupted or unreadable file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OCR ERRORS
# =============================================================================

class OCRError(RaceCardExtractionError):
    """Base exception for text recognition errors."""
    pass


class OCREngineNotAvailableError(OCRError):
    """Raised when a recognition backend is missing or misconfigured."""

    def __init__(self, engine_name: str, reason: str = None):
        message = f"OCR engine not available: {engine_name}"
        details = {"engine": engine_name}
        if reason:
            details["reason"] = reason
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when recognition fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"OCR processing failed for: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'RaceCardExtractionError',
    'ConfigurationError',
    'InputError',
    'UnsupportedFileTypeError',
    'InputFileNotFoundError',
    'FileTooLargeError',
    'CorruptedFileError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
]
