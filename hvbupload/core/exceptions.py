"""
Custom exceptions for encrypted upload operations.

Every error raised here is fatal to the upload in progress. Nothing is
retried; the driver stops the part loop and re-raises to the caller.
"""
from typing import Optional


class UploadError(Exception):
    """Base exception for all upload-related errors."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status: HTTP status code (if available)
        """
        self.status = status
        super().__init__(message)


class ProtocolError(UploadError):
    """Raised when the server violates the resumable upload contract.

    Covers a missing ``Location`` on creation, a missing or invalid
    ``Upload-Offset`` acknowledgement and chunks sent before initialization.
    """
    pass


class TransportError(UploadError):
    """Raised for network failures and non-success HTTP responses."""
    pass


class EncryptionError(UploadError):
    """Raised when a part cannot be read completely or the cipher fails."""

    def __init__(
        self,
        message: str,
        start: Optional[int] = None,
        end: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            start: Start of the plaintext range being processed
            end: End of the plaintext range being processed
        """
        self.start = start
        self.end = end
        super().__init__(message)


class AbortedError(UploadError):
    """Raised when a cooperative stop is honored before a part starts."""

    def __init__(self, message: str = "Upload aborted", part_index: Optional[int] = None) -> None:
        self.part_index = part_index
        super().__init__(message)
