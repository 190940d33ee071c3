"""
Custom exceptions for the Infrastructure layer.
"""
from typing import Optional


class InfrastructureError(Exception):
    """Base class for exceptions in the infrastructure layer."""
    pass


class InvalidConfiguration(InfrastructureError):
    """Provider options are missing a required value."""
    pass


class BytescaleApiError(InfrastructureError):
    """
    Non-success response returned by the Bytescale API

    Attributes:
        status: HTTP status code
        code: Bytescale error code (e.g. "file_not_found"), if provided
    """

    def __init__(self, status: int, message: str, code: Optional[str] = None):
        self.status = status
        self.code = code
        super().__init__(f"[{status}] {code + ': ' if code else ''}{message}")


class FileProviderError(InfrastructureError):
    """Operation-time failure; the underlying error is kept on ``cause``."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class UploadFailed(FileProviderError):
    def __init__(self, filename: str, cause: Optional[BaseException] = None):
        self.filename = filename
        super().__init__(f"Upload failed for {filename}: {cause}", cause)


class DownloadFailed(FileProviderError):
    def __init__(self, file_key: str, cause: Optional[BaseException] = None):
        self.file_key = file_key
        super().__init__(f"Download failed for {file_key}: {cause}", cause)


class UrlGenerationFailed(FileProviderError):
    def __init__(self, file_key: str, cause: Optional[BaseException] = None):
        self.file_key = file_key
        super().__init__(f"URL generation failed for {file_key}: {cause}", cause)


class DeleteItemFailed(FileProviderError):
    """Recorded per item in a batch delete; never raised to the caller."""

    def __init__(self, file_key: str, cause: Optional[BaseException] = None):
        self.file_key = file_key
        super().__init__(f"Delete failed for {file_key}: {cause}", cause)
