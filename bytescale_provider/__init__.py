"""Bytescale file provider: upload, download and delete files on Bytescale."""

from .infrastructure.exceptions import (
    BytescaleApiError,
    DeleteItemFailed,
    DownloadFailed,
    FileProviderError,
    InfrastructureError,
    InvalidConfiguration,
    UploadFailed,
    UrlGenerationFailed,
)
from .infrastructure.storage.object_storage import (
    BytescaleFileProviderService,
    DeleteFileRequest,
    DeleteResult,
    DownloadStream,
    FileProviderInterface,
    FileResult,
    GetFileRequest,
    ProviderConfig,
    StorageFactory,
    UploadFileRequest,
    UploadStreamHandle,
    UploadStreamRequest,
)

__version__ = "0.1.0"

__all__ = [
    "BytescaleFileProviderService",
    "FileProviderInterface",
    "StorageFactory",
    "ProviderConfig",
    "UploadFileRequest",
    "UploadStreamRequest",
    "DeleteFileRequest",
    "GetFileRequest",
    "FileResult",
    "DeleteResult",
    "UploadStreamHandle",
    "DownloadStream",
    "InfrastructureError",
    "InvalidConfiguration",
    "BytescaleApiError",
    "FileProviderError",
    "UploadFailed",
    "DownloadFailed",
    "UrlGenerationFailed",
    "DeleteItemFailed",
]
