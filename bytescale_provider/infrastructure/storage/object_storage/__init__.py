"""
File Provider Infrastructure Module

Provides the file provider interface and its Bytescale implementation.
"""

from .base import (
    DeleteFileRequest,
    DeleteResult,
    DownloadStream,
    FileProviderInterface,
    FileResult,
    GetFileRequest,
    ProviderConfig,
    UploadFileRequest,
    UploadStreamHandle,
    UploadStreamRequest,
)
from .bytescale_adapter import BytescaleFileProviderService, build_file_path, normalize_upload_folder
from .factory import StorageFactory

__all__ = [
    'FileProviderInterface',
    'ProviderConfig',
    'UploadFileRequest',
    'UploadStreamRequest',
    'DeleteFileRequest',
    'GetFileRequest',
    'FileResult',
    'DeleteResult',
    'UploadStreamHandle',
    'DownloadStream',
    'BytescaleFileProviderService',
    'StorageFactory',
    'build_file_path',
    'normalize_upload_folder',
]
