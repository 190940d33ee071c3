"""
Bytescale File Provider Adapter

Implements FileProviderInterface on top of the Bytescale Upload/File APIs.
The adapter keeps no state beyond its configuration and the API client.
"""

import asyncio
import logging
import posixpath
from typing import Any, List, Mapping, Optional, Sequence, Union

from ...exceptions import (
    DeleteItemFailed,
    DownloadFailed,
    InvalidConfiguration,
    UploadFailed,
    UrlGenerationFailed,
)
from ...external_apis.bytescale_client import (
    DEFAULT_API_BASE,
    DEFAULT_CDN_BASE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    BytescaleClient,
    build_url,
)
from ..streaming import DEFAULT_MAX_CHUNKS, AsyncPipe
from .base import (
    DEFAULT_PREFIX,
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


def normalize_upload_folder(prefix: Optional[str]) -> str:
    """
    Normalize a folder prefix to "/path/to/folder"

    Leading slash, no trailing slash; the root folder stays "/".
    An empty or missing prefix means "/uploads".
    """
    folder_path = prefix or f"/{DEFAULT_PREFIX}"
    if not folder_path.startswith("/"):
        folder_path = f"/{folder_path}"
    return folder_path.rstrip("/") or "/"


def build_file_path(folder_path: str, filename: str) -> str:
    """Path a file named ``filename`` gets inside ``folder_path``"""
    return f"{folder_path.rstrip('/')}/{filename.lstrip('/')}"


def _option(options: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if options.get(key) is not None:
            return options[key]
    return None


class BytescaleFileProviderService(FileProviderInterface):
    """
    Bytescale implementation of FileProviderInterface

    Single-file operations log failures and re-raise them as the matching
    FileProviderError. Batch deletes are best effort: item failures are
    logged as warnings and never raised.
    """

    identifier = "bytescale-file"

    def __init__(
        self,
        options: Union[ProviderConfig, Mapping[str, Any]],
        logger: Optional[logging.Logger] = None,
        client: Optional[Any] = None,
        cdn_base: str = DEFAULT_CDN_BASE,
        max_buffered_chunks: int = DEFAULT_MAX_CHUNKS,
        api_base: str = DEFAULT_API_BASE,
        timeout: int = DEFAULT_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.options = self.validate_options(options)
        self.logger = logger or logging.getLogger(__name__)
        self.cdn_base = cdn_base
        self.max_buffered_chunks = max_buffered_chunks
        self.client = client or BytescaleClient(
            api_key=self.options.api_key,
            account_id=self.options.account_id,
            api_base=api_base,
            cdn_base=cdn_base,
            timeout=timeout,
            chunk_size=chunk_size,
        )

    @staticmethod
    def validate_options(options: Union[ProviderConfig, Mapping[str, Any], None]) -> ProviderConfig:
        """
        Check required options and return them as a ProviderConfig

        Raises:
            InvalidConfiguration: apiKey or accountId is missing or empty
        """
        if isinstance(options, ProviderConfig):
            api_key, account_id, prefix = options.api_key, options.account_id, options.prefix
        else:
            options = options or {}
            api_key = _option(options, "apiKey", "api_key")
            account_id = _option(options, "accountId", "account_id")
            prefix = _option(options, "prefix")

        if not api_key:
            raise InvalidConfiguration("Bytescale provider requires 'apiKey' option.")
        if not account_id:
            raise InvalidConfiguration("Bytescale provider requires 'accountId' option.")

        return ProviderConfig(api_key=api_key, account_id=account_id, prefix=prefix)

    def _get_upload_path(self) -> str:
        return normalize_upload_folder(self.options.prefix)

    def _build_url(self, file_path: str) -> str:
        return build_url(self.options.account_id, file_path, self.cdn_base)

    async def upload(self, file: UploadFileRequest) -> FileResult:
        """
        Upload a file into the configured folder

        The content is handed to the client untouched; Bytescale picks the
        final file name and its answer is returned as-is.
        """
        try:
            result = await self.client.upload(
                data=file.content,
                mime=file.mime_type,
                original_file_name=file.filename,
                folder_path=self._get_upload_path(),
            )
        except Exception as error:
            self.logger.error(
                f"Bytescale upload failed for {file.filename}: {error}",
                extra={"event": "bytescale.upload_failed", "file_name": file.filename, "error": str(error)},
            )
            raise UploadFailed(file.filename, error) from error

        return FileResult(url=result.file_url, key=result.file_path)

    async def delete(self, files: Union[DeleteFileRequest, Sequence[DeleteFileRequest]]) -> None:
        await self.delete_files(files)

    async def delete_files(
        self, files: Union[DeleteFileRequest, Sequence[DeleteFileRequest]]
    ) -> List[DeleteResult]:
        file_list = [files] if isinstance(files, DeleteFileRequest) else list(files)
        return list(await asyncio.gather(*(self._delete_one(file) for file in file_list)))

    async def _delete_one(self, file: DeleteFileRequest) -> DeleteResult:
        try:
            await self.client.delete_file(account_id=self.options.account_id, file_path=file.file_key)
        except Exception as error:
            # Siblings keep going; the caller only sees the result entry
            self.logger.warning(
                f"Bytescale delete failed for {file.file_key}: {error}",
                extra={"event": "bytescale.delete_failed", "file_key": file.file_key, "error": str(error)},
            )
            return DeleteResult(file_key=file.file_key, success=False, error=DeleteItemFailed(file.file_key, error))
        return DeleteResult(file_key=file.file_key, success=True)

    async def get_presigned_download_url(self, file_data: GetFileRequest) -> str:
        """Permanent public URL of the file; nothing is signed and nothing expires"""
        try:
            return self._build_url(file_data.file_key)
        except Exception as error:
            self.logger.error(
                f"Bytescale URL gen failed: {error}",
                extra={"event": "bytescale.url_failed", "file_key": file_data.file_key, "error": str(error)},
            )
            raise UrlGenerationFailed(file_data.file_key, error) from error

    async def get_upload_stream(self, file_data: UploadStreamRequest) -> UploadStreamHandle:
        """
        Start an upload fed by a pipe and return without waiting for data

        The returned key and url are computed from the folder and file name
        the upload is told to use, so they match the completed upload.
        """
        try:
            expected_key = build_file_path(self._get_upload_path(), file_data.filename)
            expected_url = self._build_url(expected_key)
        except Exception as error:
            self.logger.error(
                f"Bytescale upload stream failed: {error}",
                extra={"event": "bytescale.upload_stream_failed", "file_name": file_data.filename, "error": str(error)},
            )
            raise UploadFailed(file_data.filename, error) from error

        pipe = AsyncPipe(self.max_buffered_chunks)
        completion = asyncio.create_task(self._stream_upload(pipe, file_data, expected_key))

        return UploadStreamHandle(
            write_stream=pipe,
            completion=completion,
            url=expected_url,
            file_key=expected_key,
        )

    async def _stream_upload(self, pipe: AsyncPipe, file_data: UploadStreamRequest, expected_key: str) -> FileResult:
        folder_path, file_name = posixpath.split(expected_key)
        try:
            result = await self.client.upload(
                data=pipe,
                mime=file_data.mime_type,
                original_file_name=file_data.filename,
                folder_path=folder_path,
                file_name=file_name,
            )
        except asyncio.CancelledError:
            pipe.fail(ConnectionAbortedError("upload cancelled"))
            raise
        except Exception as error:
            pipe.fail(error)
            self.logger.error(
                f"Bytescale upload stream failed for {file_data.filename}: {error}",
                extra={"event": "bytescale.upload_stream_failed", "file_name": file_data.filename, "error": str(error)},
            )
            raise UploadFailed(file_data.filename, error) from error

        if result.file_path != expected_key:
            self.logger.warning(
                f"Bytescale stored {file_data.filename} at {result.file_path}, expected {expected_key}",
                extra={"event": "bytescale.upload_path_mismatch", "file_key": result.file_path},
            )
        return FileResult(url=result.file_url, key=result.file_path)

    async def get_download_stream(self, file_data: GetFileRequest) -> DownloadStream:
        try:
            response = await self.client.download_file(
                account_id=self.options.account_id,
                file_path=file_data.file_key,
            )
        except Exception as error:
            self.logger.error(
                f"Bytescale download stream failed: {error}",
                extra={"event": "bytescale.download_failed", "file_key": file_data.file_key, "error": str(error)},
            )
            raise DownloadFailed(file_data.file_key, error) from error

        return DownloadStream(response.iter_chunks(), on_close=response.close, content_type=response.content_type)

    async def get_as_buffer(self, file_data: GetFileRequest) -> bytes:
        try:
            response = await self.client.download_file(
                account_id=self.options.account_id,
                file_path=file_data.file_key,
            )
            return await response.read()
        except Exception as error:
            self.logger.error(
                f"Bytescale buffer download failed: {error}",
                extra={"event": "bytescale.download_failed", "file_key": file_data.file_key, "error": str(error)},
            )
            raise DownloadFailed(file_data.file_key, error) from error
