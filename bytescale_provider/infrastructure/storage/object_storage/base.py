"""
File Provider Abstract Base Classes

Defines the capability set a host application expects from a file provider
(upload, delete, public URL, download stream, upload stream, buffer), so
providers can be swapped without touching the host.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, Sequence, Union

from ...exceptions import DeleteItemFailed
from ..streaming import AsyncPipe

DEFAULT_PREFIX = "uploads"


@dataclass(frozen=True)
class ProviderConfig:
    """Configuration for a file provider; immutable after construction"""
    api_key: str
    account_id: str
    prefix: Optional[str] = DEFAULT_PREFIX


@dataclass
class UploadFileRequest:
    """
    A file to upload.

    ``content`` may be bytes, text, a binary file object or an async
    iterable of bytes; it is passed to the remote client as-is.
    """
    filename: str
    mime_type: str
    content: Any


@dataclass
class UploadStreamRequest:
    """A file whose content will be written through an upload stream"""
    filename: str
    mime_type: str


@dataclass
class DeleteFileRequest:
    file_key: str


@dataclass
class GetFileRequest:
    file_key: str


@dataclass
class FileResult:
    """Stored file: ``key`` is the backend path, ``url`` its public address"""
    url: str
    key: str


@dataclass
class DeleteResult:
    """Outcome of one item of a batch delete"""
    file_key: str
    success: bool
    error: Optional[DeleteItemFailed] = None


@dataclass
class UploadStreamHandle:
    """
    A live streaming upload.

    Attributes:
        write_stream: Pipe to write content into; close it to finish the upload
        completion: Task resolving to the confirmed FileResult
        url: Public URL the file will have once the upload completes
        file_key: Path the file will have once the upload completes
    """
    write_stream: AsyncPipe
    completion: "asyncio.Task[FileResult]"
    url: str
    file_key: str


class DownloadStream:
    """Async iterator over the bytes of a download; ``aclose`` releases the connection"""

    def __init__(
        self,
        chunks: AsyncIterator[bytes],
        on_close: Optional[Callable[[], Awaitable[None]]] = None,
        content_type: Optional[str] = None,
    ):
        self._chunks = chunks
        self._on_close = on_close
        self.content_type = content_type

    def __aiter__(self) -> "DownloadStream":
        return self

    async def __anext__(self) -> bytes:
        return await self._chunks.__anext__()

    async def aclose(self) -> None:
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._on_close is not None:
            await self._on_close()

    async def read(self) -> bytes:
        """Consume the rest of the stream into memory"""
        return b"".join([chunk async for chunk in self])

    async def __aenter__(self) -> "DownloadStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class FileProviderInterface(ABC):
    """
    Abstract interface for file providers

    Every provider exposes exactly this capability set; the host only
    talks to providers through it.
    """

    identifier: str = ""

    @abstractmethod
    async def upload(self, file: UploadFileRequest) -> FileResult:
        """
        Upload a file

        Raises:
            UploadFailed: the remote upload failed
        """
        pass

    @abstractmethod
    async def delete(self, files: Union[DeleteFileRequest, Sequence[DeleteFileRequest]]) -> None:
        """
        Delete one or several files, best effort

        Individual failures are logged and never raised.
        """
        pass

    @abstractmethod
    async def delete_files(
        self, files: Union[DeleteFileRequest, Sequence[DeleteFileRequest]]
    ) -> List[DeleteResult]:
        """Same as ``delete`` but reports the outcome of each item"""
        pass

    @abstractmethod
    async def get_presigned_download_url(self, file_data: GetFileRequest) -> str:
        """
        Return a URL to download the file

        Raises:
            UrlGenerationFailed: the URL could not be built
        """
        pass

    @abstractmethod
    async def get_upload_stream(self, file_data: UploadStreamRequest) -> UploadStreamHandle:
        """
        Start a streaming upload and return immediately

        Raises:
            UploadFailed: the upload could not be started
        """
        pass

    @abstractmethod
    async def get_download_stream(self, file_data: GetFileRequest) -> DownloadStream:
        """
        Return the file content as an unbuffered stream

        Raises:
            DownloadFailed: the remote fetch failed
        """
        pass

    @abstractmethod
    async def get_as_buffer(self, file_data: GetFileRequest) -> bytes:
        """
        Return the whole file content

        Raises:
            DownloadFailed: the remote fetch failed
        """
        pass
