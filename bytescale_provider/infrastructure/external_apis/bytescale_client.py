"""Bytescale REST API client (upload, delete, download and file URLs)."""

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional
from urllib.parse import quote

import aiohttp

from ..exceptions import BytescaleApiError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.bytescale.com"
DEFAULT_CDN_BASE = "https://upcdn.io"
DEFAULT_TIMEOUT = 300
DEFAULT_CHUNK_SIZE = 64 * 1024


def build_url(account_id: str, file_path: str, cdn_base: str = DEFAULT_CDN_BASE) -> str:
    """
    Build the permanent public URL of a file.

    Pure function: no network call, no signature, no expiry.

    Args:
        account_id: Bytescale account id
        file_path: Absolute file path inside the account, e.g. "/uploads/a.png"
        cdn_base: Base URL of the file CDN

    Returns:
        str: "{cdn_base}/{account_id}/raw{file_path}"

    Raises:
        ValueError: account_id is empty or file_path is not absolute
    """
    if not account_id:
        raise ValueError("accountId is required to build a file URL")
    if not file_path or not file_path.startswith("/"):
        raise ValueError(f"filePath must start with '/': {file_path!r}")
    return f"{cdn_base.rstrip('/')}/{quote(account_id, safe='')}/raw{quote(file_path, safe='/')}"


@dataclass
class UploadResult:
    """Result of a Bytescale upload"""
    file_url: str
    file_path: str
    etag: Optional[str] = None


class DownloadResponse:
    """
    An open download. Owns its HTTP session until the body is consumed
    or ``close()`` is called.
    """

    def __init__(self, session: aiohttp.ClientSession, response: aiohttp.ClientResponse, chunk_size: int):
        self._session = session
        self._response = response
        self._chunk_size = chunk_size
        self._closed = False

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("Content-Type")

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.content.iter_chunked(self._chunk_size):
                yield chunk
        finally:
            await self.close()

    async def read(self) -> bytes:
        try:
            return await self._response.read()
        finally:
            await self.close()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._response.release()
        await self._session.close()


class BytescaleClient:
    """
    Thin async client for the Bytescale Upload and File APIs.

    Retries and rate limiting are not handled here.
    """

    def __init__(
        self,
        api_key: str,
        account_id: Optional[str] = None,
        api_base: str = DEFAULT_API_BASE,
        cdn_base: str = DEFAULT_CDN_BASE,
        timeout: int = DEFAULT_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if not api_key:
            raise ValueError("Bytescale API key is required")
        self.api_key = api_key
        self.account_id = account_id
        self.api_base = api_base.rstrip("/")
        self.cdn_base = cdn_base.rstrip("/")
        self.timeout = timeout
        self.chunk_size = chunk_size

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if extra:
            headers.update(extra)
        return headers

    def _timeout(self, streaming_body: bool = False) -> aiohttp.ClientTimeout:
        """
        Connect and per-read timeouts; no total cap, so a stream may stay
        open as long as data keeps flowing. A streamed request body may also
        pause between chunks, which leaves nothing for a read timeout to time.
        """
        if streaming_body:
            return aiohttp.ClientTimeout(total=None, sock_connect=self.timeout)
        return aiohttp.ClientTimeout(total=None, sock_connect=self.timeout, sock_read=self.timeout)

    def _session(self, streaming_body: bool = False) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=self._timeout(streaming_body))

    def _account(self, account_id: Optional[str]) -> str:
        account = account_id or self.account_id
        if not account:
            raise ValueError("accountId is required")
        return account

    @staticmethod
    async def _raise_for_status(response: aiohttp.ClientResponse) -> None:
        if response.status < 400:
            return
        code = None
        message = response.reason or "request failed"
        try:
            body = await response.json(content_type=None)
            error = body.get("error", {}) if isinstance(body, dict) else {}
            code = error.get("code")
            message = error.get("message") or message
        except (ValueError, aiohttp.ContentTypeError):
            pass
        raise BytescaleApiError(response.status, message, code)

    def url(self, file_path: str, account_id: Optional[str] = None) -> str:
        return build_url(self._account(account_id), file_path, self.cdn_base)

    async def upload(
        self,
        data: Any,
        mime: Optional[str],
        original_file_name: Optional[str],
        folder_path: str,
        file_name: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> UploadResult:
        """
        Upload raw file content.

        Args:
            data: bytes, str, a binary file object or an async iterable of bytes
                (sent with chunked transfer encoding)
            mime: MIME type of the content
            original_file_name: Name recorded as the file's original name
            folder_path: Destination folder, e.g. "/uploads"
            file_name: Destination file name; Bytescale generates one when omitted
            account_id: Overrides the client's account id

        Returns:
            UploadResult
        """
        account = self._account(account_id)
        url = f"{self.api_base}/v2/accounts/{quote(account, safe='')}/uploads/binary"
        params = {"folderPath": folder_path}
        if file_name:
            # Store under exactly this name; "{UTC_DATE}" and friends stay literal
            params["fileName"] = file_name
            params["fileNameVariablesEnabled"] = "false"
        if original_file_name:
            params["originalFileName"] = original_file_name
        headers = self._headers({"Content-Type": mime or "application/octet-stream"})

        logger.debug(f"Bytescale upload: POST {url} params={params}")

        async with self._session(streaming_body=hasattr(data, "__aiter__")) as session:
            async with session.post(url, params=params, data=data, headers=headers) as response:
                await self._raise_for_status(response)
                body = await response.json(content_type=None)

        return UploadResult(
            file_url=body["fileUrl"],
            file_path=body["filePath"],
            etag=body.get("etag"),
        )

    async def delete_file(self, account_id: Optional[str], file_path: str) -> None:
        account = self._account(account_id)
        url = f"{self.api_base}/v2/accounts/{quote(account, safe='')}/files"

        logger.debug(f"Bytescale delete: DELETE {url} filePath={file_path}")

        async with self._session() as session:
            async with session.delete(url, params={"filePath": file_path}, headers=self._headers()) as response:
                await self._raise_for_status(response)

    async def download_file(self, account_id: Optional[str], file_path: str) -> DownloadResponse:
        """
        Start downloading a file. The caller must consume or close the
        returned response.
        """
        url = build_url(self._account(account_id), file_path, self.cdn_base)

        logger.debug(f"Bytescale download: GET {url}")

        session = self._session()
        try:
            response = await session.get(url, headers=self._headers())
            try:
                await self._raise_for_status(response)
            except BaseException:
                response.release()
                raise
        except BaseException:
            await session.close()
            raise
        return DownloadResponse(session, response, self.chunk_size)
