"""
Pytest configuration and shared fakes for the file provider tests.

Async tests run on AnyIO's pytest plugin, pinned to the asyncio backend.
"""
import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from bytescale_provider.infrastructure.exceptions import BytescaleApiError
from bytescale_provider.infrastructure.external_apis.bytescale_client import UploadResult, build_url
from bytescale_provider.infrastructure.storage.object_storage import (
    BytescaleFileProviderService,
    ProviderConfig,
    build_file_path,
)

ACCOUNT_ID = "W142hJk"
API_KEY = "secret_test_key"


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeDownloadResponse:
    def __init__(self, chunks: Iterable[bytes], content_type: str = "application/octet-stream"):
        self._chunks = list(chunks)
        self.content_type = content_type
        self.closed = False

    async def iter_chunks(self):
        try:
            for chunk in self._chunks:
                await asyncio.sleep(0)
                yield chunk
        finally:
            await self.close()

    async def read(self) -> bytes:
        try:
            return b"".join(self._chunks)
        finally:
            await self.close()

    async def close(self) -> None:
        self.closed = True


class FakeBytescaleClient:
    """In-memory stand-in for BytescaleClient following Bytescale's naming rules"""

    def __init__(self, account_id: str = ACCOUNT_ID, files: Optional[Dict[str, bytes]] = None):
        self.account_id = account_id
        self.files: Dict[str, bytes] = dict(files or {})
        self.uploads: List[dict] = []
        self.deleted: List[str] = []
        self.fail_delete: set = set()
        self.responses: List[FakeDownloadResponse] = []

    async def upload(self, data, mime, original_file_name, folder_path, file_name=None, account_id=None):
        if isinstance(data, str):
            content = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray)):
            content = bytes(data)
        elif hasattr(data, "__aiter__"):
            content = b"".join([chunk async for chunk in data])
        else:
            content = data.read()
        # Without an explicit name Bytescale generates one
        name = file_name or f"{len(self.uploads) + 1:08d}-{original_file_name}"
        file_path = build_file_path(folder_path, name)
        self.files[file_path] = content
        self.uploads.append({
            "data": data,
            "mime": mime,
            "original_file_name": original_file_name,
            "folder_path": folder_path,
            "file_name": file_name,
        })
        return UploadResult(file_url=build_url(self.account_id, file_path), file_path=file_path)

    async def delete_file(self, account_id, file_path):
        await asyncio.sleep(0)
        if file_path in self.fail_delete or file_path not in self.files:
            raise BytescaleApiError(404, "File not found.", "file_not_found")
        del self.files[file_path]
        self.deleted.append(file_path)

    async def download_file(self, account_id, file_path):
        if file_path not in self.files:
            raise BytescaleApiError(404, "File not found.", "file_not_found")
        content = self.files[file_path]
        response = FakeDownloadResponse(content[i:i + 5] for i in range(0, len(content), 5))
        self.responses.append(response)
        return response


@pytest.fixture
def fake_client():
    return FakeBytescaleClient()


@pytest.fixture
def provider(fake_client):
    return BytescaleFileProviderService(
        ProviderConfig(api_key=API_KEY, account_id=ACCOUNT_ID),
        client=fake_client,
    )
