#!/usr/bin/env python3
import argparse
import asyncio
import logging
import mimetypes
import os
import sys
from typing import List, Optional

from bytescale_provider.core.config import settings
from bytescale_provider.core.logging_config import setup_logging
from bytescale_provider.infrastructure.exceptions import InfrastructureError
from bytescale_provider.infrastructure.storage.object_storage import (
    DeleteFileRequest,
    FileProviderInterface,
    GetFileRequest,
    StorageFactory,
    UploadStreamRequest,
)

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 256 * 1024


async def upload(provider: FileProviderInterface, path: str, mime_type: Optional[str]) -> int:
    filename = os.path.basename(path)
    mime_type = mime_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    handle = await provider.get_upload_stream(UploadStreamRequest(filename=filename, mime_type=mime_type))
    logger.info(f"上传 {path} -> {handle.file_key}")

    try:
        async with handle.write_stream as stream:
            with open(path, "rb") as f:
                while True:
                    chunk = f.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    await stream.write(chunk)
    except BrokenPipeError:
        # The upload itself failed; awaiting completion raises its UploadFailed
        pass

    result = await handle.completion
    print(result.url)
    return 0


async def download(provider: FileProviderInterface, key: str, output: Optional[str]) -> int:
    stream = await provider.get_download_stream(GetFileRequest(file_key=key))
    async with stream:
        if output:
            with open(output, "wb") as f:
                async for chunk in stream:
                    f.write(chunk)
            logger.info(f"下载完成: {key} -> {output}")
        else:
            async for chunk in stream:
                sys.stdout.buffer.write(chunk)
    return 0


async def delete(provider: FileProviderInterface, keys: List[str]) -> int:
    results = await provider.delete_files([DeleteFileRequest(file_key=key) for key in keys])
    failed = [r for r in results if not r.success]
    logger.info(f"删除完成: {len(results) - len(failed)}/{len(results)} 成功")
    return 1 if failed else 0


async def url(provider: FileProviderInterface, key: str) -> int:
    print(await provider.get_presigned_download_url(GetFileRequest(file_key=key)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bytescale file provider")
    parser.add_argument("--provider", default=settings.DEFAULT_PROVIDER, help="provider identifier")
    sub = parser.add_subparsers(dest="command", required=True)

    p_upload = sub.add_parser("upload", help="stream a local file to Bytescale")
    p_upload.add_argument("path")
    p_upload.add_argument("--mime-type")

    p_download = sub.add_parser("download", help="download a file")
    p_download.add_argument("key")
    p_download.add_argument("-o", "--output")

    p_delete = sub.add_parser("delete", help="delete one or more files")
    p_delete.add_argument("keys", nargs="+")

    p_url = sub.add_parser("url", help="print the public URL of a file")
    p_url.add_argument("key")

    return parser


async def run(args: argparse.Namespace) -> int:
    provider = StorageFactory.create(args.provider)
    if args.command == "upload":
        return await upload(provider, args.path, args.mime_type)
    if args.command == "download":
        return await download(provider, args.key, args.output)
    if args.command == "delete":
        return await delete(provider, args.keys)
    return await url(provider, args.key)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log_filename = setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    if log_filename:
        logger.info(f"日志文件路径: {log_filename}")
    try:
        return asyncio.run(run(args))
    except InfrastructureError as e:
        logger.error(f"操作失败: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
