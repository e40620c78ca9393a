"""
上传流的作用域管理：出错时把剩余内容读空，任何情况下都会关闭。
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


async def read_all(file: UploadFile, limit: Optional[int] = None) -> bytes:
    """读取全部内容；超过 limit 字节时立即抛出 ValueError"""
    parts = []
    total = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if limit is not None and total > limit:
            raise ValueError(f"文件大小超过限制: {limit} bytes")
        parts.append(chunk)
    return b"".join(parts)


async def drain(file: UploadFile) -> int:
    """丢弃剩余内容，返回丢弃的字节数"""
    dropped = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            return dropped
        dropped += len(chunk)


@asynccontextmanager
async def upload_stream(file: UploadFile):
    try:
        yield file
    except Exception:
        try:
            dropped = await drain(file)
            if dropped:
                logger.debug("[UPLOAD] 丢弃未读取内容 %d bytes", dropped)
        finally:
            await file.close()
        raise
    else:
        await file.close()
