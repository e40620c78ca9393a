"""
Redis 客户端（验证码存储）
"""

import logging
from typing import Optional

from redis.asyncio import Redis

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


def get_redis() -> Redis:
    """获取或创建全局 Redis 客户端"""
    global _client
    if _client is None:
        _client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )
        logger.info("[Redis] 创建客户端 %s:%d/%d", settings.redis_host, settings.redis_port, settings.redis_db)
    return _client


async def close_redis():
    """关闭全局 Redis 客户端（用于应用关闭时清理资源）"""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("[Redis] 关闭客户端")
