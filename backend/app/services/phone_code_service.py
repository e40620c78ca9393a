"""
短信验证码：生成、存入 Redis（带过期时间）、校验与作废。

同一手机号只保留最新一条验证码；校验本身不会作废验证码，
由调用方在登录、重置密码成功后调用 consume_code。
"""

import logging
import uuid

from redis.asyncio import Redis

from app.core.config import settings
from app.core.exceptions import SmsServiceError
from app.services import sms_service

logger = logging.getLogger(__name__)

KEY_PREFIX = "phone_code:"


def _key(phone: str) -> str:
    return f"{KEY_PREFIX}{phone}"


def generate_code() -> str:
    return f"{uuid.uuid4().int % 1000000:06d}"


async def send_code(redis: Redis, phone: str) -> int:
    """生成并发送验证码，返回有效期(秒)"""
    code = generate_code()
    ttl = settings.phone_code_ttl
    await redis.set(_key(phone), code, ex=ttl)
    ok = await sms_service.send_sms_code(phone, code)
    if not ok:
        await redis.delete(_key(phone))
        raise SmsServiceError()
    logger.info("[CODE] 已发送验证码 phone=%s ttl=%ds", phone, ttl)
    return ttl


async def check_code(redis: Redis, phone: str, code: str) -> bool:
    saved = await redis.get(_key(phone))
    if saved is None:
        logger.info("[CODE] 验证码不存在或已过期 phone=%s", phone)
        return False
    return str(saved) == str(code)


async def consume_code(redis: Redis, phone: str):
    await redis.delete(_key(phone))
