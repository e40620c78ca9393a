import logging
import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


async def send_sms_code(phone: str, code: str) -> bool:
    """调用外部短信推送服务。配置 settings.sms_push_url，形如：
    https://push.spug.cc/send/<TOKEN>
    """
    if not settings.sms_push_url:
        logger.warning("[SMS] push url not configured; skip real sending. phone=%s code=%s", phone, code)
        return True
    url = settings.sms_push_url.strip()
    payload = {
        "name": settings.sms_push_name,
        "code": code,
        "targets": phone,
    }
    timeout = httpx.Timeout(settings.sms_request_timeout, connect=5.0)
    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            resp = await client.post(url, json=payload)
            resp.raise_for_status()
            logger.info("[SMS] push resp: %s", resp.json())
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[SMS] failed to send to %s: %s", phone, e)
            return False
