"""
请求级上下文：数据库会话、带用户标识的日志器、当前用户 id。
"""

from dataclasses import dataclass
from typing import Optional
import logging

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import TokenError, TokenExpiredError
from app.services import user_service


class RequestLogger(logging.LoggerAdapter):
    """在日志前加上 [uid=..] 前缀"""

    def process(self, msg, kwargs):
        uid = self.extra.get("user_id")
        if uid is not None:
            msg = f"[uid={uid}] {msg}"
        return msg, kwargs


@dataclass
class RequestContext:
    db: Session
    logger: logging.LoggerAdapter
    user_id: Optional[int] = None


def _make_logger(user_id: Optional[int] = None) -> RequestLogger:
    return RequestLogger(logging.getLogger("app.routers.user"), {"user_id": user_id})


def get_context(db: Session = Depends(get_db)) -> RequestContext:
    return RequestContext(db=db, logger=_make_logger())


def get_auth_context(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> RequestContext:
    """校验 Bearer 令牌并填充当前用户 id"""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise TokenError("未认证")
    token = authorization.split(" ", 1)[1].strip()
    user = user_service.find_by_token(db, token) if token else None
    if not user:
        raise TokenError()
    if user_service.is_expired(user.token_expires_in):
        raise TokenExpiredError()
    return RequestContext(db=db, logger=_make_logger(user.id), user_id=user.id)
