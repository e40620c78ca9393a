"""
用户服务：用户查找/创建、密码加密与校验、会话令牌签发与清除。
"""

from datetime import datetime, timedelta
from typing import Dict, Any, Optional, Tuple
import logging
import uuid

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import RegisteredError
from app.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _now() -> datetime:
    return datetime.utcnow()


def secret_password(password: str) -> Tuple[str, str]:
    """生成新的密钥并返回 (pwd_key, 加密后的密码)"""
    pwd_key = uuid.uuid4().hex
    return pwd_key, pwd_context.hash(pwd_key + password)


def check_password(user: User, password: str) -> bool:
    return pwd_context.verify(user.pwd_key + password, user.password)


def is_expired(expires_at: Optional[datetime]) -> bool:
    return expires_at is None or expires_at <= _now()


def default_nickname(phone: str) -> str:
    return f"用户{phone[-4:]}"


def find_by_phone(db: Session, phone: str) -> Optional[User]:
    return db.query(User).filter(User.phone == phone).first()


def find_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def find_by_token(db: Session, token: str) -> Optional[User]:
    return db.query(User).filter(User.token == token).first()


def create_user(db: Session, phone: str, password: str) -> User:
    pwd_key, signed = secret_password(password)
    user = User(phone=phone, password=signed, pwd_key=pwd_key, nickname=default_nickname(phone))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # 并发注册同一手机号时由唯一约束兜底
        db.rollback()
        raise RegisteredError()
    db.refresh(user)
    return user


def reset_password(db: Session, user: User, password: str):
    user.pwd_key, user.password = secret_password(password)
    db.add(user)
    db.commit()


def generate_token(db: Session, user_id: int) -> Dict[str, Any]:
    """为用户签发新令牌，旧令牌随之失效"""
    user = find_by_id(db, user_id)
    token = uuid.uuid4().hex
    user.token = token
    user.token_expires_in = _now() + timedelta(seconds=settings.token_expire_seconds)
    db.add(user)
    db.commit()
    return {"token": token, "expires_in": settings.token_expire_seconds}


def clear_token(db: Session, user_id: int):
    db.query(User).filter(User.id == user_id).update({User.token: None, User.token_expires_in: None})
    db.commit()


def update_avatar(db: Session, user_id: int, avatar_url: str):
    db.query(User).filter(User.id == user_id).update({User.avatar: avatar_url})
    db.commit()


def get_profile(db: Session, user_id: int) -> Optional[Dict[str, Any]]:
    user = find_by_id(db, user_id)
    if not user:
        return None
    return {
        "id": user.id,
        "phone": user.phone,
        "nickname": user.nickname,
        "avatar": user.avatar,
    }
