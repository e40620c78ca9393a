import logging
import uuid
from pathlib import Path
from typing import Dict, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)

AVATAR_URL_PREFIX = "/public/uploads/avatar"

# 常见图片格式的文件头
_MAGIC = {
    b"\xff\xd8\xff": "jpg",
    b"\x89PNG\r\n\x1a\n": "png",
    b"GIF87a": "gif",
    b"GIF89a": "gif",
}


def _guess_extension(buf: bytes, filename: Optional[str]) -> str:
    for magic, ext in _MAGIC.items():
        if buf.startswith(magic):
            return ext
    if buf[:4] == b"RIFF" and buf[8:12] == b"WEBP":
        return "webp"
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    return ""


def avatar_url(file_name: str) -> str:
    return f"{AVATAR_URL_PREFIX}/{file_name}"


def save_avatar(buf: bytes, user_id: int, filename: Optional[str] = None) -> Dict[str, str]:
    """
    保存头像图片，返回 {"file_name": 生成的文件名}。
    格式或大小不合法时抛出 ValueError，写盘失败抛出 OSError。
    """
    if not buf:
        raise ValueError("图片内容为空")
    if len(buf) > settings.max_avatar_size:
        raise ValueError(f"图片大小超过限制: {settings.max_avatar_size / 1024 / 1024:.1f}MB")
    ext = _guess_extension(buf, filename)
    if ext not in settings.allowed_avatar_formats:
        raise ValueError(f"不支持的图片格式: {ext or 'unknown'}")

    file_name = f"{user_id}_{uuid.uuid4().hex}.{ext}"
    target_dir = Path(settings.avatar_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / file_name).write_bytes(buf)
    logger.debug("[AVATAR] 写入 %s (%d bytes)", target_dir / file_name, len(buf))
    return {"file_name": file_name}
