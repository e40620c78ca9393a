"""
服务层入口：用户、验证码、短信推送与头像存储。

约定：
- 数据库访问统一接收调用方传入的 Session
- 验证码存放在 Redis，短信推送使用 httpx.AsyncClient
- 从 app.core.config.settings 读取有效期、存储目录与外部服务地址
"""

__all__ = [
    "user_service",
    "phone_code_service",
    "sms_service",
    "avatar_service",
]
