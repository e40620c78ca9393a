"""
应用配置模块
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

# 运行环境：local / prod，对应 .env.<APP_ENV> 覆盖文件
APP_ENV = os.getenv("APP_ENV", "local")


class Settings(BaseSettings):
    """应用配置类"""

    # 应用基础配置
    app_name: str = "研多多用户服务"
    app_version: str = "1.0.0"
    debug: bool = False

    # API配置
    api_prefix: str = "/api"

    # 数据库配置
    database_url: str = "sqlite:///./yanduoduo.db"

    # Redis 配置（验证码存储）
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # 静态资源与头像上传配置
    public_dir: str = "public"
    max_avatar_size: int = 5 * 1024 * 1024  # 5MB
    allowed_avatar_formats: List[str] = ["jpg", "jpeg", "png", "gif", "webp"]

    # CORS配置
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # 会话令牌与验证码
    token_expire_seconds: int = 7 * 24 * 3600  # 7天
    phone_code_ttl: int = 300  # 5分钟

    # 短信推送服务配置（例如 spug），留空则只打日志不真正发送
    # 示例： https://push.spug.cc/send/<TOKEN>
    sms_push_url: str = ""
    sms_push_name: str = "推送助手"
    sms_request_timeout: float = 10.0

    # 日志配置
    log_level: str = "INFO"
    log_file: str = "logs/app.log"

    model_config = SettingsConfigDict(
        env_file=(".env", f".env.{APP_ENV}"),
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def avatar_dir(self) -> Path:
        return Path(self.public_dir) / "uploads" / "avatar"


# 创建全局配置实例
def _load_settings() -> Settings:
    s = Settings()
    # 生产环境下 Redis 默认使用 db1（可被环境变量覆盖）
    if APP_ENV == "prod" and "REDIS_DB" not in os.environ:
        s.redis_db = 1
    return s


settings = _load_settings()


# 确保必要的目录存在
def ensure_directories():
    """确保必要的目录存在"""
    directories = [
        settings.avatar_dir,
        Path(settings.log_file).parent,
    ]
    for directory in directories:
        Path(directory).mkdir(parents=True, exist_ok=True)


# 初始化目录
ensure_directories()


# 自定义日志格式化器（去除app前缀，添加毫秒）
class CustomFormatter(logging.Formatter):
    """自定义格式化器，去除logger name中的app.前缀，并添加毫秒精度"""
    def formatTime(self, record, datefmt=None):
        import time
        ct = time.localtime(record.created)
        if datefmt:
            s = time.strftime(datefmt, ct)
        else:
            s = time.strftime("%H:%M:%S", ct)
        # 添加毫秒
        s = s + f".{int(record.msecs):03d}"
        return s

    def format(self, record):
        if record.name.startswith('app.'):
            record.name = record.name[4:]
        return super().format(record)


# 日志统一初始化（集中式）
def configure_logging():
    """
    依据 Settings 中的 log_level 与 log_file 统一配置日志：
    - 设置 root logger 等级
    - 标准输出与文件（可轮转）双通道输出
    - 第三方库降噪
    可重复调用，具备幂等性（会复用已有 handler 并更新其等级与格式）。
    """
    level_name = (settings.log_level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = CustomFormatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # 控制台输出（存在则更新，没有则添加）
    stream_handler = None
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            stream_handler = h
            break
    if stream_handler is None:
        stream_handler = logging.StreamHandler()
        root_logger.addHandler(stream_handler)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)

    # 文件输出（轮转），存在则更新，没有则添加
    log_file_path = settings.log_file or "logs/app.log"
    os.makedirs(os.path.dirname(log_file_path) or ".", exist_ok=True)

    file_handler = None
    for h in root_logger.handlers:
        if isinstance(h, logging.FileHandler):
            file_handler = h
            break
    if file_handler is None:
        file_handler = RotatingFileHandler(log_file_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        root_logger.addHandler(file_handler)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # 第三方库降噪
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
