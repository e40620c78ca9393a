"""
研多多用户服务 - FastAPI后端主入口
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.routers import user as user_router
from app.core.config import settings, configure_logging
from app.core.db import Base, engine
from app.core.exceptions import AppError, InvalidParamError
from app.core.redis import close_redis
from app.models.schemas import ErrorResponse

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # 自动创建数据库表
    Base.metadata.create_all(bind=engine)
    yield
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    description="手机号注册登录、令牌管理与头像上传",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 静态文件：头像位于 /public/uploads/avatar/<name>
app.mount("/public", StaticFiles(directory=settings.public_dir), name="public")

app.include_router(user_router.router, prefix=settings.api_prefix)


def _fail(status_code: int, code: int, message: str) -> JSONResponse:
    body = ErrorResponse(code=code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# 统一异常返回格式：{success, code, message, data}
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.info("%s %s -> %s(%d): %s", request.method, request.url.path, exc.kind, exc.code, exc.detail)
    return _fail(exc.status_code, exc.code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("%s %s 参数校验失败: %s", request.method, request.url.path, exc.errors())
    err = InvalidParamError()
    return _fail(err.status_code, err.code, err.detail)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _fail(exc.status_code, exc.status_code, exc.detail)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", str(exc))
    return _fail(500, 500, "内部服务错误")


@app.get("/api/health")
async def health_check():
    """健康检查接口"""
    return {
        "status": "healthy",
        "message": "用户服务运行正常",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=(settings.log_level or "info").lower()
    )
