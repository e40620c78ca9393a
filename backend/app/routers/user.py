"""
用户API路由器 - 注册、登录、重置密码、令牌刷新、个人信息、头像、退出登录
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile
from typing import Optional
from redis.asyncio import Redis

from app.core.config import settings
from app.core.context import RequestContext, get_auth_context, get_context
from app.core.exceptions import (
    InvalidParamError, PhoneCodeError, RegisteredError, UnregisteredError,
    PasswordError, TokenError, TokenExpiredError, UploadError,
)
from app.core.redis import get_redis
from app.core.uploads import read_all, upload_stream
from app.models.schemas import (
    BaseResponse, RegisterForm, LoginForm, UserBrief, TokenData,
    UserProfile, AvatarData, PHONE_PATTERN,
)
from app.services import avatar_service, phone_code_service, user_service

router = APIRouter(prefix="/user", tags=["用户"])


@router.get("/phone-code", response_model=BaseResponse, summary="发送短信验证码")
async def get_phone_code(
    phone: str = Query(..., pattern=PHONE_PATTERN, description="手机号"),
    ctx: RequestContext = Depends(get_context),
    redis: Redis = Depends(get_redis),
):
    ttl = await phone_code_service.send_code(redis, phone)
    ctx.logger.info("成功发送验证码 phone=%s", phone)
    return BaseResponse(message="验证码已发送", data={"ttl": ttl})


@router.post("/register", response_model=BaseResponse, summary="手机号注册")
async def register(
    form: RegisterForm,
    ctx: RequestContext = Depends(get_context),
    redis: Redis = Depends(get_redis),
):
    if form.password != form.re_password:
        raise InvalidParamError("两次输入的密码不一致")
    if not await phone_code_service.check_code(redis, form.phone, form.code):
        raise PhoneCodeError()
    if user_service.find_by_phone(ctx.db, form.phone):
        raise RegisteredError()

    user = user_service.create_user(ctx.db, form.phone, form.password)
    ctx.logger.info("用户 %s 创建成功，id 为 %d", user.nickname, user.id)
    return BaseResponse(message="创建用户成功", data=UserBrief(id=user.id, nickname=user.nickname))


@router.post("/login", response_model=BaseResponse, summary="密码或短信验证码登录")
async def login(
    form: LoginForm,
    ctx: RequestContext = Depends(get_context),
    redis: Redis = Depends(get_redis),
):
    user = user_service.find_by_phone(ctx.db, form.phone)
    if not user:
        raise UnregisteredError()

    if form.password:
        # 手机号密码登录
        if not user_service.check_password(user, form.password):
            raise PasswordError()
    else:
        # 手机短信登录
        if not await phone_code_service.check_code(redis, form.phone, form.code):
            raise PhoneCodeError()
        await phone_code_service.consume_code(redis, form.phone)

    token = user_service.generate_token(ctx.db, user.id)
    ctx.logger.info("用户 %d 登录成功", user.id)
    return BaseResponse(message="登录成功", data=TokenData(**token))


@router.post("/password/reset", response_model=BaseResponse, summary="通过短信验证码重置密码")
async def reset_password(
    form: RegisterForm,
    ctx: RequestContext = Depends(get_context),
    redis: Redis = Depends(get_redis),
):
    if form.password != form.re_password:
        raise InvalidParamError("两次输入的密码不一致")
    user = user_service.find_by_phone(ctx.db, form.phone)
    if not user:
        raise UnregisteredError()
    if not await phone_code_service.check_code(redis, form.phone, form.code):
        raise PhoneCodeError()

    user_service.reset_password(ctx.db, user, form.password)
    await phone_code_service.consume_code(redis, form.phone)
    ctx.logger.info("用户 %d 修改密码", user.id)
    return BaseResponse(message="密码已重置")


@router.get("/token/refresh", response_model=BaseResponse, summary="刷新令牌")
async def refresh_token(
    token: Optional[str] = Query(None, description="当前令牌"),
    ctx: RequestContext = Depends(get_context),
):
    if not token:
        raise TokenError()

    ctx.logger.info("刷新 token")
    user = user_service.find_by_token(ctx.db, token)
    if not user:
        raise TokenError()
    if user_service.is_expired(user.token_expires_in):
        raise TokenExpiredError()

    new_token = user_service.generate_token(ctx.db, user.id)
    ctx.logger.info("用户 %d 刷新 token 成功", user.id)
    return BaseResponse(message="刷新成功", data=TokenData(**new_token))


@router.get("/profile", response_model=BaseResponse, summary="获取当前用户信息")
async def get_profile(ctx: RequestContext = Depends(get_auth_context)):
    profile = user_service.get_profile(ctx.db, ctx.user_id)
    return BaseResponse(message="成功获取用户信息", data=UserProfile(**profile))


@router.post("/avatar", response_model=BaseResponse, summary="上传头像")
async def upload_avatar(
    file: Optional[UploadFile] = File(None, description="头像图片"),
    ctx: RequestContext = Depends(get_auth_context),
):
    user_id = ctx.user_id
    ctx.logger.info("用户 %d 上传头像", user_id)
    if file is None:
        raise UploadError("未找到上传文件")

    async with upload_stream(file):
        try:
            buf = await read_all(file, limit=settings.max_avatar_size)
            info = avatar_service.save_avatar(buf, user_id, file.filename)
        except Exception as e:
            ctx.logger.error("保存头像失败: %s", e)
            raise UploadError()
    file_name = info["file_name"]
    ctx.logger.info("成功保存图片，图片名称为：%s", file_name)

    url = avatar_service.avatar_url(file_name)
    user_service.update_avatar(ctx.db, user_id, url)
    ctx.logger.info("修改头像成功")
    return BaseResponse(message="修改成功", data=AvatarData(url=url))


@router.post("/logout", response_model=BaseResponse, summary="退出登录")
async def logout(ctx: RequestContext = Depends(get_auth_context)):
    user_service.clear_token(ctx.db, ctx.user_id)
    ctx.logger.info("用户 %s 退出登录", ctx.user_id)
    return BaseResponse(message="退出登录成功")
