from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_502_BAD_GATEWAY,
)


class AppError(HTTPException):
    """业务错误基类：每个子类对应一种固定的错误码与默认提示。"""

    kind: str = "error"
    code: int = 1
    default_message: str = "请求失败"
    default_status: int = HTTP_400_BAD_REQUEST

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.default_status, detail=detail or self.default_message)


class InvalidParamError(AppError):
    kind = "invalidParam"
    code = 10001
    default_message = "请求参数不合法"


class PhoneCodeError(AppError):
    kind = "phoneCodeError"
    code = 10101
    default_message = "验证码错误或已过期"


class SmsServiceError(AppError):
    kind = "smsError"
    code = 10102
    default_message = "短信服务调用失败"
    default_status = HTTP_502_BAD_GATEWAY


class RegisteredError(AppError):
    kind = "registered"
    code = 10201
    default_message = "该手机号已注册"
    default_status = HTTP_409_CONFLICT


class UnregisteredError(AppError):
    kind = "unRegistered"
    code = 10301
    default_message = "该手机号未注册"
    default_status = HTTP_404_NOT_FOUND


class PasswordError(AppError):
    kind = "passwordError"
    code = 10302
    default_message = "密码错误"
    default_status = HTTP_401_UNAUTHORIZED


class TokenError(AppError):
    kind = "tokenError"
    code = 10401
    default_message = "无效令牌"
    default_status = HTTP_401_UNAUTHORIZED


class TokenExpiredError(AppError):
    kind = "tokenExpired"
    code = 10402
    default_message = "令牌已过期"
    default_status = HTTP_401_UNAUTHORIZED


class UploadError(AppError):
    kind = "uploadError"
    code = 10501
    default_message = "上传失败"
