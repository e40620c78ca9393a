"""
数据模型定义
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, Any
from datetime import datetime

# 手机号（大陆 11 位）与 6 位数字验证码
PHONE_PATTERN = r"^1[3-9]\d{9}$"
CODE_PATTERN = r"^\d{6}$"


# 基础响应模型
class BaseResponse(BaseModel):
    """基础响应模型"""
    success: bool = True
    code: int = 0
    message: str = "操作成功"
    data: Optional[Any] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseModel):
    """错误响应模型"""
    success: bool = False
    code: int
    message: str
    data: None = None


# ============ 请求表单 ============

class RegisterForm(BaseModel):
    """注册 / 重置密码表单"""
    model_config = ConfigDict(populate_by_name=True)

    phone: str = Field(..., pattern=PHONE_PATTERN, description="手机号")
    code: str = Field(..., pattern=CODE_PATTERN, description="短信验证码")
    password: str = Field(..., min_length=1, max_length=64, description="密码")
    re_password: str = Field(..., alias="rePassword", min_length=1, max_length=64, description="确认密码")


class LoginForm(BaseModel):
    """登录表单：密码与验证码至少提供一个，同时提供时以密码为准"""
    phone: str = Field(..., pattern=PHONE_PATTERN, description="手机号")
    password: Optional[str] = Field(None, min_length=1, max_length=64, description="密码")
    code: Optional[str] = Field(None, pattern=CODE_PATTERN, description="短信验证码")

    @field_validator("password", "code", mode="before")
    @classmethod
    def _blank_as_missing(cls, v):
        if v == "":
            return None
        return v

    @model_validator(mode="after")
    def _require_credential(self):
        if not self.password and not self.code:
            raise ValueError("password 与 code 至少提供一个")
        return self


# ============ 响应数据 ============

class UserBrief(BaseModel):
    id: int
    nickname: str


class TokenData(BaseModel):
    token: str
    expires_in: int = Field(..., description="有效期(秒)")


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    phone: str
    nickname: str
    avatar: Optional[str] = None


class AvatarData(BaseModel):
    url: str
