"""
数据模型模块
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from app.core.db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String(32), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    pwd_key = Column(String(64), nullable=False)
    nickname = Column(String(64), nullable=False)
    avatar = Column(String(255), nullable=True)
    token = Column(String(64), unique=True, index=True, nullable=True)
    token_expires_in = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
