import os
import tempfile

# 必须在导入 app 之前设置：静态目录与日志写到临时目录
_TMP_ROOT = tempfile.mkdtemp(prefix="yanduoduo-test-")
os.environ["PUBLIC_DIR"] = os.path.join(_TMP_ROOT, "public")
os.environ["LOG_FILE"] = os.path.join(_TMP_ROOT, "logs", "app.log")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SMS_PUSH_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.db import Base, get_db
from app.core.redis import get_redis
from app.services import phone_code_service, user_service


class FakeRedis:
    """内存版 Redis，只实现验证码用到的命令"""

    def __init__(self):
        self.store = {}
        self.ttl = {}

    async def set(self, key, value, ex=None):
        self.store[key] = str(value)
        self.ttl[key] = ex
        return True

    async def get(self, key):
        return self.store.get(key)

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttl.pop(key, None)
        return removed


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def redis():
    return FakeRedis()


@pytest.fixture
def client(session_factory, redis):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis] = lambda: redis
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def issue_code(redis):
    """直接往 Redis 写入验证码，模拟用户已收到短信"""
    def _issue(phone, code="123456"):
        redis.store[phone_code_service._key(phone)] = code
        return code
    return _issue


@pytest.fixture
def make_user(db):
    def _make(phone="13800000000", password="secret"):
        return user_service.create_user(db, phone, password)
    return _make


@pytest.fixture
def login(client):
    """密码登录并返回 Authorization 头"""
    def _login(phone="13800000000", password="secret"):
        resp = client.post("/api/user/login", json={"phone": phone, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['data']['token']}"}
    return _login
