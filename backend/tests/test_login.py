from app.models import User
from app.services import phone_code_service


def test_password_login_issues_token(client, db, make_user):
    user = make_user("13800000000", "secret")
    resp = client.post("/api/user/login", json={"phone": "13800000000", "password": "secret"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data["token"]) == 32
    assert data["expires_in"] > 0

    db.expire_all()
    stored = db.query(User).filter(User.id == user.id).one()
    assert stored.token == data["token"]
    assert stored.token_expires_in is not None


def test_wrong_password(client, db, make_user):
    user = make_user("13800000000", "secret")
    resp = client.post("/api/user/login", json={"phone": "13800000000", "password": "nope"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == 10302
    assert body["data"] is None

    db.expire_all()
    assert db.query(User).filter(User.id == user.id).one().token is None


def test_unregistered_phone(client):
    resp = client.post("/api/user/login", json={"phone": "13800000001", "password": "secret"})
    assert resp.status_code == 404
    assert resp.json()["code"] == 10301


def test_sms_login_consumes_code(client, make_user, issue_code, redis):
    make_user("13800000000", "secret")
    issue_code("13800000000", "246810")

    resp = client.post("/api/user/login", json={"phone": "13800000000", "code": "246810"})
    assert resp.status_code == 200
    assert resp.json()["data"]["token"]
    assert phone_code_service._key("13800000000") not in redis.store

    resp = client.post("/api/user/login", json={"phone": "13800000000", "code": "246810"})
    assert resp.json()["code"] == 10101


def test_sms_login_wrong_code(client, make_user, issue_code):
    make_user("13800000000", "secret")
    issue_code("13800000000", "246810")
    resp = client.post("/api/user/login", json={"phone": "13800000000", "code": "111111"})
    assert resp.json()["code"] == 10101


def test_password_takes_precedence_over_code(client, make_user):
    make_user("13800000000", "secret")
    resp = client.post("/api/user/login", json={"phone": "13800000000", "password": "secret", "code": "000000"})
    assert resp.status_code == 200


def test_requires_password_or_code(client, make_user):
    make_user("13800000000", "secret")
    resp = client.post("/api/user/login", json={"phone": "13800000000"})
    assert resp.status_code == 400
    assert resp.json()["code"] == 10001


def test_new_login_replaces_old_token(client, make_user):
    make_user("13800000000", "secret")
    first = client.post("/api/user/login", json={"phone": "13800000000", "password": "secret"}).json()["data"]["token"]
    second = client.post("/api/user/login", json={"phone": "13800000000", "password": "secret"}).json()["data"]["token"]
    assert first != second
    resp = client.get("/api/user/profile", headers={"Authorization": f"Bearer {first}"})
    assert resp.json()["code"] == 10401


def test_blank_password_falls_back_to_code(client, make_user, issue_code):
    make_user("13800000000", "secret")
    issue_code("13800000000", "246810")
    resp = client.post("/api/user/login", json={"phone": "13800000000", "password": "", "code": "246810"})
    assert resp.status_code == 200
    assert resp.json()["data"]["token"]


def test_blank_password_and_code_is_invalid(client, make_user):
    make_user("13800000000", "secret")
    resp = client.post("/api/user/login", json={"phone": "13800000000", "password": "", "code": ""})
    assert resp.json()["code"] == 10001
