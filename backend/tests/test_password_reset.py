from app.services import phone_code_service


def _reset(client, **overrides):
    body = {"phone": "13800000000", "code": "123456", "password": "newpass", "rePassword": "newpass"}
    body.update(overrides)
    return client.post("/api/user/password/reset", json=body)


def test_reset_password(client, make_user, issue_code, redis):
    make_user("13800000000", "oldpass")
    issue_code("13800000000")

    resp = _reset(client)
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert phone_code_service._key("13800000000") not in redis.store

    old = client.post("/api/user/login", json={"phone": "13800000000", "password": "oldpass"})
    assert old.json()["code"] == 10302
    new = client.post("/api/user/login", json={"phone": "13800000000", "password": "newpass"})
    assert new.status_code == 200


def test_reset_changes_key(client, db, make_user, issue_code):
    user = make_user("13800000000", "oldpass")
    old_key = user.pwd_key
    issue_code("13800000000")
    _reset(client)
    db.refresh(user)
    assert user.pwd_key != old_key


def test_reset_unregistered(client, issue_code):
    issue_code("13800000000")
    resp = _reset(client)
    assert resp.json()["code"] == 10301


def test_reset_wrong_code(client, make_user, issue_code):
    make_user("13800000000", "oldpass")
    issue_code("13800000000", "999999")
    resp = _reset(client)
    assert resp.json()["code"] == 10101

    still_old = client.post("/api/user/login", json={"phone": "13800000000", "password": "oldpass"})
    assert still_old.status_code == 200


def test_reset_mismatch(client, make_user, issue_code):
    make_user("13800000000", "oldpass")
    issue_code("13800000000")
    resp = _reset(client, rePassword="different")
    assert resp.json()["code"] == 10001
