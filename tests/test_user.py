from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import settings
from app.core.security import create_session_token, decode_session_token
from app.main import app
from asyncio import run

NUMBER = "9876543210"


def _stored(db, number=NUMBER):
    return run(db.users.find_one({"number": number}))


def test_send_otp_rejects_bad_number(client, db):
    response = client.post("/api/user/send-otp", json={"number": "12345"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid Mobile Number."
    assert _stored(db, "12345") is None


def test_send_otp_creates_unverified_account(client, db):
    response = client.post("/api/user/send-otp", json={"number": NUMBER})
    assert response.status_code == 200
    assert response.json()["success"] is True

    account = _stored(db)
    assert account["is_verified"] is False
    assert account["credit"] == settings.DEFAULT_CREDIT
    assert len(account["otp"]) == 6 and account["otp"].isdigit()
    assert account["otp_expiry"] > datetime.utcnow()


def test_send_otp_again_replaces_otp(client, db):
    client.post("/api/user/send-otp", json={"number": NUMBER})
    first = _stored(db)
    client.post("/api/user/send-otp", json={"number": NUMBER})
    second = _stored(db)

    assert first["_id"] == second["_id"]
    assert run(db.users.count_documents({"number": NUMBER})) == 1


def test_verify_otp_unknown_number(client, db):
    response = client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": "123456"})
    assert response.status_code == 404


def test_verify_otp_requires_both_fields(client, db):
    response = client.post("/api/user/verify-otp", json={"number": NUMBER})
    assert response.status_code == 400


def test_verify_otp_mismatch_keeps_stored_otp(client, db):
    client.post("/api/user/send-otp", json={"number": NUMBER})
    otp = _stored(db)["otp"]
    wrong = "111111" if otp != "111111" else "222222"

    response = client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": wrong})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired OTP."
    account = _stored(db)
    assert account["otp"] == otp
    assert account["is_verified"] is False
    assert settings.SESSION_COOKIE_NAME not in client.cookies


def test_verify_otp_expired_keeps_stored_otp(client, db):
    client.post("/api/user/send-otp", json={"number": NUMBER})
    otp = _stored(db)["otp"]
    run(db.users.update_one(
        {"number": NUMBER},
        {"$set": {"otp_expiry": datetime.utcnow() - timedelta(minutes=1)}}
    ))

    response = client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": otp})

    assert response.status_code == 401
    assert _stored(db)["otp"] == otp


def test_verify_otp_success_new_user(client, db):
    client.post("/api/user/send-otp", json={"number": NUMBER})
    otp = _stored(db)["otp"]

    response = client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": otp})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["isNewUser"] is True
    assert data["user"]["number"] == NUMBER
    assert data["user"]["name"] is None
    assert data["user"]["stage"] == "VERIFIED"
    assert "otp" not in data["user"]
    assert decode_session_token(data["token"]) == data["user"]["_id"]

    set_cookie = response.headers["set-cookie"]
    assert f"{settings.SESSION_COOKIE_NAME}=" in set_cookie
    assert "httponly" in set_cookie.lower()

    account = _stored(db)
    assert account["otp"] is None
    assert account["otp_expiry"] is None
    assert account["is_verified"] is True


def test_verify_otp_malformed_code_is_rejected(client, db):
    client.post("/api/user/send-otp", json={"number": NUMBER})
    otp = _stored(db)["otp"]

    for bad in ["12ab56", otp[:-1], otp + "7"]:
        response = client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": bad})
        assert response.status_code == 401, bad
        assert response.json()["message"] == "Invalid or expired OTP."

    assert _stored(db)["otp"] == otp
    assert client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": f" {otp} "}).status_code == 200


def test_otp_is_single_use(client, db):
    client.post("/api/user/send-otp", json={"number": NUMBER})
    otp = _stored(db)["otp"]

    assert client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": otp}).status_code == 200
    assert client.post("/api/user/verify-otp", json={"number": NUMBER, "otp": otp}).status_code == 401


def test_returning_user_is_not_new(login, db):
    login(NUMBER)

    session = TestClient(app)
    session.post("/api/user/send-otp", json={"number": NUMBER})
    otp = _stored(db)["otp"]
    response = session.post("/api/user/verify-otp", json={"number": NUMBER, "otp": otp})

    assert response.json()["isNewUser"] is False


def test_update_details_completes_profile(login, db):
    session = login(NUMBER)

    response = session.post(
        "/api/user/update-details",
        json={"name": "Ravi Traders", "address": "MG Road", "pin": "4321"}
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Ravi Traders"
    assert user["address"] == "MG Road"
    assert user["hasPin"] is True
    assert user["stage"] == "PROFILE_COMPLETE"
    assert "pin" not in user
    assert _stored(db)["pin"] == 4321


def test_update_details_keeps_address_when_omitted(login, db):
    session = login(NUMBER)
    session.post("/api/user/update-details", json={"name": "A", "address": "Old Street", "pin": "1234"})

    response = session.post("/api/user/update-details", json={"name": "B", "pin": "1234"})

    assert response.json()["user"]["address"] == "Old Street"


def test_update_details_validation(login):
    session = login(NUMBER)

    missing_name = session.post("/api/user/update-details", json={"pin": "1234"})
    assert missing_name.status_code == 400

    for bad_pin in ["0123", "123", "12345", None]:
        response = session.post("/api/user/update-details", json={"name": "A", "pin": bad_pin})
        assert response.status_code == 400, bad_pin


def test_profile(login):
    session = login(NUMBER, name="Ravi")

    response = session.get("/api/user/profile")

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Ravi"
    assert user["credit"] == settings.DEFAULT_CREDIT
    assert user["isVerified"] is True


def test_use_credit_decrements_once_per_call(login, db):
    session = login(NUMBER)
    run(db.users.update_one({"number": NUMBER}, {"$set": {"credit": 2}}))

    first = session.post("/api/user/use-credit")
    assert first.status_code == 200
    assert first.json()["newCredit"] == 1

    second = session.post("/api/user/use-credit")
    assert second.json()["newCredit"] == 0

    assert _stored(db)["credit"] == 0


def test_use_credit_with_zero_balance_is_forbidden(login, db):
    session = login(NUMBER)
    run(db.users.update_one({"number": NUMBER}, {"$set": {"credit": 0}}))

    response = session.post("/api/user/use-credit")

    assert response.status_code == 403
    assert response.json()["message"] == "You have no credits left."
    assert _stored(db)["credit"] == 0


def test_logout_clears_session(login):
    session = login(NUMBER)
    assert session.get("/api/user/profile").status_code == 200

    response = session.post("/api/user/logout")

    assert response.status_code == 200
    assert session.get("/api/user/profile").status_code == 401


def test_tampered_and_expired_tokens_are_rejected(login):
    session = login(NUMBER)
    account_id = session.account_id

    forged = jwt.encode({"id": account_id}, "some-other-secret", algorithm="HS256")
    session.cookies.clear()
    session.cookies.set(settings.SESSION_COOKIE_NAME, forged)
    assert session.get("/api/user/profile").status_code == 401

    expired = jwt.encode(
        {"id": account_id, "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    session.cookies.clear()
    session.cookies.set(settings.SESSION_COOKIE_NAME, expired)
    assert session.get("/api/user/profile").status_code == 401


def test_session_for_deleted_account(client, db):
    from bson import ObjectId

    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token(str(ObjectId())))
    assert client.get("/api/user/profile").status_code == 404
