import re
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, unquote, urlparse

from sqlalchemy.orm import Session

from app.domain.password_reset import ResetTokenPolicy
from app.repositories.user import get_user_by_email, set_password_reset_token
from app.services.auth import FORGOT_PASSWORD_MESSAGE, INVALID_RESET_TOKEN_MESSAGE


def _request_reset(client, email: str):
    return client.post("/api/v1/auth/forgot-password", json={"email": email})


def _token_from_email(message: dict) -> str:
    match = re.search(r'href="([^"]+)"', message["html"])
    assert match, "reset link missing from email body"
    url = urlparse(match.group(1).replace("&amp;", "&"))
    return parse_qs(url.query)["token"][0]


# ============================================================================
# FORGOT PASSWORD TESTS
# ============================================================================


def test_forgot_password_sends_link_to_admin(
    client, db: Session, email_sender, admin_user: dict, sale_user_dict: dict
):
    response = _request_reset(client, sale_user_dict["email"])

    assert response.status_code == 200
    assert response.json()["message"] == FORGOT_PASSWORD_MESSAGE
    assert len(email_sender.sent) == 1
    message = email_sender.sent[0]
    assert message["to"] == admin_user["email"]
    assert message["subject"].startswith("Password Reset Request")
    assert sale_user_dict["email"] in unquote(message["html"])

    user = get_user_by_email(db, sale_user_dict["email"])
    db.refresh(user)
    token = _token_from_email(message)
    # Only the digest is stored
    assert user.reset_token_hash is not None
    assert user.reset_token_hash != token
    assert user.reset_token_expires is not None


def test_forgot_password_unknown_email(client, email_sender):
    response = _request_reset(client, "nobody@example.com")
    assert response.status_code == 200
    assert response.json()["message"] == FORGOT_PASSWORD_MESSAGE
    assert email_sender.sent == []


def test_forgot_password_inactive_account(client, email_sender, user_factory):
    user = user_factory("dormant@example.com", is_active=False)
    response = _request_reset(client, user["email"])
    assert response.status_code == 200
    assert response.json()["message"] == FORGOT_PASSWORD_MESSAGE
    assert email_sender.sent == []


def test_forgot_password_delivery_failure_clears_token(
    client, db: Session, email_sender, sale_user_dict: dict
):
    email_sender.fail = True

    response = _request_reset(client, sale_user_dict["email"])

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "DELIVERY_FAILED"
    assert body["message"] == "Failed to send password reset email. Please try again later."
    user = get_user_by_email(db, sale_user_dict["email"])
    db.refresh(user)
    assert user.reset_token_hash is None
    assert user.reset_token_expires is None


# ============================================================================
# RESET PASSWORD TESTS
# ============================================================================


def test_reset_password_flow(client, email_sender, sale_user_dict: dict):
    _request_reset(client, sale_user_dict["email"])
    token = _token_from_email(email_sender.sent[0])

    response = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": token, "new_password": "Recovered123!"},
    )
    assert response.status_code == 200
    assert "reset successfully" in response.json()["message"]

    login = client.post(
        "/api/v1/auth/login",
        json={"email": sale_user_dict["email"], "password": "Recovered123!"},
    )
    assert login.status_code == 200


def test_reset_token_is_single_use(client, email_sender, sale_user_dict: dict):
    _request_reset(client, sale_user_dict["email"])
    token = _token_from_email(email_sender.sent[0])
    payload = {"email": sale_user_dict["email"], "token": token, "new_password": "Recovered123!"}

    assert client.post("/api/v1/auth/reset-password", json=payload).status_code == 200

    payload["new_password"] = "SecondTry123!"
    second = client.post("/api/v1/auth/reset-password", json=payload)
    assert second.status_code == 400
    assert second.json()["message"] == INVALID_RESET_TOKEN_MESSAGE


def test_new_request_invalidates_previous_token(client, email_sender, sale_user_dict: dict):
    _request_reset(client, sale_user_dict["email"])
    _request_reset(client, sale_user_dict["email"])
    first_token = _token_from_email(email_sender.sent[0])
    second_token = _token_from_email(email_sender.sent[1])
    assert first_token != second_token

    stale = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": first_token, "new_password": "Recovered123!"},
    )
    assert stale.status_code == 400

    fresh = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": second_token, "new_password": "Recovered123!"},
    )
    assert fresh.status_code == 200


def test_expired_reset_token_is_rejected(client, db: Session, sale_user_dict: dict):
    issued = ResetTokenPolicy().generate(
        now=datetime.now(timezone.utc) - timedelta(minutes=16)
    )
    set_password_reset_token(db, sale_user_dict["id"], issued.token_hash, issued.expires_at)

    response = client.post(
        "/api/v1/auth/reset-password",
        json={
            "email": sale_user_dict["email"],
            "token": issued.plain_token,
            "new_password": "Recovered123!",
        },
    )
    assert response.status_code == 400
    assert response.json()["message"] == INVALID_RESET_TOKEN_MESSAGE


def test_reset_with_wrong_token(client, email_sender, sale_user_dict: dict):
    _request_reset(client, sale_user_dict["email"])

    response = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": "f" * 64, "new_password": "Recovered123!"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == INVALID_RESET_TOKEN_MESSAGE


def test_reset_for_unknown_email(client):
    response = client.post(
        "/api/v1/auth/reset-password",
        json={"email": "nobody@example.com", "token": "f" * 64, "new_password": "Recovered123!"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == INVALID_RESET_TOKEN_MESSAGE


def test_reset_with_weak_password_keeps_token(client, email_sender, sale_user_dict: dict):
    _request_reset(client, sale_user_dict["email"])
    token = _token_from_email(email_sender.sent[0])

    weak = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": token, "new_password": "weakpassword"},
    )
    assert weak.status_code == 400
    assert "uppercase" in weak.json()["message"]

    retry = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": token, "new_password": "Recovered123!"},
    )
    assert retry.status_code == 200


def test_change_password_clears_pending_reset(
    client, db: Session, email_sender, sale_token: str, sale_user_dict: dict
):
    _request_reset(client, sale_user_dict["email"])
    token = _token_from_email(email_sender.sent[0])

    client.put(
        "/api/v1/auth/change-password",
        json={"current_password": sale_user_dict["password"], "new_password": "BrandNew123!"},
        headers={"Authorization": f"Bearer {sale_token}"},
    )

    response = client.post(
        "/api/v1/auth/reset-password",
        json={"email": sale_user_dict["email"], "token": token, "new_password": "Recovered123!"},
    )
    assert response.status_code == 400
