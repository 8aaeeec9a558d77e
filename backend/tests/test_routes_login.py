"""
Backend — Login Route Tests
=============================

What:  OAuth2 password login, token check and the password recovery flow
       over HTTP.
How:   httpx AsyncClient against the app; SMTP delivery is patched out.

What we test:
    ✅ Login returns a bearer token usable on /login/test-token
    ✅ Wrong password / inactive user → 400 with the error envelope
    ✅ Invalid token → 403 + WWW-Authenticate
    ✅ Password recovery answers identically for unknown emails
    ✅ Reset with a valid token changes the password; bad token → 400
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.config import settings
from app.routes.login import RECOVERY_MESSAGE
from app.security import generate_password_reset_token, verify_password
from app.services.user_service import user_service
from conftest import API, NORMAL_USER_EMAIL, NORMAL_USER_PASSWORD, create_test_user


async def login(client, email, password):
    return await client.post(
        f"{API}/login/access-token",
        data={"username": email, "password": password},
    )


class TestAccessToken:

    @pytest.mark.asyncio
    async def test_login_and_test_token(self, client, normal_user):
        response = await login(client, NORMAL_USER_EMAIL, NORMAL_USER_PASSWORD)
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"

        check = await client.post(
            f"{API}/login/test-token",
            headers={"Authorization": f"Bearer {body['access_token']}"},
        )
        assert check.status_code == 200
        assert check.json()["email"] == NORMAL_USER_EMAIL
        assert "hashed_password" not in check.json()

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, normal_user):
        response = await login(client, NORMAL_USER_EMAIL, "not-the-password")
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Incorrect email or password"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_unknown_email(self, client):
        response = await login(client, "ghost@example.com", "whatever-password")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_inactive_user(self, client, session_factory):
        await create_test_user(
            session_factory, "sleepy@example.com", "sleepy-password", is_active=False
        )
        response = await login(client, "sleepy@example.com", "sleepy-password")
        assert response.status_code == 400
        assert response.json()["message"] == "Inactive user"

    @pytest.mark.asyncio
    async def test_invalid_bearer_token(self, client):
        response = await client.post(
            f"{API}/login/test-token", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 403
        assert response.json()["error"] == "invalid_credentials"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.post(f"{API}/login/test-token")
        assert response.status_code == 401


class TestPasswordRecovery:

    @pytest.mark.asyncio
    async def test_unknown_email_gets_same_message(self, client):
        response = await client.post(f"{API}/password-recovery/ghost@example.com")
        assert response.status_code == 200
        assert response.json() == {"message": RECOVERY_MESSAGE}

    @pytest.mark.asyncio
    async def test_sends_email_when_enabled(self, client, normal_user, monkeypatch):
        monkeypatch.setattr(settings, "smtp_host", "mailcatcher")
        monkeypatch.setattr(settings, "emails_from_email", "info@example.com")
        with patch("app.services.email_service.send_email", new=AsyncMock()) as send:
            response = await client.post(f"{API}/password-recovery/{NORMAL_USER_EMAIL}")

        assert response.status_code == 200
        assert response.json() == {"message": RECOVERY_MESSAGE}
        send.assert_awaited_once()
        assert send.await_args.kwargs["email_to"] == NORMAL_USER_EMAIL

    @pytest.mark.asyncio
    async def test_no_email_when_disabled(self, client, normal_user):
        with patch("app.services.email_service.send_email", new=AsyncMock()) as send:
            response = await client.post(f"{API}/password-recovery/{NORMAL_USER_EMAIL}")
        assert response.status_code == 200
        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reset_password(self, client, normal_user):
        token = generate_password_reset_token(NORMAL_USER_EMAIL)
        response = await client.post(
            f"{API}/reset-password/",
            json={"token": token, "new_password": "a-brand-new-password"},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password updated successfully"}

        assert (await login(client, NORMAL_USER_EMAIL, "a-brand-new-password")).status_code == 200
        assert (await login(client, NORMAL_USER_EMAIL, NORMAL_USER_PASSWORD)).status_code == 400

    @pytest.mark.asyncio
    async def test_reset_password_invalid_token(self, client):
        response = await client.post(
            f"{API}/reset-password/",
            json={"token": "garbage", "new_password": "a-brand-new-password"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_reset_password_unknown_user(self, client):
        token = generate_password_reset_token("ghost@example.com")
        response = await client.post(
            f"{API}/reset-password/",
            json={"token": token, "new_password": "a-brand-new-password"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_recovery_html_content_requires_superuser(
        self, client, normal_user, normal_user_token_headers
    ):
        response = await client.post(
            f"{API}/password-recovery-html-content/{NORMAL_USER_EMAIL}",
            headers=normal_user_token_headers,
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_recovery_html_content(self, client, normal_user, superuser_token_headers):
        response = await client.post(
            f"{API}/password-recovery-html-content/{NORMAL_USER_EMAIL}",
            headers=superuser_token_headers,
        )
        assert response.status_code == 200
        assert "reset-password?token=" in response.text
        assert NORMAL_USER_EMAIL in response.headers["subject"]

    @pytest.mark.asyncio
    async def test_reset_password_inactive_user(self, client, session_factory):
        await create_test_user(
            session_factory, "sleepy@example.com", "sleepy-password", is_active=False
        )
        token = generate_password_reset_token("sleepy@example.com")
        response = await client.post(
            f"{API}/reset-password/",
            json={"token": token, "new_password": "a-brand-new-password"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Inactive user"

        async with session_factory() as session:
            user = await user_service.get_user_by_email(session, "sleepy@example.com")
        assert verify_password("sleepy-password", user.hashed_password)

    @pytest.mark.asyncio
    async def test_reset_password_expired_token(self, client, normal_user, monkeypatch):
        monkeypatch.setattr(settings, "email_reset_token_expire_hours", -1)
        token = generate_password_reset_token(NORMAL_USER_EMAIL)
        response = await client.post(
            f"{API}/reset-password/",
            json={"token": token, "new_password": "a-brand-new-password"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token"
        assert (await login(client, NORMAL_USER_EMAIL, NORMAL_USER_PASSWORD)).status_code == 200


class TestEmailCase:

    @pytest.mark.asyncio
    async def test_signup_then_login_with_mixed_case_domain(self, client):
        signup = await client.post(
            f"{API}/users/signup",
            json={"email": "Alice@Example.COM", "password": "alice-password"},
        )
        assert signup.status_code == 200
        assert signup.json()["email"] == "Alice@example.com"

        response = await login(client, "Alice@Example.COM", "alice-password")
        assert response.status_code == 200
        assert (await login(client, "alice@example.com", "alice-password")).status_code == 200

    @pytest.mark.asyncio
    async def test_recovery_finds_user_regardless_of_case(self, client, normal_user, monkeypatch):
        monkeypatch.setattr(settings, "smtp_host", "mailcatcher")
        monkeypatch.setattr(settings, "emails_from_email", "info@example.com")
        with patch("app.services.email_service.send_email", new=AsyncMock()) as send:
            response = await client.post(f"{API}/password-recovery/{NORMAL_USER_EMAIL.upper()}")
        assert response.status_code == 200
        send.assert_awaited_once()
        assert send.await_args.kwargs["email_to"] == NORMAL_USER_EMAIL

    @pytest.mark.asyncio
    async def test_signup_duplicate_differing_only_in_case(self, client, normal_user):
        response = await client.post(
            f"{API}/users/signup",
            json={"email": NORMAL_USER_EMAIL.upper(), "password": "whatever-password"},
        )
        assert response.status_code == 409
