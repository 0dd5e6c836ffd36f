"""Tests for registration, login and password reset."""

from datetime import timedelta

import pytest

from drive_api import auth, models, users
from drive_api.errors import AuthenticationError, ConflictError, ValidationError
from drive_api.models import utcnow


def _token_from(link):
    return link.rsplit("/", 1)[1]


class TestRegistration:
    def test_password_is_hashed(self, db):
        user = users.register_user(db, "new@example.com", "s3cret-pass", "New")

        assert user.hashed_password != "s3cret-pass"
        assert auth.verify_password("s3cret-pass", user.hashed_password)

    def test_email_is_normalized(self, db):
        user = users.register_user(db, "  Mixed@Example.COM ", "s3cret-pass")
        assert user.email == "mixed@example.com"

    def test_duplicate_email_case_insensitive(self, db, user):
        with pytest.raises(ConflictError):
            users.register_user(db, "OWNER@example.com", "another-pass")

    def test_concurrent_duplicate_is_a_conflict(self, db, user, monkeypatch):
        # the other request registered the email after our lookup ran
        monkeypatch.setattr(users, "get_user_by_email", lambda db, email: None)

        with pytest.raises(ConflictError):
            users.register_user(db, "owner@example.com", "another-pass")

        assert db.query(models.User).count() == 1
        assert db.get(models.User, user.id).email == "owner@example.com"

    def test_same_password_different_hashes(self, db):
        first = users.register_user(db, "one@example.com", "same-pass")
        second = users.register_user(db, "two@example.com", "same-pass")
        assert first.hashed_password != second.hashed_password


class TestAuthenticate:
    def test_valid_credentials(self, db, user):
        assert users.authenticate(db, "Owner@Example.com", "testpass123").id == user.id

    def test_wrong_password_and_unknown_email_look_the_same(self, db, user):
        with pytest.raises(AuthenticationError) as wrong_password:
            users.authenticate(db, "owner@example.com", "nope-nope")
        with pytest.raises(AuthenticationError) as unknown_email:
            users.authenticate(db, "ghost@example.com", "testpass123")

        assert wrong_password.value.message == unknown_email.value.message


class TestPasswordReset:
    def test_reset_flow(self, db, user, sent_emails):
        users.request_password_reset(db, "owner@example.com")

        assert len(sent_emails) == 1
        email, link = sent_emails[0]
        assert email == "owner@example.com"
        token = _token_from(link)
        # only a digest of the token is persisted
        assert user.reset_token_hash != token

        users.reset_password(db, token, "brand-new-pass")

        assert users.authenticate(db, "owner@example.com", "brand-new-pass").id == user.id
        assert user.reset_token_hash is None
        assert user.reset_token_expires_at is None

    def test_token_is_single_use(self, db, user, sent_emails):
        users.request_password_reset(db, "owner@example.com")
        token = _token_from(sent_emails[0][1])
        users.reset_password(db, token, "brand-new-pass")

        with pytest.raises(ValidationError):
            users.reset_password(db, token, "third-pass")

    def test_expired_token_rejected_and_cleared(self, db, user, sent_emails):
        users.request_password_reset(db, "owner@example.com")
        token = _token_from(sent_emails[0][1])
        user.reset_token_expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        with pytest.raises(ValidationError):
            users.reset_password(db, token, "brand-new-pass")

        db.expire_all()
        stored = db.get(models.User, user.id)
        assert stored.reset_token_hash is None
        assert users.authenticate(db, "owner@example.com", "testpass123").id == user.id

    def test_unknown_token(self, db, user):
        with pytest.raises(ValidationError):
            users.reset_password(db, "not-a-token", "brand-new-pass")

    def test_unknown_email_sends_nothing(self, db, sent_emails):
        users.request_password_reset(db, "ghost@example.com")
        assert sent_emails == []
