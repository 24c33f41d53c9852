"""
Unit tests for the user service: validation, email normalisation,
password rules, authentication and deletion.
"""

import logging

import pytest

from app.models.user import User
from app.services import user_service
from app.services.credential_service import get_credential_service
from app.services.errors import UserValidationError


class TestValidation:
    """Field validators return (is_valid, error_message)."""

    def test_valid_name(self):
        assert user_service.validate_name("Example User") == (True, None)

    @pytest.mark.parametrize("name", [None, "", "     "])
    def test_blank_name(self, name):
        is_valid, message = user_service.validate_name(name)
        assert not is_valid
        assert "blank" in message

    def test_name_too_long(self):
        is_valid, message = user_service.validate_name("a" * 51)
        assert not is_valid
        assert "too long" in message

    def test_name_at_limit(self):
        assert user_service.validate_name("a" * 50) == (True, None)

    @pytest.mark.parametrize("email", [
        "user@example.com",
        "USER@foo.COM",
        "A_US-ER@foo.bar.org",
        "first.last@foo.jp",
        "alice+bob@baz.cn",
    ])
    def test_valid_emails(self, email):
        assert user_service.validate_email(email) == (True, None)

    @pytest.mark.parametrize("email", [
        "user@example,com",
        "user_at_foo.org",
        "user.name@example.",
        "foo@bar_baz.com",
        "foo@bar+baz.com",
        "user@example",
        "user@exa mple.com",
        " user@example.com ",
        "user@example.com\n",
    ])
    def test_invalid_emails(self, email):
        is_valid, message = user_service.validate_email(email)
        assert not is_valid
        assert message == "Email is invalid"

    def test_email_too_long(self):
        email = "a" * 189 + "@example.com"
        assert len(email) == 201
        is_valid, message = user_service.validate_email(email)
        assert not is_valid
        assert "too long" in message

    def test_blank_email(self):
        is_valid, message = user_service.validate_email("   ")
        assert not is_valid
        assert "blank" in message

    def test_short_password(self):
        is_valid, message = user_service.validate_password("a" * 5)
        assert not is_valid
        assert "too short" in message

    def test_blank_password(self):
        is_valid, message = user_service.validate_password(" " * 6)
        assert not is_valid
        assert "blank" in message

    def test_password_over_bcrypt_limit(self):
        is_valid, message = user_service.validate_password("a" * 73)
        assert not is_valid
        assert "too long" in message

    def test_password_confirmation_mismatch(self):
        is_valid, message = user_service.validate_password("foobar", "foobaz")
        assert not is_valid
        assert "confirmation" in message


class TestCreateUser:
    """Test user registration."""

    def test_create_user(self, db_session):
        user = user_service.create_user(db_session, "Example User", "user@example.com", "foobar")
        assert user.id is not None
        assert user.name == "Example User"
        assert user.email == "user@example.com"

    def test_password_is_stored_as_digest(self, db_session):
        user = user_service.create_user(db_session, "Example User", "user@example.com", "foobar")
        assert user.password_digest != "foobar"
        assert user.password_digest.startswith("$2")
        assert get_credential_service().verify_password(user, "foobar")

    def test_email_saved_lowercase(self, db_session):
        mixed_case = "Foo@ExAMPle.CoM"
        user = user_service.create_user(db_session, "Example User", mixed_case, "foobar")
        db_session.expire_all()
        reloaded = db_session.get(User, user.id)
        assert reloaded.email == mixed_case.lower()

    def test_duplicate_email_rejected_case_insensitively(self, db_session):
        user_service.create_user(db_session, "First", "a@b.com", "foobar")
        with pytest.raises(UserValidationError) as exc_info:
            user_service.create_user(db_session, "Second", "A@B.com", "foobar")
        assert exc_info.value.errors == {"email": ["Email has already been taken"]}

    def test_all_field_errors_reported_together(self, db_session):
        with pytest.raises(UserValidationError) as exc_info:
            user_service.create_user(db_session, "", "not-an-email", "abc")
        errors = exc_info.value.errors
        assert set(errors) == {"name", "email", "password"}
        assert errors["email"] == ["Email is invalid"]

    def test_short_password_rejected(self, db_session):
        with pytest.raises(UserValidationError) as exc_info:
            user_service.create_user(db_session, "Example User", "user@example.com", "a" * 5)
        assert "password" in exc_info.value.errors
        assert db_session.query(User).count() == 0

    def test_validation_error_is_value_error(self, db_session):
        with pytest.raises(ValueError):
            user_service.create_user(db_session, "Example User", "bad", "foobar")

    def test_padded_email_rejected(self, db_session):
        with pytest.raises(UserValidationError) as exc_info:
            user_service.create_user(db_session, "Example User", "  user@example.com  ", "foobar")
        assert exc_info.value.errors["email"] == ["Email is invalid"]
        assert db_session.query(User).count() == 0


class TestUpdateUser:
    """Test user updates."""

    def test_update_without_password_keeps_digest(self, db_session, make_user):
        user = make_user()
        digest = user.password_digest
        updated = user_service.update_user(db_session, user.id, name="New Name")
        assert updated.name == "New Name"
        assert updated.password_digest == digest

    def test_update_email_is_lowercased(self, db_session, make_user):
        user = make_user()
        updated = user_service.update_user(db_session, user.id, email="NEW@Example.COM")
        assert updated.email == "new@example.com"

    def test_update_own_email_in_other_case_allowed(self, db_session, make_user):
        user = make_user(email="me@example.com")
        updated = user_service.update_user(db_session, user.id, email="ME@example.com")
        assert updated.email == "me@example.com"

    def test_update_to_taken_email_rejected(self, db_session, make_user):
        make_user(email="taken@example.com")
        user = make_user()
        with pytest.raises(UserValidationError) as exc_info:
            user_service.update_user(db_session, user.id, email="Taken@Example.com")
        assert "email" in exc_info.value.errors

    def test_update_short_password_rejected(self, db_session, make_user):
        user = make_user()
        with pytest.raises(UserValidationError) as exc_info:
            user_service.update_user(db_session, user.id, password="abc")
        assert "password" in exc_info.value.errors

    def test_update_password(self, db_session, make_user):
        user = make_user(password="foobar")
        user_service.update_user(db_session, user.id, password="newsecret", password_confirmation="newsecret")
        credentials = get_credential_service()
        assert credentials.verify_password(user, "newsecret")
        assert not credentials.verify_password(user, "foobar")

    def test_update_missing_user(self, db_session):
        with pytest.raises(ValueError, match="User not found"):
            user_service.update_user(db_session, 99999, name="Nobody")


class TestAuthentication:
    """Test password login."""

    def test_authenticate_with_correct_password(self, db_session, make_user):
        user = make_user(email="login@example.com", password="foobar")
        assert user_service.authenticate_user(db_session, "LOGIN@example.com", "foobar").id == user.id

    def test_authenticate_with_wrong_password(self, db_session, make_user):
        make_user(email="login@example.com", password="foobar")
        assert user_service.authenticate_user(db_session, "login@example.com", "wrong!") is None

    def test_authenticate_unknown_email(self, db_session):
        assert user_service.authenticate_user(db_session, "ghost@example.com", "foobar") is None

    def test_failed_login_does_not_log_email(self, db_session, make_user, caplog):
        make_user(email="private.person@example.com", password="foobar")
        with caplog.at_level(logging.WARNING, logger="app.services.user_service"):
            assert user_service.authenticate_user(db_session, "private.person@example.com", "wrong!") is None
            assert user_service.authenticate_user(db_session, "ghost@example.com", "foobar") is None
        assert caplog.text.count("Failed login") == 2
        assert "@example.com" not in caplog.text


class TestLookupAndDelete:
    """Test lookup helpers and deletion."""

    def test_get_user_by_email_ignores_case(self, db_session, make_user):
        user = make_user(email="case@example.com")
        assert user_service.get_user_by_email(db_session, "CASE@EXAMPLE.COM").id == user.id

    def test_get_all_users_ordered_by_name(self, db_session, make_user):
        make_user(name="Zed")
        make_user(name="Amy")
        names = [u.name for u in user_service.get_all_users(db_session)]
        assert names == ["Amy", "Zed"]

    def test_delete_user(self, db_session, make_user):
        user = make_user()
        assert user_service.delete_user(db_session, user.id) is True
        assert user_service.get_user_by_id(db_session, user.id) is None

    def test_delete_missing_user(self, db_session):
        assert user_service.delete_user(db_session, 99999) is False
