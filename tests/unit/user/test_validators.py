"""Tests for user input validators."""

import pytest

from shortlink.core.modules.user.validators import username_from_email, validate_email, validate_password
from shortlink.errors import ValidationError


class TestValidateEmail:
    """Tests for validate_email function."""

    def test_valid_email_normalized(self):
        """Test that valid emails are stripped and lowercased."""
        assert validate_email("  Alice@Example.COM ") == "alice@example.com"

    @pytest.mark.parametrize("email", ["", "alice", "alice@", "@example.com", "alice@example", "a b@example.com", "a@b@c.com"])
    def test_invalid_email_rejected(self, email):
        """Test that malformed addresses are rejected."""
        with pytest.raises(ValidationError):
            validate_email(email)


class TestUsernameFromEmail:
    """Tests for username_from_email function."""

    def test_local_part(self):
        """Test that the username is the part before @."""
        assert username_from_email("alice.smith@example.com") == "alice.smith"


class TestValidatePassword:
    """Tests for validate_password function."""

    def test_valid_password(self):
        """Test that a reasonable password passes."""
        validate_password("correct-horse")

    def test_too_short(self):
        """Test that short passwords are rejected."""
        with pytest.raises(ValidationError):
            validate_password("short")

    def test_whitespace_rejected(self):
        """Test that passwords with whitespace are rejected."""
        with pytest.raises(ValidationError):
            validate_password("correct horse")

    def test_too_long_for_bcrypt(self):
        """Test that passwords beyond 72 bytes are rejected."""
        validate_password("a" * 72)
        with pytest.raises(ValidationError):
            validate_password("a" * 73)
        with pytest.raises(ValidationError):
            validate_password("é" * 37)
