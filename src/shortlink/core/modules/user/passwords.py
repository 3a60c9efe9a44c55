"""One-way password hashing with bcrypt."""

import bcrypt

from shortlink.errors import AuthenticationError

BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with a fresh salt. The work factor is ``2**rounds``."""
    salt = bcrypt.gensalt(rounds if rounds is not None else BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password_hash: str, password: str) -> None:
    """Check a password against a stored hash.

    bcrypt compares digests in constant time.

    Raises:
        AuthenticationError: If the password does not match or the hash is malformed
    """
    try:
        matches = bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        # Invalid salt or an over-long password
        raise AuthenticationError("Invalid email or password") from e
    if not matches:
        raise AuthenticationError("Invalid email or password")
