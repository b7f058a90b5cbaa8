"""Password hashing and access token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from nacl import pwhash
from nacl.exceptions import InvalidkeyError

from heartline.core.errors import AuthenticationError
from heartline.core.settings import settings


def hash_password(password: str) -> str:
    """Return an Argon2id hash string for ``password``."""
    return pwhash.str(password.encode("utf-8")).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches the stored Argon2id hash."""
    try:
        return pwhash.verify(password_hash.encode("ascii"), password.encode("utf-8"))
    except InvalidkeyError:
        return False


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a signed JWT whose subject is the account id."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> str:
    """Validate ``token`` and return the account id it was issued for.

    Raises:
        AuthenticationError: If the token is expired, malformed or has no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as err:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED") from err
    except JWTError as err:
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN") from err

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
    return str(subject)
