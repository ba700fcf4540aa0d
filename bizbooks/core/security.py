"""JWT bearer-token and password hashing helpers."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError
from passlib.context import CryptContext

from bizbooks.core.config import AuthSettings
from bizbooks.core.errors import AuthenticationError

# pbkdf2_sha256 hashes new passwords; bcrypt hashes imported from elsewhere still verify.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Representation of the authenticated principal carried in the token."""

    user_id: int
    username: str
    email: str


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognised hash format stored for the user.
        return False


class SecurityProvider:
    """Issue and verify signed access tokens."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    def create_access_token(self, user: AuthenticatedUser) -> str:
        """Create a signed JWT for the authenticated user."""

        now = datetime.now(tz=timezone.utc)
        expires = now + timedelta(minutes=self._settings.access_token_expire_minutes)
        payload: dict[str, object] = {
            "userId": user.user_id,
            "username": user.username,
            "email": user.email,
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Decode a JWT and return the corresponding ``AuthenticatedUser``."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                issuer=self._settings.issuer,
                audience=self._settings.audience,
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        user_id = payload.get("userId")
        username = payload.get("username")
        email = payload.get("email")
        if not isinstance(username, str) or not isinstance(email, str):
            raise AuthenticationError("Token payload missing required claims")
        try:
            resolved_user_id = int(user_id)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise AuthenticationError("Token userId claim invalid") from exc

        return AuthenticatedUser(user_id=resolved_user_id, username=username, email=email)


def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """Retrieve the authenticated user placed on the request by ``AuthMiddleware``."""

    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")
    return user


def get_security(request: Request) -> SecurityProvider:
    """Return the provider bound to the running application."""

    return request.app.state.security_provider


__all__ = [
    "AuthenticatedUser",
    "SecurityProvider",
    "get_authenticated_user",
    "get_security",
    "hash_password",
    "verify_password",
]
