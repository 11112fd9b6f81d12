"""Bearer token handling for identities issued by the external sign-in provider."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from town_hall.core.settings import settings


@dataclass(frozen=True)
class Principal:
    """A verified caller."""

    id: str
    name: str
    email: str


def create_access_token(
    user_id: str,
    *,
    name: str = "",
    email: str = "",
    expires_minutes: int | None = None,
) -> str:
    """Create a signed access token for ``user_id``."""
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    to_encode: dict[str, object] = {
        "sub": user_id,
        "name": name,
        "email": email,
        "exp": datetime.now(UTC) + timedelta(minutes=minutes),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> Principal | None:
    """Return the principal a token was issued to, or None if it is invalid."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject:
        return None
    name = payload.get("name") or ""
    return Principal(
        id=str(subject),
        name=str(name or payload.get("email") or subject),
        email=str(payload.get("email") or ""),
    )
