"""Bearer token helpers.

Tokens are issued by the account service; this module only needs to verify
them and, for tooling and tests, mint compatible ones.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from kosthub.config import get_settings

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenSubject:
    """Identity carried by a verified token."""

    subject_id: int
    role: str | None


def create_access_token(
    subject_id: int,
    *,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: dict = {"sub": str(subject_id), "exp": expire}
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def verify_credential(token: str) -> TokenSubject:
    """Return the subject of ``token`` or raise ``ValueError``.

    Expired, tampered and malformed tokens all produce the same error so the
    boundary never reveals which check failed.
    """

    payload = decode_access_token(token)
    subject = payload.get("sub")
    try:
        subject_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise ValueError("Could not validate credentials") from exc
    role = payload.get("role")
    return TokenSubject(subject_id=subject_id, role=role if isinstance(role, str) else None)


__all__ = [
    "TokenSubject",
    "create_access_token",
    "decode_access_token",
    "verify_credential",
]
