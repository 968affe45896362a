from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from dutydesk.core.config import settings


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_REQUIRED_CLAIMS = ("sub", "role", "exp")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def issue_dashboard_token(
    account_id: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims: dict[str, Any] = {
        "sub": account_id,
        "role": role,
        "iat": issued_at,
        "exp": expire,
        "iss": settings.app_name,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm), expire


def read_dashboard_token(token: str) -> dict[str, Any]:
    """Decode a dashboard bearer token and return its claims.

    Raises ValueError for expired, tampered or incomplete tokens.
    """
    try:
        claims = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            issuer=settings.app_name,
        )
    except ExpiredSignatureError as exc:
        raise ValueError("Token expired") from exc
    except JWTError as exc:
        raise ValueError("Invalid token") from exc

    missing = [claim for claim in _REQUIRED_CLAIMS if not claims.get(claim)]
    if missing:
        raise ValueError(f"Token missing claims: {', '.join(missing)}")
    return claims
