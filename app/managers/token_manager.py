"""
Stateless JWT access tokens.

A token carries the user id in ``sub`` plus issuer, audience and expiry
claims; anything that fails to decode or lacks those claims is rejected.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from app.configs import settings
from app.schemas.auth import TokenData

ACCESS_TOKEN_TYPE = "access"


def _signing_key() -> str:
    return settings.SECRET_KEY.get_secret_value()


def create_access_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    """
    Sign an access token for ``user_id``.

    Lifetime defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "jti": uuid4().hex,
        "type": ACCESS_TOKEN_TYPE,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, _signing_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenData | None:
    """Return the token's claims, or None when it is not a valid access token."""
    try:
        claims = jwt.decode(
            token,
            _signing_key(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    if claims.get("type") != ACCESS_TOKEN_TYPE or not claims.get("jti"):
        return None
    try:
        user_id = UUID(claims.get("sub") or "")
    except ValueError:
        return None
    return TokenData(user_id=user_id, jti=claims["jti"], token_type=ACCESS_TOKEN_TYPE)
