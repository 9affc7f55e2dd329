import secrets
from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import ExpiredSignatureError, JWTError, jwt
import bcrypt
from app.core.config import settings
from app.core.exceptions import AuthenticationError

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to embed (userId, email, role, tenantId, tenantSlug)
        expires_delta: Optional custom lifetime. Defaults to
            ACCESS_TOKEN_EXPIRE_MINUTES (24 hours).

    Returns:
        Encoded JWT token string carrying iss, aud and exp claims
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode.update({
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    })
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def verify_token(token: str) -> dict:
    """
    Verify and decode a JWT token.

    Checks the signature, issuer, audience and expiry.

    Args:
        token: JWT token string

    Returns:
        Dictionary containing token claims

    Raises:
        AuthenticationError: If the token is missing, malformed, expired
            or signed with another key
    """
    if not token:
        raise AuthenticationError("Authentication token required")
    try:
        return jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError:
        raise AuthenticationError("Invalid or expired token")


def get_token_expiration(payload: dict) -> datetime:
    """Return the exp claim of a decoded token as an aware UTC datetime."""
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)


def generate_invitation_token() -> str:
    """High-entropy single-use invitation token (64 hex chars)."""
    return secrets.token_hex(32)
