# app/utils/jwt_handler.py
from datetime import datetime, timedelta
from typing import Optional
import logging

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from pydantic import ValidationError

from app.config import settings
from app.errors import ConfigurationError
from app.schemas.token import DecodedToken, TokenClaims, TokenType

logger = logging.getLogger(__name__)


def _require_secret(secret: Optional[str]) -> str:
    if not secret:
        raise ConfigurationError("JWT secret not found")
    return secret


def _create_token(data: dict, token_type: TokenType, expires_delta: timedelta,
                  secret: Optional[str] = None, algorithm: Optional[str] = None) -> str:
    secret = _require_secret(settings.SECRET_KEY if secret is None else secret)
    now = datetime.utcnow()

    to_encode = data.copy()
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": token_type.value
    })
    return jwt.encode(to_encode, secret, algorithm=algorithm or settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None, **kwargs) -> str:
    """
    Create JWT access token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(data, TokenType.ACCESS, expires_delta, **kwargs)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None, **kwargs) -> str:
    """
    Create JWT refresh token
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _create_token(data, TokenType.REFRESH, expires_delta, **kwargs)


def create_recover_token(data: dict, expires_delta: Optional[timedelta] = None, **kwargs) -> str:
    """
    Create JWT recover token, issued for soft-deleted accounts
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.RECOVER_TOKEN_EXPIRE_MINUTES)
    return _create_token(data, TokenType.RECOVER, expires_delta, **kwargs)


def issue_session_tokens(account_id: int, phone: str) -> dict:
    """Access and refresh tokens for an active account."""
    data = {"sub": str(account_id), "phone": str(phone)}
    return {
        "access_token": create_access_token(data),
        "refresh_token": create_refresh_token(data),
    }


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> DecodedToken:
    """
    Verify the signature of a raw JWT and parse its claims.

    Never raises for a bad token; the reason is returned in `error`.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError:
        logger.info("JWT verification failed: token expired")
        return DecodedToken(error="Token expired")
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        return DecodedToken(error="Token verification failed")

    try:
        if "phone" in payload and payload["phone"] is not None:
            payload["phone"] = str(payload["phone"])
        return DecodedToken(claims=TokenClaims(**payload))
    except (ValidationError, TypeError) as e:
        logger.warning(f"JWT payload rejected: {str(e)}")
        return DecodedToken(error="Token verification failed")
