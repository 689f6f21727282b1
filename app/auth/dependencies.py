# app/auth/dependencies.py
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.errors import AuthenticationError
from app.services.sms_gateway import SmsGateway, get_sms_gateway
from app.services.token_verifier import TokenVerifier
from app.services.user_repository import UserRepository
from app.services.verification_code import VerificationCodeService


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_verification_code_service(
    db: Session = Depends(get_db),
    gateway: SmsGateway = Depends(get_sms_gateway)
) -> VerificationCodeService:
    return VerificationCodeService(db, gateway=gateway, expiry_ms=settings.OTP_EXPIRY)


def get_token_verifier(users: UserRepository = Depends(get_user_repository)) -> TokenVerifier:
    # Read settings per request so a rotated secret takes effect
    return TokenVerifier(users, secret=settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """Raw Authorization header; format checks happen in the verifier."""
    if not authorization:
        raise AuthenticationError("Authorization header is missing")
    return authorization
