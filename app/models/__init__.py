# app/models/__init__.py

from .user import User
from .verification_code import VerificationCode, VerificationCodeStatus

__all__ = ["User", "VerificationCode", "VerificationCodeStatus"]
