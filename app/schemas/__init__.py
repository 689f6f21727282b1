from .otp import SendOtpRequest, VerifyOtpRequest
from .response import APIBody, APIResponse, envelope
from .token import (
    TokenType,
    TokenClaims,
    DecodedToken,
    TokenVerification,
    VerifyTokenRequest,
    RefreshTokenRequest
)

__all__ = [
    "SendOtpRequest",
    "VerifyOtpRequest",
    "APIBody",
    "APIResponse",
    "envelope",
    "TokenType",
    "TokenClaims",
    "DecodedToken",
    "TokenVerification",
    "VerifyTokenRequest",
    "RefreshTokenRequest"
]
