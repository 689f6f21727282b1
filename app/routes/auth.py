# app/routes/auth.py
from fastapi import APIRouter, Depends
import logging

from app.auth.dependencies import (
    get_bearer_token,
    get_token_verifier,
    get_user_repository,
    get_verification_code_service,
)
from app.errors import AuthenticationError, InvalidParametersError, UncaughtError
from app.schemas.otp import SendOtpRequest, VerifyOtpRequest
from app.schemas.response import APIResponse, envelope
from app.schemas.token import RefreshTokenRequest, TokenType, VerifyTokenRequest
from app.services.token_verifier import TokenVerifier
from app.services.user_repository import UserRepository
from app.services.verification_code import VerificationCodeService
from app.utils.jwt_handler import create_access_token, create_recover_token, issue_session_tokens
from app.utils.validators import is_valid_otp_code, is_valid_phone

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/send-otp", response_model=APIResponse, response_model_exclude_none=True)
def send_otp(
    payload: SendOtpRequest,
    otp_service: VerificationCodeService = Depends(get_verification_code_service)
):
    if not is_valid_phone(payload.phone):
        raise InvalidParametersError("Phone number is not valid")

    verification_code = otp_service.generate(payload.phone)
    if not otp_service.send(verification_code):
        raise UncaughtError("Failed to send OTP")

    return envelope(200, "OTP sent successfully")


@router.post("/verify-otp", response_model=APIResponse, response_model_exclude_none=True)
def verify_otp(
    payload: VerifyOtpRequest,
    otp_service: VerificationCodeService = Depends(get_verification_code_service),
    users: UserRepository = Depends(get_user_repository)
):
    """
    Consume an OTP. When an account exists for the phone, the response
    carries session tokens, or a recover token if the account is deleted.
    """
    if not is_valid_phone(payload.phone):
        raise InvalidParametersError("Phone number is not valid")
    if not is_valid_otp_code(payload.code):
        raise InvalidParametersError("OTP must be 4 digits")

    if not otp_service.verify(payload.code, payload.phone):
        raise AuthenticationError("Invalid or expired OTP")

    user = users.get_by_phone(payload.phone)
    if user is None:
        return envelope(200, "OTP verified successfully")

    if user.is_deleted:
        recover_token = create_recover_token({"sub": str(user.id), "phone": user.phone})
        return envelope(200, "OTP verified, account can be recovered",
                        account_id=user.id, recover_token=recover_token)

    return envelope(200, "OTP verified successfully", account_id=user.id,
                    **issue_session_tokens(user.id, user.phone))


@router.post("/verify-token", response_model=APIResponse, response_model_exclude_none=True)
def verify_token(
    payload: VerifyTokenRequest,
    token: str = Depends(get_bearer_token),
    verifier: TokenVerifier = Depends(get_token_verifier)
):
    result = verifier.verify(token, payload.type, phone=payload.phone, account_id=payload.account_id)
    if not result.success:
        raise AuthenticationError(result.message)

    return envelope(200, result.message)


@router.post("/refresh", response_model=APIResponse, response_model_exclude_none=True)
def refresh_access_token(
    payload: RefreshTokenRequest,
    token: str = Depends(get_bearer_token),
    verifier: TokenVerifier = Depends(get_token_verifier)
):
    result = verifier.verify(token, TokenType.REFRESH, phone=payload.phone, account_id=payload.account_id)
    if not result.success:
        raise AuthenticationError(result.message)

    access_token = create_access_token({"sub": str(payload.account_id), "phone": result.claims.phone})
    logger.info(f"Access token refreshed for account {payload.account_id}")
    return envelope(200, "Token refreshed successfully", access_token=access_token)
