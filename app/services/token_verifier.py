# app/services/token_verifier.py
from typing import Optional
import logging

from app.config import settings
from app.errors import ConfigurationError
from app.schemas.token import TokenClaims, TokenType, TokenVerification
from app.services.user_repository import UserRepository
from app.utils.jwt_handler import decode_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _fail(message: str) -> TokenVerification:
    return TokenVerification(success=False, message=message)


class TokenVerifier:
    """
    Checks a bearer token's signature and purpose, and cross-checks its
    claims against the account stored for the token's phone number.
    """

    def __init__(self, users: UserRepository, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.users = users
        self.secret = settings.SECRET_KEY if secret is None else secret
        self.algorithm = algorithm or settings.ALGORITHM

    def verify(self, token: str, type: str, phone=None, account_id: Optional[int] = None) -> TokenVerification:
        """
        Verify `token` ("Bearer <jwt>") for the operation `type`.

        access/refresh require `account_id` and a live account; recover
        requires `phone` and a soft-deleted account. Any other type only
        gets the signature and type checks.
        """
        if not self.secret:
            raise ConfigurationError("JWT secret not found")

        if not token or not token.startswith(BEARER_PREFIX):
            return _fail("Invalid token format")

        decoded = decode_token(token[len(BEARER_PREFIX):].strip(), self.secret, self.algorithm)
        if not decoded.ok:
            return _fail(decoded.error)
        claims = decoded.claims

        if type in (TokenType.ACCESS, TokenType.REFRESH):
            if account_id is None:
                return _fail("Account ID not found")
            verification = self._verify_session_claims(claims, account_id, phone)
            if not verification.success:
                return verification

        elif type == TokenType.RECOVER:
            if phone is None or str(phone) == "":
                return _fail("Phone number not found")
            verification = self._verify_recover_claims(claims, phone)
            if not verification.success:
                return verification

        if claims.type != type:
            logger.warning(f"Token of type {claims.type} presented for {type}")
            return _fail("Invalid token type, does not match the operation!")

        return TokenVerification(success=True, message="Token verified successfully", claims=claims)

    def _verify_session_claims(self, claims: TokenClaims, account_id: int, phone=None) -> TokenVerification:
        user = self.users.get_by_phone(claims.phone)

        if phone and claims.phone != str(phone):
            return _fail("Phone number does not belong to this JWT token")

        if not user:
            return _fail("User linked to this JWT token does not exist")

        if user.is_deleted:
            return _fail("User linked to this JWT token is deleted")

        if user.id != account_id:
            return _fail("User Id provided does not belong to this token")

        return TokenVerification(success=True, message="Token verified successfully", claims=claims)

    def _verify_recover_claims(self, claims: TokenClaims, phone) -> TokenVerification:
        user = self.users.get_by_phone(claims.phone)

        if claims.phone != str(phone):
            return _fail("Phone number does not belong to this JWT token")

        if not user:
            return _fail("User linked to this JWT token does not exist")

        if not user.is_deleted:
            return _fail("User linked to this JWT token is not deleted")

        return TokenVerification(success=True, message="Token verified successfully", claims=claims)
