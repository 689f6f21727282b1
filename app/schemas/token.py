from pydantic import BaseModel, ConfigDict
from typing import Optional, Union
import enum


class TokenType(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    RECOVER = "recover"


class TokenClaims(BaseModel):
    type: str
    phone: str
    sub: Optional[str] = None  # account id
    iat: Optional[float] = None
    exp: Optional[float] = None

    model_config = ConfigDict(extra="allow")


class DecodedToken(BaseModel):
    """Outcome of decoding a token: either claims or the reason it was rejected."""
    claims: Optional[TokenClaims] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.claims is not None and self.error is None


class TokenVerification(BaseModel):
    success: bool
    message: str
    claims: Optional[TokenClaims] = None


class VerifyTokenRequest(BaseModel):
    type: TokenType
    phone: Optional[Union[str, int]] = None
    account_id: Optional[int] = None


class RefreshTokenRequest(BaseModel):
    account_id: int
    phone: Optional[Union[str, int]] = None
