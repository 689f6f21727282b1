from pydantic import BaseModel, field_validator


def _as_text(value):
    # Clients send phone numbers both as JSON strings and numbers
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class SendOtpRequest(BaseModel):
    phone: str

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, v):
        return _as_text(v)

    class Config:
        json_schema_extra = {"example": {"phone": "9998887777"}}


class VerifyOtpRequest(BaseModel):
    phone: str
    code: str

    @field_validator("phone", "code", mode="before")
    @classmethod
    def normalize_text(cls, v):
        return _as_text(v)

    class Config:
        json_schema_extra = {"example": {"phone": "9998887777", "code": "4821"}}
