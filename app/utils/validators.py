# app/utils/validators.py
import re

PHONE_PATTERN = re.compile(r"[0-9]{10}")
OTP_CODE_PATTERN = re.compile(r"[0-9]{4}")


def is_valid_phone(phone) -> bool:
    """A phone number is exactly 10 decimal digits."""
    if phone is None:
        return False
    return bool(PHONE_PATTERN.fullmatch(str(phone)))


def is_valid_otp_code(code) -> bool:
    if code is None:
        return False
    return bool(OTP_CODE_PATTERN.fullmatch(str(code)))
