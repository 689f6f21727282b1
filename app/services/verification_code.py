# app/services/verification_code.py
from datetime import datetime, timedelta
from typing import Optional
import logging
import secrets

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.verification_code import VerificationCode, VerificationCodeStatus
from app.services.sms_gateway import SmsGateway, LoggingSmsGateway

logger = logging.getLogger(__name__)

ACTIVE = VerificationCodeStatus.ACTIVE.value
INACTIVE = VerificationCodeStatus.INACTIVE.value

GENERATE_ATTEMPTS = 3

MESSAGE_TEMPLATE = (
    "Your one time password to access your account at {app_name} is {code}. "
    "Do not share it with anyone."
)


# -------------------- OTP GENERATOR --------------------
def random_four_digits() -> str:
    """Uniform 4-digit code in 0000-9999 from the OS CSPRNG, zero-padded."""
    return f"{secrets.randbelow(10000):04d}"


class VerificationCodeService:
    """
    Issues and verifies one-time codes for phone numbers.

    Holds no state of its own: every operation reads and writes the
    verification_codes table through the injected session.
    """

    def __init__(self, db: Session, gateway: Optional[SmsGateway] = None, expiry_ms: Optional[int] = None):
        self.db = db
        self.gateway = gateway or LoggingSmsGateway()
        self.expiry_ms = settings.OTP_EXPIRY if expiry_ms is None else expiry_ms

    # -------------------- GENERATE --------------------
    def generate(self, phone: str) -> VerificationCode:
        """
        Deactivate every code for the phone and store a fresh ACTIVE one.

        Both statements commit together. A concurrent generate for the same
        phone trips the partial unique index, in which case the whole
        transaction is retried.
        """
        phone = str(phone)

        for attempt in range(1, GENERATE_ATTEMPTS + 1):
            try:
                self.db.query(VerificationCode).filter(
                    VerificationCode.phone == phone
                ).update({VerificationCode.status: INACTIVE}, synchronize_session=False)

                record = VerificationCode(
                    phone=phone,
                    code=random_four_digits(),
                    status=ACTIVE,
                    created_at=datetime.utcnow(),
                )
                self.db.add(record)
                self.db.commit()
                self.db.refresh(record)

                logger.info(f"[OTP STORAGE] Stored code for {phone} | ID: {record.id}")
                return record

            except IntegrityError:
                self.db.rollback()
                if attempt == GENERATE_ATTEMPTS:
                    logger.error(f"[OTP STORAGE ERROR] Gave up on {phone} after {attempt} attempts")
                    raise
                logger.warning(f"[OTP STORAGE] Concurrent issue for {phone}, retrying ({attempt}/{GENERATE_ATTEMPTS})")

    # -------------------- SEND --------------------
    def send(self, record: VerificationCode) -> bool:
        if not record.code:
            return False

        message = MESSAGE_TEMPLATE.format(app_name=settings.APP_NAME, code=record.code)
        delivered = self.gateway.send_sms(str(record.phone), message)

        if not delivered:
            logger.warning(f"[OTP DELIVERY] Gateway refused message for {record.phone}")
        return delivered

    # -------------------- VERIFY --------------------
    def is_expired(self, record: VerificationCode, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        return record.created_at + timedelta(milliseconds=self.expiry_ms) < now

    def verify(self, code: str, phone: str) -> bool:
        """
        Consume a code. True only for the first successful attempt on an
        ACTIVE, unexpired code; expired codes are deactivated on the way out.
        """
        phone = str(phone)

        # Latest match wins; an older row with the same code is history
        record = (
            self.db.query(VerificationCode)
            .filter(VerificationCode.code == code, VerificationCode.phone == phone)
            .order_by(VerificationCode.id.desc())
            .first()
        )

        if record is None:
            logger.info(f"[OTP VERIFICATION] No code found for {phone}")
            return False

        if not record.is_active:
            logger.info(f"[OTP VERIFICATION] Code {record.id} for {phone} is {record.status}")
            return False

        if self.is_expired(record):
            self.deactivate(record.id)
            logger.info(f"[OTP VERIFICATION] Code {record.id} for {phone} expired")
            return False

        consumed = self.deactivate(record.id)
        if consumed:
            logger.info(f"[OTP VERIFICATION] Code {record.id} for {phone} verified")
        return consumed

    # -------------------- DEACTIVATE --------------------
    def deactivate(self, code_id: int) -> bool:
        """Flip an ACTIVE code to INACTIVE. False if it was already inactive or missing."""
        updated = self.db.query(VerificationCode).filter(
            VerificationCode.id == code_id,
            VerificationCode.status == ACTIVE,
        ).update({VerificationCode.status: INACTIVE}, synchronize_session=False)
        self.db.commit()
        return updated == 1
