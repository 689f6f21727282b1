from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, Index, text
from datetime import datetime
import enum

from app.database import Base


class VerificationCodeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class VerificationCode(Base):
    __tablename__ = "verification_codes"
    __table_args__ = (
        CheckConstraint("status IN ('ACTIVE', 'INACTIVE')", name="ck_verification_codes_status"),
        # At most one ACTIVE code per phone
        Index(
            "uq_verification_codes_active_phone",
            "phone",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
        Index("ix_verification_codes_phone_code", "phone", "code"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(6), nullable=False)
    phone = Column(String(15), nullable=False)
    status = Column(String(15), nullable=False, default=VerificationCodeStatus.ACTIVE.value,
                    server_default=VerificationCodeStatus.ACTIVE.value)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == VerificationCodeStatus.ACTIVE.value

    def __repr__(self):
        return f"<VerificationCode id={self.id} phone={self.phone} status={self.status}>"
