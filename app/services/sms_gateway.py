# app/services/sms_gateway.py
from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class SmsGateway(ABC):
    """Delivery collaborator for OTP messages."""

    @abstractmethod
    def send_sms(self, phone: str, message: str) -> bool:
        """Hand `message` to the provider; True when it was accepted."""


class LoggingSmsGateway(SmsGateway):
    """
    Stub gateway: records the dispatch without contacting a provider.
    The message body is never logged since it carries the plaintext code.
    """

    def send_sms(self, phone: str, message: str) -> bool:
        logger.info(f"[SMS] Dispatched message to {phone} ({len(message)} chars)")
        return True


def get_sms_gateway() -> SmsGateway:
    return LoggingSmsGateway()
