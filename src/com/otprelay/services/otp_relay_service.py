import logging
import time
from dataclasses import replace
from typing import Callable, Optional

from com.otprelay.cache.redis.otp_cache import RedisOtpCache
from com.otprelay.common.errors import InvalidPhoneError, OtpNotFoundError
from com.otprelay.common.phone import is_valid_phone
from com.otprelay.entities.otp_record import OtpRecord, decode_record
from com.otprelay.services.otp_extract_service import OtpExtractService


class OtpRelayService:
    """Single-slot, consume-once OTP mailbox per phone number.

    ``submit`` always overwrites the slot (value and TTL). ``retrieve`` hands
    an unused OTP to exactly one caller: the ``used`` flag is flipped with an
    atomic compare-and-set against the value that was read, so concurrent
    consumers of the same record cannot both win.
    """
    logger = logging.getLogger(__name__)
    max_consume_attempts = 3

    def __init__(self,
                 otp_extractor: OtpExtractService,
                 otp_cache: RedisOtpCache,
                 clock: Callable[[], float] = time.time):
        self.otp_extractor = otp_extractor
        self.otp_cache = otp_cache
        self.clock = clock

    def submit(self, phone: str, message: str) -> None:
        if not is_valid_phone(phone):
            raise InvalidPhoneError()
        code = self.otp_extractor.extract(message) if isinstance(message, str) else None
        if not code:
            self.logger.info("NO_OTP phone=%s", phone)
            raise OtpNotFoundError()

        record = OtpRecord(otp=code, created_at=int(self.clock() * 1000), used=False)
        self.otp_cache.put(phone, record)
        self.logger.info("PUSH phone=%s", phone)
        self.logger.debug("PUSH phone=%s otp=%s", phone, code)

    def retrieve(self, phone: str) -> Optional[str]:
        if not is_valid_phone(phone):
            raise InvalidPhoneError()

        for attempt in range(1, self.max_consume_attempts + 1):
            raw = self.otp_cache.get(phone)
            record = decode_record(raw)
            if record is None:
                if raw:
                    self.logger.warning("malformed record phone=%s, treated as absent", phone)
                return None
            if record.used:
                return None
            if self.otp_cache.compare_and_set(phone, raw, replace(record, used=True)):
                self.logger.info("CONSUMED phone=%s", phone)
                return record.otp
            # lost the race against another retrieve or a fresh submit
            self.logger.debug("consume conflict phone=%s attempt=%s", phone, attempt)
        self.logger.warning("consume gave up phone=%s after %s attempts", phone, self.max_consume_attempts)
        return None
