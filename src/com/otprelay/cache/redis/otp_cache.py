from dataclasses import dataclass
from typing import Optional
import redis
import logging

from com.otprelay.common.errors import StoreUnavailableError
from com.otprelay.entities.otp_record import OtpRecord, encode_record

# KEYS[1]=key ARGV[1]=expected value ARGV[2]=new value ARGV[3]=ttl seconds
COMPARE_AND_SET_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    redis.call('SET', KEYS[1], ARGV[2], 'EX', ARGV[3])
    return 1
end
return 0
"""

@dataclass(frozen=True)
class RedisOtpCacheConfig:
    ttl_seconds: int
    key_prefix: str
    # already redacted, only used in error messages
    store_url: str = ""

class RedisOtpCache:
    logger = logging.getLogger(__name__)
    def __init__(self, client: redis.Redis, cfg: RedisOtpCacheConfig):
        self.client = client
        self.cfg = cfg
        self._compare_and_set = client.register_script(COMPARE_AND_SET_LUA)

    def put(self, phone: str, record: OtpRecord) -> None:
        key = self.buildRedisKey(phone)
        value = encode_record(record)
        try:
            self.client.setex(key, self.cfg.ttl_seconds, value)
        except redis.RedisError as e:
            self.logger.warning("put key=%s err=%s", key, e)
            raise self._unavailable(e) from e
        self.logger.info("put: %s", key)
        self.logger.debug("put payload key=%s payload=%s", key, value)

    def get(self, phone: str) -> Optional[str]:
        key = self.buildRedisKey(phone)
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            self.logger.warning("get key=%s err=%s", key, e)
            raise self._unavailable(e) from e

    def compare_and_set(self, phone: str, expected: str, record: OtpRecord) -> bool:
        """Replace the value only if it still equals ``expected``; the TTL restarts on success."""
        key = self.buildRedisKey(phone)
        try:
            swapped = self._compare_and_set(
                keys=[key], args=[expected, encode_record(record), self.cfg.ttl_seconds])
        except redis.RedisError as e:
            self.logger.warning("compare_and_set key=%s err=%s", key, e)
            raise self._unavailable(e) from e
        self.logger.debug("compare_and_set key=%s swapped=%s", key, swapped)
        return bool(swapped)

    def ping(self) -> None:
        try:
            self.client.ping()
        except redis.RedisError as e:
            self.logger.warning("ping err=%s", e)
            raise self._unavailable(e) from e

    def buildRedisKey(self, phone: str) -> str:
        return f"{self.cfg.key_prefix}{phone}"

    def _unavailable(self, e: Exception) -> StoreUnavailableError:
        where = f" at {self.cfg.store_url}" if self.cfg.store_url else ""
        return StoreUnavailableError(f"Key-value store unavailable{where}: {type(e).__name__}: {e}")
