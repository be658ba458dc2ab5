import json
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class OtpRecord:
    otp: str
    created_at: int
    used: bool = False


def encode_record(record: OtpRecord) -> str:
    payload = {
        "otp": record.otp,
        "createdAt": record.created_at,
        "used": record.used,
    }
    return json.dumps(payload, ensure_ascii=False)


def decode_record(raw) -> Optional[OtpRecord]:
    """Parse a stored value; anything malformed is reported as absent (None)."""
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None

    otp = payload.get("otp")
    used = payload.get("used")
    created_at = payload.get("createdAt", 0)
    if not isinstance(otp, str) or not otp:
        return None
    if not isinstance(used, bool):
        return None
    # bool is an int subclass
    if not isinstance(created_at, int) or isinstance(created_at, bool):
        return None
    return OtpRecord(otp=otp, created_at=created_at, used=used)
