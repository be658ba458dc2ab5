import re

PHONE_STRIP_RE = re.compile(r"[\s\-()+]")
PHONE_DIGITS_RE = re.compile(r"[0-9]{7,15}")


def normalize_phone(phone: str) -> str:
    return PHONE_STRIP_RE.sub("", phone)


def is_valid_phone(phone) -> bool:
    """7-15 ASCII digits once spaces, hyphens, parentheses and '+' are removed."""
    if not phone or not isinstance(phone, str):
        return False
    return PHONE_DIGITS_RE.fullmatch(normalize_phone(phone)) is not None
