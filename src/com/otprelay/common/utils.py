import os

from com.otprelay.common.errors import ConfigError


def env_float(key: str, default: float) -> float:
    v = os.getenv(key)
    if v is None or not v.strip():
        return default
    try:
        return float(v)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {v!r}") from None

def env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {v!r}") from None

def env_str(key: str, default: str = "") -> str:
    v = os.getenv(key)
    return default if v is None else v

def env_required(key: str, hint: str = "") -> str:
    v = os.getenv(key)
    if v is None or not v.strip():
        msg = f"Missing required environment variable: {key}."
        if hint:
            msg = f"{msg} {hint}"
        raise ConfigError(msg)
    return v.strip()
