from contextlib import contextmanager
from typing import Iterator
from urllib.parse import urlsplit, urlunsplit

import redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry


def create_pool(url: str,
                socket_timeout_s: float,
                connect_timeout_s: float,
                retries: int) -> redis.ConnectionPool:
    extra = {"connection_class": redis.SSLConnection} if wants_tls(url) else {}
    return redis.ConnectionPool.from_url(
        url,
        decode_responses=True,
        socket_timeout=socket_timeout_s,
        socket_connect_timeout=connect_timeout_s,
        retry=Retry(ExponentialBackoff(cap=1.0, base=0.2), retries),
        retry_on_error=[redis.exceptions.ConnectionError, redis.exceptions.TimeoutError],
        **extra,
    )


def wants_tls(url: str) -> bool:
    """rediss:// always; plain redis:// on 6380, the port hosted Redis uses for TLS."""
    try:
        parts = urlsplit(url)
        return parts.scheme == "rediss" or (parts.scheme == "redis" and parts.port == 6380)
    except ValueError:
        return False


@contextmanager
def redis_session(pool: redis.ConnectionPool) -> Iterator[redis.Redis]:
    """Per-request client; connections go back to the pool on every exit path."""
    client = redis.Redis(connection_pool=pool)
    try:
        yield client
    finally:
        client.close()


def redact_url(url: str) -> str:
    try:
        parts = urlsplit(url)
        if parts.password is None:
            return url
        netloc = parts.hostname or ""
        if parts.port:
            netloc = f"{netloc}:{parts.port}"
    except ValueError:
        return "<unparseable url>"
    userinfo = f"{parts.username}:***" if parts.username else ":***"
    return urlunsplit((parts.scheme, f"{userinfo}@{netloc}", parts.path, parts.query, parts.fragment))
