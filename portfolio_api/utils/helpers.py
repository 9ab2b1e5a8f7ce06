from datetime import datetime, timezone
from typing import Any

from flask import request


def client_ip(req: Any = None) -> str:
    """
    Best-effort client address: first X-Forwarded-For hop, else the peer address.
    Works for plain HTTP requests and Socket.IO handshakes alike.
    """
    req = req if req is not None else request
    forwarded = req.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return req.remote_addr or "unknown"


def isoformat_utc(value: Any) -> Any:
    """ISO-8601 string for datetimes (naive values are taken as UTC); other values pass through."""
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
