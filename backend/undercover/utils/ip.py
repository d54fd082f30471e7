from __future__ import annotations

from flask import Request, current_app


_FORWARDING_HEADERS = ("CF-Connecting-IP", "X-Real-IP")


def get_client_ip(request: Request) -> str:
    """Best-effort caller address for logs; forwarding headers only count behind a trusted proxy."""
    if current_app.config.get("TRUST_PROXY_HEADERS", False):
        for header in _FORWARDING_HEADERS:
            value = request.headers.get(header)
            if value:
                return value.strip()

        xff = request.headers.get("X-Forwarded-For", "")
        first = xff.split(",")[0].strip()
        if first:
            return first

    return request.remote_addr or "unknown"
