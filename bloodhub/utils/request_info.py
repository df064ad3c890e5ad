from typing import NamedTuple

from fastapi import Request

# Checked in order; the first hop of X-Forwarded-For is the original client
PROXY_IP_HEADERS = ("x-forwarded-for", "x-real-ip")


class ClientInfo(NamedTuple):
    ip_address: str
    user_agent: str


def client_info(request: Request) -> ClientInfo:
    """Caller address and user agent, honouring reverse-proxy headers"""
    ip_address = None
    for header in PROXY_IP_HEADERS:
        value = request.headers.get(header)
        if value:
            ip_address = value.split(",")[0].strip()
            break

    if not ip_address:
        ip_address = request.client.host if request.client else "unknown"

    return ClientInfo(ip_address, request.headers.get("user-agent", "unknown"))
