# kosync/core/client_ip.py
"""
Client address attribution for request logging.

The connecting address is used unless it belongs to a trusted proxy, in
which case the first valid address of X-Forwarded-For wins. The result is
only used to prefix log lines; it never takes part in authentication.
"""
import ipaddress
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from fastapi import FastAPI, Request

from kosync.config import get_settings

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class ClientIp:
    client_ip: str
    connecting_ip: str
    trusted_proxy: bool
    proxies_configured: bool = False


def _normalize(address: Optional[str]) -> str:
    if not address:
        return ""
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return address  # e.g. "testclient"
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped:
        return str(ip.ipv4_mapped)
    return str(ip)


def _first_forwarded(forwarded_for: Optional[str]) -> Optional[str]:
    if not forwarded_for:
        return None
    first = next((p.strip() for p in forwarded_for.split(",") if p.strip()), None)
    if not first:
        return None
    try:
        ipaddress.ip_address(first)
    except ValueError:
        return None
    return first


def resolve_client_ip(
    connecting: Optional[str],
    forwarded_for: Optional[str],
    trusted_proxies: Sequence[str],
) -> ClientIp:
    connecting_ip = _normalize(connecting)
    trusted = connecting_ip in trusted_proxies
    client_ip = connecting_ip

    if trusted:
        forwarded = _first_forwarded(forwarded_for)
        if forwarded:
            client_ip = forwarded
        else:
            logger.warning("Trusted proxy [%s] failed to forward client IP address.", connecting_ip)

    if not client_ip:
        logger.warning("Unable to determine client IP address.")

    return ClientIp(
        client_ip=client_ip,
        connecting_ip=connecting_ip,
        trusted_proxy=trusted,
        proxies_configured=bool(trusted_proxies),
    )


def client_tag(request: Request) -> str:
    """
    Log prefix for a request: "[client_ip]", with "*" appended when trusted
    proxies are configured but the request bypassed them.
    """
    info: Optional[ClientIp] = getattr(request.state, "client", None)
    if info is None:
        return "[]"
    tag = f"[{info.client_ip}]"
    if info.proxies_configured and not info.trusted_proxy:
        tag += "*"
    return tag


def log_request(request: Request, level: int, text: str, *args) -> None:
    logger.log(level, "%s " + text, client_tag(request), *args)


def install_client_ip_middleware(app: FastAPI) -> None:
    """
    Attach the resolved ClientIp to request.state.client.

    Settings come from the get_settings provider, so
    app.dependency_overrides[get_settings] applies here as in the routes.
    """

    @app.middleware("http")
    async def detect_client_ip(request: Request, call_next):
        provider = app.dependency_overrides.get(get_settings, get_settings)
        host = request.client.host if request.client else None
        request.state.client = resolve_client_ip(
            host,
            request.headers.get("x-forwarded-for"),
            provider().trusted_proxies,
        )
        return await call_next(request)
