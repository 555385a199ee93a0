"""Upstream Proxy — relays requests to the product service over httpx.

Invariants:
    - Method, path, query string and body are relayed verbatim
    - Only content-negotiation headers cross the hop in either direction
    - Transport failures → UpstreamUnavailable (502, or 503 on timeout); never retried
    - Upstream status codes (including 400/413/500) are relayed unchanged

Design Decisions:
    - One shared httpx.AsyncClient per process, owned by the gateway lifespan
    - Accept-Encoding is not forwarded: httpx hands back decoded bytes, so the
      relayed body is always identity-encoded
"""

import logging

import httpx
from starlette.datastructures import Headers

from shopfront.core.errors import ErrorContext, UpstreamUnavailable

logger = logging.getLogger(__name__)

FORWARDED_REQUEST_HEADERS = ("content-type", "accept", "accept-language")
RELAYED_RESPONSE_HEADERS = ("content-type", "content-language", "vary")


def select_headers(headers: Headers | httpx.Headers, names: tuple[str, ...]) -> dict[str, str]:
    return {name: headers[name] for name in names if name in headers}


class UpstreamProxy:
    """Forward requests to the client's base URL."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def forward(
        self,
        method: str,
        path: str,
        query: str = "",
        headers: Headers | None = None,
        body: bytes = b"",
    ) -> httpx.Response:
        target = f"{path}?{query}" if query else path
        outbound = select_headers(headers, FORWARDED_REQUEST_HEADERS) if headers else {}
        upstream = str(self.client.base_url)
        context = ErrorContext(method=method, path=path)
        try:
            return await self.client.request(
                method, target, headers=outbound, content=body or None,
            )
        except httpx.TimeoutException as e:
            logger.error(
                f"Upstream timeout: {e!r}",
                extra={"method": method, "path": path, "upstream": upstream},
            )
            raise UpstreamUnavailable(upstream, 503, context) from e
        except httpx.TransportError as e:
            logger.error(
                f"Upstream unreachable: {e!r}",
                extra={"method": method, "path": path, "upstream": upstream},
            )
            raise UpstreamUnavailable(upstream, 502, context) from e
