"""Gateway fixtures — gateway app wired to the real service app or a mock upstream.

Invariants:
    - upstream_client talks to service_app in-process via ASGITransport
    - dead_gateway's upstream raises ConnectError on every call
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from shopfront.config import GatewaySettings
from shopfront.gateway.main import create_gateway_app


@pytest.fixture
def gateway_settings():
    return GatewaySettings(
        gateway_port=8080,
        gateway_upstream_url="http://product-service:8000",
    )


def _client_for(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://edge")


@pytest.fixture
async def gateway(gateway_settings, service_app):
    """Gateway client whose upstream is the in-memory product service."""
    async with AsyncClient(
        transport=ASGITransport(app=service_app),
        base_url=gateway_settings.gateway_upstream_url,
    ) as upstream_client:
        app = create_gateway_app(gateway_settings, client=upstream_client)
        async with _client_for(app) as c:
            yield c


@pytest.fixture
async def mock_upstream_gateway(gateway_settings):
    """Factory: gateway client whose upstream is an httpx.MockTransport handler."""
    clients = []

    async def build(handler):
        upstream_client = AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=gateway_settings.gateway_upstream_url,
        )
        app = create_gateway_app(gateway_settings, client=upstream_client)
        gateway_client = _client_for(app)
        clients.extend([upstream_client, gateway_client])
        return gateway_client

    yield build
    for c in clients:
        await c.aclose()


@pytest.fixture
async def dead_gateway(mock_upstream_gateway):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    return await mock_upstream_gateway(refuse)
