"""Process Entry Points — run the product service or the gateway under uvicorn.

Invariants:
    - Settings are validated before the server is built; a missing or invalid
      variable exits 1 without binding a port
    - A lifespan startup failure (e.g. store unreachable) exits 1
    - SIGINT/SIGTERM: uvicorn stops accepting, drains in-flight requests, runs
      lifespan shutdown, then the process exits 0
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from shopfront.config import GatewaySettings, ServiceSettings
from shopfront.gateway.main import create_gateway_app
from shopfront.main import create_app

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _serve(app, host: str, port: int, log_level: str) -> int:
    config = uvicorn.Config(
        app, host=host, port=port, lifespan="on", log_level=log_level.lower(),
    )
    server = uvicorn.Server(config)
    try:
        server.run()
    except Exception as e:
        logger.critical(f"Unrecoverable runtime fault: {e!r}", exc_info=True)
        return EXIT_FAILURE
    if not server.started:
        logger.critical("Startup failed")
        return EXIT_FAILURE
    return EXIT_OK


def _startup_fault(tier: str, exc: ValidationError) -> int:
    missing = ", ".join(
        ".".join(str(loc) for loc in e["loc"]).upper() for e in exc.errors()
    )
    print(f"shopfront-{tier}: invalid configuration ({missing})", file=sys.stderr)
    return EXIT_FAILURE


def run_service() -> int:
    try:
        settings = ServiceSettings()
    except ValidationError as e:
        return _startup_fault("service", e)
    return _serve(
        create_app(settings), settings.host, settings.service_port, settings.log_level,
    )


def run_gateway() -> int:
    try:
        settings = GatewaySettings()
    except ValidationError as e:
        return _startup_fault("gateway", e)
    return _serve(
        create_gateway_app(settings), settings.host, settings.gateway_port, settings.log_level,
    )


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "service"
    sys.exit(run_gateway() if target == "gateway" else run_service())
