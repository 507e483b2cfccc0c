"""
Process entry point: builds the uvicorn server and runs it.

    python -m triplink          # or the `triplink` console script

The Server object is created in main() and passed down; its `started` flag
tells main() whether startup succeeded, which decides the exit status.
"""

import asyncio
import logging
import sys

import uvicorn

from triplink.config import settings

logger = logging.getLogger(__name__)


def build_server() -> uvicorn.Server:
    config = uvicorn.Config(
        "triplink.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
        lifespan="on",
    )
    return uvicorn.Server(config)


async def run(server: uvicorn.Server) -> None:
    await server.serve()


def main() -> int:
    server = build_server()
    asyncio.run(run(server))
    if not server.started:
        logger.critical("Server failed to start")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
