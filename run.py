"""Entry point for the Members API.

Starts the FastAPI application under Uvicorn.  Host, port and the rest
of the configuration come from environment variables (see
``members_api.app.core.config``).

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from members_api.app.core.config import settings
from members_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
