"""Entry point for the Evenza API.

Starts the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you
only specify a single Python file to run.

Configuration (``SECRET_KEY``, ``DATABASE_URL``, storage and email
credentials, ...) is read from environment variables; see
``evenza_api/app/core/config.py`` for the full list.  Host and port
come from ``API_HOST`` and ``API_PORT`` (defaults ``0.0.0.0`` and
``8000``).

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server

from evenza_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    # log_config=None keeps the handlers installed by setup_logging.
    config = Config(app=app, host=host, port=port, reload=False, log_config=None)
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
