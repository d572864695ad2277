"""
Git Webhook Proxy - Main application entry point.
"""
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings
from .exceptions import ConfigurationError
from .logger import logger, setup_logging
from .proxy import Proxy

HEALTH_MESSAGE = "I'm Healthy and I know it! ;) "


def create_app(proxy: Proxy, app_settings: Settings = settings) -> FastAPI:
    """Create the FastAPI application around a configured proxy."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Proxying {proxy.provider} webhooks to '{proxy.upstream_url}', "
            f"allowed paths: {list(proxy.allowed_paths) or 'all'}"
        )
        yield
        await proxy.aclose()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=app_settings.app_name,
        description="Validates Git webhooks and relays them upstream",
        version=app_settings.app_version,
        lifespan=lifespan,
        debug=app_settings.debug
    )
    app.state.proxy = proxy

    @app.exception_handler(StarletteHTTPException)
    async def plain_text_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.get("/health", response_class=PlainTextResponse)
    async def health():
        """Health check endpoint."""
        return HEALTH_MESSAGE

    @app.post("/{path:path}")
    async def proxy_webhook(request: Request, path: str):
        """Relay a webhook delivery upstream."""
        return await proxy.proxy_request(request)

    return app


def main():
    """Run the proxy, reading settings from the environment and command line."""
    import uvicorn

    try:
        cli_settings = Settings(_cli_parse_args=True)
        setup_logging(cli_settings.debug)
        proxy = Proxy.from_settings(cli_settings)
        host, port = cli_settings.host, cli_settings.port
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    logger.info(f"Listening at: {cli_settings.listen_address}")
    uvicorn.run(
        create_app(proxy, cli_settings),
        host=host,
        port=port,
        log_level="debug" if cli_settings.debug else "info"
    )


if __name__ == "__main__":
    main()
