"""Bucket bouncer HTTP service shell with signed request auth."""

from collections.abc import Sequence

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import BaseRoute, Route

from bouncer.auth.authenticator import Authenticator
from bouncer.auth.middleware import SignedRequestAuthMiddleware
from bouncer.common.http import RequestIdMiddleware
from bouncer.common.logging import get_logger, setup_logging
from bouncer.common.settings import Settings, get_settings

logger = get_logger(__name__)


async def handle_ping(_request: Request) -> Response:
    """Liveness check, never authenticated."""
    return Response("OK", status_code=200, media_type="text/plain")


def create_app(
    settings: Settings | None = None,
    routes: Sequence[BaseRoute] = (),
    authenticator: Authenticator | None = None,
) -> Starlette:
    """
    Create the Starlette application.

    Args:
        settings: Application settings
        routes: Extra routes served behind signed request auth
        authenticator: Optional authenticator (built from settings if None)
    """
    settings = settings or get_settings()

    app = Starlette(
        routes=[
            Route("/ping", handle_ping, methods=["GET", "HEAD"]),
            Route("/ping/", handle_ping, methods=["GET", "HEAD"]),
            *routes,
        ]
    )

    app.add_middleware(
        SignedRequestAuthMiddleware,
        settings=settings,
        authenticator=authenticator,
    )
    app.add_middleware(RequestIdMiddleware)

    return app


def main() -> None:
    """Entry point for the bouncer server."""
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    if settings.auth_mode == "signed" and not (settings.admin_key_id and settings.admin_secret):
        logger.warning("Signed auth enabled but no admin credential configured")

    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
