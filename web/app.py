"""Quart app factory and serving lifecycle."""

from collections.abc import Awaitable, Callable

import structlog
from quart import Quart
from config.settings import settings
from storage.database import close_client, connect

log = structlog.get_logger(__name__)


def create_app(connect_on_start: bool = True) -> Quart:
    """Create and configure the Quart web application."""
    app = Quart(
        __name__,
        template_folder="templates",
        static_folder="static",
    )

    from web.routes.profile import profile_bp

    app.register_blueprint(profile_bp)

    if connect_on_start:

        @app.before_serving
        async def open_database() -> None:
            # Runs in the background so requests are served during retries.
            app.add_background_task(connect)

    @app.after_serving
    async def close_database() -> None:
        log.info("shutting_down")
        await close_client()

    return app


async def start_web(shutdown_trigger: Callable[[], Awaitable[None]] | None = None) -> None:
    """Start the profile web server."""
    app = create_app()
    log.info("starting_web_server", host=settings.host, port=settings.port)
    await app.run_task(host=settings.host, port=settings.port, shutdown_trigger=shutdown_trigger)
