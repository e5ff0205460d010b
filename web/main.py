"""Entry point: configure logging, serve until SIGINT/SIGTERM."""

import asyncio
import signal

import structlog
from config.logging_config import setup_logging
from web.app import start_web

log = structlog.get_logger(__name__)


async def run() -> None:
    setup_logging()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    await start_web(shutdown_trigger=stop.wait)
    log.info("server_stopped")


def main() -> None:
    """Run the web server."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
