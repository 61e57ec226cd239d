"""Process entry point: run the HTTP server and drain it on shutdown.

uvicorn installs the SIGINT/SIGTERM handlers. On a signal it stops accepting
connections and asks open ones to close; `DrainingServer` bounds how long
in-flight requests may take to finish.

Exit Codes:
    0: Clean shutdown, all in-flight requests completed.
    1: The listener failed to start, or the drain timed out.
"""

import asyncio
import socket

import uvicorn

from statuspage.config import Settings, get_settings
from statuspage.core.logging_config import get_logger
from statuspage.main import create_app

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


class DrainingServer(uvicorn.Server):
    """uvicorn server whose shutdown waits at most `drain_timeout` seconds.

    When the window elapses, the remaining request tasks are cancelled and
    `drain_timed_out` is set so the caller can exit non-zero.
    """

    def __init__(self, config: uvicorn.Config, drain_timeout: float) -> None:
        super().__init__(config)
        self.drain_timeout = drain_timeout
        self.drain_timed_out = False

    async def shutdown(self, sockets: list[socket.socket] | None = None) -> None:
        logger.info("Shutting down gracefully", drain_timeout=self.drain_timeout)
        try:
            await asyncio.wait_for(super().shutdown(sockets=sockets), timeout=self.drain_timeout)
        except asyncio.TimeoutError:
            self.drain_timed_out = True
            pending = list(self.server_state.tasks)
            for task in pending:
                task.cancel()
            logger.critical("Server forced to shutdown", cancelled_tasks=len(pending))


def build_server(settings: Settings) -> DrainingServer:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        # Logging is configured by the application lifespan.
        log_config=None,
    )
    return DrainingServer(config, drain_timeout=settings.SHUTDOWN_TIMEOUT)


def main() -> int:
    """Run the service until a termination signal arrives.

    Returns:
        int: Process exit code.
    """
    settings = get_settings()
    server = build_server(settings)

    try:
        server.run()
    except SystemExit as e:
        # uvicorn exits directly when the listener cannot bind.
        logger.critical("Error starting server", host=settings.HOST, port=settings.PORT, code=e.code)
        return EXIT_FATAL

    if not server.started:
        logger.critical("Server did not start", host=settings.HOST, port=settings.PORT)
        return EXIT_FATAL
    if server.drain_timed_out:
        return EXIT_FATAL

    logger.info("Server stopped")
    return EXIT_OK
