"""Main entry point - runs the bridge API."""

import asyncio
import logging
import signal

import uvicorn

from lokibridge.api.app import create_app
from lokibridge.clients.factory import close_clients
from lokibridge.config import get_settings

logger = logging.getLogger(__name__)


class Application:
    """Main application serving the bridge API."""

    def __init__(self):
        self.settings = get_settings()
        self._shutdown_event = asyncio.Event()

    async def start(self):
        """Start the API server and wait for shutdown."""
        log_level = logging.DEBUG if self.settings.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        logger.info("Starting Loki bridge...")
        logger.info(f"Environment: {self.settings.environment}")
        if not self.settings.bnb_our_address:
            logger.warning("BNB_OUR_ADDRESS not set - deposit lookups will fail")

        task = asyncio.create_task(self._run_api())

        # Wait for shutdown signal or server exit
        shutdown = asyncio.create_task(self._shutdown_event.wait())
        await asyncio.wait({task, shutdown}, return_when=asyncio.FIRST_COMPLETED)

        task.cancel()
        shutdown.cancel()
        await asyncio.gather(task, shutdown, return_exceptions=True)

        await self._cleanup()

    async def _run_api(self):
        """Run the FastAPI server."""
        try:
            config = uvicorn.Config(
                create_app(),
                host=self.settings.api_host,
                port=self.settings.api_port,
                log_level="debug" if self.settings.debug else "info",
            )
            server = uvicorn.Server(config)
            logger.info(f"Starting API server on {self.settings.api_host}:{self.settings.api_port}")
            await server.serve()
        except asyncio.CancelledError:
            logger.info("API server cancelled")
        except Exception as e:
            logger.error(f"API error: {e}")
            raise

    async def _cleanup(self):
        """Cleanup resources."""
        logger.info("Cleaning up...")
        await close_clients()
        logger.info("Cleanup complete")

    def shutdown(self):
        """Signal shutdown."""
        logger.info("Shutdown requested")
        self._shutdown_event.set()


def main():
    """Main entry point."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    app = Application()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.shutdown)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
