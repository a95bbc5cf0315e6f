import asyncio
import logging
import sys

from productagent.config import settings
from productagent.utils.logging_config import configure_logging
from productagent.web.server import run_web_server

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


async def main():
    """Main entry point"""
    logger.info("="*60)
    logger.info("Starting ProductAIgent...")
    logger.info(f"Log level: {settings.LOG_LEVEL}")
    logger.info(f"Copywriter model: {settings.COPY_MODEL}")
    logger.info(f"Studio model: {settings.STUDIO_MODEL}")
    logger.info("="*60)

    runner = await run_web_server()

    try:
        # Serve until interrupted
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        logger.info("Web server stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("="*60)
        logger.info("Stopped by user")
        logger.info("="*60)
    except Exception as e:
        logger.critical(f"Unhandled exception: {e}", exc_info=True)
        sys.exit(1)
