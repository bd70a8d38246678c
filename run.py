import asyncio
import logging
import signal

from utils.logging_config import setup_logging

# Initialize centralized logging configuration before anything logs
setup_logging()

import config
from airtable import AirtableClient
from exceptions import StorefrontException
from services.session import StorefrontSession
from utils.error_handler import handle_service_error
from utils.local_store import LocalStore

logger = logging.getLogger(__name__)


async def _authenticate(session: StorefrontSession) -> bool:
    user = await session.restore()
    if user is not None:
        return True
    if not config.STOREFRONT_LOGIN:
        logger.error("[Startup] No stored session and STOREFRONT_LOGIN is not set")
        return False
    try:
        await session.login(config.STOREFRONT_LOGIN, config.STOREFRONT_PASSWORD)
    except StorefrontException as e:
        logger.error(f"[Startup] Login failed: {handle_service_error(e)}")
        return False
    return True


async def main() -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C still raises KeyboardInterrupt
            pass

    async with AirtableClient() as client:
        session = StorefrontSession(client, LocalStore(config.LOCAL_STORE_PATH))
        if not await _authenticate(session):
            return

        user = session.user
        if user.is_employee:
            await session.employee_workflow.go_online()
        logger.info(f"[Startup] Running as {user.role.value} {user.name or user.id}")

        session.start()
        try:
            await stop_event.wait()
        finally:
            logger.warning("Shutting down..")
            await session.close()
            if user.is_employee:
                try:
                    await session.employee_workflow.go_offline()
                except StorefrontException as e:
                    logger.error(f"[Shutdown] Could not take employee {user.id} off the line: {e}")
            logger.warning("Bye!")


if __name__ == '__main__':
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
