"""
Record Tracker - Main Entrypoint
Telegram front end for an external album catalog API.
"""
import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage

from tracker.config.settings import settings
from tracker.handlers import CatalogHub, router
from tracker.services.catalog_api import CatalogApi
from tracker.utils.http_client import build_session
from tracker.utils.logging import setup_logging


async def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)

    if not settings.BOT_TOKEN:
        raise SystemExit("BOT_TOKEN is not set")

    profile = settings.profile
    session = build_session()
    api = CatalogApi(session, settings.api_base_url, id_field=profile.id_field)
    hub = CatalogHub(
        api,
        profile,
        placeholder=settings.PLACEHOLDER_COVER_URL,
        confirm_timeout=settings.CONFIRM_TIMEOUT_SECONDS,
        max_chats=settings.MAX_CHATS,
    )

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher(storage=MemoryStorage(), hub=hub)
    dp.include_router(router)

    logger.info(
        "Starting bot",
        extra={"env": settings.ENV, "variant": profile.variant.value, "api": api.base_url},
    )
    try:
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await session.close()
        await bot.session.close()
        logger.info("Bot stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
