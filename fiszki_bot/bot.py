"""Main entry point for the flashcard bot."""
import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand

from fiszki_bot.config import settings
from fiszki_bot.database.seed import seed_if_empty
from fiszki_bot.database.store import open_store
from fiszki_bot.exceptions import StorageError
from fiszki_bot.handlers import admin, lesson, start


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


async def main():
    """Main function to start the bot."""
    if not settings.BOT_TOKEN:
        logger.error("BOT_TOKEN is not set. Create a .env file based on .env.example")
        sys.exit(1)

    logger.info("Starting flashcard bot...")

    # Initialize database
    logger.info("Initializing database at %s", settings.DATABASE_PATH)
    store = await open_store(settings.DATABASE_PATH)

    # First run: fill an empty store with sample lessons
    try:
        await seed_if_empty(store)
    except StorageError as e:
        logger.error("Could not seed flashcards: %s", e)

    # Initialize bot and dispatcher
    bot = Bot(token=settings.BOT_TOKEN)
    dp = Dispatcher(storage=MemoryStorage())
    dp["store"] = store

    # Register routers (admin first)
    dp.include_router(admin.router)
    dp.include_router(start.router)
    dp.include_router(lesson.router)

    await bot.set_my_commands([
        BotCommand(command="start", description="Wybór lekcji"),
        BotCommand(command="count", description="Liczba fiszek (admin)"),
        BotCommand(command="reset_cards", description="Przywróć przykładowe fiszki (admin)"),
    ])

    logger.info("Bot handlers registered successfully")

    try:
        logger.info("Starting bot polling...")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types()
        )
    finally:
        await bot.session.close()
        await store.db.close()
        logger.info("Bot stopped")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    run()
