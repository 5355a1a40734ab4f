import logging

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from fiszki_bot.config import settings
from fiszki_bot.database.seed import seed_if_empty
from fiszki_bot.database.store import FlashcardStore
from fiszki_bot.exceptions import StorageError

logger = logging.getLogger(__name__)

router = Router()


async def _check_admin(message: Message) -> bool:
    """Check that sender is the configured admin and chat is private. Returns True if OK."""
    if settings.ADMIN_ID is None or message.from_user.id != settings.ADMIN_ID:
        return False
    if message.chat.type != "private":
        await message.answer("⚠️ Komenda dostępna tylko w prywatnej rozmowie.")
        return False
    return True


@router.message(Command("count"))
async def cmd_count(message: Message, store: FlashcardStore):
    if not await _check_admin(message):
        return

    try:
        total = await store.count()
    except StorageError as e:
        logger.error("Cannot count flashcards: %s", e)
        await message.answer("❌ Baza danych jest niedostępna.")
        return

    await message.answer(f"🗂 Fiszek w bazie: {total}")


@router.message(Command("reset_cards"))
async def cmd_reset_cards(message: Message, store: FlashcardStore):
    """Wipe all flashcards and restore the built-in samples."""
    if not await _check_admin(message):
        return

    try:
        removed = await store.clear_all()
        added = await seed_if_empty(store)
    except StorageError as e:
        logger.error("Flashcard reset failed: %s", e)
        await message.answer("❌ Nie udało się zresetować fiszek.")
        return

    logger.info("Admin %d reset flashcards: removed=%d, added=%d", message.from_user.id, removed, added)
    await message.answer(f"♻️ Usunięto fiszek: {removed}, dodano przykładowych: {added}")
