"""Shared fixtures for flashcard bot tests."""
import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from fiszki_bot.core.database import init_database
from fiszki_bot.database.seed import seed_if_empty
from fiszki_bot.database.store import FlashcardStore
from fiszki_bot.quiz.models import Flashcard
from fiszki_bot.quiz.session import LessonSession


@pytest.fixture
async def db(tmp_path):
    """Fresh SQLite database file with the flashcards schema."""
    database = await init_database(str(tmp_path / "fiszki.db"))
    yield database
    await database.close()


@pytest.fixture
def store(db):
    return FlashcardStore(db)


@pytest.fixture
async def seeded_store(store):
    """Store holding the built-in sample lessons (5 + 3 flashcards)."""
    await seed_if_empty(store)
    return store


@pytest.fixture
def session(seeded_store):
    return LessonSession(seeded_store)


@pytest.fixture
def sample_card():
    """Flashcard with all decoys present."""
    return Flashcard(
        id=1,
        lesson_id=1,
        question="Co oznacza słowo 'kot' po angielsku?",
        answer="Cat",
        decoy1="Dog",
        decoy2="Mouse",
        decoy3="Bird",
    )


@pytest.fixture
def sparse_card():
    """Flashcard with only one decoy."""
    return Flashcard(id=2, lesson_id=3, question="2 + 2?", answer="4", decoy1="5")


@pytest.fixture
def fsm_storage():
    return MemoryStorage()


@pytest.fixture
def make_state(fsm_storage):
    """Build the FSMContext of a chat backed by a shared MemoryStorage."""
    def _make(chat_id: int = 555) -> FSMContext:
        key = StorageKey(bot_id=1, chat_id=chat_id, user_id=chat_id)
        return FSMContext(storage=fsm_storage, key=key)
    return _make
