"""Built-in sample flashcards for the first run."""
import logging
from typing import List

from fiszki_bot.database.store import FlashcardStore
from fiszki_bot.quiz.models import Flashcard

logger = logging.getLogger(__name__)

SAMPLE_FLASHCARDS: List[Flashcard] = [
    # Lekcja 1: Zwierzęta
    Flashcard(
        lesson_id=1,
        question="Co oznacza słowo 'kot' po angielsku?",
        answer="Cat",
        decoy1="Dog", decoy2="Mouse", decoy3="Bird",
    ),
    Flashcard(
        lesson_id=1,
        question="Co oznacza słowo 'pies' po angielsku?",
        answer="Dog",
        decoy1="Cat", decoy2="Fish", decoy3="Rabbit",
    ),
    Flashcard(
        lesson_id=1,
        question="Co oznacza słowo 'dom' po angielsku?",
        answer="House",
        decoy1="Car", decoy2="Tree", decoy3="Garden",
    ),
    Flashcard(
        lesson_id=1,
        question="Co oznacza słowo 'książka' po angielsku?",
        answer="Book",
        decoy1="Pen", decoy2="Paper", decoy3="Table",
    ),
    Flashcard(
        lesson_id=1,
        question="Co oznacza słowo 'samochód' po angielsku?",
        answer="Car",
        decoy1="Bike", decoy2="Bus", decoy3="Train",
    ),
    # Lekcja 2: Powitania
    Flashcard(
        lesson_id=2,
        question="Jak powiesz 'cześć' po angielsku?",
        answer="Hello",
        decoy1="Goodbye", decoy2="Please", decoy3="Thank you",
    ),
    Flashcard(
        lesson_id=2,
        question="Jak powiesz 'dziękuję' po angielsku?",
        answer="Thank you",
        decoy1="Sorry", decoy2="Please", decoy3="Excuse me",
    ),
    Flashcard(
        lesson_id=2,
        question="Jak powiesz 'przepraszam' po angielsku?",
        answer="Sorry",
        decoy1="Thank you", decoy2="Hello", decoy3="Goodbye",
    ),
]


async def seed_if_empty(store: FlashcardStore) -> int:
    """Insert the sample flashcards if the store holds none. Returns rows inserted."""
    count = await store.count()
    logger.debug("Flashcards in store: %d", count)

    if count > 0:
        return 0

    logger.info("Store is empty, adding sample flashcards")
    inserted = await store.insert_many(SAMPLE_FLASHCARDS)
    logger.info("Added %d sample flashcards", len(inserted))
    return len(inserted)
