"""Lesson screen: loading lessons, answering flashcards, moving on."""
import html
import logging
from typing import Optional

from aiogram import Router, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from fiszki_bot.database.store import FlashcardStore
from fiszki_bot.exceptions import SelectionLockedError
from fiszki_bot.keyboards.lesson_kb import (
    answers_keyboard,
    completed_keyboard,
    lessons_keyboard,
    reload_keyboard,
)
from fiszki_bot.quiz.models import AnswerChoice, LessonState, SessionSnapshot
from fiszki_bot.quiz.session import LessonSession

logger = logging.getLogger(__name__)

router = Router()

LOADING_TEXT = "⏳ Ładowanie lekcji..."
EMPTY_TEXT = "📭 Brak fiszek w tej lekcji"
BUSY_TEXT = "⏳ Poczekaj, lekcja się ładuje"
LOCKED_TEXT = "Odpowiedź już wybrana"
CHOOSE_LESSON_TEXT = "📚 Wybierz lekcję:"


async def get_session(state: FSMContext, store: FlashcardStore) -> LessonSession:
    """
    Get or create the lesson session kept in the chat's FSM data.

    A session loaded before the store was cleared is replaced by a fresh one.
    """
    data = await state.get_data()
    session = data.get("session")
    if session is None or data.get("store_generation") != store.generation:
        session = LessonSession(store)
        await state.update_data(session=session, store_generation=store.generation)
    return session


# ============================================================================
# HELPERS
# ============================================================================

def _parse_int_suffix(data: Optional[str], prefix: str) -> Optional[int]:
    """Parse 'prefix:<int>' callback data. Returns None when malformed."""
    if not data or not data.startswith(prefix + ":"):
        return None
    try:
        return int(data.split(":", 1)[1])
    except ValueError:
        return None


def _format_flashcard(snapshot: SessionSnapshot, choice: Optional[AnswerChoice] = None) -> str:
    """Flashcard text: counter, question, remaining count and answer feedback."""
    card = snapshot.current
    lines = [
        f"Fiszka {snapshot.position + 1} z {snapshot.total}",
        "",
        f"<b>{html.escape(card.question, quote=False)}</b>",
        "",
        f"Pozostało fiszek: {snapshot.remaining}",
    ]
    if choice is not None:
        lines.append("")
        lines.append("✅ Dobrze!" if choice.is_correct else "❌ Źle!")
    return "\n".join(lines)


def _format_completed(snapshot: SessionSnapshot) -> str:
    return (
        f"🎉 Koniec lekcji!\n\n"
        f"Wszystkie fiszki ukończone: {snapshot.total}"
    )


async def _edit(message: Message, text: str, reply_markup=None):
    """Edit the lesson message, ignoring 'message is not modified'."""
    try:
        await message.edit_text(text, reply_markup=reply_markup, parse_mode="HTML")
    except TelegramBadRequest as e:
        if "message is not modified" not in str(e):
            raise


async def render(message: Message, session: LessonSession):
    """Draw the current session state into the lesson message."""
    snapshot = session.snapshot()

    if snapshot.state is LessonState.LOADING:
        await _edit(message, LOADING_TEXT)
    elif snapshot.state is LessonState.EMPTY:
        await _edit(message, EMPTY_TEXT, reload_keyboard(snapshot.lesson_id))
    elif snapshot.state is LessonState.COMPLETED:
        await _edit(message, _format_completed(snapshot), completed_keyboard(snapshot.lesson_id))
    elif snapshot.state is LessonState.READY:
        card = snapshot.current
        choice = session.presenter.selected_choice(card)
        await _edit(
            message,
            _format_flashcard(snapshot, choice),
            answers_keyboard(session.choices(), session.selection()),
        )
    else:
        await _edit(message, CHOOSE_LESSON_TEXT, lessons_keyboard())


async def _load_and_render(callback: CallbackQuery, session: LessonSession, lesson_id: int):
    await callback.answer()
    await _edit(callback.message, LOADING_TEXT)
    await session.load_lesson(lesson_id)
    await render(callback.message, session)


# ============================================================================
# HANDLERS
# ============================================================================

@router.callback_query(F.data.startswith("lesson:"))
async def select_lesson(callback: CallbackQuery, state: FSMContext, store: FlashcardStore):
    """Load the chosen lesson and show its first flashcard."""
    lesson_id = _parse_int_suffix(callback.data, "lesson")
    if lesson_id is None:
        await callback.answer()
        return

    session = await get_session(state, store)
    await _load_and_render(callback, session, lesson_id)


@router.callback_query(F.data.startswith("reload:"))
async def reload_lesson(callback: CallbackQuery, state: FSMContext, store: FlashcardStore):
    """Retry loading a lesson that came back empty."""
    lesson_id = _parse_int_suffix(callback.data, "reload")
    if lesson_id is None:
        await callback.answer()
        return

    session = await get_session(state, store)
    await _load_and_render(callback, session, lesson_id)


@router.callback_query(F.data.startswith("ans:"))
async def answer_flashcard(callback: CallbackQuery, state: FSMContext, store: FlashcardStore):
    """Lock in the tapped answer and show whether it was right."""
    session = await get_session(state, store)
    if session.is_loading:
        await callback.answer(BUSY_TEXT)
        return

    index = _parse_int_suffix(callback.data, "ans")
    if index is None:
        await callback.answer()
        return

    if session.current_flashcard() is None:
        # Tap on a message from an earlier session (bot restart, /reset_cards)
        await callback.answer()
        await _edit(callback.message, CHOOSE_LESSON_TEXT, lessons_keyboard())
        return

    try:
        choice = session.select_answer(index)
    except SelectionLockedError:
        await callback.answer(LOCKED_TEXT)
        return
    except IndexError:
        logger.warning("Answer index out of range: %r", callback.data)
        await callback.answer()
        return

    await callback.answer("✅ Dobrze!" if choice.is_correct else "❌ Źle!")
    await render(callback.message, session)


@router.callback_query(F.data == "proceed")
async def proceed(callback: CallbackQuery, state: FSMContext, store: FlashcardStore):
    """Next flashcard after a correct answer, retry after a wrong one."""
    session = await get_session(state, store)
    if session.is_loading:
        await callback.answer(BUSY_TEXT)
        return

    session.proceed()
    await callback.answer()
    await render(callback.message, session)


@router.callback_query(F.data == "restart")
async def restart_lesson(callback: CallbackQuery, state: FSMContext, store: FlashcardStore):
    """Start the current lesson over from its first flashcard."""
    session = await get_session(state, store)
    if session.is_loading:
        await callback.answer(BUSY_TEXT)
        return

    session.reset()
    await callback.answer()
    await render(callback.message, session)
