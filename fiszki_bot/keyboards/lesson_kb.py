from typing import List, Optional

from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from fiszki_bot.config import LESSONS
from fiszki_bot.quiz.models import AnswerChoice


def _lesson_rows(selected: Optional[int] = None) -> List[List[InlineKeyboardButton]]:
    rows = []
    for lesson_id, title in LESSONS.items():
        label = f"✅ {title}" if lesson_id == selected else title
        rows.append([InlineKeyboardButton(text=label, callback_data=f"lesson:{lesson_id}")])
    return rows


def lessons_keyboard(selected: Optional[int] = None) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=_lesson_rows(selected))


def answers_keyboard(choices: List[AnswerChoice], selected: Optional[int] = None) -> InlineKeyboardMarkup:
    """Answer buttons; once an answer is selected, marks it and adds the proceed button."""
    labels = ["A", "B", "C", "D"]
    buttons = []
    for i, choice in enumerate(choices):
        label = labels[i] if i < len(labels) else str(i + 1)
        text = f"{label}) {choice.text}"
        if i == selected:
            text = ("✅ " if choice.is_correct else "❌ ") + text
        buttons.append([InlineKeyboardButton(text=text, callback_data=f"ans:{i}")])

    if selected is not None and 0 <= selected < len(choices):
        if choices[selected].is_correct:
            proceed_text = "Dobrze! Następna fiszka ➡️"
        else:
            proceed_text = "Źle! Spróbuj dalej 🔄"
        buttons.append([InlineKeyboardButton(text=proceed_text, callback_data="proceed")])

    return InlineKeyboardMarkup(inline_keyboard=buttons)


def reload_keyboard(lesson_id: int) -> InlineKeyboardMarkup:
    """Shown when a lesson has no flashcards."""
    rows = [[InlineKeyboardButton(text="🔄 Załaduj ponownie", callback_data=f"reload:{lesson_id}")]]
    return InlineKeyboardMarkup(inline_keyboard=rows + _lesson_rows(lesson_id))


def completed_keyboard(lesson_id: Optional[int] = None) -> InlineKeyboardMarkup:
    rows = [[InlineKeyboardButton(text="🔁 Od początku", callback_data="restart")]]
    return InlineKeyboardMarkup(inline_keyboard=rows + _lesson_rows(lesson_id))
