from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from fiszki_bot.keyboards.lesson_kb import lessons_keyboard

router = Router()

WELCOME_TEXT = (
    "👋 Cześć! Tu możesz ćwiczyć słówka z fiszkami.\n\n"
    "Wybierz lekcję:"
)


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(WELCOME_TEXT, reply_markup=lessons_keyboard())
