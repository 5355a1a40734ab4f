"""Lesson session: progress through one lesson's flashcards."""
import logging
from typing import Callable, List, Optional

from fiszki_bot.database.store import FlashcardStore
from fiszki_bot.exceptions import StorageError
from fiszki_bot.quiz.models import AnswerChoice, Flashcard, LessonState, SessionSnapshot
from fiszki_bot.quiz.presenter import AnswerPresenter

logger = logging.getLogger(__name__)

Observer = Callable[[SessionSnapshot], None]


class LessonSession:
    """
    State machine over the active lesson.

    IDLE -> LOADING -> READY | EMPTY; READY -> COMPLETED after advancing
    past the last flashcard. A new load_lesson() may start from any state.
    """

    def __init__(self, store: FlashcardStore, presenter: Optional[AnswerPresenter] = None):
        self.store = store
        self.presenter = presenter or AnswerPresenter()
        self.state = LessonState.IDLE
        self.lesson_id: Optional[int] = None
        self.flashcards: List[Flashcard] = []
        self.position = 0
        self.last_error: Optional[Exception] = None
        self._load_generation = 0
        self._observers: List[Observer] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a state-change callback. Returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            lesson_id=self.lesson_id,
            position=self.position,
            total=len(self.flashcards),
            current=self.current_flashcard(),
        )

    def _notify(self):
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Session observer %r failed", observer)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.state is LessonState.LOADING

    async def load_lesson(self, lesson_id: int) -> LessonState:
        """
        Fetch a lesson and start it from the first flashcard.

        Storage failures end in EMPTY with the error kept in last_error.
        When another load is requested before this one finishes, the
        older result is dropped.
        """
        self._load_generation += 1
        generation = self._load_generation

        self.state = LessonState.LOADING
        self.lesson_id = lesson_id
        self._notify()

        logger.info("Loading lesson %s", lesson_id)
        error: Optional[Exception] = None
        try:
            flashcards = await self.store.fetch_by_lesson(lesson_id)
        except StorageError as e:
            logger.error("Storage error while loading lesson %s: %s", lesson_id, e)
            flashcards, error = [], e
        except Exception as e:
            logger.exception("Unexpected error while loading lesson %s", lesson_id)
            flashcards, error = [], e

        if generation != self._load_generation:
            logger.debug("Discarding stale result for lesson %s", lesson_id)
            return self.state

        self.flashcards = list(flashcards)
        self.position = 0
        self.last_error = error
        self.presenter.invalidate()

        if self.flashcards:
            self.state = LessonState.READY
            logger.info("Loaded %d flashcards for lesson %s", len(self.flashcards), lesson_id)
        else:
            self.state = LessonState.EMPTY
            if error is None:
                logger.warning("No flashcards for lesson %s", lesson_id)

        self._notify()
        return self.state

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def current_flashcard(self) -> Optional[Flashcard]:
        if self.state not in (LessonState.READY, LessonState.COMPLETED):
            return None
        if 0 <= self.position < len(self.flashcards):
            return self.flashcards[self.position]
        return None

    def advance(self) -> bool:
        """Move to the next flashcard. At the last one, mark the lesson completed."""
        if self.state not in (LessonState.READY, LessonState.COMPLETED):
            return False

        if self.position < len(self.flashcards) - 1:
            self.position += 1
            logger.debug("Moving to flashcard %d", self.position)
            self._notify()
            return True

        if self.state is LessonState.READY:
            logger.info("Lesson %s completed", self.lesson_id)
            self.state = LessonState.COMPLETED
            self._notify()
        return False

    def reset(self):
        """Go back to the first flashcard without refetching."""
        self.position = 0
        self.presenter.clear_selection()
        if self.state is LessonState.COMPLETED:
            self.state = LessonState.READY
        self._notify()

    # ------------------------------------------------------------------
    # Answering
    # ------------------------------------------------------------------

    def choices(self) -> List[AnswerChoice]:
        card = self.current_flashcard()
        if card is None:
            return []
        return self.presenter.choices_for(card)

    def selection(self) -> Optional[int]:
        card = self.current_flashcard()
        if card is None:
            return None
        return self.presenter.selection(card)

    def select_answer(self, index: int) -> AnswerChoice:
        """
        Lock in an answer for the current flashcard.

        Raises:
            LookupError: If there is no current flashcard
            SelectionLockedError: If an answer is already selected
        """
        card = self.current_flashcard()
        if card is None:
            raise LookupError("No flashcard to answer")
        choice = self.presenter.select(card, index)
        self._notify()
        return choice

    def proceed(self) -> bool:
        """
        Act on the locked answer: advance when it was correct, otherwise
        let the learner retry the same flashcard. Returns True if advanced.
        """
        card = self.current_flashcard()
        if card is None:
            return False

        choice = self.presenter.selected_choice(card)
        self.presenter.clear_selection(card)
        if choice is not None and choice.is_correct:
            return self.advance()

        self._notify()
        return False
