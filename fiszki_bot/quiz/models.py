"""Data models for flashcards and lesson sessions."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class Flashcard:
    """One question with its correct answer and up to three decoys."""
    question: str
    answer: str
    lesson_id: Optional[int] = None
    decoy1: Optional[str] = None
    decoy2: Optional[str] = None
    decoy3: Optional[str] = None
    id: Optional[int] = None  # assigned by the store on insert

    @property
    def decoys(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        return (self.decoy1, self.decoy2, self.decoy3)

    def with_id(self, card_id: int) -> "Flashcard":
        return replace(self, id=card_id)


@dataclass(frozen=True)
class AnswerChoice:
    """Single answer button: its text and whether it is the correct one."""
    text: str
    is_correct: bool


class LessonState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a lesson session handed to observers."""
    state: LessonState
    lesson_id: Optional[int]
    position: int
    total: int
    current: Optional[Flashcard]

    @property
    def is_loading(self) -> bool:
        return self.state is LessonState.LOADING

    @property
    def remaining(self) -> int:
        """Flashcards left after the current one."""
        if self.total == 0:
            return 0
        return self.total - self.position - 1


def flashcard_from_row(row) -> Flashcard:
    """Convert a `flashcards` table row into a Flashcard."""
    return Flashcard(
        id=row["id"],
        lesson_id=row["lesson_id"],
        question=row["question"],
        answer=row["answer"],
        decoy1=row["decoy1"],
        decoy2=row["decoy2"],
        decoy3=row["decoy3"],
    )
