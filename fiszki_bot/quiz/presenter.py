"""Shuffled answer choices for a flashcard and the learner's single selection."""
import random
from typing import Dict, Hashable, List, Optional

from fiszki_bot.config import settings
from fiszki_bot.exceptions import SelectionLockedError
from fiszki_bot.quiz.models import AnswerChoice, Flashcard


class AnswerPresenter:
    """
    Builds the answer set for a flashcard and remembers it.

    The shuffle is computed once per flashcard id and reused until
    invalidate() is called, so the correct answer keeps its position
    across re-renders.
    """

    def __init__(self, rng: Optional[random.Random] = None, placeholder: Optional[str] = None):
        self._rng = rng or random.Random()
        self.placeholder = placeholder if placeholder is not None else settings.DECOY_PLACEHOLDER
        self._choices: Dict[Hashable, List[AnswerChoice]] = {}
        self._selected: Dict[Hashable, int] = {}

    @staticmethod
    def _key(card: Flashcard) -> Hashable:
        # Cards not yet stored have no id; the frozen card itself is the key
        return card.id if card.id is not None else card

    def build_choices(self, card: Flashcard) -> List[AnswerChoice]:
        """Unshuffled candidates: correct answer first, then the decoys."""
        choices = [AnswerChoice(card.answer, True)]
        for decoy in card.decoys:
            choices.append(AnswerChoice(decoy if decoy is not None else self.placeholder, False))
        return choices

    def choices_for(self, card: Flashcard) -> List[AnswerChoice]:
        key = self._key(card)
        if key not in self._choices:
            choices = self.build_choices(card)
            self._rng.shuffle(choices)
            self._choices[key] = choices
        return list(self._choices[key])

    def select(self, card: Flashcard, index: int) -> AnswerChoice:
        """
        Record the learner's answer for a flashcard.

        Raises:
            SelectionLockedError: If an answer was already selected
            IndexError: If index is outside the presented choices
        """
        key = self._key(card)
        if key in self._selected:
            raise SelectionLockedError(f"Answer already selected for flashcard {card.id}")

        choices = self.choices_for(card)
        if not 0 <= index < len(choices):
            raise IndexError(f"Answer index {index} out of range (0..{len(choices) - 1})")

        self._selected[key] = index
        return choices[index]

    def selection(self, card: Flashcard) -> Optional[int]:
        return self._selected.get(self._key(card))

    def selected_choice(self, card: Flashcard) -> Optional[AnswerChoice]:
        index = self.selection(card)
        if index is None:
            return None
        return self.choices_for(card)[index]

    def is_locked(self, card: Flashcard) -> bool:
        return self._key(card) in self._selected

    def clear_selection(self, card: Optional[Flashcard] = None):
        """Unlock one flashcard, or every flashcard when card is None."""
        if card is None:
            self._selected.clear()
        else:
            self._selected.pop(self._key(card), None)

    def invalidate(self):
        """Forget all cached shuffles and selections."""
        self._choices.clear()
        self._selected.clear()
