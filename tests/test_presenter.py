"""Tests for the shuffled answer set and selection lock."""
import random
from collections import Counter

import pytest

from fiszki_bot.exceptions import SelectionLockedError
from fiszki_bot.quiz.models import AnswerChoice, Flashcard
from fiszki_bot.quiz.presenter import AnswerPresenter


class TestChoices:
    """Answer set composition and shuffle caching."""

    def test_exactly_one_correct(self, sample_card):
        choices = AnswerPresenter().choices_for(sample_card)

        assert len(choices) == 4
        assert sum(1 for c in choices if c.is_correct) == 1
        assert next(c for c in choices if c.is_correct).text == "Cat"

    def test_texts_match_card(self, sample_card):
        choices = AnswerPresenter().choices_for(sample_card)

        assert Counter(c.text for c in choices) == Counter(["Cat", "Dog", "Mouse", "Bird"])

    def test_missing_decoys_use_placeholder(self, sparse_card):
        presenter = AnswerPresenter(placeholder="—")
        choices = presenter.choices_for(sparse_card)

        assert Counter(c.text for c in choices) == Counter(["4", "5", "—", "—"])
        assert all(not c.is_correct for c in choices if c.text == "—")

    def test_default_placeholder(self, sparse_card):
        choices = AnswerPresenter().choices_for(sparse_card)

        assert sum(1 for c in choices if c.text == "Brak odpowiedzi") == 2

    def test_shuffle_uses_rng(self, sample_card):
        presenter = AnswerPresenter(rng=random.Random(7))
        expected = presenter.build_choices(sample_card)
        random.Random(7).shuffle(expected)

        assert presenter.choices_for(sample_card) == expected

    def test_order_stable_across_renders(self, sample_card):
        presenter = AnswerPresenter()
        first = presenter.choices_for(sample_card)

        for _ in range(20):
            assert presenter.choices_for(sample_card) == first

    def test_returned_list_is_a_copy(self, sample_card):
        presenter = AnswerPresenter()
        choices = presenter.choices_for(sample_card)
        choices.reverse()
        choices.append(AnswerChoice("extra", False))

        assert len(presenter.choices_for(sample_card)) == 4

    def test_invalidate_drops_cache(self, sample_card):
        presenter = AnswerPresenter()
        presenter.choices_for(sample_card)
        presenter.select(sample_card, 0)

        presenter.invalidate()

        assert presenter._choices == {}
        assert presenter.selection(sample_card) is None


class TestSelection:
    """One answer per presentation, locked until cleared."""

    def test_select_returns_choice(self, sample_card):
        presenter = AnswerPresenter()
        choices = presenter.choices_for(sample_card)

        choice = presenter.select(sample_card, 2)

        assert choice == choices[2]
        assert presenter.selection(sample_card) == 2
        assert presenter.selected_choice(sample_card) == choices[2]
        assert presenter.is_locked(sample_card)

    def test_second_selection_rejected(self, sample_card):
        presenter = AnswerPresenter()
        presenter.select(sample_card, 0)

        with pytest.raises(SelectionLockedError):
            presenter.select(sample_card, 1)

        assert presenter.selection(sample_card) == 0

    def test_out_of_range_index(self, sample_card):
        presenter = AnswerPresenter()

        with pytest.raises(IndexError):
            presenter.select(sample_card, 4)
        with pytest.raises(IndexError):
            presenter.select(sample_card, -1)

        assert not presenter.is_locked(sample_card)

    def test_clear_selection_keeps_order(self, sample_card):
        presenter = AnswerPresenter()
        before = presenter.choices_for(sample_card)
        presenter.select(sample_card, 1)

        presenter.clear_selection(sample_card)

        assert not presenter.is_locked(sample_card)
        assert presenter.selected_choice(sample_card) is None
        assert presenter.choices_for(sample_card) == before
        presenter.select(sample_card, 3)

    def test_clear_all_selections(self, sample_card, sparse_card):
        presenter = AnswerPresenter()
        presenter.select(sample_card, 0)
        presenter.select(sparse_card, 0)

        presenter.clear_selection()

        assert not presenter.is_locked(sample_card)
        assert not presenter.is_locked(sparse_card)


class TestUnstoredCards:
    """Flashcards without an id are told apart by their content."""

    def test_distinct_cards_kept_apart(self):
        presenter = AnswerPresenter()
        first = Flashcard(question="a?", answer="A", decoy1="x")
        second = Flashcard(question="b?", answer="B", decoy1="y")

        presenter.select(first, 0)

        assert presenter.is_locked(first)
        assert not presenter.is_locked(second)
        assert {c.text for c in presenter.choices_for(second)} == {"B", "y", "Brak odpowiedzi"}

    def test_equal_cards_share_state(self):
        presenter = AnswerPresenter()
        card = Flashcard(question="a?", answer="A", decoy1="x")
        order = presenter.choices_for(card)
        presenter.select(card, 1)

        same = Flashcard(question="a?", answer="A", decoy1="x")

        assert presenter.choices_for(same) == order
        assert presenter.selection(same) == 1
        with pytest.raises(SelectionLockedError):
            presenter.select(same, 2)
