"""Flashcard quiz bot."""
