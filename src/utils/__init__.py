"""Utility modules for the flashcard scheduler."""
