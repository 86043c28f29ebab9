"""memit — spaced repetition flashcards."""

from memit.consts import VERSION

__version__ = VERSION
