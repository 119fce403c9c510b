"""Parse .env files, switch which value of each key is active, and save them back, with a curses interface."""

__version__ = "0.1.0"

__all__ = ["__version__"]