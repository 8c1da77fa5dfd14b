"""Translation helpers for category and classification labels."""

from .catalog import Translator, get_translator, load_translations, normalise_locale

__all__ = ["Translator", "get_translator", "load_translations", "normalise_locale"]
