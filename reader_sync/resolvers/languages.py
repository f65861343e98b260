# reader_sync/resolvers/languages.py
from babel import Locale

# Names are rendered in English regardless of the host locale
_DISPLAY_LOCALE = Locale('en')

LANGUAGE_PREFIX = "Language: "


def language_name(code: str) -> str:
    """Human readable name for a language code, or the code itself if unknown."""
    cleaned = code.strip()
    if not cleaned:
        return code
    names = _DISPLAY_LOCALE.languages
    return names.get(cleaned) or names.get(cleaned.lower()) or code


def language_description(code: str) -> str:
    """Format a language code as stored on a Book, e.g. "Language: English"."""
    return f"{LANGUAGE_PREFIX}{language_name(code).title()}"
