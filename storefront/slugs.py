"""URL slugs for product titles and category names.

Titles are written in Serbian, in either Cyrillic or Latin script, so the
slug is built by transliterating to ASCII first and only then stripping
everything a URL segment should not contain.

    >>> slugify("Hrana za kućne ljubimce")
    'hrana-za-kucne-ljubimce'
    >>> slugify("Љубимци")
    'ljubimci'
"""

import re
import unicodedata
from typing import Any, Dict

__all__ = ["slugify", "CYRILLIC_TO_LATIN"]

CYRILLIC_TO_LATIN: Dict[str, str] = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "ђ": "dj", "е": "e", "ж": "z",
    "з": "z", "и": "i", "ј": "j", "к": "k", "л": "l", "љ": "lj", "м": "m", "н": "n",
    "њ": "nj", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "ћ": "c", "у": "u",
    "ф": "f", "х": "h", "ц": "c", "ч": "c", "џ": "dz", "ш": "s",
    "А": "a", "Б": "b", "В": "v", "Г": "g", "Д": "d", "Ђ": "dj", "Е": "e", "Ж": "z",
    "З": "z", "И": "i", "Ј": "j", "К": "k", "Л": "l", "Љ": "lj", "М": "m", "Н": "n",
    "Њ": "nj", "О": "o", "П": "p", "Р": "r", "С": "s", "Т": "t", "Ћ": "c", "У": "u",
    "Ф": "f", "Х": "h", "Ц": "c", "Ч": "c", "Џ": "dz", "Ш": "s",
}

# Latin letters with diacritics that NFD alone does not flatten the way URLs
# already in circulation expect (đ has no decomposition at all).
LATIN_DIACRITICS: Dict[str, str] = {
    "đ": "dj", "Đ": "dj",
    "ž": "z", "Ž": "z",
    "č": "c", "Č": "c",
    "ć": "c", "Ć": "c",
    "š": "s", "Š": "s",
}

# Basic Cyrillic block plus the Serbian letters outside а-я
_CYRILLIC_RE = re.compile(r"[а-яА-ЯђЂљЉњЊћЋџЏ]")
_COMBINING_MARKS_RE = re.compile(r"[\u0300-\u036f]")
_LATIN_DIACRITICS_RE = re.compile("[" + "".join(LATIN_DIACRITICS) + "]")
_DISALLOWED_RE = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")


def slugify(value: Any) -> str:
    """Turn a display string into a URL slug.

    The step order is fixed; URLs already shared depend on it.

    Args:
        value: Title or category label. None and "" give "".

    Returns:
        Lowercase slug of ASCII letters, digits and hyphens.
    """
    if not value:
        return ""

    result = str(value)
    result = _CYRILLIC_RE.sub(lambda m: CYRILLIC_TO_LATIN.get(m.group(), m.group()), result)
    result = unicodedata.normalize("NFD", result)
    result = _COMBINING_MARKS_RE.sub("", result)
    result = _LATIN_DIACRITICS_RE.sub(lambda m: LATIN_DIACRITICS[m.group()], result)

    result = _DISALLOWED_RE.sub("", result)
    result = result.strip()
    result = _WHITESPACE_RE.sub("-", result)
    return result.lower()
