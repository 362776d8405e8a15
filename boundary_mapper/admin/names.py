"""
Administrative name helpers
"""

import unicodedata

_DASHES = str.maketrans({"–": "-", "—": "-", "―": "-"})
_LETTER_MAP = str.maketrans({"đ": "d", "Đ": "D"})

ADMIN_PREFIXES = ("Thành phố ", "Tỉnh ")


def strip_accents(text: str) -> str:
    """
    Remove Vietnamese diacritics.

    Decomposes to NFD and drops non-spacing marks, which also handles names
    typed with combining accents (e.g. "a" + U+0309).
    """
    text = unicodedata.normalize("NFC", text).translate(_DASHES)
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return stripped.translate(_LETTER_MAP)


def short_admin_name(name: str) -> str:
    """Drop the 'Thành phố ' / 'Tỉnh ' prefix used in OSM province names"""
    name = unicodedata.normalize("NFC", name).strip()
    for prefix in ADMIN_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix):].strip()
    return name
