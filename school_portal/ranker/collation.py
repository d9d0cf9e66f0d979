"""Locale-aware name collation for ranking tie-breaks.

Implements a three-level comparison key in the spirit of the Unicode
Collation Algorithm as applied to Brazilian Portuguese:

    1. primary: base letters, ignoring accents and case
    2. secondary: accents, an unaccented letter sorting before an accented one
    3. tertiary: case, lowercase sorting before uppercase

Only the first level that differs decides the order, so "Ana" and "ana"
differ only tertiarily and "Ábio" sorts right after "Abio".
"""

import unicodedata


CollationKey = tuple[str, tuple[tuple[int, ...], ...], tuple[int, ...]]

# Secondary weights of combining marks, in DUCET order (acute < grave < ...)
_MARK_WEIGHTS: dict[str, int] = {
    "\u0301": 1,  # acute
    "\u0300": 2,  # grave
    "\u0306": 3,  # breve
    "\u0302": 4,  # circumflex
    "\u030C": 5,  # caron
    "\u030A": 6,  # ring above
    "\u0308": 7,  # diaeresis
    "\u030B": 8,  # double acute
    "\u0303": 9,  # tilde
    "\u0307": 10,  # dot above
    "\u0327": 11,  # cedilla
    "\u0328": 12,  # ogonek
    "\u0304": 13,  # macron
}

# Stroke letters carry this weight on top of their base letter
_STROKE_WEIGHT = 14

# Marks missing from the table sort after every known one
_UNKNOWN_MARK_BASE = 0x10000

# Latin letters without a canonical decomposition, mapped onto base letters
_LETTER_FOLDS: dict[str, tuple[str, int | None]] = {
    "ł": ("l", _STROKE_WEIGHT),
    "ø": ("o", _STROKE_WEIGHT),
    "đ": ("d", _STROKE_WEIGHT),
    "ħ": ("h", _STROKE_WEIGHT),
    "ŧ": ("t", _STROKE_WEIGHT),
    "ƀ": ("b", _STROKE_WEIGHT),
    "ı": ("i", None),
    "æ": ("ae", None),
    "œ": ("oe", None),
    "ß": ("ss", None),
}


def _mark_weight(mark: str) -> int:
    return _MARK_WEIGHTS.get(mark, _UNKNOWN_MARK_BASE + ord(mark))


def collation_key(name: str) -> CollationKey:
    """Build a sort key for a display name.

    Args:
        name: Display name to collate.

    Returns:
        Tuple of (primary, secondary, tertiary) keys.
    """
    decomposed = unicodedata.normalize("NFD", name)

    bases: list[str] = []
    marks: list[list[int]] = []
    cases: list[int] = []

    for char in decomposed:
        if unicodedata.combining(char):
            if marks:
                marks[-1].append(_mark_weight(char))
            continue

        is_upper = 1 if char != char.lower() else 0
        folded = char.lower()
        letters, extra_weight = _LETTER_FOLDS.get(folded, (folded.casefold(), None))

        for index, letter in enumerate(letters):
            bases.append(letter)
            marks.append([extra_weight] if index == 0 and extra_weight else [])
            cases.append(is_upper)

    primary = "".join(bases)
    secondary = tuple(tuple(m) for m in marks)
    return primary, secondary, tuple(cases)


def compare_names(left: str, right: str) -> int:
    """Compare two names under the portal collation.

    Args:
        left: First name.
        right: Second name.

    Returns:
        Negative if left sorts first, positive if right does, 0 if equal.
    """
    left_key = collation_key(left)
    right_key = collation_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0
