"""
================================================================================
Turkish Text Utilities
================================================================================

Locale-aware text helpers for asserting against Turkish storefront content.

Python's str.upper()/str.lower() follow the default Unicode mapping, which is
wrong for the dotted/dotless i pair:

    "i".upper()  -> "I"   (Turkish: "İ")
    "I".lower()  -> "i"   (Turkish: "ı")
    "İ".lower()  -> "i̇"   (adds U+0307 COMBINING DOT ABOVE)

Features:
    - Turkish case conversion and case-insensitive comparison
    - Diacritic normalization to ASCII for fuzzy matching
    - Turkish currency formatting and parsing ("1.234,56 TL")
    - Digit extraction from count labels ("67049+ Ürün")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
import unicodedata
from typing import Dict, Optional

from loguru import logger


TURKISH_LOWERCASE = "çğıöşü"
TURKISH_UPPERCASE = "ÇĞİÖŞÜ"
TURKISH_CHARACTERS = TURKISH_LOWERCASE + TURKISH_UPPERCASE

ASCII_REPLACEMENTS: Dict[str, str] = {
    "ç": "c", "Ç": "C",
    "ğ": "g", "Ğ": "G",
    "ı": "i", "İ": "I",
    "ö": "o", "Ö": "O",
    "ş": "s", "Ş": "S",
    "ü": "u", "Ü": "U",
}

_VALID_TEXT_PATTERN = re.compile(r"^[a-zA-ZçÇğĞıİöÖşŞüÜ0-9\s]+$")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_NON_DIGIT_PATTERN = re.compile(r"\D")

# Stripped before numeric conversion: currency code, lira sign, spaces
_CURRENCY_TOKENS = ("TL", "₺", "\xa0", "\u202f", " ")


# ================================================================================
# Character Checks
# ================================================================================

def contains_turkish_characters(text: Optional[str]) -> bool:
    """Return True if any Turkish-specific letter (ç ğ ı ö ş ü) is present."""
    if not text:
        return False
    return any(ch in TURKISH_CHARACTERS for ch in text)


def starts_with_turkish_character(text: Optional[str]) -> bool:
    if not text:
        return False
    return text[0] in TURKISH_CHARACTERS


def turkish_character_count(text: Optional[str]) -> int:
    if not text:
        return 0
    return sum(1 for ch in text if ch in TURKISH_CHARACTERS)


def is_valid_turkish_text(text: Optional[str]) -> bool:
    """
    Check the text only contains letters (Latin or Turkish), digits and spaces.

    Args:
        text: Text to validate

    Returns:
        False for None/empty text or any punctuation/symbol
    """
    if not text:
        return False
    return _VALID_TEXT_PATTERN.match(text) is not None


# ================================================================================
# Case Conversion
# ================================================================================

def to_upper_turkish(text: Optional[str]) -> Optional[str]:
    """
    Uppercase using Turkish rules: i -> İ, ı -> I.

    Example:
        >>> to_upper_turkish("istanbul")
        'İSTANBUL'
    """
    if text is None:
        return None
    return text.replace("i", "İ").replace("ı", "I").upper()


def to_lower_turkish(text: Optional[str]) -> Optional[str]:
    """
    Lowercase using Turkish rules: İ -> i, I -> ı.

    Example:
        >>> to_lower_turkish("ISPARTA İZMİR")
        'ısparta izmir'
    """
    if text is None:
        return None
    return text.replace("İ", "i").replace("I", "ı").lower()


# ================================================================================
# Normalization
# ================================================================================

def replace_turkish_chars(
    text: Optional[str],
    replacement_map: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Replace Turkish letters using a per-character map.

    Args:
        text: Source text
        replacement_map: Character -> replacement; defaults to ASCII_REPLACEMENTS

    Returns:
        Text with every mapped character replaced
    """
    if text is None:
        return None
    mapping = ASCII_REPLACEMENTS if replacement_map is None else replacement_map
    return "".join(mapping.get(ch, ch) for ch in text)


def normalize_to_ascii(text: Optional[str]) -> Optional[str]:
    """
    Convert Turkish (and other accented) letters to their ASCII base letters.

    Turkish letters are mapped explicitly first (ı has no decomposition),
    then any remaining combining marks are stripped after NFD decomposition.

    Example:
        >>> normalize_to_ascii("Çanta Şık Ürün")
        'Canta Sik Urun'
    """
    if text is None:
        return None
    replaced = replace_turkish_chars(text)
    decomposed = unicodedata.normalize("NFD", replaced)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def clean_whitespace(text: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace (including NBSP) into single spaces and trim."""
    if text is None:
        return None
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


# ================================================================================
# Comparison
# ================================================================================

def equals_ignore_case_turkish(first: Optional[str], second: Optional[str]) -> bool:
    """
    Case-insensitive equality using Turkish case rules.

    Two None values are equal; None never equals a string.
    """
    if first is None and second is None:
        return True
    if first is None or second is None:
        return False
    return to_lower_turkish(first) == to_lower_turkish(second)


def contains_ignore_case_turkish(text: Optional[str], search: Optional[str]) -> bool:
    """Case-insensitive substring check using Turkish case rules."""
    if text is None or search is None:
        return False
    return to_lower_turkish(search) in to_lower_turkish(text)


def fuzzy_equals_turkish(first: Optional[str], second: Optional[str]) -> bool:
    """
    Equality that ignores case and Turkish diacritics.

    Useful when the storefront renders "Ürün" but test data says "urun".
    """
    if first is None and second is None:
        return True
    if first is None or second is None:
        return False
    return normalize_to_ascii(first).lower() == normalize_to_ascii(second).lower()


# ================================================================================
# Numbers and Currency
# ================================================================================

def format_turkish_currency(amount: float) -> str:
    """
    Format an amount the way Trendyol displays prices.

    Example:
        >>> format_turkish_currency(1234.56)
        '1.234,56 TL'
    """
    formatted = f"{amount:,.2f}"
    # 1,234.56 -> 1.234,56
    formatted = formatted.replace(",", "\0").replace(".", ",").replace("\0", ".")
    return f"{formatted} TL"


def parse_turkish_number(text: Optional[str]) -> float:
    """
    Parse a Turkish-formatted number or price into a float.

    "." is the thousands separator and "," the decimal mark.

    Args:
        text: Price text such as "1.234,56 TL", "₺140.000" or "89,90"

    Returns:
        Parsed value, or 0.0 for empty or unparseable input

    Example:
        >>> parse_turkish_number("1.234,56 TL")
        1234.56
    """
    if text is None or not text.strip():
        return 0.0

    cleaned = text
    for token in _CURRENCY_TOKENS:
        cleaned = cleaned.replace(token, "")
    cleaned = cleaned.replace(".", "").replace(",", ".")

    try:
        return float(cleaned)
    except ValueError:
        logger.error(f"Could not parse Turkish number: '{text}'")
        return 0.0


def parse_count(text: Optional[str]) -> int:
    """
    Extract the integer from a count label by keeping digits only.

    Example:
        >>> parse_count("67049+ Ürün")
        67049
    """
    if not text:
        return 0
    digits = _NON_DIGIT_PATTERN.sub("", text)
    return int(digits) if digits else 0


__all__ = [
    "TURKISH_CHARACTERS",
    "ASCII_REPLACEMENTS",
    "contains_turkish_characters",
    "starts_with_turkish_character",
    "turkish_character_count",
    "is_valid_turkish_text",
    "to_upper_turkish",
    "to_lower_turkish",
    "replace_turkish_chars",
    "normalize_to_ascii",
    "clean_whitespace",
    "equals_ignore_case_turkish",
    "contains_ignore_case_turkish",
    "fuzzy_equals_turkish",
    "format_turkish_currency",
    "parse_turkish_number",
    "parse_count",
]
