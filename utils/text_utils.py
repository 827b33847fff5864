"""
Text utilities for cleaning CSV headers and cell values.

Journal exports come from many locales and spreadsheet tools: headers carry
accents, flag emoji and byte-order marks, and cells are often quoted.
"""

import unicodedata
from typing import Any


def strip_accents(text: str) -> str:
    """
    Remove accent marks while keeping the base characters.

    - "Dirección" → "Direccion"
    - "Fécha" → "Fecha"

    Args:
        text: Original text (may have accents, mixed case)

    Returns:
        Text with combining marks removed; case is preserved
    """
    if not text:
        return ""

    # NFD decomposition separates base chars from accents
    normalized = unicodedata.normalize('NFD', text)

    # Remove accent marks (combining characters in Unicode category 'Mn')
    return ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )


def normalize_trim(value: str) -> str:
    """
    Trim a raw value, dropping BOMs and turning non-breaking spaces into spaces.

    Spreadsheet exports often write " WIN\\u00a0" or a BOM-prefixed first header.
    """
    if not value:
        return ""
    return value.replace('\ufeff', '').replace('\u00a0', ' ').strip()


def clean_cell(value: Any) -> str:
    """
    Clean a CSV cell for sampling.

    - None → ""
    - Strips whitespace, BOM and a single pair of wrapping quotes

    Args:
        value: Raw cell value (usually str, may be None or a number)

    Returns:
        Cleaned string, possibly empty
    """
    if value is None:
        return ""

    text = normalize_trim(str(value))
    if text[:1] in ('"', "'"):
        text = text[1:]
    if text[-1:] in ('"', "'"):
        text = text[:-1]
    return text
