#!/usr/bin/env python3
"""Arabic numeral helpers shared by the mushaf tools."""

from __future__ import annotations

ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"


def latin_to_arabic_digits(value) -> str:
    """Convert every ASCII digit of value to its Arabic-Indic numeral.

    Non-digit characters pass through unchanged, so "12:3" becomes "١٢:٣".
    """
    mapping = {str(i): c for i, c in enumerate(ARABIC_INDIC_DIGITS)}
    return "".join(mapping.get(c, c) for c in str(value))


def format_surah_id(surah: int) -> str:
    """Zero-padded surah id as used in section-header lines ("002")."""
    return str(surah).zfill(3)
