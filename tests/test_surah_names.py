#!/usr/bin/env python3
"""Tests for the surah name table (tools/surah_names.py) and Arabic numerals (tools/arabic_text.py)"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "tools"))

from arabic_text import format_surah_id, latin_to_arabic_digits
from surah_names import DEFAULT_SURAHS_PATH, SURAH_COUNT, SurahNames, parse_surah_table


# ─── Arabic numerals ───────────────────────────────────────────────────────

class TestLatinToArabicDigits:
    def test_single_digit(self):
        assert latin_to_arabic_digits(5) == "٥"

    def test_multi_digit(self):
        assert latin_to_arabic_digits(286) == "٢٨٦"

    def test_zero(self):
        assert latin_to_arabic_digits(10) == "١٠"

    def test_string_input(self):
        assert latin_to_arabic_digits("0123456789") == "٠١٢٣٤٥٦٧٨٩"

    def test_non_digits_pass_through(self):
        assert latin_to_arabic_digits("2:255") == "٢:٢٥٥"


class TestFormatSurahId:
    def test_padding(self):
        assert format_surah_id(2) == "002"
        assert format_surah_id(18) == "018"
        assert format_surah_id(114) == "114"


# ─── Bundled table ─────────────────────────────────────────────────────────

class TestBundledTable:
    def test_complete(self):
        names = SurahNames.load()
        assert len(names) == SURAH_COUNT
        assert sorted(names.names) == list(range(1, SURAH_COUNT + 1))

    def test_known_names(self):
        names = SurahNames.load(DEFAULT_SURAHS_PATH)
        assert names.name(1) == "سورة الفاتحة"
        assert names.name(9) == "سورة التوبة"
        assert names.name(114) == "سورة الناس"

    def test_unknown_id_is_empty(self):
        assert SurahNames.load().name(0) == ""


# ─── Table formats ─────────────────────────────────────────────────────────

class TestParseSurahTable:
    def test_upstream_record_list(self):
        data = [{"id": 1, "arabicLong": "الفاتحة"}, {"id": 2, "arabicLong": "البقرة"}]
        assert parse_surah_table(data) == {1: "الفاتحة", 2: "البقرة"}

    def test_string_keys(self):
        assert parse_surah_table({"1": "الفاتحة"}) == {1: "الفاتحة"}

    def test_nested_record_values(self):
        assert parse_surah_table({"surahs": {2: {"arabicLong": "البقرة"}}}) == {2: "البقرة"}

    def test_record_without_name(self):
        assert parse_surah_table([{"id": 3, "english": "Al-Imran"}]) == {3: ""}

    def test_none(self):
        assert parse_surah_table(None) == {}

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            parse_surah_table({115: "x"})

    def test_non_integer_id(self):
        with pytest.raises(ValueError, match="not an integer"):
            parse_surah_table({"al-fatiha": "x"})

    def test_record_without_id(self):
        with pytest.raises(ValueError, match="without id"):
            parse_surah_table([{"arabicLong": "x"}])

    def test_unsupported_type(self):
        with pytest.raises(ValueError, match="Unsupported"):
            parse_surah_table("just a string")

    def test_upstream_json_file(self, tmp_path):
        p = tmp_path / "surahs.json"
        p.write_text(json.dumps([{"id": 2, "arabicLong": "سورة البقرة"}]), encoding="utf-8")
        names = SurahNames.load(p)
        assert names.name(2) == "سورة البقرة"
        assert names.source == str(p)
