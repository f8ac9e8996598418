#!/usr/bin/env python3
"""Line assembler: one mushaf-layout page -> ordered, render-ready lines.

Input page (mushaf-layout/page-N.json):
  {"verses": [{"surahNumber", "verseNumber",
               "words": [{"text", "qpc", "line", "position", "location"?}, ...]}]}

In the layout data, the last entry of every multi-word verse is not a word but
the verse-number ornament. It is folded into the word before it:
  - its v2 glyph is appended to that word's v2 glyph,
  - the v1 ornament glyph (position + 2 in the v1 table) to its v1 glyph,
  - the Arabic-Indic verse number to its plain text.

Source line numbers do not count the surah headers and basmalas inserted on the
page, so every insertion shifts the words that follow by one line.

Output: [{"line", "type": "section-header"|"basmala"|"text", ...}, ...]
with line numbers 1..N, top to bottom.

Malformed pages raise ValueError: no "verses" list, an empty one (a page
always holds at least one verse, so no empty line list is produced), a verse
without words, or a non-integer surahNumber/verseNumber/line/position.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from arabic_text import latin_to_arabic_digits
from layout_corrections import PageContext, apply_corrections
from line_buckets import (
    SURAH_WITHOUT_BASMALA,
    LineBucket,
    MarkerBucket,
    TextBucket,
    WordItem,
    basmala_bucket,
    header_bucket,
)


# ─── Input model ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SourceWord:
    """One word entry of the layout data (read-only)."""
    text: str
    qpc: str                      # font v2 glyph
    line: int                     # target line on the page, as laid out in the source
    position: int
    location: str
    is_verse_end: bool = False
    ornament_v1: str = ""         # v1 verse-number glyph, set on verse-end words


@dataclass(frozen=True)
class Verse:
    surah: int
    number: int
    words: tuple[SourceWord, ...]


def _require_int(obj: dict, key: str, where: str) -> int:
    value = obj.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{where}: '{key}' must be an integer, got {value!r}")
    return value


def parse_verses(page_data: dict) -> list[Verse]:
    """Validate the raw page JSON and convert it to Verse records."""
    if not isinstance(page_data, dict) or not isinstance(page_data.get("verses"), list):
        raise ValueError("page data has no 'verses' list")
    if not page_data["verses"]:
        raise ValueError("page data has an empty 'verses' list")

    verses = []
    for vi, raw in enumerate(page_data["verses"]):
        if not isinstance(raw, dict):
            raise ValueError(f"verse #{vi}: expected an object, got {type(raw).__name__}")
        surah = _require_int(raw, "surahNumber", f"verse #{vi}")
        number = _require_int(raw, "verseNumber", f"verse #{vi}")
        where = f"verse {surah}:{number}"

        raw_words = raw.get("words")
        if not isinstance(raw_words, list) or not raw_words:
            raise ValueError(f"{where}: no words")

        words = []
        for w in raw_words:
            if not isinstance(w, dict):
                raise ValueError(f"{where}: word entry is not an object: {w!r}")
            position = _require_int(w, "position", where)
            words.append(SourceWord(
                text=w.get("text") or "",
                qpc=w.get("qpc") or "",
                line=_require_int(w, "line", f"{where} word {position}"),
                position=position,
                location=w.get("location") or f"{surah}:{number}:{position}",
            ))
        verses.append(Verse(surah=surah, number=number, words=tuple(words)))
    return verses


# ─── Verse-number merging ───────────────────────────────────────────────────

def merge_verse_number(verse: Verse, glyphs) -> list[SourceWord]:
    """Fold the trailing verse-number ornament into the verse's last real word.

    Single-word verses have no ornament and are returned unchanged.
    """
    words = list(verse.words)
    if len(words) <= 1:
        return words

    ornament = words.pop()
    end_word = words[-1]

    qpc = end_word.qpc
    if qpc and ornament.qpc:
        qpc = f"{qpc} {ornament.qpc}".strip()

    words[-1] = replace(
        end_word,
        qpc=qpc,
        is_verse_end=True,
        ornament_v1=glyphs.word_glyph(verse.surah, verse.number, end_word.position + 2, "1"),
    )
    return words


def build_word_item(word: SourceWord, verse: Verse, glyphs) -> WordItem:
    qpc_v1 = glyphs.word_glyph(verse.surah, verse.number, word.position, "1")
    if word.ornament_v1:
        qpc_v1 = f"{qpc_v1} {word.ornament_v1}"

    text = word.text
    if word.is_verse_end:
        text = f"{text} {latin_to_arabic_digits(verse.number)}"

    return WordItem(
        location=word.location,
        word=text,
        qpc_v2=word.qpc,
        qpc_v1=qpc_v1.strip(),
        surah=verse.surah,
        verse=verse.number,
        position=word.position,
        is_verse_end=word.is_verse_end,
    )


# ─── Bucket construction ────────────────────────────────────────────────────

class PageLines:
    """Buckets of one page plus the running line offset."""

    def __init__(self, glyphs, names):
        self.glyphs = glyphs
        self.names = names
        self.buckets: list[LineBucket] = []
        self.line_offset = 0

    def add_surah_header(self, surah: int) -> None:
        self.buckets.append(header_bucket(surah, self.names))
        self.line_offset += 1

    def add_basmala(self) -> None:
        self.buckets.append(basmala_bucket(self.glyphs))
        self.line_offset += 1

    def place(self, item: WordItem, source_line: int) -> None:
        """Put a word on its line, shifted by the markers inserted so far.

        A word whose line is held by a header/basmala goes to a new text line
        spliced in after the marker; every later word then moves down one
        line, so the rest of that source line stays together.
        """
        target = source_line + self.line_offset
        while len(self.buckets) <= target:
            self.buckets.append(TextBucket())

        if isinstance(self.buckets[target], MarkerBucket):
            # Line already taken by a header/basmala: open a text line right
            # after it. The insertion shifts everything below by one line.
            self.buckets.insert(target + 1, TextBucket())
            self.line_offset += 1
            target += 1

        self.buckets[target].add(item)

    def add_verse(self, verse: Verse) -> None:
        for word in merge_verse_number(verse, self.glyphs):
            self.place(build_word_item(word, verse, self.glyphs), word.line)

    def non_empty(self) -> list[LineBucket]:
        return [b for b in self.buckets if not b.is_empty()]


def finalize_lines(buckets: list[LineBucket]) -> list[dict]:
    """Number buckets 1..N and turn each into its output line record."""
    out = []
    for idx, bucket in enumerate(buckets, start=1):
        rec = bucket.finalize(idx)
        if rec is not None:
            out.append(rec)
    return out


def generate_lines(page_data: dict, page: int, glyphs, names) -> list[dict]:
    """Build the finalized lines of one page.

    Pure: the same input always gives the same output. Raises ValueError on
    malformed page data.
    """
    verses = parse_verses(page_data)
    lines = PageLines(glyphs, names)

    current_surah = None
    for verse in verses:
        if current_surah is not None and current_surah != verse.surah:
            lines.add_surah_header(verse.surah)
            if verse.surah != SURAH_WITHOUT_BASMALA:
                lines.add_basmala()
        current_surah = verse.surah
        lines.add_verse(verse)

    ctx = PageContext(
        page=page,
        first_surah=verses[0].surah,
        first_verse=verses[0].number,
        last_surah=verses[-1].surah,
        glyphs=glyphs,
        names=names,
    )
    buckets, _ = apply_corrections(lines.non_empty(), ctx)
    return finalize_lines(buckets)
