#!/usr/bin/env python3
"""Line buckets: the per-page working model of the line assembler.

A page is built as an ordered list of buckets, one per visual line.
A bucket is either
  - MarkerBucket: exactly one non-text line (surah header or basmala), or
  - TextBucket:   the words placed on that line so far.
Words can only be appended to a TextBucket, so a bucket never mixes markers
and words.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from arabic_text import format_surah_id

# The one surah that opens without a basmala.
SURAH_WITHOUT_BASMALA = 9


# ─── Markers ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SurahHeader:
    text: str                     # display name from the surah name table
    surah: str                    # zero-padded surah id, e.g. "002"

    def to_record(self, line: int) -> dict:
        return {"line": line, "type": "section-header", "text": self.text, "surah": self.surah}


@dataclass(frozen=True)
class Basmala:
    qpc_v2: str
    qpc_v1: str

    def to_record(self, line: int) -> dict:
        return {"line": line, "type": "basmala", "qpcV2": self.qpc_v2, "qpcV1": self.qpc_v1}


Marker = Union[SurahHeader, Basmala]


def make_surah_header(surah: int, names) -> SurahHeader:
    return SurahHeader(text=names.name(surah), surah=format_surah_id(surah))


def make_basmala(glyphs) -> Basmala:
    return Basmala(qpc_v2=glyphs.basmala_glyph("2"), qpc_v1=glyphs.basmala_glyph("1"))


# ─── Words ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WordItem:
    """One word as it will appear on its line."""
    location: str                 # "surah:verse:position"
    word: str                     # plain text, verse number appended at verse end
    qpc_v2: str
    qpc_v1: str
    surah: int
    verse: int
    position: int
    is_verse_end: bool = False

    def to_record(self) -> dict:
        return {
            "location": self.location,
            "word": self.word,
            "qpcV2": self.qpc_v2,
            "qpcV1": self.qpc_v1,
        }


# ─── Buckets ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MarkerBucket:
    marker: Marker

    def is_empty(self) -> bool:
        return False

    def finalize(self, line: int) -> dict:
        return self.marker.to_record(line)


@dataclass
class TextBucket:
    words: list[WordItem] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.words

    def add(self, item: WordItem) -> None:
        self.words.append(item)

    def finalize(self, line: int) -> dict | None:
        """Compact the words into one text line; None for an empty bucket."""
        if not self.words:
            return None

        # Verse-end words already carry their verse number.
        text = " ".join(w.word for w in self.words).strip()

        start, end = self.words[0], self.words[-1]
        return {
            "line": line,
            "type": "text",
            "text": text,
            "verseRange": f"{start.surah}:{start.verse}-{end.surah}:{end.verse}",
            "words": [w.to_record() for w in self.words],
        }


LineBucket = Union[MarkerBucket, TextBucket]


def header_bucket(surah: int, names) -> MarkerBucket:
    return MarkerBucket(make_surah_header(surah, names))


def basmala_bucket(glyphs) -> MarkerBucket:
    return MarkerBucket(make_basmala(glyphs))
