#!/usr/bin/env python3
"""Page-layout corrections for the 604-page Madani mushaf.

The per-verse rule in line_assembler inserts a surah header and basmala only
where a surah changes in the middle of a page. Pages that open or close on a
surah boundary, and the two opening pages, come out short; their line count
after placement identifies them:

  13 lines  page opens a surah: header + basmala go on top.
            otherwise the next surah's header (+ basmala) closes the page.
  14 lines  page opens a surah: basmala on top (header only for surah 9).
            otherwise the page ends with the last surah's own header.
  6/7 lines pages 1-2: header on top, plus basmala on page 2.

The 14-line header-only case needs the page to open surah 9 (first verse 9:1).
A 14-line page that starts inside surah 9 gets the trailing title instead;
older generators keyed this on the surah alone and put the header on top.

These are fixed facts about the reference edition, not a general rule, and
must not be applied to other corpora. At most one rule fires per page and
rules are tried in table order (13/14 before 6/7).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from line_buckets import (
    SURAH_WITHOUT_BASMALA,
    LineBucket,
    basmala_bucket,
    header_bucket,
)


@dataclass(frozen=True)
class PageContext:
    """What a correction needs to know about the page besides its buckets."""
    page: int
    first_surah: int
    first_verse: int
    last_surah: int
    glyphs: object
    names: object


@dataclass(frozen=True)
class CorrectionRule:
    name: str
    counts: tuple[int, ...]
    apply: Callable[[list[LineBucket], PageContext], list[LineBucket]]


def opens_surah(ctx: PageContext) -> bool:
    return ctx.first_verse == 1


def correct_13_lines(buckets: list[LineBucket], ctx: PageContext) -> list[LineBucket]:
    if opens_surah(ctx):
        top = [header_bucket(ctx.first_surah, ctx.names)]
        if ctx.first_surah != SURAH_WITHOUT_BASMALA:
            top.append(basmala_bucket(ctx.glyphs))
        return top + buckets

    next_surah = ctx.last_surah + 1
    tail = [header_bucket(next_surah, ctx.names)]
    if next_surah != SURAH_WITHOUT_BASMALA:
        tail.append(basmala_bucket(ctx.glyphs))
    return buckets + tail


def correct_14_lines(buckets: list[LineBucket], ctx: PageContext) -> list[LineBucket]:
    if opens_surah(ctx):
        if ctx.first_surah == SURAH_WITHOUT_BASMALA:
            return [header_bucket(ctx.first_surah, ctx.names)] + buckets
        return [basmala_bucket(ctx.glyphs)] + buckets
    return buckets + [header_bucket(ctx.last_surah, ctx.names)]


def correct_opening_pages(buckets: list[LineBucket], ctx: PageContext) -> list[LineBucket]:
    top = [header_bucket(ctx.first_surah, ctx.names)]
    if ctx.page == 2:
        top.append(basmala_bucket(ctx.glyphs))
    return top + buckets


CORRECTION_RULES: tuple[CorrectionRule, ...] = (
    CorrectionRule("thirteen_lines", (13,), correct_13_lines),
    CorrectionRule("fourteen_lines", (14,), correct_14_lines),
    CorrectionRule("opening_pages", (6, 7), correct_opening_pages),
)


def find_correction(count: int) -> Optional[CorrectionRule]:
    for rule in CORRECTION_RULES:
        if count in rule.counts:
            return rule
    return None


def apply_corrections(buckets: list[LineBucket], ctx: PageContext) -> tuple[list[LineBucket], Optional[str]]:
    """Apply the matching rule, if any. Returns (buckets, rule name or None)."""
    rule = find_correction(len(buckets))
    if rule is None:
        return buckets, None
    return rule.apply(list(buckets), ctx), rule.name
