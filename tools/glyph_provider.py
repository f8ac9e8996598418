#!/usr/bin/env python3
"""QPC glyph tables (font versions 1 and 2).

Layout under the data directory:
  QPC2/qpc-v2.json          {"s:v:w": glyph}   font version 2
  QPC1/qpc-v1.json          {"s:v:w": glyph}   font version 1
  QPC2/verse-mapping.json   per-verse mapping for version 2 (keyed "s:v")
  QPC1/verse-mapping.json   per-verse mapping for version 1 (keyed "s:v")

GlyphProvider.load() is the explicit initialization step: it reads every table
once, and the provider is then shared read-only by all pages. A missing or
unreadable table is reported and treated as empty, so lookups return "".
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

VERSIONS = ("1", "2")

GLYPH_TABLE_PATHS = {
    "1": os.path.join("QPC1", "qpc-v1.json"),
    "2": os.path.join("QPC2", "qpc-v2.json"),
}
VERSE_MAPPING_PATHS = {
    "1": os.path.join("QPC1", "verse-mapping.json"),
    "2": os.path.join("QPC2", "verse-mapping.json"),
}

# Opening invocation glyphs (drawn with the QPC1BSML / QPC2BSML fonts).
BASMALA_GLYPHS = {"1": '#"!', "2": "ﭑﭒﭓ"}


def warn(msg):
    print(f"WARNING: {msg}", file=sys.stderr)


def _check_version(version: str) -> str:
    if version not in VERSIONS:
        raise ValueError(f"Unknown QPC font version: {version!r} (expected one of {VERSIONS})")
    return version


def glyph_key(surah: int, verse: int, position: int) -> str:
    return f"{surah}:{verse}:{position}"


def load_table(path: str) -> dict:
    """Read one JSON table; returns {} (with a warning) when it cannot be used."""
    if not os.path.exists(path):
        warn(f"QPC table not found: {path}")
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        warn(f"Cannot load QPC table {path}: {e}")
        return {}
    if not isinstance(data, dict):
        warn(f"QPC table {path} is not a JSON object ({type(data).__name__}); ignored")
        return {}
    return data


@dataclass(frozen=True)
class GlyphProvider:
    glyphs: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    verse_mappings: Mapping[str, Mapping[str, object]] = field(default_factory=dict)

    @classmethod
    def load(cls, data_dir: str) -> "GlyphProvider":
        glyphs = {v: load_table(os.path.join(data_dir, p)) for v, p in GLYPH_TABLE_PATHS.items()}
        mappings = {v: load_table(os.path.join(data_dir, p)) for v, p in VERSE_MAPPING_PATHS.items()}
        return cls.from_tables(glyphs, mappings)

    @classmethod
    def from_tables(cls, glyphs: dict, verse_mappings: dict | None = None) -> "GlyphProvider":
        """Build a provider from in-memory tables (read-only views)."""
        verse_mappings = verse_mappings or {}
        return cls(
            glyphs=MappingProxyType({v: MappingProxyType(dict(glyphs.get(v) or {})) for v in VERSIONS}),
            verse_mappings=MappingProxyType(
                {v: MappingProxyType(dict(verse_mappings.get(v) or {})) for v in VERSIONS}
            ),
        )

    def word_glyph(self, surah: int, verse: int, position: int, version: str) -> str:
        table = self.glyphs.get(_check_version(version), {})
        return table.get(glyph_key(surah, verse, position)) or ""

    def basmala_glyph(self, version: str) -> str:
        return BASMALA_GLYPHS[_check_version(version)]

    def verse_mapping(self, surah: int, verse: int, version: str):
        table = self.verse_mappings.get(_check_version(version), {})
        return table.get(f"{surah}:{verse}")

    def table_sizes(self) -> dict[str, int]:
        sizes = {}
        for v in VERSIONS:
            sizes[f"qpc_v{v}_glyphs"] = len(self.glyphs.get(v, {}))
            sizes[f"qpc_v{v}_verse_mapping"] = len(self.verse_mappings.get(v, {}))
        return sizes
