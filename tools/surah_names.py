#!/usr/bin/env python3
"""Surah display-name table used for section-header lines.

Accepted table formats (auto-detected, all read with yaml.safe_load so the
upstream JSON export works unchanged):
  - bundled YAML:   {version: ..., surahs: {1: "سورة الفاتحة", ...}}
  - plain mapping:  {1: "سورة الفاتحة", ...}   (keys may be strings)
  - upstream JSON:  [{"id": 1, "arabicLong": "..."}, ...]

The table is loaded once, before any page is processed, and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SURAHS_PATH = REPO_ROOT / "data" / "surahs.yaml"

SURAH_COUNT = 114

# Record fields tried, in order, for list-of-records tables.
NAME_FIELDS = ("arabicLong", "arabic", "name")


@dataclass(frozen=True)
class SurahNames:
    """Read-only surah id -> display name lookup."""
    names: dict[int, str] = field(default_factory=dict)
    source: str = ""

    @classmethod
    def load(cls, path: str | Path = DEFAULT_SURAHS_PATH) -> "SurahNames":
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(names=parse_surah_table(data), source=str(path))

    def name(self, surah_id: int) -> str:
        return self.names.get(surah_id, "")

    def __len__(self) -> int:
        return len(self.names)


def parse_surah_table(data) -> dict[int, str]:
    """Normalize any accepted table shape into {surah_id: name}."""
    if data is None:
        return {}

    if isinstance(data, dict) and "surahs" in data:
        data = data["surahs"]

    names: dict[int, str] = {}
    if isinstance(data, dict):
        for key, value in data.items():
            names[_surah_id(key)] = _name_text(value, key)
    elif isinstance(data, list):
        for rec in data:
            if not isinstance(rec, dict) or "id" not in rec:
                raise ValueError(f"Surah record without id: {rec!r}")
            names[_surah_id(rec["id"])] = _record_name(rec)
    else:
        raise ValueError(f"Unsupported surah table type: {type(data).__name__}")
    return names


def _surah_id(key) -> int:
    try:
        sid = int(key)
    except (TypeError, ValueError):
        raise ValueError(f"Surah id is not an integer: {key!r}") from None
    if not 1 <= sid <= SURAH_COUNT:
        raise ValueError(f"Surah id out of range 1-{SURAH_COUNT}: {sid}")
    return sid


def _name_text(value, key) -> str:
    if isinstance(value, dict):
        return _record_name(value)
    if not isinstance(value, str):
        raise ValueError(f"Surah {key}: name must be a string, got {type(value).__name__}")
    return value


def _record_name(rec: dict) -> str:
    for fld in NAME_FIELDS:
        if isinstance(rec.get(fld), str):
            return rec[fld]
    return ""
