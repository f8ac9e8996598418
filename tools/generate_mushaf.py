#!/usr/bin/env python3
"""Generate the render-ready line files of the 604-page Madani mushaf.

For every page 1..604 this tool reads the word-position layout
(<data-dir>/mushaf-layout/page-N.json), rebuilds the page's visual lines with
line_assembler, validates the result against
schemas/mushaf_page_schema_v0.1.json and writes <output-dir>/page-NNN.json.

Processing is best effort: a missing input file or a failing page is reported,
counted and skipped; the batch always runs to the end. A deterministic
generation_report.json (counts, failed pages, fingerprint of the written
files) is written next to the pages.

Usage:
  python tools/generate_mushaf.py [--data-dir data] [--output-dir mushaf]
"""

from __future__ import annotations

import argparse
import hashlib
import json
import os
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path

import jsonschema
import yaml

from glyph_provider import GlyphProvider
from line_assembler import generate_lines
from surah_names import DEFAULT_SURAHS_PATH, SurahNames

REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = REPO_ROOT / "data"
DEFAULT_OUTPUT_DIR = REPO_ROOT / "mushaf"
PAGE_SCHEMA_PATH = REPO_ROOT / "schemas" / "mushaf_page_schema_v0.1.json"

PAGE_COUNT = 604
LAYOUT_DIR = "mushaf-layout"
REPORT_FILENAME = "generation_report.json"
REPORT_VERSION = "mushaf_generation_report_v0.1"


# ─── Errors ─────────────────────────────────────────────────────────────────

class MissingInput(FileNotFoundError):
    """The layout file of a page does not exist."""

    def __init__(self, page: int, path: str):
        super().__init__(f"page {page}: input file not found: {path}")
        self.page = page
        self.path = path


class ProcessingFailure(RuntimeError):
    """Loading, assembling or validating a page failed."""

    def __init__(self, page: int, message: str):
        super().__init__(f"page {page}: {message}")
        self.page = page
        self.message = message


def warn(msg):
    print(f"WARNING: {msg}", file=sys.stderr)


def error(msg):
    print(f"ERROR: {msg}", file=sys.stderr)


# ─── Report ─────────────────────────────────────────────────────────────────

@dataclass
class GenerationReport:
    report_version: str = REPORT_VERSION
    total_pages: int = 0
    succeeded: int = 0
    failed: int = 0
    missing_pages: list[int] = field(default_factory=list)
    failed_pages: list[dict] = field(default_factory=list)   # {"page", "error"}
    glyph_tables: dict[str, int] = field(default_factory=dict)
    surah_names: int = 0
    output_fingerprint: str = ""


def sha256_file(path: str) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()


def compute_fingerprint(output_dir: str, filenames: list[str]) -> str:
    """sha256 over "name:sha256" of every written page file, in name order."""
    parts = [f"{fn}:{sha256_file(os.path.join(output_dir, fn))}" for fn in sorted(filenames)]
    return hashlib.sha256("\n".join(parts).encode("utf-8")).hexdigest()


# ─── Paths ──────────────────────────────────────────────────────────────────

def input_path(data_dir: str, page: int) -> str:
    return os.path.join(data_dir, LAYOUT_DIR, f"page-{page}.json")


def output_filename(page: int) -> str:
    return f"page-{page:03d}.json"


def resolve_surahs_path(data_dir: str) -> Path:
    """Prefer the upstream <data-dir>/surahs.json; fall back to the bundled table."""
    upstream = Path(data_dir) / "surahs.json"
    return upstream if upstream.exists() else DEFAULT_SURAHS_PATH


def load_page_schema(path: str | Path = PAGE_SCHEMA_PATH) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# ─── Per-page processing ────────────────────────────────────────────────────

def process_page(page: int, data_dir: str, glyphs, names, schema: dict | None) -> dict:
    """Build the output record of one page.

    Raises MissingInput when the layout file is absent and ProcessingFailure
    for anything that goes wrong afterwards.
    """
    path = input_path(data_dir, page)
    if not os.path.exists(path):
        raise MissingInput(page, path)

    try:
        with open(path, encoding="utf-8") as f:
            page_data = json.load(f)
        result = {"page": page, "lines": generate_lines(page_data, page, glyphs, names)}
        if schema is not None:
            jsonschema.validate(result, schema)
    except jsonschema.ValidationError as e:
        raise ProcessingFailure(page, f"schema validation failed: {e.message}") from e
    except Exception as e:
        raise ProcessingFailure(page, str(e) or type(e).__name__) from e
    return result


def write_page(result: dict, output_dir: str) -> str:
    fn = output_filename(result["page"])
    with open(os.path.join(output_dir, fn), "w", encoding="utf-8") as f:
        json.dump(result, f, ensure_ascii=False, indent=2)
        f.write("\n")
    return fn


def is_progress_page(page: int) -> bool:
    return page % 50 == 0 or page <= 10 or page > PAGE_COUNT - 10


def generate_all_pages(
    data_dir: str,
    output_dir: str,
    glyphs,
    names,
    schema: dict | None = None,
    pages=None,
) -> GenerationReport:
    """Process every page, never stopping on a page error."""
    pages = list(pages) if pages is not None else list(range(1, PAGE_COUNT + 1))
    os.makedirs(output_dir, exist_ok=True)

    report = GenerationReport(
        total_pages=len(pages),
        glyph_tables=glyphs.table_sizes(),
        surah_names=len(names),
    )
    written = []

    for page in pages:
        try:
            result = process_page(page, data_dir, glyphs, names, schema)
        except MissingInput as e:
            warn(f"Missing input file: {os.path.basename(e.path)}")
            report.missing_pages.append(page)
            report.failed += 1
            continue
        except ProcessingFailure as e:
            error(f"Page {page}: {e.message}")
            report.failed_pages.append({"page": page, "error": e.message})
            report.failed += 1
            continue

        try:
            written.append(write_page(result, output_dir))
        except OSError as e:
            message = f"cannot write {output_filename(page)}: {e.strerror or e}"
            error(f"Page {page}: {message}")
            report.failed_pages.append({"page": page, "error": message})
            report.failed += 1
            continue
        report.succeeded += 1
        if is_progress_page(page):
            print(f"  Page {page}/{PAGE_COUNT} done")

    report.output_fingerprint = compute_fingerprint(output_dir, written)
    return report


def write_report(report: GenerationReport, output_dir: str) -> str:
    path = os.path.join(output_dir, REPORT_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(report), f, ensure_ascii=False, indent=2)
        f.write("\n")
    return path


# ─── CLI ────────────────────────────────────────────────────────────────────

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Generate render-ready mushaf line files (pages 1-604).")
    ap.add_argument("--data-dir", default=str(DEFAULT_DATA_DIR),
                    help="Root of the layout data (mushaf-layout/, QPC1/, QPC2/)")
    ap.add_argument("--output-dir", default=str(DEFAULT_OUTPUT_DIR),
                    help="Directory receiving page-NNN.json files")
    args = ap.parse_args(argv)

    print("Starting...")
    print(f"Source: {os.path.join(args.data_dir, LAYOUT_DIR)}")
    print(f"Output: {args.output_dir}")

    surahs_path = resolve_surahs_path(args.data_dir)
    try:
        names = SurahNames.load(surahs_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        error(f"Cannot load surah names from {surahs_path}: {e}")
        return 1
    glyphs = GlyphProvider.load(args.data_dir)
    schema = load_page_schema()

    report = generate_all_pages(args.data_dir, args.output_dir, glyphs, names, schema)
    report_path = write_report(report, args.output_dir)

    print("\nDone.")
    print(f"  Succeeded: {report.succeeded}")
    print(f"  Failed:    {report.failed}")
    if report.missing_pages:
        print(f"  ⚠ Missing input pages: {len(report.missing_pages)}")
    print(f"  Output:    {args.output_dir}")
    print(f"  Report:    {report_path}")
    return 0 if report.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
