#!/usr/bin/env python3
"""Environment and data-layout sanity check for the mushaf generator.

Checks:
- Python version (>= 3.10)
- Required dependencies installed and (best-effort) version match with requirements.txt
- Data layout under --data-dir: QPC glyph tables, verse mappings,
  mushaf-layout page files, surah name table

Usage:
  python tools/check_env.py [--data-dir data]
"""

from __future__ import annotations

import argparse
import importlib
import os
import platform
import sys
from pathlib import Path

import yaml

from generate_mushaf import DEFAULT_DATA_DIR, PAGE_COUNT, input_path, resolve_surahs_path
from glyph_provider import GLYPH_TABLE_PATHS, VERSE_MAPPING_PATHS, GlyphProvider
from surah_names import SURAH_COUNT, SurahNames

MIN_PY = (3, 10)
REPO_ROOT = Path(__file__).resolve().parent.parent

REQUIRED_MODULES = [
    ("yaml", "PyYAML"),
    ("jsonschema", "jsonschema"),
]


def parse_pinned_requirements(req_path: Path) -> dict[str, str]:
    pinned: dict[str, str] = {}
    if not req_path.exists():
        return pinned
    for raw in req_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        # only exact pins "name==version"
        if "==" in line and ">" not in line and "<" not in line:
            name, ver = line.split("==", 1)
            pinned[name.strip().lower()] = ver.strip()
    return pinned


def get_installed_version(dist_name: str) -> str | None:
    from importlib import metadata

    try:
        return metadata.version(dist_name)
    except metadata.PackageNotFoundError:
        return None


def check_python_version(version_info=sys.version_info) -> list[str]:
    issues: list[str] = []
    if tuple(version_info[:2]) < MIN_PY:
        issues.append(
            f"Python >= {MIN_PY[0]}.{MIN_PY[1]} required; found {version_info[0]}.{version_info[1]}."
        )
    return issues


def check_import(module: str, pip_name: str) -> tuple[bool, str | None]:
    try:
        importlib.import_module(module)
        return True, None
    except ImportError as e:
        return False, f"Missing module '{module}'. Install '{pip_name}' via requirements.txt. ({e})"


def check_data_layout(data_dir: str) -> tuple[list[str], list[str], list[str]]:
    """Inspect the data directory. Returns (issues, warnings, report lines)."""
    issues: list[str] = []
    warnings: list[str] = []
    lines: list[str] = []

    if not os.path.isdir(data_dir):
        issues.append(f"Data directory not found: {data_dir}")
        return issues, warnings, lines

    for rel in list(GLYPH_TABLE_PATHS.values()) + list(VERSE_MAPPING_PATHS.values()):
        ok = os.path.isfile(os.path.join(data_dir, rel))
        lines.append(f"  - {'OK' if ok else 'MISSING'}  {rel}")
        if not ok:
            if rel in GLYPH_TABLE_PATHS.values():
                issues.append(f"Glyph table missing: {rel}")
            else:
                warnings.append(f"Verse mapping missing: {rel}")

    glyphs = GlyphProvider.load(data_dir)
    for name, size in glyphs.table_sizes().items():
        lines.append(f"  {name}: {size} entries")
    for version in ("1", "2"):
        if glyphs.table_sizes()[f"qpc_v{version}_verse_mapping"] and glyphs.verse_mapping(1, 1, version) is None:
            warnings.append(f"QPC{version} verse mapping has no entry for 1:1")

    present = [p for p in range(1, PAGE_COUNT + 1) if os.path.isfile(input_path(data_dir, p))]
    lines.append(f"  layout pages: {len(present)}/{PAGE_COUNT}")
    if not present:
        issues.append("No mushaf-layout page files found")
    elif len(present) < PAGE_COUNT:
        warnings.append(f"{PAGE_COUNT - len(present)} layout page file(s) missing")

    surahs_path = resolve_surahs_path(data_dir)
    try:
        names = SurahNames.load(surahs_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        issues.append(f"Cannot load surah names from {surahs_path}: {e}")
    else:
        lines.append(f"  surah names: {len(names)} ({surahs_path})")
        if len(names) != SURAH_COUNT:
            warnings.append(f"Surah name table has {len(names)} entries, expected {SURAH_COUNT}")

    return issues, warnings, lines


def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--data-dir", default=str(DEFAULT_DATA_DIR), help="Root of the layout data")
    args = ap.parse_args(argv)

    print("Mushaf generator environment check")
    print("-" * 72)
    print(f"Repo root: {REPO_ROOT}")
    print(f"Python: {sys.executable}")
    print(f"Python version: {sys.version.splitlines()[0]}")
    print(f"OS: {platform.system()} {platform.release()} ({platform.platform()})")
    print(f"Data dir: {args.data_dir}")

    issues: list[str] = []
    warnings: list[str] = []
    issues.extend(check_python_version())

    for mod, pip_name in REQUIRED_MODULES:
        ok, msg = check_import(mod, pip_name)
        if not ok and msg:
            issues.append(msg)

    pinned = parse_pinned_requirements(REPO_ROOT / "requirements.txt")
    if pinned:
        print("\nPinned dependency versions (requirements.txt):")
        for name, ver in pinned.items():
            inst_ver = get_installed_version(name)
            if inst_ver is None:
                print(f"  - {name}=={ver}: NOT INSTALLED")
                issues.append(f"Dependency not installed: {name}=={ver}")
            elif inst_ver == ver:
                print(f"  - {name}=={ver}: OK")
            else:
                print(f"  - {name}=={ver}: MISMATCH (installed {inst_ver})")
                warnings.append(f"Version mismatch for {name}: required {ver}, installed {inst_ver}")

    print("\nData layout:")
    data_issues, data_warnings, data_lines = check_data_layout(args.data_dir)
    for line in data_lines:
        print(line)
    issues.extend(data_issues)
    warnings.extend(data_warnings)

    print("\nResult:")
    if issues:
        print("ENV CHECK: FAIL")
        for i in issues:
            print(f"- {i}")
        print("\nFix:")
        print("  python -m pip install -r requirements.txt")
        print("  and place the layout data under --data-dir (mushaf-layout/, QPC1/, QPC2/)")
        return 2

    if warnings:
        print("ENV CHECK: PASS (WARNINGS)")
        for w in warnings:
            print(f"- {w}")
    else:
        print("ENV CHECK: PASS")
    print("Next:")
    print("  python tools/generate_mushaf.py")
    return 0


if __name__ == "__main__":
    sys.exit(main())
