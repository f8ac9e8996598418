#!/usr/bin/env python3
"""Tests for the environment / data-layout check (tools/check_env.py)"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "tools"))

from check_env import (
    check_data_layout,
    check_import,
    check_python_version,
    main,
    parse_pinned_requirements,
)
from generate_mushaf import PAGE_COUNT, input_path


def write_json(path: Path, obj):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj), encoding="utf-8")


def make_data_dir(root: Path, pages=(1,), mappings=True) -> Path:
    write_json(root / "QPC1" / "qpc-v1.json", {"1:1:1": "A"})
    write_json(root / "QPC2" / "qpc-v2.json", {"1:1:1": "B"})
    if mappings:
        write_json(root / "QPC1" / "verse-mapping.json", {"1:1": [1, 5]})
        write_json(root / "QPC2" / "verse-mapping.json", {"1:1": [1, 5]})
    for p in pages:
        write_json(Path(input_path(str(root), p)), {"verses": []})
    return root


class TestPythonVersion:
    def test_too_old(self):
        issues = check_python_version((3, 9, 1))
        assert len(issues) == 1
        assert "3.10" in issues[0]

    def test_ok(self):
        assert check_python_version((3, 12, 0)) == []


class TestImports:
    def test_present(self):
        assert check_import("json", "json") == (True, None)

    def test_missing(self):
        ok, msg = check_import("no_such_module_for_mushaf", "no-such-dist")
        assert not ok
        assert "no-such-dist" in msg


class TestPinnedRequirements:
    def test_only_exact_pins(self, tmp_path):
        req = tmp_path / "requirements.txt"
        req.write_text("# comment\nPyYAML==6.0.2\njsonschema>=4\n\npytest==8.3.4\n", encoding="utf-8")
        assert parse_pinned_requirements(req) == {"pyyaml": "6.0.2", "pytest": "8.3.4"}

    def test_missing_file(self, tmp_path):
        assert parse_pinned_requirements(tmp_path / "nope.txt") == {}


class TestDataLayout:
    def test_missing_dir(self, tmp_path):
        issues, warnings, _ = check_data_layout(str(tmp_path / "nope"))
        assert issues and "not found" in issues[0]

    def test_partial_pages_warn(self, tmp_path):
        issues, warnings, lines = check_data_layout(str(make_data_dir(tmp_path, pages=(1, 2))))
        assert issues == []
        assert f"{PAGE_COUNT - 2} layout page file(s) missing" in warnings
        assert f"  layout pages: 2/{PAGE_COUNT}" in lines
        assert any("surah names: 114" in ln for ln in lines)

    def test_missing_glyph_table_is_issue(self, tmp_path):
        root = make_data_dir(tmp_path)
        (root / "QPC1" / "qpc-v1.json").unlink()
        issues, _, lines = check_data_layout(str(root))
        assert any("Glyph table missing" in i for i in issues)
        assert any("MISSING  QPC1" in ln for ln in lines)

    def test_missing_mapping_is_warning(self, tmp_path):
        issues, warnings, _ = check_data_layout(str(make_data_dir(tmp_path, mappings=False)))
        assert issues == []
        assert sum("Verse mapping missing" in w for w in warnings) == 2

    def test_mapping_without_first_verse(self, tmp_path):
        root = make_data_dir(tmp_path)
        write_json(root / "QPC2" / "verse-mapping.json", {"2:1": [1, 2]})
        _, warnings, _ = check_data_layout(str(root))
        assert "QPC2 verse mapping has no entry for 1:1" in warnings

    def test_no_pages_is_issue(self, tmp_path):
        issues, _, _ = check_data_layout(str(make_data_dir(tmp_path, pages=())))
        assert "No mushaf-layout page files found" in issues

    def test_short_surah_table_warns(self, tmp_path):
        root = make_data_dir(tmp_path)
        write_json(root / "surahs.json", [{"id": 1, "arabicLong": "الفاتحة"}])
        _, warnings, _ = check_data_layout(str(root))
        assert any("expected 114" in w for w in warnings)

    def test_bad_surah_table_is_issue(self, tmp_path):
        root = make_data_dir(tmp_path)
        write_json(root / "surahs.json", [{"arabicLong": "x"}])
        issues, _, _ = check_data_layout(str(root))
        assert any("Cannot load surah names" in i for i in issues)


class TestMain:
    def test_fail_without_data(self, tmp_path, capsys):
        assert main(["--data-dir", str(tmp_path / "missing")]) == 2
        assert "ENV CHECK: FAIL" in capsys.readouterr().out
