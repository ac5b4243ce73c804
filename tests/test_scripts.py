"""
Command-line script tests.
"""

import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent


def run(script, *args):
    return subprocess.run(
        [sys.executable, str(ROOT / "scripts" / script), *map(str, args)],
        capture_output=True, text=True,
    )


def test_init_dataset(tmp_path):
    path = tmp_path / "show.json"
    result = run("init_dataset.py", path, "-s", "News", "-s", "Tips", "-p", "A")
    assert result.returncode == 0, result.stderr
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "DBVersion": 1,
        "Episodes": [],
        "DefaultSegments": ["News", "Tips"],
        "Presenters": ["A"],
    }


def test_init_dataset_refuses_to_overwrite(dataset_path):
    before = dataset_path.read_bytes()
    result = run("init_dataset.py", dataset_path, "-s", "Other")
    assert result.returncode == 1
    assert dataset_path.read_bytes() == before


def test_migrate_dataset(unversioned_path):
    result = run("migrate_dataset.py", unversioned_path)
    assert result.returncode == 0, result.stderr
    data = json.loads(unversioned_path.read_text(encoding="utf-8"))
    assert data["DBVersion"] == 1
    assert [s["ID"] for s in data["Episodes"][0]["Segments"][0]["Stories"]] == [1, 2]


def test_migrate_dataset_missing_file(tmp_path):
    result = run("migrate_dataset.py", tmp_path / "nope.json")
    assert result.returncode == 1
