"""
Shared fixtures for the rundown test suite.
"""

import json

import pytest

from rundown.core.placement import RandomSource


class ScriptedRandom(RandomSource):
    """Random source that returns pre-chosen values and records the bounds it was asked for."""

    def __init__(self, *values):
        self.values = list(values)
        self.bounds = []

    def intn(self, n):
        self.bounds.append(n)
        value = self.values.pop(0) if self.values else 0
        assert 0 <= value < n, f"scripted value {value} out of range [0, {n})"
        return value


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def dataset_path(tmp_path):
    """A current dataset with two default segments and two presenters."""
    path = tmp_path / "rundown.json"
    path.write_text(json.dumps({
        "DBVersion": 1,
        "Episodes": [],
        "DefaultSegments": ["News", "Tips"],
        "Presenters": ["A", "B"],
    }, indent="\t"), encoding="utf-8")
    return path


@pytest.fixture
def unversioned_path(tmp_path):
    """A dataset written before story IDs existed."""
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps({
        "Episodes": [
            {
                "Title": "Old episode",
                "Slug": "old-episode",
                "Segments": [
                    {
                        "Name": "News",
                        "Stories": [
                            {"Title": "first", "Notes": "", "Presenter": "A"},
                            {"Title": "second", "Notes": "", "Presenter": "B"},
                        ],
                    },
                    {"Name": "Tips", "Stories": None},
                ],
            }
        ],
        "DefaultSegments": ["News", "Tips"],
        "Presenters": ["A", "B"],
    }, indent="\t"), encoding="utf-8")
    return path
