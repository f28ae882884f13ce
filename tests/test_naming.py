"""
Tests for legacy project name resolution
"""

import pytest

from rpglump.naming import DEFAULT_PROJECT_NAME, resolve_project_name


@pytest.mark.parametrize("path, expected", [
    ("games/vikings.rpg", "VIKING"),
    ("VIKINGS.RPG", "VIKING"),
    ("wander.rpg", "WANDER"),
    ("projects/mygame", "MYGAME"),
    ("/tmp/Some Quest.rpg", "SOME QUEST"),
])
def test_resolve_project_name(path, expected):
    assert resolve_project_name(path) == expected


def test_empty_path_uses_default():
    assert resolve_project_name("") == DEFAULT_PROJECT_NAME
    assert resolve_project_name(None) == DEFAULT_PROJECT_NAME


def test_override_is_not_generalized():
    assert resolve_project_name("dragons.rpg") == "DRAGONS"
