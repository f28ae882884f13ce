"""
Shared fixtures
"""

from pathlib import Path
from typing import Callable, Dict

import pytest

from rpglump.container import LumpStore
from rpglump.records import DecodeContext


@pytest.fixture
def context():
    """Decode context over an empty store"""
    return DecodeContext(store=LumpStore(), project_name="GAME")


@pytest.fixture
def make_project_dir(tmp_path) -> Callable[..., Path]:
    """Write lumps as loose files under a project directory"""
    def _make(lumps: Dict[str, bytes], name: str = "game") -> Path:
        root = tmp_path / name
        root.mkdir()
        for lump_name, data in lumps.items():
            path = root / lump_name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return root
    return _make
