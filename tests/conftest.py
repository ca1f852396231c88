"""Shared test fixtures for resim-sync tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.fakes.client import FakeResimClient


@pytest.fixture
def fake_client() -> FakeResimClient:
    return FakeResimClient()


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[..., Path]:
    def _write(text: str, name: str = "experiences.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
