"""Shared pytest fixtures and configuration for the now-certs test suite.

Guidelines
----------
* No internet access in any test.
* The certificates API is mocked at the client boundary (``MagicMock``)
  or at the transport (``pytest-httpx``).
* Tests never read the real ``~/.now`` directory or ambient env vars.
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config lookup at an empty temp dir and clear NOW_* env vars."""
    global_dir = tmp_path / "global"
    work_dir = tmp_path / "work"
    global_dir.mkdir()
    work_dir.mkdir()
    monkeypatch.setenv("NOW_CONFIG_DIR", str(global_dir))
    monkeypatch.delenv("NOW_TOKEN", raising=False)
    monkeypatch.delenv("NOW_API_URL", raising=False)
    monkeypatch.chdir(work_dir)
    return global_dir
