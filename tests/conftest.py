"""Root test configuration: per-test env isolation and session cleanup of build artifacts"""

import os
import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_ARTIFACTS = ["mdsite.db", "_site"]


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Drop MDSITE_* variables from the caller's shell so settings start from defaults."""
    for name in [k for k in os.environ if k.startswith("MDSITE_")]:
        monkeypatch.delenv(name)


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove a manifest DB or output site accidentally built in the project root."""
    yield
    for name in _ARTIFACTS:
        p = _PROJECT_ROOT / name
        if p.is_dir():
            shutil.rmtree(p)
        elif p.exists():
            p.unlink()
