from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
PYTEST_TEMP = Path(os.environ.get("PYTEST_DEBUG_TEMPROOT", "/tmp/mcpadmin-pytest")).resolve()
os.environ.setdefault("PYTEST_DEBUG_TEMPROOT", str(PYTEST_TEMP))
PYTEST_TEMP.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def write_json() -> Callable[[Path, Any], Path]:
    return _write_json


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """Directory holding the fake projects; resolved so paths match cwd-style keys."""

    root = (tmp_path / "work").resolve()
    for name in ("alpha", "beta", "gamma"):
        (root / name).mkdir(parents=True, exist_ok=True)
    return root
