from __future__ import annotations

from pathlib import Path

import pytest

from mcpadmin.cli import main as cli_main
from mcpadmin.settings import RuntimeSettings


@pytest.fixture()
def runtime_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    """Isolated settings pointing the CLI at a registry inside tmp_path."""
    base = tmp_path / "runtime"
    home = base / "home"
    log_dir = base / "logs"
    for directory in (home, log_dir):
        directory.mkdir(parents=True, exist_ok=True)
    settings = RuntimeSettings(
        home_dir=home,
        registry_file=base / "claude.json",
        log_dir=log_dir,
        color="never",
    )
    monkeypatch.setattr(cli_main, "SETTINGS", settings, raising=False)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("MCPADMIN_TELEMETRY", raising=False)
    return settings
