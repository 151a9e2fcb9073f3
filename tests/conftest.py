from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ("WALVER_API_KEY", "WALVER_BASE_URL", "WALVER_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
