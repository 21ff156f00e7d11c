"""Root test configuration for ClientGuard.

Clears every CLIENTGUARD_* environment variable for the whole suite so that a
developer's shell (or CI settings) cannot leak config paths, tenant ids or log
levels into tests. Tests that exercise env overrides set them explicitly with
their own monkeypatch calls, which run after this fixture and win.
"""

import os

import pytest

from clientguard.utils.logger import clear_request_id


@pytest.fixture(autouse=True)
def isolate_clientguard_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Remove CLIENTGUARD_* env vars and run from an empty working directory.

    Running from tmp_path keeps a checked-in ``.clientguard/config.yaml`` from
    being picked up by load_config()'s working-directory search.
    """
    for name in list(os.environ):
        if name.startswith("CLIENTGUARD_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_request_id() -> None:
    """Prevent request-id bleed between tests."""
    clear_request_id()
