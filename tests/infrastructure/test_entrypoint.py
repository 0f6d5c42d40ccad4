"""Tests for the merch-store console entry point."""

import uvicorn

from merch_store import main
from merch_store.config import Settings


def test_run_serves_app_on_configured_address(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(main, "get_settings", lambda: Settings(host="127.0.0.1", port=9000))

    main.run()

    assert calls == [(
        "merch_store.main:app",
        {"host": "127.0.0.1", "port": 9000, "log_config": None},
    )]
