"""
tests/test_cli.py — ``python -m sync_reputation`` Commands
===========================================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from sync_reputation import __main__ as cli
from sync_reputation.database.models import Business
from sync_reputation.database.seed import DEMO_BUSINESSES


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    """Keep a developer's .env out of the command's environment."""
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)


@pytest.fixture
def fake_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


class TestMissingDatabaseUrl:
    @pytest.mark.parametrize("command", ["serve", "init-db", "seed-demo", "recompute"])
    def test_exits_with_status_1(self, monkeypatch, caplog, fake_uvicorn, command):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        assert cli.main([command]) == 1
        assert "DATABASE_URL is not set" in caplog.text
        assert any(r.levelname == "CRITICAL" for r in caplog.records)
        assert fake_uvicorn == []


class TestCommands:
    @pytest.fixture
    def sqlite_url(self, tmp_path, monkeypatch):
        url = f"sqlite:///{tmp_path / 'cli.db'}"
        monkeypatch.setenv("DATABASE_URL", url)
        return url

    def test_seed_demo_then_recompute(self, sqlite_url):
        assert cli.main(["seed-demo"]) == 0
        assert cli.main(["seed-demo"]) == 0  # idempotent

        engine = create_engine(sqlite_url)
        with Session(engine) as session:
            count = session.scalar(select(func.count()).select_from(Business))
        assert count == len(DEMO_BUSINESSES)

        assert cli.main(["recompute"]) == 0
        engine.dispose()

    def test_init_db(self, sqlite_url):
        assert cli.main(["init-db"]) == 0

    def test_serve_uses_configured_port(self, sqlite_url, tmp_path, monkeypatch, fake_uvicorn):
        config = tmp_path / "config.yaml"
        config.write_text('app_name: "SynC"\napi_port: 8123\n', encoding="utf-8")
        monkeypatch.setenv("CONFIG_PATH", str(config))

        assert cli.main(["serve"]) == 0
        (args, kwargs), = fake_uvicorn
        assert args == ("sync_reputation.api.main:app",)
        assert kwargs["port"] == 8123
