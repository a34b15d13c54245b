import json
from pathlib import Path

import pytest

from hftools import config
from hftools.infrastructure.memory import InMemoryExecutor
from hftools.model.entities import FXInstrument, FXInstrument2, Trade
from hftools.model.samples import sample_fills, sample_instruments, sample_trades, sample_users
from hftools.orm import Repository, codec
from hftools.seeding import SEEDED_TYPES, seed
from scripts import seed_data


def test_get_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in ("DB_HOST", "DB_PORT", "DB_USER", "DB_NAME", "ORM_STRICT_AFFECTED_ROWS"):
        monkeypatch.delenv(name, raising=False)
    settings = config.get_settings()
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "hftools_db"
    assert settings.db_pool_min_size <= settings.db_pool_max_size
    assert settings.orm_strict_affected_rows is True


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("LOG_JSON", "true")
    settings = config.get_settings()
    assert settings.db_port == 6543
    assert settings.log_json is True
    assert config.get_settings() is settings


def test_sample_data_is_consistent():
    users = {u.id for u in sample_users()}
    instruments = {i.id for i in sample_instruments()}
    trades = sample_trades()
    assert len(users) == 5
    assert len(instruments) == 10
    assert len(trades) == 8
    assert all(t.user_id in users and t.instrument_id in instruments for t in trades)
    assert sample_instruments()[0].symbol == "EUR/USD"
    assert [list(f.to_json().values()) for f in sample_fills()] == [
        list(t.to_json().values()) for t in trades
    ]


def test_seed_inserts_every_sample(memory_executor: InMemoryExecutor):
    counts = seed(memory_executor)
    assert counts == {"users": 5, "fxinstruments": 10, "trades": 8, "FXInstrument2": 8}
    assert len(SEEDED_TYPES) == len(counts)


def test_seeded_rows_decode_back(seeded_executor: InMemoryExecutor):
    assert Repository(Trade, seeded_executor).get_all() == sample_trades()
    eur_usd = Repository(FXInstrument, seeded_executor).get_by_id(1)
    assert eur_usd.base_currency == "EUR"
    assert Repository(FXInstrument2, seeded_executor).get_by_id(8).price == 149.90


def test_export_json_writes_loadable_files(tmp_path: Path):
    written = seed_data._export_json(tmp_path / "out")
    assert [p.name for p in written] == ["users.json", "fxinstruments.json", "trades.json"]

    payload = json.loads((tmp_path / "out" / "trades.json").read_text(encoding="utf-8"))
    assert payload[0] == {
        "id": 1,
        "user_id": 1,
        "instrument_id": 1,
        "side": "BUY",
        "quantity": 100000.0,
        "price": 1.085,
        "timestamp": "2024-01-28 10:30:00",
    }
    assert codec.from_json_list(Trade, payload) == sample_trades()


def test_build_dsn_prefers_override():
    assert seed_data._build_dsn("postgresql://a:b@c:1/d") == "postgresql://a:b@c:1/d"
    assert seed_data._build_dsn(None).startswith("postgresql://")
