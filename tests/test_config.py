from __future__ import annotations

import pytest

from engine.config import EngineConfig


def test_defaults_from_empty_env():
    cfg = EngineConfig.from_env({})
    assert cfg == EngineConfig()
    assert cfg.base_seed is None
    assert cfg.scenario_id == "classic"


def test_reads_all_variables():
    cfg = EngineConfig.from_env(
        {
            "CENTIBLE_SEED": " 42 ",
            "CENTIBLE_SCENARIO": "Startup",
            "CENTIBLE_STORAGE_DIR": "/tmp/centible",
            "CENTIBLE_MAX_LOG": "200",
        }
    )
    assert cfg.base_seed == 42
    assert cfg.scenario_id == "startup"
    assert cfg.storage_dir == "/tmp/centible"
    assert cfg.max_log_entries == 200


def test_unknown_scenario_falls_back():
    assert EngineConfig.from_env({"CENTIBLE_SCENARIO": "space"}).scenario_id == "classic"


@pytest.mark.parametrize("name", ["CENTIBLE_SEED", "CENTIBLE_MAX_LOG"])
def test_bad_integers_raise(name):
    with pytest.raises(ValueError, match=name):
        EngineConfig.from_env({name: "lots"})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("CENTIBLE_SEED", "9")
    monkeypatch.delenv("CENTIBLE_SCENARIO", raising=False)
    assert EngineConfig.from_env().base_seed == 9
