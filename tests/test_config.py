from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from balance_trap.config import DEFAULT_THRESHOLD_WEI, RuntimeConfig, TrapConfig, load_config


def test_defaults() -> None:
    rt = RuntimeConfig()
    assert rt.trap.threshold_wei == DEFAULT_THRESHOLD_WEI == 10**16
    assert rt.trap.strategy == "two_point"
    assert rt.history_size >= 2
    assert rt.sink.function_name == "logAnomaly"


@pytest.mark.parametrize("address", ["0x1234", "not-an-address", "00" * 20])
def test_rejects_bad_address(address: str) -> None:
    with pytest.raises(ValidationError):
        TrapConfig(monitored_address=address)


def test_rejects_negative_threshold() -> None:
    with pytest.raises(ValidationError):
        TrapConfig(threshold_wei=-1)


def test_rejects_unknown_strategy() -> None:
    with pytest.raises(ValidationError):
        TrapConfig(strategy="moving_average")


def test_history_must_hold_a_pair() -> None:
    with pytest.raises(ValidationError):
        RuntimeConfig(history_size=1)


def test_load_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RPC_URL", "http://node.invalid:8545")
    path = tmp_path / "config.yaml"
    path.write_text(
        "trap:\n"
        "  monitored_address: '0x00000000000000000000000000000000000000bb'\n"
        "  threshold_wei: 500\n"
        "history_size: 4\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.env.RPC_URL == "http://node.invalid:8545"
    assert cfg.runtime.trap.threshold_wei == 500
    assert cfg.runtime.history_size == 4


def test_invalid_yaml_is_value_error(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("trap:\n  threshold_wei: -3\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config(path)


def test_missing_yaml_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    cfg = load_config()
    assert cfg.runtime == RuntimeConfig()
