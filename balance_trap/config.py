from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

# 0.01 ether expressed in wei
DEFAULT_THRESHOLD_WEI = 10**16


class TrapConfig(BaseModel):
    """Monitored subject and decision rule.

    These are construction-time constants: a running trap never changes them.
    """

    monitored_address: str = Field(
        "0x0000000000000000000000000000000000000000",
        description="Account whose native balance is sampled once per block",
    )
    threshold_wei: int = Field(
        DEFAULT_THRESHOLD_WEI,
        ge=0,
        description="|current - previous| >= this triggers a response",
    )
    strategy: str = Field(
        "two_point",
        description="Evaluation strategy key (extensible via balance_trap.core.strategies)",
    )

    @field_validator("monitored_address")
    @classmethod
    def _check_address(cls, v: str) -> str:
        if not ADDRESS_RE.match(v):
            raise ValueError(f"not a 20-byte hex address: {v!r}")
        return v

    @field_validator("strategy")
    @classmethod
    def _check_strategy(cls, v: str) -> str:
        from .core.strategies import STRATEGY_KEYS

        if v not in STRATEGY_KEYS:
            raise ValueError(f"unknown strategy {v!r}; expected one of {sorted(STRATEGY_KEYS)}")
        return v


class SinkConfig(BaseModel):
    function_name: str = Field("logAnomaly", description="Receiving operation on the response sink")
    timeout_sec: float = 10.0


class RuntimeConfig(BaseModel):
    trap: TrapConfig = Field(default_factory=TrapConfig)
    sink: SinkConfig = Field(default_factory=SinkConfig)
    history_size: int = Field(10, ge=2, description="Snapshots retained by the host")
    poll_interval_sec: float = Field(2.0, gt=0, description="How often to check for a new block")
    network_timeout_sec: int = 10
    max_retries: int = Field(3, ge=1)
    backoff_base_sec: float = 0.5
    backoff_cap_sec: float = 10.0


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    RPC_URL: str = "http://127.0.0.1:8545"
    LOG_LEVEL: str = "INFO"
    WEBHOOK_URL: Optional[str] = None


class AppConfig(BaseModel):
    env: EnvSettings
    runtime: RuntimeConfig

    # Allow tests to pass a plain dict for env; coerce to EnvSettings
    @field_validator("env", mode="before")
    @classmethod
    def _coerce_env(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, dict):
            return EnvSettings(**v)
        return v

    @staticmethod
    def load(config_path: Optional[Path] = None) -> "AppConfig":
        env = EnvSettings()  # loads from environment and .env

        runtime = RuntimeConfig()
        if config_path is None:
            default_path = Path("config.yaml")
            config_path = default_path if default_path.exists() else None

        if config_path and Path(config_path).exists():
            with open(config_path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            try:
                runtime = RuntimeConfig(**raw)
            except ValidationError as ve:
                raise ValueError(f"Invalid config.yaml: {ve}")

        return AppConfig(env=env, runtime=runtime)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load merged configuration from environment and optional YAML."""

    return AppConfig.load(config_path)
