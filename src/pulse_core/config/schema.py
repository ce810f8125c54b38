"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FeedConfig(BaseModel):
    interval_s: float = 2.0
    seed: int | None = None


class DetectorParams(BaseModel):
    enabled: bool = True
    params: dict[str, float | int | str | bool] = Field(default_factory=dict)


class HistoryConfig(BaseModel):
    capacity: int = Field(default=100, ge=1)


class RegistryConfig(BaseModel):
    dedup_window_s: float = 60.0


class ScoringConfig(BaseModel):
    # Normalisation constants are policy knobs, not derived quantities.
    consistency_variance_norm: float = 10000.0
    speed_norm_s: float = 30.0
    pnl_norm: float = 1000.0
    window_days: int = 30


class PipelineConfig(BaseModel):
    parallel_detectors: bool = False


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///pulse.db"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    assets: list[str] = Field(default_factory=lambda: ["ETH", "BTC", "SOL"])
    feed: FeedConfig = Field(default_factory=FeedConfig)
    detectors: dict[str, DetectorParams] = Field(default_factory=dict)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
