"""Configuration for the API server, the tracking client and the worker."""

import os

import yaml
from pydantic import BaseModel, Field, model_validator

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class DelayRange(BaseModel):
    """Bounds of a simulated delay, in seconds."""

    low: float = Field(..., ge=0)
    high: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> "DelayRange":
        if self.high < self.low:
            raise ValueError("high must not be lower than low")
        return self


class LatencyConfig(BaseModel):
    """Artificial per-stage latency. ``scale`` multiplies every range."""

    enabled: bool = True
    scale: float = Field(1.0, ge=0)
    search: DelayRange = DelayRange(low=0.6, high=1.2)
    order: DelayRange = DelayRange(low=0.7, high=1.4)
    payment: DelayRange = DelayRange(low=0.8, high=1.6)
    delivery: DelayRange = DelayRange(low=1.0, high=2.0)


class PaymentConfig(BaseModel):
    decline_probability: float = Field(0.15, ge=0, le=1)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000


class ClientConfig(BaseModel):
    base_url: str = "http://localhost:5000/api"
    # Seconds per stage call; None waits forever.
    timeout: float | None = 30.0


class TemporalConfig(BaseModel):
    address: str = "localhost:7233"
    task_queue: str = "food-orders"
    stage_timeout_seconds: float = 30.0
    # Retries cover infrastructure failures only; stage failures are non-retryable.
    maximum_attempts: int = Field(3, ge=1)


class FoodOrderConfig(BaseModel):
    """Top-level configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    latency: LatencyConfig = Field(default_factory=LatencyConfig)
    payment: PaymentConfig = Field(default_factory=PaymentConfig)
    temporal: TemporalConfig = Field(default_factory=TemporalConfig)
    catalog_path: str | None = None


def load_config(path: str | None = None) -> FoodOrderConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to FOOD_ORDER_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("FOOD_ORDER_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = FoodOrderConfig(**data)
    else:
        config = FoodOrderConfig()

    env_port = os.getenv("PORT")
    if env_port:
        config.server.port = int(env_port)
    env_api_url = os.getenv("FOOD_ORDER_API_URL")
    if env_api_url:
        config.client.base_url = env_api_url
    env_temporal = os.getenv("TEMPORAL_ADDRESS")
    if env_temporal:
        config.temporal.address = env_temporal
    return config
