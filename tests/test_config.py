"""Tests for configuration loading."""

from food_order.config import FoodOrderConfig, load_config


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("FOOD_ORDER_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("FOOD_ORDER_API_URL", raising=False)
    monkeypatch.delenv("TEMPORAL_ADDRESS", raising=False)

    config = load_config()
    assert config.server.port == 5000
    assert config.payment.decline_probability == 0.15
    assert config.latency.delivery.high == 2.0
    assert config.temporal.task_queue == "food-orders"


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
server:
  port: 8080
latency:
  scale: 0.1
payment:
  decline_probability: 0.5
temporal:
  stage_timeout_seconds: 5
"""
    )
    monkeypatch.setenv("FOOD_ORDER_CONFIG", str(config_path))
    monkeypatch.delenv("PORT", raising=False)

    config = load_config()
    assert config.server.port == 8080
    assert config.latency.scale == 0.1
    assert config.latency.search.low == 0.6
    assert config.payment.decline_probability == 0.5
    assert config.temporal.stage_timeout_seconds == 5


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("FOOD_ORDER_API_URL", "http://orders.internal/api")
    monkeypatch.setenv("TEMPORAL_ADDRESS", "temporal:7233")

    config = load_config(str(tmp_path / "none.yaml"))
    assert config.server.port == 9000
    assert config.client.base_url == "http://orders.internal/api"
    assert config.temporal.address == "temporal:7233"


def test_env_overrides_do_not_leak_into_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "9001")
    load_config(str(tmp_path / "none.yaml"))
    assert FoodOrderConfig().server.port == 5000
