import os
from pathlib import Path

import pytest

from airgradient_monitor.config.settings import InfluxSettings, TagPair
from airgradient_monitor.utils.mocks import make_reading

CONFIG_TOML = """
[airgradient]
url = "http://airgradient.local"
delaysecs = 30

[influxdb]
token = "s3cret-token"
bucket = "air"
org = "home"
url = "http://influx.local:8086"
tags = [
    { key = "room", value = "office" },
    { key = "floor", val = "2" },
]
"""


@pytest.fixture
def reading():
    return make_reading()


@pytest.fixture
def influx_settings() -> InfluxSettings:
    return InfluxSettings(
        url="http://influx.local:8086",
        token="s3cret-token",
        org="home",
        bucket="air",
        tags=(TagPair(key="room", value="office"),),
    )


@pytest.fixture
def disabled_settings(influx_settings: InfluxSettings) -> InfluxSettings:
    return influx_settings.model_copy(update={"enable": False})


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "airgradient_monitor.toml"
    path.write_text(CONFIG_TOML)
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep AIRGRADIENT_MONITOR_* variables from the host out of settings."""
    for name in list(os.environ):
        if name.startswith("AIRGRADIENT_MONITOR_"):
            monkeypatch.delenv(name)
