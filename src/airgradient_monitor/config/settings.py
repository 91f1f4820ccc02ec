from pathlib import Path
from typing import Literal, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path("/etc/airgradient_monitor.toml")


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


class TagPair(BaseModel):
    """A static tag attached to every point.

    Tags are a list of pairs rather than a table so that keys keep their case
    and their order. ``val`` is accepted as an alias of ``value``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: str = Field(validation_alias=AliasChoices("value", "val"))


class AirGradientSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    delaysecs: int = Field(gt=0)
    timeout_secs: float = Field(10.0, gt=0)


class InfluxSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    enable: bool = True
    url: str
    token: SecretStr
    org: str
    bucket: str
    tags: Tuple[TagPair, ...] = ()
    timeout_ms: int = Field(10_000, gt=0)
    # "pm02" reproduces older releases that wrote PM2.5 into the pm10 field
    pm10_source: Literal["pm10", "pm02"] = "pm10"


class Settings(BaseSettings):
    """Configuration settings for the monitor.

    Values come from the TOML file passed to ``load_settings``; environment
    variables such as ``AIRGRADIENT_MONITOR_INFLUXDB__TOKEN`` override them.
    """

    model_config = SettingsConfigDict(
        env_prefix="AIRGRADIENT_MONITOR_",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    airgradient: AirGradientSettings
    influxdb: InfluxSettings

    # Logging
    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # environment first so it wins over values read from the file
        return env_settings, init_settings


def load_settings(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from a TOML file.

    Raises:
        ConfigError: If the file is missing, is not valid TOML, or lacks a
            required field.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file {path} not found")

    try:
        file_values = TomlConfigSettingsSource(Settings, toml_file=path)()
        return Settings(**file_values)
    except ValueError as e:
        # tomllib.TOMLDecodeError and pydantic.ValidationError are both ValueErrors
        raise ConfigError(f"Invalid config file {path}: {e}") from e
