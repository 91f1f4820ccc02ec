import logging
import time
from dataclasses import dataclass
from typing import Dict, Union

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS, WriteApi

from airgradient_monitor.config.settings import InfluxSettings
from airgradient_monitor.sensing.airgradient import SensorReading

logger = logging.getLogger(__name__)

MEASUREMENT = "airgradient"


@dataclass(frozen=True)
class OutputPoint:
    """The record persisted for one poll cycle."""

    measurement: str
    fields: Dict[str, Union[int, float]]
    tags: Dict[str, str]
    timestamp_ns: int

    def to_point(self) -> Point:
        point = Point(self.measurement)
        for key, value in self.tags.items():
            point.tag(key, value)
        for key, value in self.fields.items():
            point.field(key, value)
        return point.time(self.timestamp_ns, WritePrecision.NS)


def build_point(
    reading: SensorReading, aqi: int, cfg: InfluxSettings, timestamp_ns: int
) -> OutputPoint:
    """Build the output point for a reading.

    Static tags from the config are applied after the identity tags, so a
    configured tag overrides ``firmware``, ``model`` or ``serialno`` when the
    keys collide. The last static tag wins among duplicates.
    """
    pm10 = reading.pm10 if cfg.pm10_source == "pm10" else reading.pm02
    fields: Dict[str, Union[int, float]] = {
        "rco2": reading.rco2,
        "pm01": reading.pm01,
        "pm02": reading.pm02,
        "pm10": pm10,
        "pm003Count": reading.pm003_count,
        "temp": float(reading.atmp_compensated),
        "humidity": reading.rhum_compensated,
        "tvoc": reading.tvoc_raw,
        "tvocIndex": reading.tvoc_index,
        "nox": reading.nox_raw,
        "noxIndex": reading.nox_index,
        "aqi": aqi,
    }
    tags = {
        "firmware": reading.firmware,
        "model": reading.model,
        "serialno": reading.serialno,
    }
    for tag in cfg.tags:
        tags[tag.key] = tag.value

    return OutputPoint(
        measurement=MEASUREMENT, fields=fields, tags=tags, timestamp_ns=timestamp_ns
    )


@dataclass(frozen=True)
class Disconnected:
    pass


@dataclass(frozen=True)
class Connected:
    client: InfluxDBClient
    write_api: WriteApi


ConnectionState = Union[Disconnected, Connected]


class MetricsWriter:
    """Writes readings to InfluxDB over a lazily created client.

    The writer never disconnects on its own. A caller that sees
    ``write_point`` raise is expected to call ``disconnect`` so that the next
    write builds a fresh client.
    """

    def __init__(self, cfg: InfluxSettings):
        self.cfg = cfg
        self._state: ConnectionState = Disconnected()

        logger.info(
            "Initializing InfluxDB writer: enable=%s, url=%s, org=%s, bucket=%s, tags=%d",
            cfg.enable,
            cfg.url,
            cfg.org,
            cfg.bucket,
            len(cfg.tags),
        )

    @property
    def state(self) -> ConnectionState:
        return self._state

    def is_connected(self) -> bool:
        """Check if a client handle is held."""
        return isinstance(self._state, Connected)

    def connect(self) -> None:
        """Create the client if writing is enabled and none is held yet."""
        if not self.cfg.enable:
            logger.debug("InfluxDB writing disabled, not connecting")
            return
        if isinstance(self._state, Connected):
            return

        client = InfluxDBClient(
            url=self.cfg.url,
            token=self.cfg.token.get_secret_value(),
            org=self.cfg.org,
            timeout=self.cfg.timeout_ms,
        )
        write_api = client.write_api(write_options=SYNCHRONOUS)
        self._state = Connected(client=client, write_api=write_api)
        logger.info("Connected to InfluxDB at %s", self.cfg.url)

    def disconnect(self) -> None:
        """Drop the client handle. Always succeeds."""
        state = self._state
        self._state = Disconnected()
        if not isinstance(state, Connected):
            return

        logger.info("Closing InfluxDB connection to %s", self.cfg.url)
        try:
            state.client.close()
        except Exception as e:
            logger.warning("Error while closing InfluxDB client: %s", e)

    def write_point(self, reading: SensorReading, aqi: int) -> None:
        """Write one point for ``reading``, stamped with the current time.

        Raises:
            Exception: Whatever the client raises on network, auth or
                serialization errors. The connection is left as is.
        """
        if not self.cfg.enable:
            logger.debug("InfluxDB writing disabled, dropping reading")
            return

        self.connect()
        state = self._state
        if not isinstance(state, Connected):
            raise RuntimeError("InfluxDB client missing after connect")

        point = build_point(reading, aqi, self.cfg, time.time_ns())
        state.write_api.write(bucket=self.cfg.bucket, org=self.cfg.org, record=point.to_point())
        logger.debug(
            "Wrote point for %s to bucket %s (aqi=%d)", reading.serialno, self.cfg.bucket, aqi
        )
