import logging
from typing import Any, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field


class SensorReading(BaseModel):
    """A single snapshot from the AirGradient ``/measures/current`` endpoint.

    Field aliases follow the device's native JSON keys, so a reading is built
    directly from the response body. Unknown keys are ignored and a missing
    required key fails validation.

    Attributes:
        serialno: Device serial number.
        rco2: CO2 concentration in ppm.
        pm01: PM1.0 concentration in μg/m³.
        pm02: PM2.5 concentration in μg/m³.
        pm10: PM10 concentration in μg/m³.
        pm003_count: Particle count above 0.3 μm.
        atmp_compensated: Compensated temperature in °C.
        rhum_compensated: Compensated relative humidity in %.
        tvoc_index: VOC index.
        tvoc_raw: Raw VOC signal.
        nox_index: NOx index.
        nox_raw: Raw NOx signal.
        boot: Boot counter (diagnostic only).
        boot_count: Boot counter (diagnostic only).
        firmware: Firmware version.
        model: Hardware model identifier.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    serialno: str
    rco2: int = Field(ge=0)
    pm01: int = Field(ge=0)
    pm02: int = Field(ge=0)
    pm10: int = Field(ge=0)
    pm003_count: int = Field(alias="pm003Count", ge=0)
    atmp_compensated: float = Field(alias="atmpCompensated")
    rhum_compensated: int = Field(alias="rhumCompensated", ge=0)
    tvoc_index: int = Field(alias="tvocIndex", ge=0)
    tvoc_raw: int = Field(alias="tvocRaw", ge=0)
    nox_index: int = Field(alias="noxIndex", ge=0)
    nox_raw: int = Field(alias="noxRaw", ge=0)
    boot: int = Field(ge=0)
    boot_count: int = Field(alias="bootCount", ge=0)
    firmware: str
    model: str

    # reported by the device but never persisted
    wifi: Optional[int] = None
    atmp: Optional[float] = None
    rhum: Optional[int] = None
    led_mode: Optional[str] = Field(None, alias="ledMode")


class AirGradientClient:
    """HTTP client for the AirGradient local API.

    Attributes:
        url: Full URL of the current-measures endpoint.
        timeout_secs: Timeout applied to every request.
    """

    PATH = "/measures/current"

    def __init__(
        self,
        base_url: str,
        *,
        timeout_secs: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = base_url.rstrip("/") + self.PATH
        self.timeout_secs = timeout_secs
        self._session = session or requests.Session()
        self.logger = logging.getLogger(f"{__name__}.AirGradientClient")

    def fetch_current(self) -> SensorReading:
        """Fetch and parse the current reading.

        Raises:
            requests.RequestException: On connection errors, timeouts and
                non-2xx responses.
            pydantic.ValidationError: If the body lacks a required field or a
                field has the wrong type.
        """
        self.logger.debug(f"Fetching {self.url} (timeout={self.timeout_secs}s)")
        r = self._session.get(self.url, timeout=self.timeout_secs)
        r.raise_for_status()
        body: Any = r.json()
        reading = SensorReading.model_validate(body)
        self.logger.debug(
            f"Parsed reading from {reading.serialno}: PM2.5={reading.pm02}, "
            f"PM10={reading.pm10} μg/m³, CO2={reading.rco2} ppm"
        )
        return reading

    def close(self) -> None:
        self._session.close()
