import copy
import json
from typing import Any, Dict, List, Optional

from airgradient_monitor.sensing.airgradient import SensorReading

# Body returned by an AirGradient ONE on /measures/current
AIRGRADIENT_JSON = """
{
    "wifi": -52,
    "serialno": "744dbdbfe4c8",
    "rco2": 612,
    "pm01": 3,
    "pm02": 12,
    "pm10": 20,
    "pm003Count": 540,
    "atmp": 23.4,
    "rhum": 41,
    "atmpCompensated": 22.1,
    "rhumCompensated": 45,
    "tvocIndex": 100,
    "tvocRaw": 31850,
    "noxIndex": 1,
    "noxRaw": 17210,
    "boot": 12,
    "bootCount": 12,
    "ledMode": "pm",
    "firmware": "3.1.3",
    "model": "I-9PSL"
}
"""

AIRGRADIENT_PAYLOAD: Dict[str, Any] = json.loads(AIRGRADIENT_JSON)


def make_payload(**overrides: Any) -> Dict[str, Any]:
    """Copy of the sample payload with keys replaced or, when set to None, removed."""
    payload = copy.deepcopy(AIRGRADIENT_PAYLOAD)
    for key, value in overrides.items():
        if value is None:
            payload.pop(key, None)
        else:
            payload[key] = value
    return payload


def make_reading(**overrides: Any) -> SensorReading:
    return SensorReading.model_validate(make_payload(**overrides))


class FakeSource:
    """Reading source that replays a script of readings and exceptions."""

    def __init__(self, script: Optional[List[Any]] = None):
        self.script = list(script) if script is not None else [make_reading()]
        self.calls = 0

    def fetch_current(self) -> SensorReading:
        item = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


class FakeWriter:
    """Point writer that records writes and disconnects."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.fail_with = fail_with
        self.written: List[tuple] = []
        self.disconnects = 0

    def write_point(self, reading: SensorReading, aqi: int) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.written.append((reading, aqi))

    def disconnect(self) -> None:
        self.disconnects += 1
