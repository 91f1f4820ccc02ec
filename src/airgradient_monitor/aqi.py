"""
US EPA Air Quality Index computed from particulate readings.

Algorithm from https://en.wikipedia.org/wiki/Air_quality_index#United_States:
each pollutant is interpolated linearly inside its breakpoint bracket and the
overall index is the worst (highest) sub-index.
"""

import math
from typing import Protocol, Sequence

AQI_BREAKPOINTS = (0.0, 50.0, 100.0, 150.0, 200.0, 300.0, 500.0)

# concentration breakpoints in µg/m³
PM02 = (0.0, 9.0, 35.4, 55.4, 125.4, 225.4, 325.4)
PM10 = (0.0, 54.0, 154.0, 254.0, 354.0, 424.0, 604.0)

# noxRaw is not reported in ppb, so NOx is left out of the index.
# NOX = (0.0, 53.0, 100.0, 360.0, 649.0, 1249.0, 2049.0)

MAX_AQI = 500


class ParticulateReading(Protocol):
    pm02: int
    pm10: int


def compute_one_aqi(datum: float, vector: Sequence[float]) -> int:
    """Interpolate a single pollutant concentration onto the AQI scale.

    Args:
        datum: Concentration in the units of ``vector``.
        vector: Seven ascending concentration breakpoints, starting at 0.0.

    Returns:
        The sub-index, truncated toward zero and capped at 500.

    Raises:
        ValueError: If ``datum`` is negative or NaN.
    """
    if math.isnan(datum) or datum < 0:
        raise ValueError(f"Concentration must be a non-negative number, got {datum!r}")

    i = 1
    while i < 6 and datum >= vector[i]:
        i += 1

    aqi = (
        (AQI_BREAKPOINTS[i] - AQI_BREAKPOINTS[i - 1]) / (vector[i] - vector[i - 1])
    ) * (datum - vector[i - 1]) + AQI_BREAKPOINTS[i - 1]
    return min(int(aqi), MAX_AQI)


def compute_aqi(reading: ParticulateReading) -> int:
    """Overall index: the maximum of the PM2.5 and PM10 sub-indices."""
    return max(
        compute_one_aqi(float(reading.pm02), PM02),
        compute_one_aqi(float(reading.pm10), PM10),
    )
