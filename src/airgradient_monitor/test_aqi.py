import math

import pytest

from airgradient_monitor.aqi import PM02, PM10, compute_aqi, compute_one_aqi
from airgradient_monitor.utils.mocks import make_reading


def test_zero_concentration():
    assert compute_one_aqi(0.0, PM02) == 0
    assert compute_one_aqi(0.0, PM10) == 0


def test_breakpoints_map_to_aqi_breakpoints():
    assert compute_one_aqi(9.0, PM02) == 50
    assert compute_one_aqi(35.4, PM02) == 100
    assert compute_one_aqi(54.0, PM10) == 50
    assert compute_one_aqi(154.0, PM10) == 100
    assert compute_one_aqi(354.0, PM10) == 200


def test_interpolation_truncates():
    # 50 + 50 / 26.4 * 3 = 55.68
    assert compute_one_aqi(12.0, PM02) == 55
    # 50 / 54 * 20 = 18.5
    assert compute_one_aqi(20.0, PM10) == 18


def test_top_bracket():
    # 300 + 200 / 180 * 179 = 498.9
    assert compute_one_aqi(603.0, PM10) == 498
    assert compute_one_aqi(1000.0, PM10) == 500
    assert compute_one_aqi(10_000.0, PM02) == 500


def test_monotonic_in_top_bracket():
    values = [compute_one_aqi(225.4 + k * 0.1, PM02) for k in range(1500)]
    assert values == sorted(values)
    assert all(0 <= v <= 500 for v in values)


def test_monotonic_over_whole_range():
    values = [compute_one_aqi(float(c), PM10) for c in range(0, 700)]
    assert values == sorted(values)


@pytest.mark.parametrize("datum", [-1.0, -0.001, math.nan])
def test_rejects_negative_and_nan(datum):
    with pytest.raises(ValueError):
        compute_one_aqi(datum, PM02)


def test_compute_aqi_takes_maximum():
    # PM2.5 maps to 50, PM10 to 100
    reading = make_reading(pm02=9, pm10=154)
    assert compute_aqi(reading) == 100

    # PM2.5 maps to 100, PM10 to 50
    reading = make_reading(pm02=35, pm10=54)
    assert compute_aqi(reading) == 99


def test_compute_aqi_sample_reading(reading):
    assert compute_aqi(reading) == 55


def test_nox_does_not_affect_index():
    low = make_reading(noxRaw=0, noxIndex=0)
    high = make_reading(noxRaw=60000, noxIndex=500)
    assert compute_aqi(low) == compute_aqi(high)
