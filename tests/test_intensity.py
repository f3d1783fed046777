"""Tests for intensity scaling and color mapping."""
import math
import pytest
from phototrail.core.intensity import (
    GRID_COLOR_STOPS,
    HSL,
    admin_area_color,
    grid_cell_color,
    log_intensity,
    to_css,
)


def test_log_intensity():
    """Test log-scale normalization."""
    assert log_intensity(10, 10) == pytest.approx(1.0)
    assert log_intensity(0, 10) == 0.0
    assert log_intensity(1, 3) == pytest.approx(math.log(2) / math.log(4))


def test_log_intensity_zero_max():
    """Test zero max count yields zero intensity."""
    assert log_intensity(0, 0) == 0.0


def test_log_intensity_is_monotonic():
    """Test higher counts never get lower intensity."""
    values = [log_intensity(c, 50) for c in range(51)]
    assert values == sorted(values)
    assert all(0.0 <= v <= 1.0 for v in values)


def test_grid_cell_color_at_stops():
    """Test colors at stop positions equal the stop colors."""
    for stop in GRID_COLOR_STOPS:
        color = grid_cell_color(stop.t)
        assert color.h == pytest.approx(stop.color.h)
        assert color.s == pytest.approx(stop.color.s)
        assert color.l == pytest.approx(stop.color.l)


def test_grid_cell_color_interpolates():
    """Test midpoint between the first two stops."""
    color = grid_cell_color(0.125)
    assert color.h == pytest.approx(195)
    assert color.s == pytest.approx(70)
    assert color.l == pytest.approx(50)


def test_grid_cell_color_ends():
    """Test lowest intensity is blue and highest is red."""
    assert grid_cell_color(0.0).h == pytest.approx(210)
    assert grid_cell_color(1.0).h == pytest.approx(0)


def test_admin_area_color():
    """Test linear administrative area ramp."""
    assert admin_area_color(0.0) == HSL(210, 70, 50)
    assert admin_area_color(1.0) == HSL(0, 85, 60)


def test_to_css():
    """Test CSS rendering rounds components."""
    assert to_css(HSL(195.4, 70, 49.6)) == "hsl(195, 70%, 50%)"
