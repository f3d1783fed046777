"""Tests for grid aggregation."""
import random
import pytest
from phototrail.core.degrees import meters_to_lat_degrees
from phototrail.core.grid import build_photo_grid, grid_index
from phototrail.core.models import LocatedObservation


def random_observations(n, seed=7):
    rng = random.Random(seed)
    return [
        LocatedObservation(str(i), 35.6 + rng.random() * 0.2, 139.6 + rng.random() * 0.3)
        for i in range(n)
    ]


def test_grid_index():
    """Test row/col derivation floors toward negative infinity."""
    assert grid_index(0.5, 0.5, 0.0, 0.0, 1.0, 1.0) == (0, 0)
    assert grid_index(1.0, 2.5, 0.0, 0.0, 1.0, 1.0) == (1, 2)
    assert grid_index(-0.5, 0.0, 0.0, 0.0, 1.0, 1.0) == (-1, 0)


def test_three_point_scenario(sample_observations):
    """Test two nearby points and one far point."""
    stats = build_photo_grid(sample_observations, cell_size_meters=500)

    assert sum(cell.count for cell in stats.cells) == 3
    assert stats.total_cells in (2, 3)
    far_cell = next(c for c in stats.cells if any(o.id == "p3" for o in c.observations))
    assert far_cell.count == 1
    if stats.total_cells == 2:
        assert sorted(c.count for c in stats.cells) == [1, 2]
        assert stats.cells[0].count == 2


def test_counts_sum_to_input():
    """Test every observation lands in exactly one cell."""
    observations = random_observations(300)
    stats = build_photo_grid(observations, cell_size_meters=500)

    assert sum(cell.count for cell in stats.cells) == len(observations)
    ids = [o.id for cell in stats.cells for o in cell.observations]
    assert sorted(ids) == sorted(o.id for o in observations)


def test_intensity_range_and_max():
    """Test intensities stay in [0, 1] and the densest cell is 1.0."""
    stats = build_photo_grid(random_observations(200), cell_size_meters=1000)

    assert all(0.0 <= cell.intensity <= 1.0 for cell in stats.cells)
    densest = [cell for cell in stats.cells if cell.count == stats.max_count]
    assert densest
    assert all(cell.intensity == pytest.approx(1.0) for cell in densest)


def test_cells_sorted_by_count_descending():
    """Test display order."""
    stats = build_photo_grid(random_observations(200), cell_size_meters=2000)
    counts = [cell.count for cell in stats.cells]
    assert counts == sorted(counts, reverse=True)


def test_idempotent():
    """Test re-running on the same input yields identical cells."""
    observations = random_observations(100)
    first = build_photo_grid(observations)
    second = build_photo_grid(observations)

    assert [(c.id, c.count, c.intensity, c.center) for c in first.cells] == \
        [(c.id, c.count, c.intensity, c.center) for c in second.cells]


def test_cell_bounds_contain_members():
    """Test each cell's bounds contain its observations."""
    stats = build_photo_grid(random_observations(50), cell_size_meters=500)
    for cell in stats.cells:
        for o in cell.observations:
            assert cell.bounds.min_lat - 1e-9 <= o.latitude <= cell.bounds.max_lat + 1e-9
            assert cell.bounds.min_lng - 1e-9 <= o.longitude <= cell.bounds.max_lng + 1e-9


def test_single_observation():
    """Test a single observation forms one full-intensity cell."""
    stats = build_photo_grid([LocatedObservation("only", 35.0, 139.0)], cell_size_meters=500)

    cell = stats.cells[0]
    assert cell.count == 1
    assert cell.intensity == pytest.approx(1.0)
    assert cell.bounds.max_lat - cell.bounds.min_lat == pytest.approx(meters_to_lat_degrees(500))


def test_empty_input():
    """Test empty input returns an empty result."""
    stats = build_photo_grid([])
    assert stats.cells == []
    assert stats.max_count == 0
    assert stats.total_cells == 0


@pytest.mark.parametrize("size", [0, -100])
def test_invalid_cell_size(size):
    """Test non-positive cell sizes are rejected."""
    with pytest.raises(ValueError):
        build_photo_grid([LocatedObservation("x", 35.0, 139.0)], cell_size_meters=size)


def test_to_geodataframe(sample_observations):
    """Test conversion to cell rectangles."""
    stats = build_photo_grid(sample_observations)
    gdf = stats.to_geodataframe()

    assert len(gdf) == stats.total_cells
    assert gdf.crs.to_epsg() == 4326
    assert set(gdf.geometry.geom_type) == {"Polygon"}
    assert gdf["count"].sum() == 3


def test_to_geodataframe_empty():
    """Test empty grid converts to an empty frame."""
    gdf = build_photo_grid([]).to_geodataframe()
    assert len(gdf) == 0
    assert "count" in gdf.columns
