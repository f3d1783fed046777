#!/usr/bin/env python3
"""CLI script to aggregate photo locations into grid and administrative-area GeoJSON."""
import argparse
import json
import sys
from pathlib import Path
from typing import List
import geopandas as gpd
import pandas as pd
from shapely.geometry import Point
from tqdm import tqdm
from phototrail.boundaries.loader import BoundaryLoader
from phototrail.core.admin_aggregator import admin_level_label, build_admin_boundary_stats
from phototrail.core.boundary_matcher import match_boundaries
from phototrail.core.config import ADMIN_LEVELS, GRID_CELL_SIZE_METERS, LOG_LEVEL
from phototrail.core.geocoder import MapboxReverseGeocoder, geocode_observations
from phototrail.core.grid import build_photo_grid
from phototrail.core.models import AdminBoundaryStats, LocatedObservation
from phototrail.utils.error_tracking import setup_error_tracking
from phototrail.utils.logging import setup_logging


def load_observations(
    csv_path: Path,
    id_field: str,
    lat_field: str,
    lng_field: str,
    time_field: str
) -> List[LocatedObservation]:
    """Read observations from CSV, dropping rows without coordinates."""
    df = pd.read_csv(csv_path)

    missing = [f for f in (lat_field, lng_field) if f not in df.columns]
    if missing:
        raise ValueError(f"CSV missing required fields: {', '.join(missing)}")

    df = df.dropna(subset=[lat_field, lng_field]).reset_index(drop=True)
    if time_field in df.columns:
        timestamps = pd.to_datetime(df[time_field], errors="coerce")
    else:
        timestamps = pd.Series([pd.NaT] * len(df))

    observations = []
    for i, row in df.iterrows():
        obs_id = str(row[id_field]) if id_field in df.columns else str(i)
        ts = timestamps.iloc[i]
        observations.append(LocatedObservation(
            id=obs_id,
            latitude=float(row[lat_field]),
            longitude=float(row[lng_field]),
            timestamp=None if pd.isna(ts) else ts.to_pydatetime(),
        ))
    return observations


def area_cells_to_geojson(stats: AdminBoundaryStats) -> dict:
    """Area cells as point features at their centroids (fallback when no polygons load)."""
    records = [
        {
            "name": cell.name,
            "count": cell.count,
            "intensity": cell.intensity,
            "geometry": Point(cell.center[1], cell.center[0]),
        }
        for cell in stats.cells
    ]
    if not records:
        return {"type": "FeatureCollection", "features": []}
    gdf = gpd.GeoDataFrame(records, geometry="geometry", crs="EPSG:4326")
    return json.loads(gdf.to_json())


def write_json(path: Path, data: dict):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
    print(f"✅ Wrote {path}")


def main():
    parser = argparse.ArgumentParser(description="Aggregate photo locations into GeoJSON layers")
    parser.add_argument("file", type=Path, help="CSV file with photo locations")
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--cell-size", type=float, default=GRID_CELL_SIZE_METERS,
                        help="Grid cell size in meters")
    parser.add_argument("--id-field", default="id", help="ID column (default: id)")
    parser.add_argument("--lat-field", default="latitude", help="Latitude column")
    parser.add_argument("--lng-field", default="longitude", help="Longitude column")
    parser.add_argument("--time-field", default="timestamp", help="Timestamp column")
    parser.add_argument("--geocode", action="store_true",
                        help="Reverse geocode locations and aggregate by administrative area")
    parser.add_argument("--level", default="city", choices=list(ADMIN_LEVELS),
                        help="Administrative level for --geocode")
    parser.add_argument("--match-boundaries", action="store_true",
                        help="Match administrative areas to boundary polygons")

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)
    setup_error_tracking()

    if not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    args.output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Loading {args.file}...")
    try:
        observations = load_observations(
            args.file, args.id_field, args.lat_field, args.lng_field, args.time_field
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Loaded {len(observations)} located photos")

    grid = build_photo_grid(observations, cell_size_meters=args.cell_size)
    print(f"Grid: {grid.total_cells} cells, max {grid.max_count} photos per cell")
    write_json(args.output_dir / "grid.geojson", json.loads(grid.to_geodataframe().to_json()))

    if not args.geocode:
        return

    geocoder = MapboxReverseGeocoder()
    with tqdm(total=len(observations), desc="Reverse geocoding") as pbar:
        addressed = geocode_observations(
            geocoder,
            observations,
            on_progress=lambda completed, total: pbar.update(completed - pbar.n),
        )

    stats = build_admin_boundary_stats(addressed, args.level)
    print(f"{admin_level_label(args.level)}: {stats.total_areas} areas")

    if args.match_boundaries:
        prefectures = sorted({a.address.prefecture for a in addressed if a.address.prefecture})
        features = BoundaryLoader().load_level(args.level, prefectures)
        if features:
            matched = match_boundaries(
                features, stats.counts_by_name(), args.level, stats.centers_by_name()
            )
            print(f"Matched {len(matched)} boundary polygons")
            write_json(args.output_dir / f"{args.level}_boundaries.geojson", matched.to_geojson())
            return
        print("No boundary polygons available, writing area centroids instead")

    write_json(args.output_dir / f"{args.level}_areas.geojson", area_cells_to_geojson(stats))


if __name__ == "__main__":
    main()
