"""
Data writer module for flattened measure records.

Builds DataFrames and GeoDataFrames from flat records and writes them to
geospatial files.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import geopandas as gpd
import pandas as pd
from shapely.geometry import shape as to_shape

from .core import constants
from .core.date_utils import DateUtils
from .core.exceptions import FieldNameCollisionError, MixedGeometryError
from .models import FlatRecord
from .processing import FieldNameNormalizer

# Geometry families that a single shapefile layer can hold
_GEOMETRY_FAMILIES = {
    "Point": "Point",
    "MultiPoint": "Point",
    "Polygon": "Polygon",
    "MultiPolygon": "Polygon",
}

# Columns the writer fills itself
_RESERVED_COLUMNS = {
    constants.LONGITUDE_COLUMN,
    constants.LATITUDE_COLUMN,
    constants.DATE_COLUMN,
    constants.GEOMETRY_COLUMN,
}


class RecordWriter:
    """Convert flat records to tables and write them to files."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize record writer.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.normalizer = FieldNameNormalizer(logger)

    def to_dataframe(self, records: Sequence[FlatRecord]) -> pd.DataFrame:
        """
        Build an in-memory table from records.

        Columns are ``longitude`` and ``latitude`` (when records carry a
        centroid), ``date`` (when records are dated) and one column per
        measure. Units are kept in ``DataFrame.attrs["units"]``.

        Args:
            records: Flat records

        Returns:
            DataFrame with one row per record

        Raises:
            FieldNameCollisionError: If a measure is named like a location, date or geometry column
        """
        measure_names: List[str] = []
        units: Dict[str, Optional[str]] = {}
        for record in records:
            for name in record.values:
                if name not in units:
                    measure_names.append(name)
                    units[name] = record.units.get(name)
                elif units[name] is None:
                    units[name] = record.units.get(name)

        has_centroid = any(record.location.centroid is not None for record in records)
        has_date = any(record.date is not None for record in records)

        for name in measure_names:
            if name in _RESERVED_COLUMNS:
                raise FieldNameCollisionError(name, len(name), conflicts_with=f"the {name} column")

        rows = []
        for record in records:
            row: Dict[str, object] = {}
            if has_centroid:
                centroid = record.location.centroid
                row[constants.LONGITUDE_COLUMN] = centroid[0] if centroid else None
                row[constants.LATITUDE_COLUMN] = centroid[1] if centroid else None
            if has_date:
                row[constants.DATE_COLUMN] = record.date
            for name in measure_names:
                row[name] = record.values.get(name)
            rows.append(row)

        columns = []
        if has_centroid:
            columns += [constants.LONGITUDE_COLUMN, constants.LATITUDE_COLUMN]
        if has_date:
            columns.append(constants.DATE_COLUMN)
        columns += measure_names

        df = pd.DataFrame(rows, columns=columns)
        df.attrs["units"] = units
        return df

    def to_geodataframe(
        self,
        records: Sequence[FlatRecord],
        crs: str = constants.DEFAULT_CRS,
        prefer: str = "shape"
    ) -> gpd.GeoDataFrame:
        """
        Build a GeoDataFrame from records.

        Geometry comes from the record's attached geometry, else from its
        location (shape or centroid according to ``prefer``).

        Args:
            records: Flat records
            crs: Coordinate reference system of the coordinates
            prefer: "shape" or "centroid"

        Returns:
            GeoDataFrame with a geometry column
        """
        df = self.to_dataframe(records)
        geometries = [
            to_shape(record.geometry) if record.geometry is not None
            else record.location.to_geometry(prefer)
            for record in records
        ]
        gdf = gpd.GeoDataFrame(df, geometry=geometries, crs=crs)
        gdf.attrs["units"] = df.attrs["units"]
        return gdf

    def write(
        self,
        records: Sequence[FlatRecord],
        path: Union[str, Path],
        driver: str = constants.DEFAULT_OUTPUT_DRIVER,
        max_field_length: Optional[int] = None,
        crs: str = constants.DEFAULT_CRS,
        prefer: str = "shape"
    ) -> Dict[str, str]:
        """
        Write records to a geospatial file.

        Field names are normalized to ``max_field_length``; for the shapefile
        driver the budget defaults to 10 characters. Dates are written as ISO
        strings for shapefiles, which have no timestamp type.

        Args:
            records: Flat records
            path: Output file path
            driver: Output driver ("ESRI Shapefile", "GeoJSON", "GPKG", ...)
            max_field_length: Maximum field name length, None for no limit
            crs: Coordinate reference system of the coordinates
            prefer: "shape" or "centroid"

        Returns:
            Mapping of column name to the field name written

        Raises:
            MixedGeometryError: If a shapefile would mix points and polygons
            FieldNameCollisionError: If field names cannot be made unique
        """
        if not records:
            raise ValueError("No records to write")

        is_shapefile = driver == constants.DEFAULT_OUTPUT_DRIVER
        if max_field_length is None and is_shapefile:
            max_field_length = constants.SHAPEFILE_MAX_FIELD_LENGTH

        gdf = self.to_geodataframe(records, crs=crs, prefer=prefer)

        if is_shapefile:
            families = {_GEOMETRY_FAMILIES.get(t, t) for t in gdf.geometry.geom_type}
            if len(families) > 1:
                raise MixedGeometryError(gdf.geometry.geom_type.unique())
            if constants.DATE_COLUMN in gdf.columns:
                gdf[constants.DATE_COLUMN] = gdf[constants.DATE_COLUMN].map(DateUtils.format_date)

        columns = [c for c in gdf.columns if c != constants.GEOMETRY_COLUMN]
        if max_field_length is not None:
            field_names = self.normalizer.normalize_field_names(columns, max_length=max_field_length)
        else:
            field_names = {column: column for column in columns}
        gdf = gdf.rename(columns=field_names)

        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.logger.info(f"Writing {len(gdf)} records to {output_path} ({driver})")
        gdf.to_file(output_path, driver=driver)

        return field_names
