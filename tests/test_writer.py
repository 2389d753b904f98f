"""
Tests for the record writer.

Tests table layout, geometry selection and file output.
"""

import geopandas as gpd
import pytest

from src.geospatial_workflow.processing import ResponseFlattener
from src.geospatial_workflow.writer import RecordWriter
from src.geospatial_workflow.core.exceptions import FieldNameCollisionError, MixedGeometryError
from src.geospatial_workflow.models import FlatRecord, Location


@pytest.fixture
def flattener():
    return ResponseFlattener()


@pytest.fixture
def writer():
    return RecordWriter()


@pytest.fixture
def soil_records(flattener, scalar_document):
    response = flattener.parse(scalar_document)
    groups = flattener.flatten_scalar_measures(response, ["soilPH", "soilTotalAbundanceOfInvertebrates"])
    return flattener.merge_by_location(groups)


@pytest.fixture
def temperature_records(flattener, time_series_document):
    response = flattener.parse(time_series_document)
    return flattener.flatten_time_series_measures(response, ["temperatureMean", "temperatureMin"])


class TestDataFrames:
    """Test cases for in-memory tables."""

    def test_scalar_columns(self, writer, soil_records):
        df = writer.to_dataframe(soil_records)

        assert list(df.columns) == ["longitude", "latitude", "soilPH", "soilTotalAbundanceOfInvertebrates"]
        assert len(df) == 2
        assert df.loc[0, "soilPH"] == 6.1
        assert df.loc[0, "soilTotalAbundanceOfInvertebrates"] == 120
        assert df["soilTotalAbundanceOfInvertebrates"].isna().iloc[1]
        assert df.attrs["units"] == {"soilPH": "pH", "soilTotalAbundanceOfInvertebrates": "count"}

    def test_time_series_columns(self, writer, temperature_records):
        df = writer.to_dataframe(temperature_records)

        assert list(df.columns) == ["longitude", "latitude", "date", "temperatureMean", "temperatureMin"]
        assert len(df) == 6

    def test_measure_named_like_fixed_column(self, writer):
        records = [FlatRecord(
            location=Location(centroid=(1.0, 2.0)),
            values={"latitude": 51.8, "soilPH": 6.1},
            units={"latitude": "degrees", "soilPH": "pH"},
        )]

        with pytest.raises(FieldNameCollisionError) as excinfo:
            writer.to_dataframe(records)
        assert excinfo.value.field_name == "latitude"

    def test_geodataframe_prefers_shape(self, writer, soil_records):
        gdf = writer.to_geodataframe(soil_records)

        assert gdf.crs.to_epsg() == 4326
        assert list(gdf.geometry.geom_type) == ["Polygon", "Polygon"]

    def test_geodataframe_centroids(self, writer, soil_records):
        gdf = writer.to_geodataframe(soil_records, prefer="centroid")

        assert list(gdf.geometry.geom_type) == ["Point", "Point"]
        assert gdf.geometry.iloc[0].x == pytest.approx(-0.38)

    def test_attached_geometry_wins(self, writer, flattener, soil_records):
        source = {record.location.key: {"type": "Point", "coordinates": [0.0, 0.0]} for record in soil_records}
        attached = flattener.attach_geometry(soil_records, source)

        gdf = writer.to_geodataframe(attached)

        assert list(gdf.geometry.geom_type) == ["Point", "Point"]


class TestFileOutput:
    """Test cases for writing files."""

    def test_write_shapefile_normalizes_fields(self, writer, soil_records, tmp_path):
        path = tmp_path / "soil" / "soil.shp"

        field_names = writer.write(soil_records, path)

        assert field_names["soilTotalAbundanceOfInvertebrates"] == "soilTotalA"
        written = gpd.read_file(path)
        assert "soilTotalA" in written.columns
        assert written.loc[0, "soilPH"] == pytest.approx(6.1)
        assert len(written) == 2

    def test_write_shapefile_with_dates(self, writer, temperature_records, tmp_path):
        path = tmp_path / "temperature.shp"

        field_names = writer.write(temperature_records, path, prefer="centroid")

        assert field_names["temperatureMean"] == "temperatur"
        assert field_names["temperatureMin"] == "temperatu1"
        written = gpd.read_file(path)
        assert len(written) == 6
        assert str(written.loc[0, "date"])[:10] == "2021-01-01"

    def test_write_geojson_keeps_names(self, writer, soil_records, tmp_path):
        path = tmp_path / "soil.geojson"

        field_names = writer.write(soil_records, path, driver="GeoJSON")

        assert field_names["soilTotalAbundanceOfInvertebrates"] == "soilTotalAbundanceOfInvertebrates"
        written = gpd.read_file(path)
        assert "soilTotalAbundanceOfInvertebrates" in written.columns

    def test_mixed_geometry_rejected_for_shapefile(self, writer, flattener, tmp_path):
        response = flattener.parse({"soilPH": [
            {"unit": "pH", "value": 6.1, "location": {"centroid": [0.5, 0.5]}},
            {"unit": "pH", "value": 5.9, "location": {
                "centroid": [1.5, 0.5], "shape": [[1, 0], [2, 0], [2, 1], [1, 1], [1, 0]]
            }},
        ]})
        records = flattener.flatten_scalar_measures(response, ["soilPH"])["soilPH"]

        with pytest.raises(MixedGeometryError):
            writer.write(records, tmp_path / "mixed.shp")

    def test_empty_records_rejected(self, writer, tmp_path):
        with pytest.raises(ValueError):
            writer.write([], tmp_path / "empty.shp")
