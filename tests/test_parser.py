"""
Tests for response parsing.

Tests the kind discriminant, datapoint parsing and error reporting.
"""

from datetime import datetime

import pytest
import pytz

from src.geospatial_workflow.processing import ResponseParser
from src.geospatial_workflow.models import Location, Measure, MeasureKind, ScalarMeasure, TimeSeriesMeasure
from src.geospatial_workflow.core.exceptions import (
    InconsistentUnitError,
    KindMismatchError,
    MalformedGeometryError,
    QueryExecutionError,
)


class TestResponseParser:
    """Test cases for ResponseParser."""

    @pytest.fixture
    def parser(self):
        return ResponseParser()

    def test_parse_scalar_document(self, parser, scalar_document):
        response = parser.parse(scalar_document)

        assert response.names == ["soilPH", "soilTotalAbundanceOfInvertebrates"]
        assert response.kind_of("soilPH") == MeasureKind.SCALAR
        measure = response["soilPH"][0]
        assert isinstance(measure, ScalarMeasure)
        assert measure.value == 6.1
        assert measure.unit == "pH"
        assert measure.location.centroid == (-0.38, 51.81)
        assert measure.location.shape["type"] == "Polygon"

    def test_parse_time_series_document(self, parser, time_series_document):
        response = parser.parse(time_series_document)

        assert response.kind_of("temperatureMean") == MeasureKind.TIMESERIES
        measure = response["temperatureMean"][0]
        assert isinstance(measure, TimeSeriesMeasure)
        assert len(measure.datapoints) == 3
        assert measure.datapoints[0].date == pytz.UTC.localize(datetime(2021, 1, 1))
        assert measure.datapoints[0].value == 4.2

    def test_accepts_bare_measures_mapping(self, parser):
        response = parser.parse({"soilPH": [{"unit": "pH", "value": 6.1, "location": {"centroid": [0, 0]}}]})
        assert response["soilPH"][0].value == 6.1

    def test_null_value_is_scalar(self, parser):
        response = parser.parse({"soilPH": [{"unit": "pH", "value": None, "location": {"centroid": [0, 0]}}]})
        assert response.kind_of("soilPH") == MeasureKind.SCALAR
        assert response["soilPH"][0].value is None

    def test_explicit_kind_tag(self, parser):
        response = parser.parse({
            "rainfall": [{"kind": "timeseries", "unit": "mm", "location": {"centroid": [0, 0]}}]
        })
        assert response.kind_of("rainfall") == MeasureKind.TIMESERIES
        assert response["rainfall"][0].datapoints == []

    def test_empty_measure_has_no_kind(self, parser):
        response = parser.parse({"soilPH": None})
        assert response["soilPH"] == []
        assert response.kind_of("soilPH") is None

    def test_value_and_datapoints_rejected(self, parser):
        with pytest.raises(KindMismatchError):
            parser.parse({"soilPH": [{"value": 1.0, "datapoints": [], "location": {"centroid": [0, 0]}}]})

    def test_neither_value_nor_datapoints_rejected(self, parser):
        with pytest.raises(KindMismatchError):
            parser.parse({"soilPH": [{"unit": "pH", "location": {"centroid": [0, 0]}}]})

    def test_mixed_kinds_rejected(self, parser):
        with pytest.raises(KindMismatchError) as excinfo:
            parser.parse({"soilPH": [
                {"unit": "pH", "value": 6.0, "location": {"centroid": [0, 0]}},
                {"unit": "pH", "datapoints": [], "location": {"centroid": [1, 0]}},
            ]})
        assert excinfo.value.measure_name == "soilPH"

    def test_mixed_units_rejected(self, parser):
        with pytest.raises(InconsistentUnitError) as excinfo:
            parser.parse({"temperatureMean": [{
                "unit": "Celsius",
                "location": {"centroid": [0, 0]},
                "datapoints": [
                    {"date": "2021-01-01", "value": 1.0, "unit": "Celsius"},
                    {"date": "2021-01-02", "value": 274.0, "unit": "Kelvin"},
                ],
            }]})
        assert excinfo.value.actual == "Kelvin"

    def test_measure_unit_inherited_from_datapoints(self, parser):
        response = parser.parse({"rainfall": [{
            "location": {"centroid": [0, 0]},
            "datapoints": [{"date": "2021-01-01", "value": 1.0, "unit": "mm"}],
        }]})
        assert response["rainfall"][0].unit == "mm"

    def test_missing_location_rejected(self, parser):
        with pytest.raises(MalformedGeometryError) as excinfo:
            parser.parse({"soilPH": [{"unit": "pH", "value": 6.0}]})
        assert excinfo.value.measure_name == "soilPH"
        assert excinfo.value.location_index == 0

    def test_malformed_centroid_reports_location(self, parser):
        with pytest.raises(MalformedGeometryError) as excinfo:
            parser.parse({"soilPH": [
                {"unit": "pH", "value": 6.0, "location": {"centroid": [0, 0]}},
                {"unit": "pH", "value": 6.0, "location": {"centroid": [0]}},
            ]})
        assert excinfo.value.location_index == 1

    def test_graphql_errors_raised(self, parser):
        with pytest.raises(QueryExecutionError) as excinfo:
            parser.parse({"errors": [{"message": "Unknown field soilPHH"}], "data": None})
        assert excinfo.value.messages == ["Unknown field soilPHH"]

    def test_sorted_datapoints_leaves_source_order(self, parser):
        response = parser.parse({"rainfall": [{
            "unit": "mm",
            "location": {"centroid": [0, 0]},
            "datapoints": [
                {"date": "2021-01-02", "value": 2.0},
                {"date": "2021-01-01", "value": 1.0},
            ],
        }]})
        measure = response["rainfall"][0]

        assert [point.value for point in measure.sorted_datapoints()] == [1.0, 2.0]
        assert [point.value for point in measure.datapoints] == [2.0, 1.0]


class TestMeasureModels:
    """Test cases for the measure DTOs."""

    def test_measure_base_is_abstract(self):
        with pytest.raises(TypeError):
            Measure(name="soilPH", unit="pH", location=Location(centroid=(1.0, 2.0)))

    def test_kinds(self):
        location = Location(centroid=(1.0, 2.0))

        assert ScalarMeasure("soilPH", "pH", location, 6.1).kind == MeasureKind.SCALAR
        assert TimeSeriesMeasure("rainfall", "mm", location).kind == MeasureKind.TIMESERIES
