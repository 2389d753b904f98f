"""
Data models for the geospatial workflow.

Contains DTOs for locations, measures, query responses and flat records.
"""

from .location import Location
from .measure import (
    MeasureKind,
    Datapoint,
    Measure,
    ScalarMeasure,
    TimeSeriesMeasure,
    QueryResponse,
)
from .record import FlatRecord

__all__ = [
    "Location",
    "MeasureKind",
    "Datapoint",
    "Measure",
    "ScalarMeasure",
    "TimeSeriesMeasure",
    "QueryResponse",
    "FlatRecord",
]
