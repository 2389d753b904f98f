"""
Core utilities for the geospatial workflow.

Provides configuration management, logging, date handling and the error taxonomy.
"""

from .config import Config
from .logger import setup_logger, LoggerContext
from . import constants
from .date_utils import DateUtils
from .exceptions import (
    GeospatialWorkflowError,
    UnknownMeasureError,
    KindMismatchError,
    MisalignedGridError,
    GeometryResolutionError,
    FieldNameCollisionError,
    MalformedGeometryError,
    InconsistentUnitError,
    MixedGeometryError,
    QueryExecutionError,
)

__all__ = [
    "Config",
    "setup_logger",
    "LoggerContext",
    "constants",
    "DateUtils",
    "GeospatialWorkflowError",
    "UnknownMeasureError",
    "KindMismatchError",
    "MisalignedGridError",
    "GeometryResolutionError",
    "FieldNameCollisionError",
    "MalformedGeometryError",
    "InconsistentUnitError",
    "MixedGeometryError",
    "QueryExecutionError",
]
