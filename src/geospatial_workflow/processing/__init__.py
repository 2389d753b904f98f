"""
Data processing module for the geospatial workflow.

Provides response parsing, flattening, geometry resolution and field name
normalization.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core import constants
from ..models import FlatRecord, QueryResponse
from .field_names import FieldNameNormalizer, normalize_field_names
from .flattener import MeasureFlattener
from .geometry import GeometryResolver, GeometrySource
from .parser import ResponseParser


class ResponseFlattener:
    """
    Unified flattener combining parsing, flattening and geometry resolution.

    This class provides a convenient interface to all processing operations.
    All operations are pure: inputs are never modified.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize response flattener.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.geometry = GeometryResolver(logger)
        self.parser = ResponseParser(self.geometry, logger)
        self.flattener = MeasureFlattener(logger)
        self.normalizer = FieldNameNormalizer(logger)

    def parse(self, document: Mapping[str, Any]) -> QueryResponse:
        """
        Parse a decoded JSON response into a QueryResponse.

        Args:
            document: Decoded JSON response

        Returns:
            Parsed query response
        """
        return self.parser.parse(document)

    def flatten_scalar_measures(
        self,
        response: QueryResponse,
        measure_names: Iterable[str]
    ) -> Dict[str, List[FlatRecord]]:
        """
        Flatten scalar measures, one record sequence per measure.

        Args:
            response: Parsed query response
            measure_names: Names of the scalar measures to include

        Returns:
            Mapping of measure name to its records
        """
        return self.flattener.flatten_scalar_measures(response, measure_names)

    def merge_by_location(
        self,
        groups: Mapping[str, Sequence[FlatRecord]],
        co_registered: bool = False
    ) -> List[FlatRecord]:
        """
        Outer-join per-measure records on their location.

        Args:
            groups: Mapping of measure name to single-measure records
            co_registered: Require identical location sequences

        Returns:
            One record per distinct location
        """
        return self.flattener.merge_by_location(groups, co_registered)

    def flatten_time_series_measures(
        self,
        response: QueryResponse,
        measure_names: Sequence[str],
        co_registered: bool = True
    ) -> List[FlatRecord]:
        """
        Unnest time series measures into one record per (location, date).

        Args:
            response: Parsed query response
            measure_names: Ordered names of the time series measures
            co_registered: Require all measures to share one grid

        Returns:
            Flat records ordered by location then date
        """
        return self.flattener.flatten_time_series_measures(response, measure_names, co_registered)

    def attach_geometry(
        self,
        records: Sequence[FlatRecord],
        geometry_source: GeometrySource
    ) -> List[FlatRecord]:
        """
        Attach resolved geometry to each record by location.

        Args:
            records: Flat records to enrich
            geometry_source: Location key mapping or iterable of location fragments

        Returns:
            New records with geometry set
        """
        return self.geometry.attach_geometry(records, geometry_source)

    def regroup_by_location(
        self,
        records: Iterable[FlatRecord]
    ) -> Dict[Hashable, Dict[str, List[Tuple[Optional[datetime], Optional[float], Optional[str]]]]]:
        """
        Group record values back by location and measure.

        Args:
            records: Flat records

        Returns:
            Mapping of location key to measure name to (date, value, unit) entries
        """
        return self.flattener.regroup_by_location(records)

    def normalize_field_names(
        self,
        names: Iterable[str],
        max_length: int = constants.SHAPEFILE_MAX_FIELD_LENGTH,
        allow_suffix: bool = True
    ) -> Dict[str, str]:
        """
        Map names to unique names within a length budget.

        Args:
            names: Original field names
            max_length: Maximum length of a normalized name
            allow_suffix: Resolve clashes with numeric suffixes

        Returns:
            Mapping of original name to normalized name
        """
        return self.normalizer.normalize_field_names(names, max_length, allow_suffix)


__all__ = [
    "ResponseParser",
    "MeasureFlattener",
    "GeometryResolver",
    "FieldNameNormalizer",
    "ResponseFlattener",
    "normalize_field_names",
]
