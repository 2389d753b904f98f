"""
Response parsing module.

Converts the JSON document of a geospatialMeasures query into a QueryResponse.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..core import constants
from ..core.date_utils import DateUtils
from ..core.exceptions import (
    InconsistentUnitError,
    KindMismatchError,
    MalformedGeometryError,
    QueryExecutionError,
)
from ..models import (
    Datapoint,
    Measure,
    MeasureKind,
    QueryResponse,
    ScalarMeasure,
    TimeSeriesMeasure,
)
from .geometry import GeometryResolver


class ResponseParser:
    """Parse GraphQL geospatial responses into typed measures."""

    def __init__(
        self,
        geometry: Optional[GeometryResolver] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize response parser.

        Args:
            geometry: Geometry resolver used to validate locations
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.geometry = geometry or GeometryResolver(self.logger)

    def parse(self, document: Mapping[str, Any]) -> QueryResponse:
        """
        Parse a response document.

        Accepts the full document (``{"data": {"geospatialMeasures": ...}}``),
        the ``data`` mapping, or the bare ``geospatialMeasures`` mapping.

        Args:
            document: Decoded JSON response

        Returns:
            QueryResponse keyed by measure name, in document order

        Raises:
            QueryExecutionError: If the document carries GraphQL errors
            KindMismatchError: If a measure's kind cannot be determined or is mixed
            MalformedGeometryError: If a location is not well formed
            InconsistentUnitError: If a time series mixes units
        """
        errors = document.get(constants.ERRORS_KEY)
        if errors:
            raise QueryExecutionError([error.get("message", str(error)) for error in errors])

        measures = self._unwrap(document)
        response = QueryResponse()

        for name, instances in measures.items():
            parsed, kind = self._parse_measure_list(name, instances or [])
            response.measures[name] = parsed
            response.kinds[name] = kind
            self.logger.debug(
                f"Parsed measure {name}: {len(parsed)} instances, kind={kind.value if kind else None}"
            )

        self.logger.info(f"Parsed {len(response)} measures from response")
        return response

    @staticmethod
    def _unwrap(document: Mapping[str, Any]) -> Mapping[str, Any]:
        if constants.DATA_KEY in document:
            document = document[constants.DATA_KEY] or {}
        if constants.MEASURES_KEY in document:
            document = document[constants.MEASURES_KEY] or {}
        return document

    def _parse_measure_list(
        self,
        name: str,
        instances: List[Mapping[str, Any]]
    ) -> Tuple[List[Measure], Optional[MeasureKind]]:
        parsed: List[Measure] = []
        kind: Optional[MeasureKind] = None

        for index, raw in enumerate(instances):
            instance_kind = self._discriminate(name, raw)
            if kind is None:
                kind = instance_kind
            elif instance_kind != kind:
                raise KindMismatchError(name, kind, instance_kind)
            parsed.append(self._parse_instance(name, index, raw, instance_kind))

        return parsed, kind

    @staticmethod
    def _discriminate(name: str, raw: Mapping[str, Any]) -> MeasureKind:
        """Determine the kind of one measure instance."""
        tag = raw.get(constants.KIND_KEY)
        if tag is not None:
            try:
                return MeasureKind(str(tag).upper())
            except ValueError:
                raise KindMismatchError(name, "SCALAR or TIMESERIES", tag)

        has_value = constants.VALUE_KEY in raw
        has_datapoints = raw.get(constants.DATAPOINTS_KEY) is not None
        if has_value and has_datapoints:
            raise KindMismatchError(name, "value or datapoints", "both")
        if has_datapoints:
            return MeasureKind.TIMESERIES
        if has_value:
            return MeasureKind.SCALAR
        raise KindMismatchError(name, "value or datapoints", "neither")

    def _parse_instance(
        self,
        name: str,
        index: int,
        raw: Mapping[str, Any],
        kind: MeasureKind
    ) -> Measure:
        if constants.LOCATION_KEY not in raw:
            raise MalformedGeometryError("location is missing", measure_name=name, location_index=index)
        location = self.geometry.parse_location(
            raw[constants.LOCATION_KEY], measure_name=name, location_index=index
        )
        unit = raw.get(constants.UNIT_KEY)

        if kind == MeasureKind.SCALAR:
            return ScalarMeasure(name=name, unit=unit, location=location, value=raw.get(constants.VALUE_KEY))

        datapoints = self._parse_datapoints(name, unit, raw.get(constants.DATAPOINTS_KEY) or [])
        if unit is None and datapoints:
            unit = datapoints[0].unit
        return TimeSeriesMeasure(name=name, unit=unit, location=location, datapoints=datapoints)

    @staticmethod
    def _parse_datapoints(
        name: str,
        unit: Optional[str],
        raw_points: List[Dict[str, Any]]
    ) -> List[Datapoint]:
        """Parse datapoints, enforcing one unit across the series."""
        datapoints = []
        series_unit = unit

        for raw in raw_points:
            point_unit = raw.get(constants.UNIT_KEY) or series_unit
            if series_unit is None:
                series_unit = point_unit
            elif point_unit != series_unit:
                raise InconsistentUnitError(name, series_unit, point_unit)

            datapoints.append(Datapoint(
                date=DateUtils.parse_timestamp(raw.get(constants.DATE_KEY)),
                value=raw.get(constants.VALUE_KEY),
                unit=point_unit,
            ))

        return datapoints
