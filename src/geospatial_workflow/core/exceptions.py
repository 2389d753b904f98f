"""
Exception taxonomy for the geospatial workflow.

Every error carries the offending identifier (measure name, field name,
location index) both as an attribute and in its message.
"""

from typing import Any, Iterable, List, Optional


class GeospatialWorkflowError(Exception):
    """Base class for all workflow errors."""


class UnknownMeasureError(GeospatialWorkflowError):
    """A requested measure is not present in the query response."""

    def __init__(self, measure_name: str, available: Optional[Iterable[str]] = None):
        self.measure_name = measure_name
        self.available = list(available or [])
        message = f"Unknown measure: {measure_name!r}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class KindMismatchError(GeospatialWorkflowError):
    """A measure is not of the kind required by the operation."""

    def __init__(self, measure_name: str, expected: Any, actual: Any):
        self.measure_name = measure_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Measure {measure_name!r} is {_kind_label(actual)}, expected {_kind_label(expected)}"
        )


class MisalignedGridError(GeospatialWorkflowError):
    """Measures declared co-registered do not share the same locations."""

    def __init__(self, measure_names: Iterable[str], detail: str):
        self.measure_names = list(measure_names)
        self.detail = detail
        super().__init__(
            f"Measures {', '.join(self.measure_names)} are not co-registered: {detail}"
        )


class GeometryResolutionError(GeospatialWorkflowError):
    """A record's location has no matching geometry fragment."""

    def __init__(self, record_index: int, location_key: Any):
        self.record_index = record_index
        self.location_key = location_key
        super().__init__(
            f"No geometry for record {record_index} at location {location_key!r}"
        )


class FieldNameCollisionError(GeospatialWorkflowError):
    """Field names cannot be made unique within the length budget."""

    def __init__(self, field_name: str, max_length: int, conflicts_with: Optional[str] = None):
        self.field_name = field_name
        self.max_length = max_length
        self.conflicts_with = conflicts_with
        message = f"Cannot normalize field {field_name!r} to a unique name of at most {max_length} characters"
        if conflicts_with:
            message += f" (collides with {conflicts_with!r})"
        super().__init__(message)


class MalformedGeometryError(GeospatialWorkflowError):
    """A location geometry is not well formed."""

    def __init__(
        self,
        detail: str,
        measure_name: Optional[str] = None,
        location_index: Optional[int] = None
    ):
        self.detail = detail
        self.measure_name = measure_name
        self.location_index = location_index
        where = []
        if measure_name is not None:
            where.append(f"measure {measure_name!r}")
        if location_index is not None:
            where.append(f"location {location_index}")
        prefix = f"Malformed geometry at {', '.join(where)}: " if where else "Malformed geometry: "
        super().__init__(prefix + detail)


class InconsistentUnitError(GeospatialWorkflowError):
    """Datapoints of one time series measure use different units."""

    def __init__(self, measure_name: str, expected: str, actual: str):
        self.measure_name = measure_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Measure {measure_name!r} mixes units: {expected!r} and {actual!r}"
        )


class MixedGeometryError(GeospatialWorkflowError):
    """Records carry geometry types that cannot share one output layer."""

    def __init__(self, geometry_types: Iterable[str]):
        self.geometry_types = sorted(set(geometry_types))
        super().__init__(
            f"Cannot write mixed geometry types to one layer: {', '.join(self.geometry_types)}"
        )


class QueryExecutionError(GeospatialWorkflowError):
    """The GraphQL endpoint reported errors for a query."""

    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__(f"GraphQL query failed: {'; '.join(messages)}")


def _kind_label(kind: Any) -> str:
    return getattr(kind, "value", str(kind))
