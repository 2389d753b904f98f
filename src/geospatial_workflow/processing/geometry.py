"""
Geometry validation and resolution.

Turns the API's location fragments into validated Location objects and
attaches externally resolved geometry to flat records.
"""

import logging
import math
from dataclasses import replace
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Union

from ..core import constants
from ..core.exceptions import GeometryResolutionError, MalformedGeometryError
from ..models import FlatRecord, Location

GeometrySource = Union[Mapping[Hashable, Any], Iterable[Mapping[str, Any]]]


class GeometryResolver:
    """Validate location fragments and attach geometry to records."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize geometry resolver.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def parse_location(
        self,
        fragment: Any,
        measure_name: Optional[str] = None,
        location_index: Optional[int] = None
    ) -> Location:
        """
        Build a Location from an API location fragment.

        The fragment holds a ``centroid`` (coordinate pair or GeoJSON Point)
        and/or a ``shape`` (GeoJSON Polygon/MultiPolygon or a bare ring).

        Raises:
            MalformedGeometryError: If no geometry is present or it is not well formed
        """
        def fail(detail: str) -> MalformedGeometryError:
            return MalformedGeometryError(detail, measure_name=measure_name, location_index=location_index)

        if not isinstance(fragment, Mapping):
            raise fail(f"location must be an object, got {type(fragment).__name__}")

        centroid_raw = fragment.get(constants.CENTROID_KEY)
        shape_raw = fragment.get(constants.SHAPE_KEY)
        if centroid_raw is None and shape_raw is None:
            raise fail("location has neither centroid nor shape")

        try:
            centroid = self._parse_centroid(centroid_raw) if centroid_raw is not None else None
            shape = self._parse_shape(shape_raw) if shape_raw is not None else None
        except ValueError as e:
            raise fail(str(e)) from e

        return Location(centroid=centroid, shape=shape)

    def _parse_centroid(self, raw: Any) -> tuple:
        if isinstance(raw, Mapping):
            if raw.get("type") != "Point":
                raise ValueError(f"centroid must be a Point, got {raw.get('type')!r}")
            raw = raw.get("coordinates")
        return self._parse_position(raw, "centroid")

    def _parse_shape(self, raw: Any) -> Dict[str, Any]:
        if isinstance(raw, Mapping):
            geometry_type = raw.get("type")
            coordinates = raw.get("coordinates")
            if geometry_type == "Polygon":
                return {"type": "Polygon", "coordinates": self._parse_polygon(coordinates)}
            if geometry_type == "MultiPolygon":
                if not isinstance(coordinates, Sequence) or not coordinates:
                    raise ValueError("MultiPolygon needs at least one polygon")
                return {
                    "type": "MultiPolygon",
                    "coordinates": [self._parse_polygon(polygon) for polygon in coordinates],
                }
            raise ValueError(f"shape must be a Polygon or MultiPolygon, got {geometry_type!r}")

        # Bare ring: [[x, y], [x, y], ...]
        return {"type": "Polygon", "coordinates": self._parse_polygon([raw])}

    def _parse_polygon(self, rings: Any) -> List[List[tuple]]:
        if not isinstance(rings, Sequence) or isinstance(rings, str) or not rings:
            raise ValueError("polygon needs at least one ring")
        return [self._parse_ring(ring) for ring in rings]

    def _parse_ring(self, ring: Any) -> List[tuple]:
        if not isinstance(ring, Sequence) or isinstance(ring, str):
            raise ValueError("ring must be a list of coordinate pairs")
        positions = [self._parse_position(position, "ring position") for position in ring]
        if len(positions) < 4:
            raise ValueError(f"ring needs at least 4 positions, got {len(positions)}")
        if positions[0] != positions[-1]:
            raise ValueError("ring is not closed")
        return positions

    @staticmethod
    def _parse_position(raw: Any, label: str) -> tuple:
        if not isinstance(raw, Sequence) or isinstance(raw, str) or len(raw) != 2:
            raise ValueError(f"{label} must be a coordinate pair, got {raw!r}")
        for number in raw:
            if isinstance(number, bool) or not isinstance(number, (int, float)) or not math.isfinite(number):
                raise ValueError(f"{label} must be numeric, got {raw!r}")
        return (float(raw[0]), float(raw[1]))

    def resolve_fragment(self, fragment: Any) -> Dict[str, Any]:
        """
        Normalise a geometry fragment into a GeoJSON geometry mapping.

        Accepts a GeoJSON Point/Polygon/MultiPolygon or an API location
        fragment; for the latter the shape wins over the centroid.
        """
        if isinstance(fragment, Mapping) and "type" in fragment:
            try:
                if fragment["type"] == "Point":
                    return {"type": "Point", "coordinates": self._parse_centroid(fragment)}
                return self._parse_shape(fragment)
            except ValueError as e:
                raise MalformedGeometryError(str(e)) from e

        location = self.parse_location(fragment)
        if location.shape is not None:
            return location.shape
        return {"type": "Point", "coordinates": location.centroid}

    def attach_geometry(
        self,
        records: Sequence[FlatRecord],
        geometry_source: GeometrySource
    ) -> List[FlatRecord]:
        """
        Attach resolved geometry to each record by location key.

        Args:
            records: Flat records to enrich
            geometry_source: Mapping of location key to geometry fragment, or an
                iterable of API location fragments keyed by their own location key

        Returns:
            New records with ``geometry`` set

        Raises:
            GeometryResolutionError: If a record's location has no geometry
            MalformedGeometryError: If a fragment is not well formed
        """
        index = self._index_source(geometry_source)
        self.logger.debug(f"Attaching geometry from {len(index)} fragments to {len(records)} records")

        attached = []
        for position, record in enumerate(records):
            key = record.location.key
            if key not in index:
                raise GeometryResolutionError(position, key)
            attached.append(replace(record, geometry=index[key]))

        return attached

    def _index_source(self, geometry_source: GeometrySource) -> Dict[Hashable, Dict[str, Any]]:
        if isinstance(geometry_source, Mapping):
            return {
                key: self.resolve_fragment(fragment)
                for key, fragment in geometry_source.items()
            }

        index: Dict[Hashable, Dict[str, Any]] = {}
        for position, fragment in enumerate(geometry_source):
            location = self.parse_location(fragment, location_index=position)
            if location.shape is not None:
                index[location.key] = location.shape
            else:
                index[location.key] = {"type": "Point", "coordinates": location.centroid}
        return index
