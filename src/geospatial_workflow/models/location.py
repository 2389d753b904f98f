"""
Location data models.

A location is the centroid of a grid cell, its shape, or both, as returned by
the API's location sub-selection.
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional, Tuple

from shapely.geometry import Point, shape as to_shape
from shapely.geometry.base import BaseGeometry

Coordinate = Tuple[float, float]


@dataclass
class Location:
    """Location of one measure instance."""

    centroid: Optional[Coordinate] = None
    shape: Optional[Dict[str, Any]] = None  # GeoJSON Polygon or MultiPolygon

    @property
    def key(self) -> Hashable:
        """
        Hashable identity used to join records.

        The centroid when present, otherwise the exterior ring of the shape.
        """
        if self.centroid is not None:
            return self.centroid
        if self.shape is None:
            return None
        coordinates = self.shape["coordinates"]
        ring = coordinates[0][0] if self.shape["type"] == "MultiPolygon" else coordinates[0]
        return tuple(tuple(position) for position in ring)

    def to_geometry(self, prefer: str = "shape") -> BaseGeometry:
        """
        Build a shapely geometry for this location.

        Args:
            prefer: "shape" to use the polygon when present, "centroid" to use the point

        Returns:
            Shapely geometry
        """
        if prefer not in ("shape", "centroid"):
            raise ValueError(f"Unknown geometry preference: {prefer}")

        if self.shape is not None and (prefer == "shape" or self.centroid is None):
            return to_shape(self.shape)
        return Point(self.centroid)
