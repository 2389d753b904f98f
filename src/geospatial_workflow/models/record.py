"""
Flat record data model.

A FlatRecord is one output row: a location, an optional date and one value
per measure. A measure with no observation for the row is None and listed
in ``missing``; a None outside ``missing`` is a null the API reported.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from .location import Location


@dataclass
class FlatRecord:
    """One row of flattened measure values."""

    location: Location
    values: Dict[str, Optional[float]] = field(default_factory=dict)
    units: Dict[str, Optional[str]] = field(default_factory=dict)
    date: Optional[datetime] = None
    geometry: Optional[Dict[str, Any]] = None
    missing: Set[str] = field(default_factory=set)

    @property
    def measure_names(self) -> List[str]:
        return list(self.values)

    @property
    def value(self) -> Optional[float]:
        """Value of a single-measure record."""
        return self.values[self._single_measure()]

    @property
    def unit(self) -> Optional[str]:
        """Unit of a single-measure record."""
        return self.units.get(self._single_measure())

    def _single_measure(self) -> str:
        if len(self.values) != 1:
            raise ValueError(
                f"Record holds {len(self.values)} measures; use values[...] instead"
            )
        return next(iter(self.values))

    def to_dict(self) -> Dict[str, Any]:
        """Plain row: location key, date (when set) and one entry per measure."""
        row: Dict[str, Any] = {"location": self.location.key}
        if self.date is not None:
            row["date"] = self.date
        row.update(self.values)
        return row
