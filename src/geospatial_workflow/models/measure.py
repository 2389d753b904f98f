"""
Measure data models.

Contains DTOs for the measures returned by a geospatialMeasures query.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .location import Location


class MeasureKind(str, Enum):
    """Shape of a measure's payload."""

    SCALAR = "SCALAR"
    TIMESERIES = "TIMESERIES"


@dataclass
class Datapoint:
    """One dated value of a time series measure."""

    date: datetime
    value: Optional[float]
    unit: Optional[str] = None


@dataclass
class Measure(ABC):
    """A named quantity at one location."""

    name: str
    unit: Optional[str]
    location: Location

    @property
    @abstractmethod
    def kind(self) -> MeasureKind:
        """Payload shape of this measure."""


@dataclass
class ScalarMeasure(Measure):
    """Measure carrying a single value."""

    value: Optional[float] = None

    @property
    def kind(self) -> MeasureKind:
        return MeasureKind.SCALAR


@dataclass
class TimeSeriesMeasure(Measure):
    """Measure carrying an ordered sequence of datapoints."""

    datapoints: List[Datapoint] = field(default_factory=list)

    @property
    def kind(self) -> MeasureKind:
        return MeasureKind.TIMESERIES

    def sorted_datapoints(self) -> List[Datapoint]:
        """Datapoints in ascending date order (stable for equal dates)."""
        return sorted(self.datapoints, key=lambda point: point.date)


@dataclass
class QueryResponse:
    """
    Measures returned by one query, keyed by measure name.

    ``kinds`` records the kind of each measure; it is None for a measure that
    came back with no instances and no explicit kind tag.
    """

    measures: Dict[str, List[Measure]] = field(default_factory=dict)
    kinds: Dict[str, Optional[MeasureKind]] = field(default_factory=dict)

    @property
    def names(self) -> List[str]:
        return list(self.measures)

    def kind_of(self, name: str) -> Optional[MeasureKind]:
        return self.kinds.get(name)

    def __getitem__(self, name: str) -> List[Measure]:
        return self.measures[name]

    def __contains__(self, name: object) -> bool:
        return name in self.measures

    def __iter__(self) -> Iterator[str]:
        return iter(self.measures)

    def __len__(self) -> int:
        return len(self.measures)
