"""
Measure flattening module.

Reshapes parsed measures into flat records: one record per scalar measure
instance, or one record per (location, date) for time series.
"""

import logging
from datetime import datetime
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.exceptions import KindMismatchError, MisalignedGridError, UnknownMeasureError
from ..models import FlatRecord, Location, MeasureKind, QueryResponse


class MeasureFlattener:
    """Flatten scalar and time series measures into records."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize measure flattener.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def flatten_scalar_measures(
        self,
        response: QueryResponse,
        measure_names: Iterable[str]
    ) -> Dict[str, List[FlatRecord]]:
        """
        Flatten scalar measures, one record sequence per measure.

        Each ScalarMeasure instance becomes exactly one record carrying its
        location, unit and value, in input order. Measures are never aligned
        positionally; use merge_by_location to combine them.

        Args:
            response: Parsed query response
            measure_names: Names of the scalar measures to include

        Returns:
            Mapping of measure name to its records, in response order

        Raises:
            UnknownMeasureError: If a name is not in the response
            KindMismatchError: If a named measure is a time series
        """
        names = self._check_measures(response, measure_names, MeasureKind.SCALAR)

        flattened: Dict[str, List[FlatRecord]] = {}
        for name in names:
            flattened[name] = [
                FlatRecord(
                    location=measure.location,
                    values={name: measure.value},
                    units={name: measure.unit},
                )
                for measure in response[name]
            ]
            self.logger.debug(f"Flattened {len(flattened[name])} records for {name}")

        return flattened

    def merge_by_location(
        self,
        groups: Mapping[str, Sequence[FlatRecord]],
        co_registered: bool = False
    ) -> List[FlatRecord]:
        """
        Outer-join per-measure records on their location key.

        Records are ordered by first encounter of their location. A measure
        absent at a location is None in that record and listed in its
        ``missing`` set.

        Args:
            groups: Mapping of measure name to single-measure records
            co_registered: Require every group to cover the same locations in the same order

        Returns:
            One record per distinct location

        Raises:
            MisalignedGridError: If co_registered is set and the groups differ
        """
        names = list(groups)
        if co_registered:
            self._check_alignment(
                names, [[record.location.key for record in groups[name]] for name in names]
            )

        locations: Dict[Hashable, Location] = {}
        values: Dict[Hashable, Dict[str, Optional[float]]] = {}
        units: Dict[str, Optional[str]] = {}

        for name in names:
            seen = set()
            for record in groups[name]:
                key = record.location.key
                locations.setdefault(key, record.location)
                values.setdefault(key, {})
                if name in record.missing or name not in record.values:
                    continue
                if key in seen:
                    self.logger.warning(
                        f"Duplicate location {key} for {name}; keeping the last value"
                    )
                seen.add(key)
                values[key][name] = record.values[name]
                if units.get(name) is None:
                    units[name] = record.units.get(name)

        merged = [
            FlatRecord(
                location=locations[key],
                values={name: values[key].get(name) for name in names},
                units=dict(units),
                missing={name for name in names if name not in values[key]},
            )
            for key in locations
        ]
        self.logger.info(f"Merged {len(names)} measures into {len(merged)} records")
        return merged

    def flatten_time_series_measures(
        self,
        response: QueryResponse,
        measure_names: Sequence[str],
        co_registered: bool = True
    ) -> List[FlatRecord]:
        """
        Unnest time series measures into one record per (location, date).

        For each location, in encounter order, every date seen for that
        location across the named measures yields one record in ascending
        date order. A measure without a datapoint at that date is None and
        listed in the record's ``missing`` set.
        Duplicate dates within one measure keep the last value.

        Args:
            response: Parsed query response
            measure_names: Ordered names of the time series measures
            co_registered: Require all measures to share one grid of locations

        Returns:
            Flat records ordered by location then date

        Raises:
            UnknownMeasureError: If a name is not in the response
            KindMismatchError: If a named measure is scalar
            MisalignedGridError: If co_registered is set and the grids differ
        """
        names = self._check_measures(response, measure_names, MeasureKind.TIMESERIES)
        if co_registered:
            self._check_alignment(
                names, [[measure.location.key for measure in response[name]] for name in names]
            )

        locations: Dict[Hashable, Location] = {}
        series: Dict[Hashable, Dict[str, Dict[datetime, Optional[float]]]] = {}
        units: Dict[str, Optional[str]] = {name: None for name in names}

        for name in names:
            for measure in response[name]:
                key = measure.location.key
                locations.setdefault(key, measure.location)
                by_date = series.setdefault(key, {}).setdefault(name, {})
                if units[name] is None:
                    units[name] = measure.unit

                for point in measure.datapoints:
                    if point.date in by_date:
                        self.logger.warning(
                            f"Duplicate datapoint for {name} at {key} on "
                            f"{point.date.isoformat()}; keeping the last value"
                        )
                    by_date[point.date] = point.value

        records = []
        for key, location in locations.items():
            location_series = series[key]
            dates = sorted(set().union(*(by_date.keys() for by_date in location_series.values())))
            for date in dates:
                records.append(FlatRecord(
                    location=location,
                    date=date,
                    values={
                        name: location_series.get(name, {}).get(date)
                        for name in names
                    },
                    units=dict(units),
                    missing={
                        name for name in names
                        if date not in location_series.get(name, {})
                    },
                ))

        self.logger.info(
            f"Unnested {len(names)} time series over {len(locations)} locations "
            f"into {len(records)} records"
        )
        return records

    @staticmethod
    def regroup_by_location(
        records: Iterable[FlatRecord]
    ) -> Dict[Hashable, Dict[str, List[Tuple[Optional[datetime], Optional[float], Optional[str]]]]]:
        """
        Group record values back by location and measure.

        Measures listed in a record's ``missing`` set are skipped; reported
        nulls are kept, so the result mirrors the measures that produced the
        records.

        Returns:
            Mapping of location key to measure name to (date, value, unit) entries
        """
        grouped: Dict[Hashable, Dict[str, List[Tuple]]] = {}
        for record in records:
            by_measure = grouped.setdefault(record.location.key, {})
            for name, value in record.values.items():
                if name in record.missing:
                    continue
                by_measure.setdefault(name, []).append((record.date, value, record.units.get(name)))
        return grouped

    def _check_measures(
        self,
        response: QueryResponse,
        measure_names: Iterable[str],
        expected: MeasureKind
    ) -> List[str]:
        """Validate requested measures and return them deduplicated, in a stable order."""
        requested = list(dict.fromkeys(measure_names))

        for name in requested:
            if name not in response:
                raise UnknownMeasureError(name, response.names)
            kind = response.kind_of(name)
            if kind is not None and kind != expected:
                raise KindMismatchError(name, expected, kind)

        # Sets carry no order of their own; fall back to the response order
        if isinstance(measure_names, (set, frozenset)):
            return [name for name in response.names if name in measure_names]
        return requested

    @staticmethod
    def _check_alignment(names: List[str], key_lists: List[List[Hashable]]) -> None:
        """Raise MisalignedGridError unless every key list matches the first."""
        if len(names) < 2:
            return

        reference_name, reference = names[0], key_lists[0]
        for name, keys in zip(names[1:], key_lists[1:]):
            if len(keys) != len(reference):
                raise MisalignedGridError(
                    [reference_name, name],
                    f"{reference_name} has {len(reference)} locations, {name} has {len(keys)}"
                )
            for index, (expected, actual) in enumerate(zip(reference, keys)):
                if expected != actual:
                    raise MisalignedGridError(
                        [reference_name, name],
                        f"location {index} differs: {expected} != {actual}"
                    )
