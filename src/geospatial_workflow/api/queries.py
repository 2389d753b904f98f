"""
GraphQL query builder for geospatialMeasures queries.
"""

import re
from typing import List, Sequence

_IDENTIFIER = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def build_measures_query(
    measures: Sequence[str],
    time_series: bool = False,
    include_shape: bool = True
) -> str:
    """
    Build a geospatialMeasures query for the given measures.

    The query takes a ``$geometry`` variable (GeoJSON region of interest) and,
    for time series, ``$startDate`` and ``$endDate``.

    Args:
        measures: Measure names to select
        time_series: Select datapoints instead of a single value
        include_shape: Select the grid cell shape along with its centroid

    Returns:
        GraphQL document

    Raises:
        ValueError: If no measures are given or a name is not a GraphQL identifier
    """
    if not measures:
        raise ValueError("At least one measure is required")
    for name in measures:
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid measure name: {name!r}")

    location_fields = "centroid shape" if include_shape else "centroid"
    if time_series:
        variables = "$geometry: Geometry!, $startDate: Date!, $endDate: Date!"
        arguments = "(where: {datapoints: {date: {GE: $startDate, LE: $endDate}}})"
        payload = "datapoints { date value unit }"
    else:
        variables = "$geometry: Geometry!"
        arguments = ""
        payload = "value"

    selections: List[str] = [
        f"    {name}{arguments} {{ unit {payload} location {{ {location_fields} }} }}"
        for name in measures
    ]

    return (
        f"query getMeasures({variables}) {{\n"
        f"  geospatialMeasures(geoFilter: {{location: $geometry, operation: WITHIN}}) {{\n"
        + "\n".join(selections)
        + "\n  }\n}"
    )
