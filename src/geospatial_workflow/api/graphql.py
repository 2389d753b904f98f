"""
GraphQL operations for the geospatial API.

Executes queries and hands the decoded response to the parser.
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from ..core.exceptions import QueryExecutionError
from ..models import QueryResponse
from ..processing import ResponseParser
from .queries import build_measures_query


class GraphQLAPI:
    """GraphQL-related API operations."""

    # Type hints for attributes provided by APIClient base class
    logger: logging.Logger
    post: Callable[[str, Dict[str, Any]], Any]

    def execute_query(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            Decoded JSON response

        Raises:
            QueryExecutionError: If the response carries GraphQL errors
            requests.exceptions.RequestException: On transport failure
        """
        self.logger.debug(f"Executing GraphQL query with variables {sorted(variables or {})}")
        result = self.post("", {"query": query, "variables": variables or {}})

        errors = result.get("errors") if isinstance(result, dict) else None
        if errors:
            messages = [error.get("message", str(error)) for error in errors]
            self.logger.error(f"GraphQL errors: {messages}")
            raise QueryExecutionError(messages)

        return result

    def fetch_measures(
        self,
        measures: Sequence[str],
        geometry: Dict[str, Any],
        time_series: bool = False,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        include_shape: bool = True
    ) -> QueryResponse:
        """
        Query measures over a region and parse the response.

        A time series query needs both dates.

        Args:
            measures: Measure names
            geometry: GeoJSON geometry of the region of interest
            time_series: Request datapoints instead of single values
            start_date: First date (YYYY-MM-DD) of a time series query
            end_date: Last date (YYYY-MM-DD) of a time series query
            include_shape: Request grid cell shapes as well as centroids

        Returns:
            Parsed query response

        Raises:
            ValueError: If a time series query is missing a date
        """
        if time_series and (start_date is None or end_date is None):
            raise ValueError("Time series queries require start_date and end_date")

        query = build_measures_query(measures, time_series=time_series, include_shape=include_shape)

        variables: Dict[str, Any] = {"geometry": geometry}
        if time_series:
            variables.update({"startDate": start_date, "endDate": end_date})

        self.logger.info(f"Fetching {len(measures)} measures ({'time series' if time_series else 'scalar'})")
        document = self.execute_query(query, variables)
        return ResponseParser(logger=self.logger).parse(document)
