"""
API layer for the geospatial GraphQL API.

Provides a low-level HTTP client and GraphQL query operations.
"""

import logging
from typing import Optional

from .client import APIClient
from .graphql import GraphQLAPI
from .queries import build_measures_query


class GeospatialAPI(GraphQLAPI, APIClient):
    """
    Unified API client for the geospatial GraphQL API.

    Combines the HTTP session with GraphQL query operations.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize unified API client.

        Args:
            base_url: GraphQL endpoint URL
            api_key: Subscription key
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            verify_ssl=verify_ssl,
            logger=logger
        )


__all__ = [
    "APIClient",
    "GraphQLAPI",
    "GeospatialAPI",
    "build_measures_query",
]
