"""
Main entry point for the geospatial workflow.

Queries the configured measures, flattens the response and writes it to a
geospatial file.
"""

import sys
from typing import List, Optional

from .core import Config, setup_logger, LoggerContext
from .api import GeospatialAPI
from .models import FlatRecord, QueryResponse
from .processing import ResponseFlattener
from .writer import RecordWriter


class GeospatialWorkflowApp:
    """Main application for querying and exporting geospatial measures."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        self.config = Config(config_file)

        self.logger = setup_logger(
            log_file=self.config.log_file,
            log_level=self.config.log_level,
            console=self.config.log_console
        )
        self.logger.info("=" * 60)
        self.logger.info("Geospatial Measures Workflow")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.api_client: Optional[GeospatialAPI] = None
        self.flattener = ResponseFlattener(logger=self.logger)
        self.writer = RecordWriter(logger=self.logger)

    def initialize_components(self) -> None:
        """Initialize the API client."""
        self.api_client = GeospatialAPI(
            base_url=self.config.api_base_url,
            api_key=self.config.api_key,
            timeout=self.config.api_timeout,
            max_retries=self.config.api_max_retries,
            verify_ssl=self.config.api_verify_ssl,
            logger=self.logger
        )

    def run(self, output_path: Optional[str] = None) -> List[FlatRecord]:
        """
        Run the workflow once.

        Args:
            output_path: Output file path. If None, uses the configured path.

        Returns:
            The records that were written
        """
        try:
            self.initialize_components()

            geometry = self.config.query_geometry
            if geometry is None:
                raise ValueError("Missing required configuration: query.geometry")

            measures = self.config.query_measures
            with LoggerContext(self.logger, "measure query") as stage:
                if self.config.query_time_series:
                    response = self.api_client.fetch_measures(
                        measures,
                        geometry,
                        time_series=True,
                        start_date=self.config.query_start_date,
                        end_date=self.config.query_end_date
                    )
                else:
                    response = self.api_client.fetch_measures(measures, geometry)
                stage.summary = f"{sum(len(response[name]) for name in response)} measure instances"

            with LoggerContext(self.logger, "response flattening") as stage:
                records = self.flatten(response, measures)
                stage.summary = f"{len(records)} records"

            if not records:
                self.logger.warning("No records to write")
                return records

            with LoggerContext(self.logger, "file export"):
                field_names = self.writer.write(
                    records,
                    output_path or self.config.output_path,
                    driver=self.config.output_driver,
                    max_field_length=self.config.max_field_length,
                    crs=self.config.crs
                )
            self.logger.info(f"Field names: {field_names}")
            self.logger.info("Processing complete")
            return records

        except Exception as e:
            self.logger.error(f"Application error: {e}", exc_info=True)
            raise

        finally:
            if self.api_client:
                self.api_client.close()

    def flatten(self, response: QueryResponse, measures: List[str]) -> List[FlatRecord]:
        """
        Flatten a response according to the configured query kind.

        Args:
            response: Parsed query response
            measures: Requested measure names

        Returns:
            Flat records
        """
        co_registered = self.config.co_registered
        if self.config.query_time_series:
            return self.flattener.flatten_time_series_measures(
                response, measures, co_registered=co_registered
            )

        groups = self.flattener.flatten_scalar_measures(response, measures)
        return self.flattener.merge_by_location(groups, co_registered=co_registered)


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Query geospatial measures and export them to a geospatial file"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path. Default: output.path from the configuration"
    )

    args = parser.parse_args()

    try:
        app = GeospatialWorkflowApp(config_file=args.config)
        app.run(output_path=args.output)
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
