"""
Main entry point for the footfall pipeline.

Runs one series request for a sensor selection and prints a summary.
"""

import asyncio
import sys
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from .core import Config, setup_logger, LoggerContext, DateUtils
from .api import FootfallAPI
from .models import SeriesRequest, SeriesResult, TimeWindow
from .processing import GapFiller, calculate_overview_metrics
from .algorithms import format_delta_display, get_comparison_period_label
from .services import ApiSampleSource, SyntheticSampleSource, RangeFetcher, LastUpdatedStore
from .pipeline import FootfallPipeline


class FootfallPipelineApp:
    """Command line application around a pipeline session."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        self.config = Config(config_file)

        self.logger = setup_logger()
        self.logger.info("=" * 60)
        self.logger.info("Footfall Pipeline")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.api_client: Optional[FootfallAPI] = None
        self.pipeline: Optional[FootfallPipeline] = None
        self.last_updated: Optional[LastUpdatedStore] = None

    def initialize_components(self) -> None:
        """Initialize all application components."""
        self.logger.info("Initializing components...")

        self.api_client = FootfallAPI(
            base_url=self.config.api_base_url,
            email=self.config.auth_email,
            password=self.config.auth_password,
            token=self.config.auth_token,
            timeout=self.config.api_timeout,
            max_retries=self.config.api_max_retries,
            verify_ssl=self.config.api_verify_ssl,
            logger=self.logger
        )

        if self.config.has_credentials and not self.api_client.is_authenticated:
            self.api_client.login()

        if not self.api_client.is_authenticated:
            self.logger.warning("No credentials configured, using synthetic demo data")

        cadence = timedelta(minutes=self.config.cadence_minutes)
        fetcher = RangeFetcher(
            source=ApiSampleSource(self.api_client, logger=self.logger),
            session=self.api_client,
            synthetic_source=SyntheticSampleSource(cadence=cadence, logger=self.logger),
            gap_filler=GapFiller(cadence, logger=self.logger),
            logger=self.logger
        )

        self.last_updated = LastUpdatedStore(self.config.last_updated_file, logger=self.logger)

        self.pipeline = FootfallPipeline(
            fetcher=fetcher,
            timezone_str=self.config.timezone,
            last_updated=self.last_updated,
            logger=self.logger
        )

        self.logger.info("All components initialized successfully")

    def run(
        self,
        sensor_ids: List[int],
        window: Optional[TimeWindow] = None,
        group_by: Optional[str] = None,
        aggregation: Optional[str] = None,
        hour_range: Optional[Tuple[int, int]] = None,
        compare: bool = False
    ) -> SeriesResult:
        """
        Run one request and log a summary.

        Args:
            sensor_ids: Sensor selection
            window: Window to view (defaults to the last 7 days)
            group_by: Bucket granularity (defaults to configuration)
            aggregation: 'sum' or 'avg' (defaults to configuration)
            hour_range: Optional opening hours to keep
            compare: Also compare against the previous period

        Returns:
            Result of the request
        """
        try:
            self.initialize_components()
            if self.pipeline is None:
                raise RuntimeError("Components not properly initialized")

            if window is None:
                window = TimeWindow(*DateUtils(self.logger).default_window(self.config.timezone))

            request = SeriesRequest(
                sensor_ids=frozenset(sensor_ids),
                window=window,
                group_by=group_by or self.config.default_group_by,
                aggregation=aggregation or self.config.default_aggregation,
                hour_range=hour_range,
            )

            with LoggerContext(self.logger, "series request", window) as timing:
                result = asyncio.run(self.pipeline.get_series(request))
                timing.record(len(result.combined), f"{request.group_by} buckets")

            self.log_summary(request, result)

            if compare and result.error is None:
                self.log_comparison(request, result)

            return result

        finally:
            if self.api_client:
                self.api_client.close()

    def log_summary(self, request: SeriesRequest, result: SeriesResult) -> None:
        """Log headline metrics of a result."""
        if result.error:
            self.logger.error(result.error)
        if not result.has_data:
            self.logger.warning("No data for the selected sensors and range")
            return

        metrics = calculate_overview_metrics(result.combined, request.window)
        self.logger.info(
            f"{len(result.per_location)} location(s), {len(result.combined)} "
            f"{request.group_by} buckets"
        )
        for key, value in metrics.as_dict().items():
            self.logger.info(f"  {key}: {value}")

    def log_comparison(self, request: SeriesRequest, result: SeriesResult) -> None:
        """Compare total entries with the previous period."""
        periods = self.pipeline.get_comparison(request.window)
        previous_request = SeriesRequest(
            sensor_ids=request.sensor_ids,
            window=periods.previous,
            group_by=request.group_by,
            aggregation=request.aggregation,
            hour_range=request.hour_range,
        )
        previous = asyncio.run(self.pipeline.get_series(previous_request))

        comparison = self.pipeline.get_metric_comparison(
            sum(result.combined.count_in), sum(previous.combined.count_in)
        )
        display = format_delta_display(comparison)
        label = get_comparison_period_label(periods.previous, self.config.timezone)
        self.logger.info(
            f"Entries vs. {label}: {display['deltaText']} ({display['percentageText']})"
        )


def _parse_sensor_ids(value: str) -> List[int]:
    ids = [int(part) for part in value.split(",") if part.strip()]
    if not ids:
        raise ValueError("At least one sensor id is required")
    return ids


def _parse_hour_range(value: str) -> Tuple[int, int]:
    start, end = value.split("-", 1)
    return int(start), int(end)


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Footfall sensor time-series pipeline"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--sensors",
        type=str,
        required=True,
        help="Comma-separated sensor IDs, e.g. 7,8,18"
    )
    parser.add_argument(
        "--start",
        type=str,
        default=None,
        help="First day (YYYY-MM-DD). Default: 6 days before --end"
    )
    parser.add_argument(
        "--end",
        type=str,
        default=None,
        help="Last day (YYYY-MM-DD). Default: today"
    )
    parser.add_argument(
        "--group-by",
        type=str,
        default=None,
        help="Bucket granularity: 5min, 10min, 15min, 30min, hour, day, week, month"
    )
    parser.add_argument(
        "--aggregation",
        type=str,
        default=None,
        choices=["sum", "avg"],
        help="Aggregation of outside traffic within a bucket"
    )
    parser.add_argument(
        "--hours",
        type=str,
        default=None,
        help="Opening hours to keep, e.g. 9-21"
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Compare entries with the previous period"
    )

    args = parser.parse_args()

    try:
        sensor_ids = _parse_sensor_ids(args.sensors)
        hour_range = _parse_hour_range(args.hours) if args.hours else None
    except ValueError as e:
        print(f"Invalid argument: {e}")
        sys.exit(1)

    try:
        app = FootfallPipelineApp(config_file=args.config)

        window = None
        if args.start or args.end:
            tz = app.config.timezone
            try:
                end_day = datetime.strptime(args.end, "%Y-%m-%d") if args.end else datetime.now()
                start_day = datetime.strptime(args.start, "%Y-%m-%d") if args.start else None
            except ValueError:
                print("Invalid date format. Use YYYY-MM-DD")
                sys.exit(1)

            tzinfo = DateUtils.parse_timezone(tz)
            end = DateUtils.end_of_day(DateUtils.localize_wall_time(end_day, tzinfo), tz)
            if start_day is None:
                start = DateUtils(app.logger).default_window(tz, reference_time=end)[0]
            else:
                start = DateUtils.start_of_day(DateUtils.localize_wall_time(start_day, tzinfo), tz)
            window = TimeWindow(start, end)

        result = app.run(
            sensor_ids=sensor_ids,
            window=window,
            group_by=args.group_by,
            aggregation=args.aggregation,
            hour_range=hour_range,
            compare=args.compare
        )
        if result.error:
            sys.exit(2)
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
