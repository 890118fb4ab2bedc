"""
Dataset orchestrator for the enrichment pipeline.

One run turns every complete sample/rain input pair into a published
dataset directory:

1. Discover input pairs and skip dates missing either file
2. Delete any existing output for the dates about to be rebuilt
3. Rebuild per-site quality history from what is left on disk
4. Process each date in ascending order, in isolation
5. Refresh latest.txt and dates.json from a directory scan

A failing date never stops the run; its inputs stay in place so it can be
retried on the next run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import logging

from .. import config
from ..enrichment.quality import QualityCounts, load_history, record_sample
from ..enrichment.rainfall import RainfallSummary, summarize_rainfall
from ..ingest.csv_parser import SampleRow, parse_rain_csv, parse_sample_csv, read_csv_file
from ..ingest.timestamps import format_sample_time, parse_default_time
from ..noaa.core.noaa_client import NOAAClient
from ..noaa.tides.tide_service import TideLookupService
from .discovery import DateFiles, PipelineError, discover_input_files
from .writer import (
    list_dataset_dates,
    remove_dataset,
    write_dataset,
    write_dates_index,
    write_latest
)

logger = logging.getLogger(__name__)


@dataclass
class ProcessingStats:
    """Row counts for one dataset date."""
    total_rows: int = 0
    processed: int = 0
    skipped: int = 0
    skipped_coordinates: int = 0
    skipped_mpn: int = 0
    skipped_site: int = 0
    tide_enriched: int = 0


@dataclass
class DateResult:
    """Outcome of processing one dataset date."""
    date: str
    success: bool = False
    feature_count: int = 0
    errors: List[str] = field(default_factory=list)
    stats: ProcessingStats = field(default_factory=ProcessingStats)


@dataclass
class RunResult:
    """Outcome of one pipeline run."""
    results: List[DateResult] = field(default_factory=list)
    incomplete_dates: List[str] = field(default_factory=list)
    latest_date: Optional[str] = None
    dates_index: List[str] = field(default_factory=list)

    @property
    def processed_dates(self) -> List[str]:
        return [r.date for r in self.results if r.success]

    @property
    def failed_dates(self) -> List[str]:
        return [r.date for r in self.results if not r.success]


class DatasetOrchestrator:
    """Builds enriched datasets from the CSV exports in an input directory."""

    def __init__(
        self,
        input_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        tide_service: Optional[TideLookupService] = None,
        settings: Optional[Dict[str, Any]] = None,
        keep_inputs: bool = False
    ):
        """Initialize the orchestrator.

        Args:
            input_dir: Directory scanned for sample/rain CSV files
            output_dir: Root of the published dataset tree
            tide_service: Tide lookup used for every sample. Built from the
                settings if omitted.
            settings: Pipeline settings (see config.load_settings)
            keep_inputs: Leave consumed input files in place
        """
        self.settings = settings if settings is not None else config.SETTINGS
        self.input_dir = Path(input_dir) if input_dir else config.input_dir(self.settings)
        self.output_dir = Path(output_dir) if output_dir else config.output_dir(self.settings)
        self.keep_inputs = keep_inputs

        timestamp_settings = self.settings.get('timestamps', {})
        self.timezone = timestamp_settings.get('timezone', "America/New_York")
        self.default_time = parse_default_time(str(timestamp_settings.get('default_time', "12:00")))
        self.rain_window = int(self.settings.get('rainfall', {}).get('window_days', 7))

        if tide_service is None:
            client = NOAAClient.from_settings(self.settings.get('api', {}))
            tide_service = TideLookupService(
                client=client,
                tide_settings=self.settings.get('tide', {}),
                timezone=self.timezone,
            )
        self.tide_service = tide_service

        self.history: Dict[str, QualityCounts] = {}

    def run(self) -> RunResult:
        """Process every complete input pair and refresh the index files.

        Raises:
            PipelineError: If the input directory cannot be read or the
                output tree cannot be written at all
        """
        logger.info(f"Starting enrichment run: {self.input_dir} -> {self.output_dir}")
        run_result = RunResult()

        date_map = discover_input_files(self.input_dir)

        eligible: List[DateFiles] = []
        for date in sorted(date_map):
            files = date_map[date]
            if files.is_complete:
                eligible.append(files)
                continue
            missing = 'samples' if files.samples is None else 'rain'
            logger.warning(f"Skipping {date}: no {missing} file")
            run_result.incomplete_dates.append(date)

        if not eligible:
            logger.info("No complete input pairs found")

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PipelineError(f"Cannot create output directory {self.output_dir}: {e}") from e

        for files in eligible:
            remove_dataset(self.output_dir, files.date)

        self.history = load_history(self.output_dir)

        for files in eligible:
            try:
                result = self.process_date(files)
            except Exception as e:
                logger.exception(f"Unexpected error processing {files.date}")
                remove_dataset(self.output_dir, files.date)
                result = DateResult(date=files.date, errors=[str(e)])
            run_result.results.append(result)
            if not result.success:
                logger.error(f"Failed to process {files.date}: {'; '.join(result.errors)}")

        try:
            dates = list_dataset_dates(self.output_dir)
            if run_result.processed_dates and dates:
                write_latest(self.output_dir, dates[-1])
                run_result.latest_date = dates[-1]
            write_dates_index(self.output_dir, dates)
        except OSError as e:
            raise PipelineError(f"Failed to write index files: {e}") from e
        run_result.dates_index = dates

        logger.info(
            f"Run complete: {len(run_result.processed_dates)} processed, "
            f"{len(run_result.failed_dates)} failed, "
            f"{len(run_result.incomplete_dates)} incomplete"
        )
        return run_result

    def process_date(self, files: DateFiles) -> DateResult:
        """Build and write the dataset for one date.

        Quality history is only updated when the whole date succeeds.
        """
        result = DateResult(date=files.date)
        stats = result.stats

        try:
            samples = read_csv_file(files.samples, parse_sample_csv)
            rain = read_csv_file(files.rain, parse_rain_csv)
        except (OSError, UnicodeDecodeError) as e:
            result.errors.append(f"Could not read input files: {e}")
            return result

        result.errors.extend(f"{files.samples.name}: {e}" for e in samples.errors)
        result.errors.extend(f"{files.rain.name}: {e}" for e in rain.errors)
        for warning in samples.warnings + rain.warnings:
            logger.warning(f"{files.date}: {warning}")
        if result.errors:
            return result

        stats.skipped_site = samples.skip_counts.get('site', 0)
        stats.skipped_coordinates = samples.skip_counts.get('coordinates', 0)
        stats.skipped_mpn = samples.skip_counts.get('mpn', 0)
        stats.skipped = stats.skipped_site + stats.skipped_coordinates + stats.skipped_mpn
        stats.total_rows = len(samples.rows) + stats.skipped

        rainfall = summarize_rainfall(rain.rows, self.rain_window)
        history = copy.deepcopy(self.history)

        features = []
        for row in samples.rows:
            try:
                feature = self.build_feature(row, files.date, rainfall, history, stats)
            except Exception as e:
                logger.warning(f"{files.date}: skipping row {row.row_number} ({row.site_name}): {e}")
                stats.skipped += 1
                continue
            features.append(feature)
            stats.processed += 1

        if not features:
            result.errors.append("No valid samples to write")
            return result

        try:
            write_dataset(self.output_dir, files.date, features, rainfall.total_rain)
        except OSError as e:
            result.errors.append(f"Failed to write dataset: {e}")
            remove_dataset(self.output_dir, files.date)
            return result

        self.history = history
        result.success = True
        result.feature_count = len(features)
        logger.info(
            f"{files.date}: {stats.processed}/{stats.total_rows} rows enriched, "
            f"{stats.tide_enriched} with tide state"
        )

        if not self.keep_inputs:
            self._consume_inputs(files)
        return result

    def build_feature(
        self,
        row: SampleRow,
        date: str,
        rainfall: RainfallSummary,
        history: Dict[str, QualityCounts],
        stats: Optional[ProcessingStats] = None
    ) -> Dict[str, Any]:
        """Assemble the GeoJSON feature for one validated sample row.

        When stats are given, samples that got a tide state are counted in
        stats.tide_enriched.
        """
        timestamp = format_sample_time(date, row.sample_time, self.timezone, self.default_time)
        tide = self.tide_service.describe(row.latitude, row.longitude, timestamp)
        counts = record_sample(history, row.site_name, row.mpn)

        properties = {
            'siteName': row.site_name,
            'mpn': row.mpn,
            'timestamp': timestamp,
            'rainByDay': list(rainfall.rain_by_day),
            'totalRain': rainfall.total_rain,
            'rainfall_mm_7day': rainfall.rainfall_mm_7day,
        }
        properties.update(tide.to_properties())
        properties.update(counts.to_properties())
        if stats is not None and tide.available:
            stats.tide_enriched += 1

        return {
            'type': 'Feature',
            'geometry': {
                'type': 'Point',
                'coordinates': [row.longitude, row.latitude],
            },
            'properties': properties,
        }

    def _consume_inputs(self, files: DateFiles) -> None:
        for path in (files.samples, files.rain):
            try:
                path.unlink()
                logger.debug(f"Removed consumed input {path.name}")
            except OSError as e:
                logger.warning(f"Could not remove input file {path}: {e}")
