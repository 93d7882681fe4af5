import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Optional
import pandas as pd

from . import settings, utils
from .backend import BackendClient, BackendError, client_from_settings
from .parsers import frame_from_rows

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for report pipelines (inventory alerts, activity report).
    Follows an Extract -> Transform -> Load (ETL) pattern.

    Data is read from the hosted backend when one is configured, otherwise
    from the newest CSV export in settings.INPUT_DIR.
    """

    def __init__(
        self,
        report_type: str,
        test_mode: bool = False,
        client: Optional[BackendClient] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.report_type = report_type
        self.test_mode = test_mode
        self.client = client if client is not None else client_from_settings()
        self.clock = clock
        # Status summary tracks the data date (or None) for each source
        self.status_summary: dict[str, Optional[date]] = {}

    def run(self) -> list[Any] | None:
        """
        Orchestrates the pipeline execution. Returns the validated rows, or
        None when the run stopped on missing or invalid data.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if raw_data is None or raw_data.empty:
            logger.warning(f"⚠️ No data extracted for {self.report_type}.")
            self.load([])
            return None

        # --- 2. TRANSFORM ---
        validated_data = self.transform(raw_data)
        if validated_data is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(validated_data)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return validated_data

    def read_source(
        self,
        source_name: str,
        table: str,
        filename_prefix: str,
        parser_func: Callable[[dict], pd.DataFrame | None],
        column_map: dict[str, str],
        limit: Optional[int] = None,
    ) -> pd.DataFrame | None:
        """Loads one table from the backend, or its newest CSV export."""
        logger.info(f"\n-- Processing Source: {source_name} --")

        if self.client is not None:
            try:
                rows = self.client.select(table, order="created_at", limit=limit)
            except BackendError as e:
                logger.error(f"  > ERROR: {e}")
                self.status_summary[source_name] = None
                return None
            self.status_summary[source_name] = self.clock()
            return frame_from_rows(rows, column_map)

        found_file_info = utils.find_latest_report(settings.INPUT_DIR, filename_prefix)
        if not found_file_info:
            logger.warning(f"  > ⚠️ Export missing ({filename_prefix}). Skipping.")
            self.status_summary[source_name] = None
            return None

        path, report_date = found_file_info
        logger.info(f"  > Found: {path.name} ({report_date})")
        self.status_summary[source_name] = report_date
        return parser_func({"primary": path})

    @abstractmethod
    def extract(self) -> pd.DataFrame | None:
        """
        Responsible for reading the sources and returning the primary raw DataFrame.
        Should also populate self.status_summary as it processes sources.
        """

    @abstractmethod
    def transform(self, df: pd.DataFrame) -> list[Any] | None:
        """
        Responsible for validation and derived columns.
        Returns a list of validated Pydantic models, or None on invalid data.
        """

    def load(self, validated_data: list[Any]):
        """Logs the status summary; subclasses add saving and posting."""
        if self.status_summary:
            logger.info("\n--- Final Status Summary ---")
            for source, date_val in self.status_summary.items():
                logger.info(f"{source}: {date_val.isoformat() if date_val else 'No data'}")
