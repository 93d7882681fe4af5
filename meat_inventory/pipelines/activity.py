import logging
import pandas as pd
from pydantic import ValidationError

from meat_inventory import data_handler, parsers, reports, settings
from meat_inventory.activity import ALL, ACTIVITY_TABLE, filter_activities
from meat_inventory.pipeline import DataPipeline
from meat_inventory.schemas import ActivityLogEntry

logger = logging.getLogger(__name__)


class ActivityReportPipeline(DataPipeline):
    """Activity log -> filtered newest-first list, exported as PDF and CSV."""

    def __init__(self, activity_type: str = ALL, entity_type: str = ALL, **kwargs):
        super().__init__("activity", **kwargs)
        self.activity_type = activity_type
        self.entity_type = entity_type

    def extract(self) -> pd.DataFrame | None:
        logger.info("--- Starting Activity Report Process ---")
        return self.read_source(
            "Activity Log",
            table=ACTIVITY_TABLE,
            filename_prefix=settings.ACTIVITY_FILENAME_PREFIX,
            parser_func=parsers.parse_activity_export,
            column_map=parsers.ACTIVITY_COLUMN_MAP,
        )

    def transform(self, df: pd.DataFrame) -> list[ActivityLogEntry] | None:
        try:
            logger.info("Validating activity entries against schema...")
            entries = [ActivityLogEntry(**row) for row in parsers.to_records(df)]
            logger.info("✅ Data validation successful.")
        except ValidationError as e:
            logger.error("❌ Data validation failed! Check the activity export.")
            logger.error(e)
            return None

        try:
            selected = filter_activities(entries, self.activity_type, self.entity_type)
        except ValueError as e:
            logger.error(f"❌ Invalid filter: {e}")
            return None

        logger.info(
            f"Selected {len(selected)} of {len(entries)} entries "
            f"(activity={self.activity_type}, entity={self.entity_type})."
        )
        return selected

    def load(self, validated_data: list[ActivityLogEntry]):
        super().load(validated_data)

        if not validated_data:
            logger.warning("No activities to export. Adjust the filters or record some activity first.")
            return

        reports.save_activity_pdf(validated_data, self.activity_type, self.entity_type)
        data_handler.save_outputs(validated_data, f"{self.report_type}_log")

        if self.test_mode:
            logger.info("🧪 Test Mode: Skipping webhook post.")
            return

        data_handler.post_to_webhook(
            {
                "filters": {"activityType": self.activity_type, "entityType": self.entity_type},
                "totalRecords": len(validated_data),
            },
            self.report_type,
        )
