import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence
import pandas as pd
import requests
from pydantic import BaseModel

from . import settings
from . import utils

logger = logging.getLogger(__name__)


def save_outputs(
    validated_data: Sequence[BaseModel],
    filename_base: str,
    output_dir: Optional[Path] = None,
) -> dict[str, Path]:
    """
    Saves validated rows to a dated CSV (using field aliases as headers) and,
    when SAVE_JSON_OUTPUT is on, to a JSON file next to it.
    """
    output_dir = output_dir or settings.OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = output_dir / f"{filename_base}_{date_suffix}.csv"
    json_path = output_dir / f"{filename_base}_{date_suffix}.json"
    written = {}

    df_for_csv = pd.DataFrame(
        [item.model_dump(mode="json", by_alias=True) for item in validated_data]
    )
    df_for_csv.to_csv(csv_path, index=False)
    written["csv"] = csv_path
    logger.info(f"✅ Report saved to: {csv_path}")

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json_data = [item.model_dump(mode="json", by_alias=True) for item in validated_data]
            json.dump(json_data, f, indent=2)
        written["json"] = json_path
        logger.info(f"✅ JSON output saved to: {json_path}")
    else:
        logger.info("Skipping JSON file save as per configuration.")

    return written


def post_to_webhook(payload: dict[str, Any], report_type: str) -> bool:
    """
    Posts a report payload to the configured webhook.
    Network failures are logged; the run itself has already produced its files.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} report to webhook: {settings.WEBHOOK_URL}")

    try:
        response = requests.post(
            settings.WEBHOOK_URL,
            json={"reportType": report_type, **payload},
            timeout=settings.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        logger.info("✅ Report successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
