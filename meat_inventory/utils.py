import logging
import re
from datetime import date, datetime
from pathlib import Path
import pandas as pd

logger = logging.getLogger(__name__)

_REPORT_DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})\.csv$")


def get_date_suffix_for_filename(today: date | None = None) -> str:
    """Returns the date as a YYYY-MM-DD string for filenames."""
    return (today or datetime.now().date()).strftime("%Y-%m-%d")


def find_latest_report(input_dir: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the newest '<prefix>YYYY-MM-DD.csv' export in input_dir.
    Returns the path together with the date parsed from its filename.
    """
    candidates = []
    for path in input_dir.glob(f"{prefix}*.csv"):
        match = _REPORT_DATE_PATTERN.search(path.name)
        if not match or path.name[: match.start()] != prefix:
            continue
        try:
            report_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            logger.warning(f"Ignoring {path.name}: invalid date in filename.")
            continue
        candidates.append((report_date, path))

    if not candidates:
        return None

    report_date, path = max(candidates)
    return path, report_date


def load_csv(file_path: Path, skiprows: int = 0) -> pd.DataFrame | None:
    """
    CSV loader with an encoding fallback.
    It will attempt to read a file in the following order:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which can decode any byte sequence.
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", skiprows=skiprows)

    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", skiprows=skiprows)
        except (OSError, ValueError) as e_latin1:
            logger.error(
                f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"Export not found at {file_path}, skipping.")
        return None

    except pd.errors.EmptyDataError:
        logger.warning(f"{file_path.name} is empty, skipping.")
        return None

    except (OSError, ValueError) as e_general:
        logger.error(
            f"An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None
