import logging
from typing import Iterable, Optional

from . import settings
from .backend import BackendClient, BackendError
from .schemas import ActivityLogEntry, ActivityType, EntityType

logger = logging.getLogger(__name__)

ALL = "all"

ACTIVITY_TABLE = "activity_logs"


def _newest_first_key(entry: ActivityLogEntry) -> float:
    # Entries without a timestamp sort last.
    return entry.created_at.timestamp() if entry.created_at else float("-inf")


def filter_activities(
    entries: Iterable[ActivityLogEntry],
    activity_type: str = ALL,
    entity_type: str = ALL,
    limit: int = settings.ACTIVITY_LOG_LIMIT,
) -> list[ActivityLogEntry]:
    """Newest-first activity entries matching both filters, capped at `limit`."""
    if activity_type != ALL:
        activity_type = ActivityType(activity_type)
    if entity_type != ALL:
        entity_type = EntityType(entity_type)

    selected = [
        entry
        for entry in entries
        if (activity_type == ALL or entry.activity_type is activity_type)
        and (entity_type == ALL or entry.entity_type is entity_type)
    ]
    selected.sort(key=_newest_first_key, reverse=True)
    return selected[:limit]


def log_activity(client: Optional[BackendClient], entry: ActivityLogEntry) -> bool:
    """
    Records an activity entry in the backend. Failures are logged and never
    interrupt the operation being recorded. Returns whether the insert succeeded.
    """
    if client is None:
        logger.warning(f"No backend configured. Activity not recorded: {entry.description}")
        return False

    row = entry.model_dump(mode="json", exclude_none=True)
    try:
        client.insert(ACTIVITY_TABLE, row)
    except BackendError as e:
        logger.error(f"Failed to log activity: {e}")
        return False
    return True
