import pytest

from meat_inventory.activity import filter_activities, log_activity
from meat_inventory.backend import BackendError
from meat_inventory.schemas import ActivityLogEntry, ActivityType, EntityType


class FakeClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.inserted = []

    def insert(self, table, row):
        if self.fail:
            raise BackendError("503 Service Unavailable")
        self.inserted.append((table, row))


def test_filter_defaults_to_all_newest_first(activities):
    result = filter_activities(activities)
    assert [e.entity_id for e in result] == ["2", "1", "1"]
    assert result[0].activity_type is ActivityType.STOCK_ADDED


def test_filter_by_activity_and_entity(activities):
    assert [e.activity_type for e in filter_activities(activities, activity_type="stock_removed")] == [
        ActivityType.STOCK_REMOVED
    ]
    assert len(filter_activities(activities, entity_type="stock")) == 2
    assert filter_activities(activities, "product_created", "stock") == []


def test_filter_limit(activities):
    assert len(filter_activities(activities, limit=1)) == 1


def test_filter_rejects_unknown_type(activities):
    with pytest.raises(ValueError):
        filter_activities(activities, activity_type="stock_teleported")


def test_entries_without_timestamp_sort_last(activities):
    undated = ActivityLogEntry(
        activity_type=ActivityType.CATEGORY_CREATED,
        entity_type=EntityType.CATEGORY,
        description="Created category: Lamb",
    )
    result = filter_activities([undated] + activities)
    assert result[-1] is undated


def test_log_activity_inserts_row(activities):
    client = FakeClient()
    assert log_activity(client, activities[0]) is True
    table, row = client.inserted[0]
    assert table == "activity_logs"
    assert row["activity_type"] == "product_created"
    assert row["entity_name"] == "Ribeye"
    assert "metadata" not in row


def test_log_activity_failure_is_swallowed(activities, caplog):
    assert log_activity(FakeClient(fail=True), activities[0]) is False
    assert "Failed to log activity" in caplog.text


def test_log_activity_without_backend(activities):
    assert log_activity(None, activities[0]) is False
