"""Tests for TimeEntryService."""
import pytest
from datetime import date, datetime, timedelta, timezone
from bson import ObjectId


CREATED = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
class TestTimeEntryServiceList:
    """Tests for listing entries."""

    async def test_list_entries_attaches_names(self, fake_db):
        """Test customer and task names are joined onto entries."""
        from timeledger.services.time_entry_service import TimeEntryService

        customer_id = ObjectId()
        db = fake_db(
            entry_docs=[{
                "_id": ObjectId(),
                "user_id": "user123",
                "customer_id": customer_id,
                "task_id": "task-1",
                "date": datetime(2024, 1, 1),
                "duration_minutes": 90,
                "billable": True,
                "rate": 500,
                "created_at": CREATED,
            }],
            customer_docs=[{"_id": customer_id, "name": "Acme", "user_id": "user123"}],
            task_docs=[{"_id": "task-1", "name": "Design", "user_id": "user123"}],
        )

        service = TimeEntryService(db)
        entries = await service.list_entries(user_id="user123")

        assert len(entries) == 1
        entry = entries[0]
        assert entry.customer_id == str(customer_id)
        assert entry.customer.name == "Acme"
        assert entry.task.name == "Design"
        assert entry.date == date(2024, 1, 1)
        assert entry.duration_minutes == 90
        db["time_entries"].find.assert_called_once_with({"user_id": "user123"})

    async def test_list_entries_tolerates_sparse_documents(self, fake_db):
        """Test documents with only required fields load with defaults."""
        from timeledger.services.time_entry_service import TimeEntryService

        db = fake_db(entry_docs=[{
            "_id": ObjectId(),
            "user_id": "user123",
            "created_at": CREATED,
        }])

        entries = await TimeEntryService(db).list_entries(user_id="user123")

        entry = entries[0]
        assert entry.billable is True
        assert entry.customer is None
        assert entry.task is None
        assert entry.duration_minutes is None
        assert entry.description == ""

    async def test_list_entries_coerces_malformed_numbers(self, fake_db):
        """Test malformed durations and rates from the store become None."""
        from timeledger.services.time_entry_service import TimeEntryService

        db = fake_db(entry_docs=[{
            "_id": ObjectId(),
            "user_id": "user123",
            "duration_minutes": "n/a",
            "rate": "-20",
            "created_at": CREATED,
        }])

        entry = (await TimeEntryService(db).list_entries(user_id="user123"))[0]

        assert entry.duration_minutes is None
        assert entry.rate is None

    async def test_list_entries_null_billable_defaults_to_billable(self, fake_db):
        """Test a stored null billable flag loads as billable."""
        from timeledger.services.time_entry_service import TimeEntryService

        db = fake_db(entry_docs=[{
            "_id": ObjectId(),
            "user_id": "user123",
            "billable": None,
            "duration_minutes": 30,
            "created_at": CREATED,
        }])

        entry = (await TimeEntryService(db).list_entries(user_id="user123"))[0]

        assert entry.billable is True
        assert entry.duration_minutes == 30

    async def test_unknown_customer_reference(self, fake_db):
        """Test a dangling customer id keeps the id but has no name."""
        from timeledger.services.time_entry_service import TimeEntryService

        db = fake_db(entry_docs=[{
            "_id": ObjectId(),
            "user_id": "user123",
            "customer_id": "deleted-customer",
            "created_at": CREATED,
        }])

        entry = (await TimeEntryService(db).list_entries(user_id="user123"))[0]

        assert entry.customer_id == "deleted-customer"
        assert entry.customer is None


@pytest.mark.asyncio
class TestTimeEntryServiceRunning:
    """Tests for the running entry lookup."""

    async def test_running_entry(self, fake_db):
        """Test the running entry is returned."""
        from timeledger.services.time_entry_service import TimeEntryService

        start = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
        db = fake_db(running_doc={
            "_id": ObjectId(),
            "user_id": "user123",
            "start_time": start,
            "end_time": None,
            "created_at": start,
        })

        entry = await TimeEntryService(db).get_running_entry(user_id="user123")

        assert entry.start_time == start
        assert entry.end_time is None

    async def test_no_running_entry(self, fake_db):
        """Test None when nothing is running."""
        from timeledger.services.time_entry_service import TimeEntryService

        entry = await TimeEntryService(fake_db()).get_running_entry(user_id="user123")

        assert entry is None


class TestBuildEntryView:
    """Tests for build_entry_view."""

    def test_running_view_counts_elapsed_time(self, make_entry):
        """Test running entries show time elapsed until now."""
        from timeledger.services.time_entry_service import build_entry_view

        start = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
        view = build_entry_view(make_entry(start_time=start), now=start + timedelta(minutes=45))

        assert view.duration_seconds == 2700
        assert view.running is True
        assert view.effective_date == date(2024, 1, 10)

    def test_closed_view(self, make_entry):
        """Test closed entries use their recorded duration."""
        from timeledger.services.time_entry_service import build_entry_view

        view = build_entry_view(
            make_entry(duration_minutes=30, date=date(2024, 1, 2)),
            now=datetime(2024, 1, 10, tzinfo=timezone.utc),
        )

        assert view.duration_seconds == 1800
        assert view.running is False
