"""Time entry service - loads a user's entries from the store."""
import logging
from datetime import datetime, tzinfo
from typing import Optional

from timeledger.models.customer import Customer
from timeledger.models.task import Task
from timeledger.models.time_entry import EntryView, TimeEntry
from timeledger.reporting.dates import resolve_effective_date
from timeledger.reporting.durations import is_running, resolve_duration_seconds

logger = logging.getLogger(__name__)


def _optional_id(value) -> Optional[str]:
    """Stringify a reference id, keeping missing references as None."""
    if value is None or value == "":
        return None
    return str(value)


def build_entry_view(
    entry: TimeEntry, now: datetime, tz: Optional[tzinfo] = None
) -> EntryView:
    """
    Resolve an entry for display, counting a running timer up to ``now``.

    Args:
        entry: Time entry
        now: Reference instant for elapsed time
        tz: Timezone used to resolve the effective date

    Returns:
        Entry with duration and effective date attached
    """
    return EntryView(
        entry=entry,
        duration_seconds=resolve_duration_seconds(entry, now),
        effective_date=resolve_effective_date(entry, tz),
        running=is_running(entry),
    )


class TimeEntryService:
    """Service for reading time entries and the names they reference."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.time_entries = db["time_entries"]
        self.customers = db["customers"]
        self.tasks = db["tasks"]

    def _doc_to_entry(
        self,
        doc: dict,
        customers: Optional[dict[str, Customer]] = None,
        tasks: Optional[dict[str, Task]] = None,
    ) -> TimeEntry:
        """
        Convert database document to TimeEntry model.

        Handles datetime to date conversion for the work date and attaches
        customer and task references when their names are known.
        """
        customer_id = _optional_id(doc.get("customer_id"))
        task_id = _optional_id(doc.get("task_id"))
        work_date = doc.get("date")

        return TimeEntry(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            customer_id=customer_id,
            task_id=task_id,
            description=doc.get("description") or "",
            date=work_date.date() if isinstance(work_date, datetime) else work_date,
            start_time=doc.get("start_time"),
            end_time=doc.get("end_time"),
            duration_minutes=doc.get("duration_minutes"),
            billable=doc.get("billable", True),
            rate=doc.get("rate"),
            created_at=doc["created_at"],
            customer=(customers or {}).get(customer_id) if customer_id else None,
            task=(tasks or {}).get(task_id) if task_id else None,
        )

    async def _load_customers(self, user_id: str) -> dict[str, Customer]:
        cursor = self.customers.find({"user_id": user_id})
        docs = await cursor.to_list(length=None)
        return {
            str(doc["_id"]): Customer(id=str(doc["_id"]), name=doc.get("name") or "")
            for doc in docs
        }

    async def _load_tasks(self, user_id: str) -> dict[str, Task]:
        cursor = self.tasks.find({"user_id": user_id})
        docs = await cursor.to_list(length=None)
        return {
            str(doc["_id"]): Task(id=str(doc["_id"]), name=doc.get("name") or "")
            for doc in docs
        }

    async def list_entries(
        self,
        user_id: str,
    ) -> list[TimeEntry]:
        """
        List time entries for a user, newest first.

        Args:
            user_id: User ID

        Returns:
            List of time entries with customer and task names attached
        """
        cursor = self.time_entries.find({"user_id": user_id}).sort("created_at", -1)
        entry_docs = await cursor.to_list(length=None)

        customers = await self._load_customers(user_id)
        tasks = await self._load_tasks(user_id)

        logger.debug("Loaded %d time entries for user %s", len(entry_docs), user_id)
        return [self._doc_to_entry(doc, customers, tasks) for doc in entry_docs]

    async def get_running_entry(
        self,
        user_id: str,
    ) -> Optional[TimeEntry]:
        """
        Get the entry whose timer is still running, if any.

        Args:
            user_id: User ID

        Returns:
            Running time entry, or None
        """
        running = await self.time_entries.find_one({
            "user_id": user_id,
            "start_time": {"$ne": None},
            "end_time": None,
            "duration_minutes": None,
        })

        if not running:
            return None

        customers = await self._load_customers(user_id)
        tasks = await self._load_tasks(user_id)
        return self._doc_to_entry(running, customers, tasks)
