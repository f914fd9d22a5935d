"""
Toggl Track API client.
Docs: https://engineering.toggl.com/docs/
"""

import base64
import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional
import logging

from backoffice.core.config import settings
from backoffice.core.exceptions import ConfigurationError, UpstreamServiceError
from backoffice.core.integrations.http.http_client import HttpClient

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def seconds_to_hours(seconds: int) -> Decimal:
    """Convert a duration to hours rounded to 2 decimal places."""
    return (Decimal(seconds) / Decimal(3600)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a ``YYYY-MM`` month."""
    year, month_num = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last_day)


@dataclass
class TimeEntry:
    date: str
    description: str
    duration_seconds: int
    duration_hours: Decimal


@dataclass
class TimeEntrySummary:
    total_seconds: int
    total_hours: Decimal
    entries: List[TimeEntry] = field(default_factory=list)


@dataclass
class MonthToDateHours:
    total_hours: Decimal
    month: str
    entry_count: int


@dataclass
class TogglClientRecord:
    id: int
    name: str
    notes: Optional[str] = None


class TogglClient:
    """Wraps the Toggl Track v9 and Reports v3 APIs."""

    def __init__(
        self,
        api_token: Optional[str] = None,
        workspace_id: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        reports_client: Optional[HttpClient] = None,
    ):
        self.api_token = api_token if api_token is not None else settings.TOGGL_API_TOKEN
        self.workspace_id = workspace_id if workspace_id is not None else settings.TOGGL_WORKSPACE_ID
        self.http = http_client or HttpClient(
            base_url=settings.TOGGL_API_BASE,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            service_name="Toggl",
        )
        self.reports = reports_client or HttpClient(
            base_url=settings.TOGGL_REPORTS_BASE,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            service_name="Toggl Reports",
        )

    def _auth_headers(self) -> Dict[str, str]:
        if not self.api_token:
            raise ConfigurationError("TOGGL_API_TOKEN environment variable is not set")
        # Basic auth with the API token as username and the literal "api_token" as password
        credentials = base64.b64encode(f"{self.api_token}:api_token".encode()).decode()
        return {
            "Authorization": f"Basic {credentials}",
            "Content-Type": "application/json",
        }

    def _workspace(self) -> str:
        if not self.workspace_id:
            raise ConfigurationError("TOGGL_WORKSPACE_ID environment variable is not set")
        return self.workspace_id

    async def _list_time_entries(self, start: date, end: date) -> List[Dict[str, Any]]:
        """Time entries from ``start`` up to but not including ``end``."""
        entries = await self.http.get_json(
            "/me/time_entries",
            params={"start_date": start.isoformat(), "end_date": end.isoformat()},
            headers=self._auth_headers(),
        )
        if not isinstance(entries, list):
            raise UpstreamServiceError("Toggl API returned an unexpected time entry payload")
        return entries

    async def fetch_time_entries(self, project_id: str, month: str) -> TimeEntrySummary:
        """
        Fetch and aggregate a project's completed time entries for a month.

        Args:
            project_id: Toggl project id
            month: Month in YYYY-MM format

        Returns:
            TimeEntrySummary with totals and per-entry rows
        """
        self._workspace()
        start, end = month_bounds(month)
        raw_entries = await self._list_time_entries(start, end + timedelta(days=1))

        project_entries = [
            e for e in raw_entries
            if str(e.get("project_id")) == str(project_id) and (e.get("duration") or 0) > 0
        ]
        total_seconds = sum(e["duration"] for e in project_entries)
        logger.info(
            "Fetched Toggl time entries",
            extra={"project_id": project_id, "month": month, "entry_count": len(project_entries)},
        )

        return TimeEntrySummary(
            total_seconds=total_seconds,
            total_hours=seconds_to_hours(total_seconds),
            entries=[
                TimeEntry(
                    date=(e.get("start") or "").split("T")[0],
                    description=e.get("description") or "(no description)",
                    duration_seconds=e["duration"],
                    duration_hours=seconds_to_hours(e["duration"]),
                )
                for e in project_entries
            ],
        )

    async def fetch_timesheet_pdf(self, project_id: str, month: str) -> bytes:
        """Render the detailed monthly report for a project as a PDF."""
        workspace_id = self._workspace()
        start, end = month_bounds(month)
        return await self.reports.post_for_bytes(
            f"/workspace/{workspace_id}/search/time_entries.pdf",
            json={
                "start_date": start.isoformat(),
                # Reports takes an inclusive end date
                "end_date": end.isoformat(),
                "project_ids": [int(project_id)],
                "grouped": True,
                "sub_grouping": "time_entries",
            },
            headers=self._auth_headers(),
        )

    async def fetch_clients(self) -> List[TogglClientRecord]:
        """List clients in the configured workspace."""
        workspace_id = self._workspace()
        data = await self.http.get_json(
            f"/workspaces/{workspace_id}/clients",
            headers=self._auth_headers(),
        )
        return [
            TogglClientRecord(id=c["id"], name=c["name"], notes=c.get("notes"))
            for c in (data or [])
        ]

    async def fetch_month_to_date_hours(self, today: Optional[date] = None) -> MonthToDateHours:
        """Total completed hours across all projects since the first of the month."""
        self._workspace()
        today = today or datetime.now(tz=timezone.utc).date()
        start = today.replace(day=1)
        raw_entries = await self._list_time_entries(start, today + timedelta(days=1))
        completed = [e for e in raw_entries if (e.get("duration") or 0) > 0]
        return MonthToDateHours(
            total_hours=seconds_to_hours(sum(e["duration"] for e in completed)),
            month=today.strftime("%Y-%m"),
            entry_count=len(completed),
        )

    async def verify_connection(self) -> Dict[str, Any]:
        """Check credentials against the /me endpoint."""
        try:
            data = await self.http.get_json("/me", headers=self._auth_headers())
        except (ConfigurationError, UpstreamServiceError) as e:
            return {"success": False, "error": e.message}
        return {"success": True, "email": data.get("email")}

    async def close(self) -> None:
        await self.http.close()
        await self.reports.close()
