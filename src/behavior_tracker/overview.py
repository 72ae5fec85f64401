"""Headline counts for the dashboard landing page."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from .gateway import GatewayClient, GatewayError, TableQuery
from .logutils import get_logger, submit_with_context, with_context
from .models import IncidentStatus

logger = get_logger(__name__)


def _count(query: TableQuery) -> int:
    return query.execute().count or 0


@dataclass(frozen=True)
class OverviewStats:
    total_students: int = 0
    open_incidents: int = 0
    counseling_sessions: int = 0
    active_interventions: int = 0

    @classmethod
    def load(cls, gateway: GatewayClient) -> "OverviewStats":
        """Count students, open incidents, counseling sessions and interventions.

        The four head-only counts run concurrently. A count that fails is
        logged and reads zero; the others keep their values.
        """
        queries: dict[str, Callable[[], TableQuery]] = {
            "total_students": lambda: gateway.table("students").select("id", count="exact", head=True),
            "open_incidents": lambda: gateway.table("incidents")
            .select("id", count="exact", head=True)
            .eq("status", IncidentStatus.OPEN.value),
            "counseling_sessions": lambda: gateway.table("counseling_records").select(
                "id", count="exact", head=True
            ),
            "active_interventions": lambda: gateway.table("behavioral_interventions").select(
                "id", count="exact", head=True
            ),
        }

        with with_context(operation="load", panel="overview"):
            with ThreadPoolExecutor(max_workers=len(queries), thread_name_prefix="overview") as pool:
                futures = {name: submit_with_context(pool, _count, build()) for name, build in queries.items()}
                counts: dict[str, int] = {}
                for name, future in futures.items():
                    try:
                        counts[name] = future.result()
                    except GatewayError:
                        logger.exception("Error loading stats", extra={"extra_data": {"stat": name}})
                        counts[name] = 0
            return cls(**counts)


@dataclass(frozen=True)
class QuickAction:
    """Shortcut on the overview that opens another panel's create form."""

    title: str
    description: str
    tab: str


QUICK_ACTIONS = (
    QuickAction("Report Incident", "Document a new behavioral incident", "incidents"),
    QuickAction("Add Student", "Register a new student profile", "students"),
    QuickAction("Schedule Counseling", "Create a new counseling session", "counseling"),
)


def find_quick_action(title: str) -> Optional[QuickAction]:
    for action in QUICK_ACTIONS:
        if action.title == title:
            return action
    return None
