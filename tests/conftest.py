"""Pytest configuration and fixtures for Behavior Tracker tests.

HTTP never leaves the process: every gateway client hands the Supabase SDK an
``httpx.Client`` on an ``httpx.MockTransport`` backed by :class:`FakeSupabase`,
an in-memory stand-in for the auth and REST endpoints that answers in the
service's own wire format.
"""

import json
import os
import re
import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from behavior_tracker.config import AppConfig  # noqa: E402
from behavior_tracker.gateway import GatewayClient  # noqa: E402
from behavior_tracker.logutils import clear_context, reset_config, reset_logging  # noqa: E402
from behavior_tracker.session import SessionStore  # noqa: E402

SUPABASE_URL = "https://school.example.supabase.co"
ANON_KEY = "anon-test-key"

STAFF_EMAIL = "teacher@school.edu"
STAFF_PASSWORD = "correct-horse"

# Embedded relation name -> foreign key column on the parent row
EMBEDS = {
    "students": "student_id",
    "incident_types": "incident_type_id",
}

# Server-side column defaults applied on insert
TABLE_DEFAULTS = {
    "students": {"enrollment_status": "active"},
    "incidents": {"status": "open"},
    "counseling_records": {"follow_up_required": False},
    "device_usage_records": {"flagged": False},
}

# Insert sets this column to now() when it is missing
NOW_COLUMNS = {
    "incidents": "date_reported",
    "counseling_records": "session_date",
    "peer_mediation_sessions": "session_date",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _filter_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _auth_failure(status: int, error_code: str, message: str) -> httpx.Response:
    return httpx.Response(status, json={"code": status, "error_code": error_code, "msg": message})


class FakeSupabase:
    """In-memory auth service and tables behind an httpx mock transport.

    Attributes:
        tables: Rows per table name.
        requests: Every request received, in order.
        failing: Table names whose every request answers HTTP 500.
        failing_writes: Table names whose inserts and updates answer HTTP 500.
        confirm_email: Sign-up returns a bare user instead of a session.
        reject_refresh: Refresh-token grants are refused.
        logout_fails: The logout endpoint answers HTTP 500.
        logout_unreachable: Logout requests fail with a connection error.
        expires_in: Lifetime in seconds of issued access tokens.
    """

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.users: dict[str, dict[str, Any]] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.failing: set[str] = set()
        self.failing_writes: set[str] = set()
        self.confirm_email = False
        self.reject_refresh = False
        self.logout_fails = False
        self.logout_unreachable = False
        self.expires_in = 3600
        self._lock = threading.Lock()

    # ==================== SEEDING ====================

    def add_user(self, email: str, password: str) -> dict[str, Any]:
        user = {"id": str(uuid.uuid4()), "email": email, "password": password, "created_at": _now()}
        self.users[email] = user
        return user

    def insert_row(self, table: str, **values: Any) -> dict[str, Any]:
        row = {"id": str(uuid.uuid4()), "created_at": _now()}
        row.update(TABLE_DEFAULTS.get(table, {}))
        if table in NOW_COLUMNS:
            row[NOW_COLUMNS[table]] = _now()
        row.update(values)
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.get(table, [])

    def requests_to(self, table: str, method: Optional[str] = None) -> list[httpx.Request]:
        path = f"/rest/v1/{table}"
        return [r for r in self.requests if r.url.path == path and (method is None or r.method == method)]

    # ==================== TRANSPORT ====================

    def handle(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
            path = request.url.path
            if path == "/auth/v1/logout" and self.logout_unreachable:
                raise httpx.ConnectError("connection refused", request=request)
            if path.startswith("/auth/v1/"):
                return self._auth(path.removeprefix("/auth/v1/"), request)
            if path.startswith("/rest/v1/"):
                return self._rest(path.removeprefix("/rest/v1/"), request)
            return self._rest_failure(404, "Not found", "PGRST125")

    # ---- auth ----

    @staticmethod
    def _user_body(user: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": user["id"],
            "aud": "authenticated",
            "role": "authenticated",
            "email": user["email"],
            "app_metadata": {"provider": "email"},
            "user_metadata": {},
            "created_at": user["created_at"],
        }

    def _issue(self, user: dict[str, Any]) -> dict[str, Any]:
        refresh_token = uuid.uuid4().hex
        self.refresh_tokens[refresh_token] = user["email"]
        return {
            "access_token": f"user-token-{uuid.uuid4().hex}",
            "token_type": "bearer",
            "expires_in": self.expires_in,
            "expires_at": int(time.time()) + self.expires_in,
            "refresh_token": refresh_token,
            "user": self._user_body(user),
        }

    def _auth(self, route: str, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}

        if route == "signup":
            if body["email"] in self.users:
                return _auth_failure(422, "user_already_exists", "User already registered")
            if len(body["password"]) < 6:
                return _auth_failure(422, "weak_password", "Password should be at least 6 characters")
            user = self.add_user(body["email"], body["password"])
            if self.confirm_email:
                return httpx.Response(200, json=self._user_body(user))
            return httpx.Response(200, json=self._issue(user))

        if route == "token":
            grant_type = request.url.params.get("grant_type")
            if grant_type == "password":
                user = self.users.get(body.get("email", ""))
                if user is None or user["password"] != body.get("password"):
                    return _auth_failure(400, "invalid_credentials", "Invalid login credentials")
                return httpx.Response(200, json=self._issue(user))
            if grant_type == "refresh_token":
                email = self.refresh_tokens.pop(body.get("refresh_token", ""), None)
                if self.reject_refresh or email is None:
                    return _auth_failure(400, "refresh_token_not_found", "Invalid Refresh Token: Refresh Token Not Found")
                return httpx.Response(200, json=self._issue(self.users[email]))

        if route == "logout":
            if self.logout_fails:
                return httpx.Response(500, json={"code": 500, "msg": "Logout failed"})
            return httpx.Response(204)

        return httpx.Response(404, json={"code": 404, "msg": f"Unknown auth route {route}"})

    # ---- rest ----

    @staticmethod
    def _rest_failure(status: int, message: str, code: str) -> httpx.Response:
        return httpx.Response(status, json={"message": message, "code": code, "details": None, "hint": None})

    def _rest(self, table: str, request: httpx.Request) -> httpx.Response:
        if table in self.failing or (table in self.failing_writes and request.method in ("POST", "PATCH")):
            return self._rest_failure(500, f"relation {table} is unavailable", "XX000")

        params = request.url.params
        filters = [
            (column, value.removeprefix("eq."))
            for column, value in params.multi_items()
            if column not in ("select", "order", "limit") and value.startswith("eq.")
        ]
        matched = [
            row
            for row in self.tables.get(table, [])
            if all(_filter_text(row.get(column)) == value for column, value in filters)
        ]

        if request.method in ("GET", "HEAD"):
            rows = self._order([self._embed(row, params.get("select", "*")) for row in matched], params.get("order"))
            if "limit" in params:
                rows = rows[: int(params["limit"])]
            headers = {}
            if "count=exact" in request.headers.get("prefer", ""):
                headers["Content-Range"] = f"0-{len(rows) - 1}/{len(rows)}" if rows else "*/0"
            if request.method == "HEAD":
                return httpx.Response(200, headers=headers)
            return httpx.Response(200, json=rows, headers=headers)

        body = json.loads(request.content)
        if request.method == "POST":
            created = [self.insert_row(table, **values) for values in (body if isinstance(body, list) else [body])]
            return httpx.Response(201, json=created)

        if request.method == "PATCH":
            for row in matched:
                row.update(body)
            return httpx.Response(200, json=matched)

        return self._rest_failure(405, "Method not allowed", "PGRST105")

    def _embed(self, row: dict[str, Any], select: str) -> dict[str, Any]:
        result = dict(row)
        for relation in re.findall(r"(\w+)\(", select):
            foreign_key = EMBEDS[relation]
            result[relation] = next(
                (dict(other) for other in self.tables.get(relation, []) if other["id"] == row.get(foreign_key)),
                None,
            )
        return result

    @staticmethod
    def _order(rows: list[dict[str, Any]], order: Optional[str]) -> list[dict[str, Any]]:
        if not order:
            return rows
        for term in reversed(order.split(",")):
            column, direction = term.rsplit(".", 1)
            # Nulls sort last ascending and first descending
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, r.get(column) or ""),
                reverse=direction == "desc",
            )
        return rows


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Drop logging configuration and context between tests."""
    clear_context()
    yield
    clear_context()


@pytest.fixture
def clean_logging():
    """Reset logging and config before and after a logging test."""
    reset_logging()
    reset_config()
    yield
    reset_logging()
    reset_config()


@pytest.fixture
def config() -> AppConfig:
    """Gateway settings; tokens are refreshed on demand only, never by a timer thread."""
    return AppConfig(supabase_url=SUPABASE_URL, anon_key=ANON_KEY, auto_refresh_token=False)


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    """Backend seeded with the role and incident-type reference rows."""
    fake = FakeSupabase()
    for name in ("admin", "teacher", "counselor", "student", "parent"):
        fake.insert_row("roles", name=name)
    for name in ("Bullying", "Tardiness", "Device misuse"):
        fake.insert_row("incident_types", name=name)
    return fake


@pytest.fixture
def gateway(config, fake_supabase):
    client = GatewayClient(config, transport=httpx.MockTransport(fake_supabase.handle))
    yield client
    client.close()


@pytest.fixture
def store(gateway):
    session_store = SessionStore(gateway)
    yield session_store
    session_store.close()


@pytest.fixture
def staff_account(fake_supabase) -> dict[str, Any]:
    return fake_supabase.add_user(STAFF_EMAIL, STAFF_PASSWORD)


@pytest.fixture
def signed_in_store(store, staff_account) -> SessionStore:
    """Session store resolved and signed in as the staff account."""
    store.start()
    store.sign_in(STAFF_EMAIL, STAFF_PASSWORD)
    return store
