"""Generic CRUD controller behind every dashboard panel.

A ``ResourcePanel`` lives as long as its tab is selected. Mounting it calls
:meth:`ResourcePanel.load`; every mutation ends with
:meth:`ResourcePanel.refresh`, whether the mutation worked or not.

Failures are logged and swallowed here. Reads keep the rows from the last
good load, and a failed submit leaves the form open with what the user typed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from ..gateway import GatewayClient, GatewayError
from ..logutils import get_logger, submit_with_context, with_context
from ..session import SessionStore
from .schema import FieldKind, FieldSpec, PanelSchema, ReferenceSpec

logger = get_logger(__name__)

ALL_STATUSES = "all"


class ResourcePanel:
    """Load, list, create and patch rows of one table, as described by a schema.

    Attributes:
        rows: Parsed rows from the last successful load.
        references: Reference-list rows keyed by ``ReferenceSpec.key``.
        loading: True until the first load attempt finishes.
        form_open: Whether the create form is showing.
        form_state: Current create-form values keyed by field name.
    """

    def __init__(self, schema: PanelSchema, gateway: GatewayClient, session: SessionStore):
        self.schema = schema
        self._gateway = gateway
        self._session = session
        self.rows: list[BaseModel] = []
        self.references: dict[str, list[dict[str, Any]]] = {ref.key: [] for ref in schema.references}
        self.loading = True
        self.form_open = False
        self.form_state: dict[str, Any] = schema.default_form()

    # ==================== READS ====================

    def _fetch_rows(self) -> list[BaseModel]:
        result = (
            self._gateway.table(self.schema.table)
            .select(self.schema.select)
            .order(self.schema.order_by, desc=self.schema.descending)
            .execute()
        )
        return [self.schema.model.model_validate(row) for row in result.data or []]

    def _fetch_reference(self, ref: ReferenceSpec) -> list[dict[str, Any]]:
        result = self._gateway.table(ref.table).select(ref.columns).order(ref.order_by).execute()
        return list(result.data or [])

    def load(self) -> bool:
        """Fetch the rows and every reference list concurrently.

        All reads must succeed for anything to change; otherwise the error
        is logged and the previous rows and references stay in place.

        Returns:
            True if the panel now shows fresh data.
        """
        with with_context(operation="load", panel=self.schema.key):
            workers = 1 + len(self.schema.references)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"load-{self.schema.key}") as pool:
                rows_future = submit_with_context(pool, self._fetch_rows)
                ref_futures = {
                    ref.key: submit_with_context(pool, self._fetch_reference, ref) for ref in self.schema.references
                }
                try:
                    rows = rows_future.result()
                    references = {key: future.result() for key, future in ref_futures.items()}
                except (GatewayError, ValidationError):
                    logger.exception("Error loading data")
                    return False
                finally:
                    self.loading = False

            self.rows = rows
            self.references = references
            logger.debug("Loaded rows", extra={"extra_data": {"count": len(rows)}})
            return True

    def refresh(self) -> bool:
        """Reload after a mutation; the one post-write contract for all panels."""
        return self.load()

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def visible_rows(self, status_filter: str = ALL_STATUSES) -> list[BaseModel]:
        """Rows matching ``status_filter`` (``"all"`` shows everything)."""
        if status_filter == ALL_STATUSES or not self.schema.status_field:
            return list(self.rows)
        return [row for row in self.rows if getattr(row, self.schema.status_field) == status_filter]

    def find_row(self, row_id: str) -> BaseModel:
        for row in self.rows:
            if getattr(row, "id", None) == row_id:
                return row
        raise KeyError(f"No {self.schema.key} row with id {row_id!r} is loaded")

    def options_for(self, spec: FieldSpec) -> list[tuple[str, str]]:
        """``(value, label)`` choices for a select field."""
        if spec.reference is None:
            return list(spec.options)
        ref = self.schema.reference(spec.reference)
        return [
            (str(row["id"]), str(row.get(ref.label_field) or ""))
            for row in self.references.get(ref.key, [])
        ]

    # ==================== CREATE FORM ====================

    def open_form(self) -> None:
        self.form_open = True

    def close_form(self) -> None:
        self.form_open = False

    def set_field(self, name: str, value: Any) -> None:
        self.schema.field_spec(name)
        self.form_state[name] = value

    def reset_form(self) -> None:
        self.form_state = self.schema.default_form()

    def missing_required(self, form_state: Optional[dict[str, Any]] = None) -> list[str]:
        """Names of required fields that are blank; checked by the input layer."""
        state = self.form_state if form_state is None else form_state
        return [
            spec.name for spec in self.schema.fields if spec.required and spec.is_blank(state.get(spec.name))
        ]

    def _payload(self, state: dict[str, Any]) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for spec in self.schema.fields:
            value = state.get(spec.name, spec.default)
            if spec.kind == FieldKind.CHECKBOX:
                value = bool(value)
            elif isinstance(value, date):
                value = value.isoformat()
            elif spec.is_blank(value):
                value = None
            payload[spec.name] = value
        return payload

    def submit(self, form_state: Optional[dict[str, Any]] = None) -> bool:
        """Insert one row from the form state.

        Required fields are not re-checked here. On success the form closes
        and resets; on failure it stays open with its values. Either way the
        panel refreshes.

        Returns:
            True if the row was created.
        """
        if form_state is not None:
            self.form_state = dict(form_state)

        with with_context(operation="submit", panel=self.schema.key):
            try:
                payload = self._payload(self.form_state)
                if self.schema.attribution_field:
                    payload[self.schema.attribution_field] = self._session.current_identity.id
                self._gateway.table(self.schema.table).insert(payload).execute()
            except GatewayError:
                logger.exception("Error creating record")
                created = False
            else:
                logger.info("Record created")
                self.form_open = False
                self.reset_form()
                created = True

            self.refresh()
            return created

    # ==================== PATCHES ====================

    def update_field(self, row_id: str, name: str, value: Any) -> bool:
        """Patch one column of one row by primary key, then refresh regardless."""
        with with_context(operation="update", panel=self.schema.key):
            try:
                self._gateway.table(self.schema.table).update({name: value}).eq("id", row_id).execute()
            except GatewayError:
                logger.exception("Error updating record", extra={"extra_data": {"id": row_id, "field": name}})
                updated = False
            else:
                updated = True

            self.refresh()
            return updated

    def update_status(self, row_id: str, status: str) -> bool:
        """Set the status column. Every status may follow every other.

        Raises:
            ValueError: If this panel has no status column or ``status`` is
                not one of its options.
        """
        if not self.schema.status_field:
            raise ValueError(f"{self.schema.key} rows have no status")
        if status not in self.schema.status_values:
            raise ValueError(f"{status!r} is not one of {', '.join(self.schema.status_values)}")
        return self.update_field(row_id, self.schema.status_field, status)

    def toggle(self, row_id: str) -> bool:
        """Flip the toggle column from its currently loaded value.

        Raises:
            ValueError: If this panel has no toggle column.
            KeyError: If the row is not in the loaded list.
        """
        if not self.schema.toggle_field:
            raise ValueError(f"{self.schema.key} rows have nothing to toggle")
        current = bool(getattr(self.find_row(row_id), self.schema.toggle_field))
        return self.update_field(row_id, self.schema.toggle_field, not current)
