"""Streamlit rendering for any :class:`ResourcePanel`."""

from datetime import datetime, time
from typing import Any, Optional

import streamlit as st
from pydantic import BaseModel

from ..panels import ALL_STATUSES, FieldKind, FieldSpec, ResourcePanel


def render_panel(panel: ResourcePanel) -> None:
    schema = panel.schema

    header, action = st.columns([4, 1], vertical_alignment="bottom")
    with header:
        st.title(schema.title)
        st.caption(schema.subtitle)
    with action:
        if st.button(schema.create_label, key=f"{schema.key}-open-form", use_container_width=True):
            panel.open_form()

    if panel.form_open:
        _render_form(panel)

    status_filter = ALL_STATUSES
    if schema.status_field:
        choices = [ALL_STATUSES, *schema.status_values]
        status_filter = st.selectbox(
            "Filter by status",
            choices,
            format_func=lambda value: "All Statuses" if value == ALL_STATUSES else value.title(),
            key=f"{schema.key}-status-filter",
        )

    rows = panel.visible_rows(status_filter)
    if not rows:
        st.info(schema.empty_message)
        return

    for row in rows:
        _render_row(panel, row)


def _render_row(panel: ResourcePanel, row: BaseModel) -> None:
    schema = panel.schema
    row_id = getattr(row, "id")

    with st.container(border=True):
        info, controls = st.columns([4, 1])
        with info:
            heading = schema.heading_column
            if heading is not None:
                st.markdown(f"**{heading.render(row)}**")
            st.markdown(
                "  \n".join(
                    f"**{column.label}:** {column.render(row)}"
                    for column in schema.columns
                    if column is not heading
                )
            )
            for detail in schema.details:
                text = detail.render(row)
                if text:
                    st.markdown(f"**{detail.label}:** {text}")

        with controls:
            if schema.status_field:
                current = getattr(row, schema.status_field)
                values = list(schema.status_values)
                key = f"{schema.key}-status-{row_id}"
                # Show the loaded status, not a pick the server refused
                if current in values and st.session_state.get(key) != current:
                    st.session_state[key] = current
                st.selectbox(
                    "Status",
                    values,
                    format_func=str.title,
                    key=key,
                    label_visibility="collapsed",
                    on_change=_change_status,
                    args=(panel, row_id, key),
                )

            if schema.toggle_field:
                flagged = bool(getattr(row, schema.toggle_field))
                off_label, on_label = schema.toggle_labels
                st.button(
                    on_label if flagged else off_label,
                    key=f"{schema.key}-toggle-{row_id}",
                    type="primary" if flagged else "secondary",
                    use_container_width=True,
                    on_click=panel.toggle,
                    args=(row_id,),
                )


def _change_status(panel: ResourcePanel, row_id: str, key: str) -> None:
    """Patch the row once, from the widget callback, before the rerun renders."""
    panel.update_status(row_id, st.session_state[key])


def _render_form(panel: ResourcePanel) -> None:
    schema = panel.schema

    with st.form(f"{schema.key}-create-form", border=True):
        st.subheader(schema.form_title)
        values = dict(panel.form_state)
        for spec in schema.fields:
            if spec.kind != FieldKind.HIDDEN:
                values[spec.name] = _render_input(panel, spec, values.get(spec.name))

        submit_col, cancel_col = st.columns(2)
        with submit_col:
            submitted = st.form_submit_button("Submit", type="primary", use_container_width=True)
        with cancel_col:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        panel.form_state = values
        panel.close_form()
        st.rerun()

    if submitted:
        missing = panel.missing_required(values)
        if missing:
            labels = ", ".join(schema.field_spec(name).label for name in missing)
            st.error(f"Please fill in the required fields: {labels}")
            return
        if panel.submit(values):
            _clear_form_widgets(panel)
        st.rerun()


def _clear_form_widgets(panel: ResourcePanel) -> None:
    # Widgets keep their own state across reruns; drop it so defaults show again
    prefix = f"{panel.schema.key}-field-"
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def _render_input(panel: ResourcePanel, spec: FieldSpec, value: Any) -> Any:
    key = f"{panel.schema.key}-field-{spec.name}"
    label = f"{spec.label} *" if spec.required else spec.label

    if spec.kind == FieldKind.TEXTAREA:
        return st.text_area(label, value=value or "", placeholder=spec.placeholder, key=key)
    if spec.kind == FieldKind.CHECKBOX:
        return st.checkbox(label, value=bool(value), key=key)
    if spec.kind == FieldKind.DATE:
        return st.date_input(label, value=value, key=key)
    if spec.kind == FieldKind.DATETIME:
        return _datetime_input(label, value, key)
    if spec.kind == FieldKind.SELECT:
        options = panel.options_for(spec)
        labels = dict(options)
        choices = [value for value, _label in options]
        if not spec.required or spec.default in ("", None):
            choices = ["", *choices]
        current = value if value in choices else choices[0] if choices else ""
        return st.selectbox(
            label,
            choices,
            index=choices.index(current) if choices else None,
            format_func=lambda choice: labels.get(choice, f"Select {spec.label.lower()}"),
            key=key,
        )
    return st.text_input(label, value=value or "", placeholder=spec.placeholder, key=key)


def _datetime_input(label: str, value: Optional[datetime], key: str) -> Optional[datetime]:
    day_col, time_col = st.columns(2)
    with day_col:
        day = st.date_input(label, value=value.date() if value else None, key=f"{key}-date")
    with time_col:
        at = st.time_input(f"{label} (time)", value=value.time() if value else None, key=f"{key}-time")
    if day is None:
        return None
    return datetime.combine(day, at or time())
