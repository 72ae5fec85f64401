"""The five dashboard panels, as schemas."""

from datetime import date, datetime
from typing import Union

from ..models import (
    CounselingRecord,
    DeviceUsageRecord,
    EnrollmentStatus,
    Incident,
    IncidentStatus,
    PeerMediationSession,
    Student,
)
from .schema import ColumnSpec, FieldKind, FieldSpec, PanelSchema, ReferenceSpec


def format_date(value: Union[date, datetime]) -> str:
    return value.strftime("%Y-%m-%d")


def format_datetime(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def format_yes_no(value: bool) -> str:
    return "Yes" if value else "No"


STUDENTS_REFERENCE = ReferenceSpec(key="students", table="students", order_by="full_name", label_field="full_name")
INCIDENT_TYPES_REFERENCE = ReferenceSpec(
    key="incident_types", table="incident_types", order_by="name", label_field="name"
)

INCIDENT_STATUS_OPTIONS = tuple((status.value, status.value.title()) for status in IncidentStatus)


STUDENTS = PanelSchema(
    key="students",
    title="Student Management",
    subtitle="Register and review student profiles",
    table="students",
    model=Student,
    order_by="full_name",
    fields=(
        FieldSpec("full_name", "Full Name", required=True),
        FieldSpec("grade_level", "Grade Level", placeholder="e.g., 7"),
        FieldSpec("section", "Section", placeholder="e.g., Rizal"),
        FieldSpec("date_of_birth", "Date of Birth", FieldKind.DATE, default=None),
        FieldSpec("contact_number", "Contact Number"),
        FieldSpec("address", "Address", FieldKind.TEXTAREA),
        FieldSpec(
            "enrollment_status",
            "Enrollment Status",
            FieldKind.SELECT,
            default=EnrollmentStatus.ACTIVE.value,
            options=tuple((status.value, status.value.title()) for status in EnrollmentStatus),
        ),
    ),
    columns=(
        ColumnSpec("Name", "full_name"),
        ColumnSpec("Grade / Section", "grade_section", fallback="-"),
        ColumnSpec("Contact", "contact_number", fallback="-"),
        ColumnSpec("Status", "enrollment_status"),
    ),
    empty_message="No students found",
    create_label="Add Student",
    form_title="Register New Student",
)


INCIDENTS = PanelSchema(
    key="incidents",
    title="Incident Management",
    subtitle="Track and manage behavioral incidents",
    table="incidents",
    model=Incident,
    select="*, students(*), incident_types(*)",
    order_by="date_reported",
    descending=True,
    references=(STUDENTS_REFERENCE, INCIDENT_TYPES_REFERENCE),
    fields=(
        FieldSpec("student_id", "Student", FieldKind.SELECT, required=True, reference="students"),
        FieldSpec("incident_type_id", "Incident Type", FieldKind.SELECT, required=True, reference="incident_types"),
        FieldSpec("location", "Location", placeholder="e.g., Classroom 101, Cafeteria"),
        FieldSpec("description", "Description", FieldKind.TEXTAREA, required=True),
        FieldSpec("immediate_action", "Immediate Action Taken", FieldKind.TEXTAREA),
        FieldSpec("status", "Status", FieldKind.HIDDEN, default=IncidentStatus.OPEN.value),
    ),
    columns=(
        ColumnSpec("Student", "students.full_name", fallback="Unknown student"),
        ColumnSpec("Type", "incident_types.name", fallback="Unknown"),
        ColumnSpec("Location", "location", fallback="Not specified"),
        ColumnSpec("Date", "date_reported", fallback="-", formatter=format_date),
    ),
    heading_path="students.full_name",
    details=(
        ColumnSpec("Description", "description"),
        ColumnSpec("Action Taken", "immediate_action"),
    ),
    attribution_field="reported_by_user_id",
    status_field="status",
    status_options=INCIDENT_STATUS_OPTIONS,
    empty_message="No incidents found",
    create_label="Report Incident",
    form_title="Report New Incident",
)


COUNSELING = PanelSchema(
    key="counseling",
    title="Counseling Records",
    subtitle="Document guidance sessions and follow-ups",
    table="counseling_records",
    model=CounselingRecord,
    select="*, students(*)",
    order_by="session_date",
    descending=True,
    references=(STUDENTS_REFERENCE,),
    fields=(
        FieldSpec("student_id", "Student", FieldKind.SELECT, required=True, reference="students"),
        FieldSpec("session_notes", "Session Notes", FieldKind.TEXTAREA),
        FieldSpec("outcome", "Outcome", FieldKind.TEXTAREA),
        FieldSpec("follow_up_required", "Follow-up required", FieldKind.CHECKBOX, default=False),
    ),
    columns=(
        ColumnSpec("Student", "students.full_name", fallback="Unknown student"),
        ColumnSpec("Session Date", "session_date", fallback="-", formatter=format_date),
        ColumnSpec("Follow-up", "follow_up_required", formatter=format_yes_no),
    ),
    heading_path="students.full_name",
    details=(
        ColumnSpec("Notes", "session_notes"),
        ColumnSpec("Outcome", "outcome"),
    ),
    attribution_field="counselor_user_id",
    empty_message="No counseling records found",
    create_label="New Session",
    form_title="New Counseling Session",
)


PEER_MEDIATION = PanelSchema(
    key="mediation",
    title="Peer Mediation",
    subtitle="Record mediation sessions between students",
    table="peer_mediation_sessions",
    model=PeerMediationSession,
    order_by="session_date",
    descending=True,
    fields=(
        FieldSpec("notes", "Session Notes", FieldKind.TEXTAREA),
        FieldSpec("outcome", "Outcome", FieldKind.TEXTAREA),
    ),
    columns=(ColumnSpec("Session Date", "session_date", fallback="-", formatter=format_date),),
    details=(
        ColumnSpec("Notes", "notes"),
        ColumnSpec("Outcome", "outcome"),
    ),
    attribution_field="mediator_user_id",
    empty_message="No peer mediation sessions found",
    create_label="New Session",
    form_title="New Mediation Session",
)


DEVICE_USAGE = PanelSchema(
    key="devices",
    title="Device Usage Tracking",
    subtitle="Monitor student device usage and activities",
    table="device_usage_records",
    model=DeviceUsageRecord,
    select="*, students(*)",
    order_by="usage_start",
    descending=True,
    references=(STUDENTS_REFERENCE,),
    fields=(
        FieldSpec("student_id", "Student", FieldKind.SELECT, required=True, reference="students"),
        FieldSpec("device_id", "Device ID", placeholder="e.g., TAB-042"),
        FieldSpec("usage_start", "Start Time", FieldKind.DATETIME, default=None),
        FieldSpec("usage_end", "End Time", FieldKind.DATETIME, default=None),
        FieldSpec("activity_description", "Activity Description", FieldKind.TEXTAREA),
        FieldSpec("flagged", "Flag for review", FieldKind.CHECKBOX, default=False),
    ),
    columns=(
        ColumnSpec("Student", "students.full_name", fallback="Unknown student"),
        ColumnSpec("Device ID", "device_id", fallback="-"),
        ColumnSpec("Start Time", "usage_start", fallback="-", formatter=format_datetime),
        ColumnSpec("End Time", "usage_end", fallback="In Use", formatter=format_datetime),
        ColumnSpec("Activity", "activity_description", fallback="-"),
    ),
    toggle_field="flagged",
    toggle_labels=("Normal", "Flagged"),
    empty_message="No device usage records found",
    create_label="Log Usage",
    form_title="Log Device Usage",
)


PANELS: dict[str, PanelSchema] = {
    schema.key: schema for schema in (STUDENTS, INCIDENTS, COUNSELING, PEER_MEDIATION, DEVICE_USAGE)
}
