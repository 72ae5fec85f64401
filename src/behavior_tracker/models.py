"""Pydantic models for rows returned by the gateway."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Row(BaseModel):
    """Base for table rows; unknown server-side columns are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: Optional[datetime] = None


class IncidentStatus(str, Enum):
    """Incident workflow status; any status may follow any other."""

    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TRANSFERRED = "transferred"
    GRADUATED = "graduated"


class RoleName(str, Enum):
    """Roles offered when creating an account."""

    ADMIN = "admin"
    TEACHER = "teacher"
    COUNSELOR = "counselor"
    STUDENT = "student"
    PARENT = "parent"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS = {
    RoleName.ADMIN: "Administrator",
    RoleName.TEACHER: "Teacher",
    RoleName.COUNSELOR: "Guidance Counselor",
    RoleName.STUDENT: "Student",
    RoleName.PARENT: "Parent",
}


# ==================== AUTH ====================


class Identity(BaseModel):
    """The authenticated principal: opaque id plus email."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    email: Optional[str] = None


class AuthSession(BaseModel):
    """Tokens issued by the auth service for one signed-in identity."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    user: Identity


# ==================== REFERENCE DATA ====================


class Role(Row):
    name: str
    description: Optional[str] = None


class UserRole(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str
    role_id: str


class IncidentType(Row):
    name: str
    description: Optional[str] = None


# ==================== PEOPLE ====================


class Student(Row):
    user_id: Optional[str] = None
    full_name: str
    grade_level: Optional[str] = None
    section: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    contact_number: Optional[str] = None
    enrollment_status: str = EnrollmentStatus.ACTIVE.value

    @property
    def grade_section(self) -> str:
        parts = [p for p in (self.grade_level, self.section) if p]
        return " - ".join(parts)


class ParentGuardian(Row):
    user_id: Optional[str] = None
    full_name: str
    relationship_to_student: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


# ==================== BEHAVIOR RECORDS ====================


class Incident(Row):
    reported_by_user_id: Optional[str] = None
    student_id: str
    incident_type_id: Optional[str] = None
    date_reported: Optional[datetime] = None
    location: Optional[str] = None
    immediate_action: Optional[str] = None
    description: Optional[str] = None
    status: str = IncidentStatus.OPEN.value

    # Embedded relations (select "*, students(*), incident_types(*)")
    students: Optional[Student] = None
    incident_types: Optional[IncidentType] = None


class CounselingRecord(Row):
    student_id: str
    counselor_user_id: Optional[str] = None
    session_date: Optional[datetime] = None
    session_notes: Optional[str] = None
    outcome: Optional[str] = None
    follow_up_required: bool = False
    modified_at: Optional[datetime] = None

    students: Optional[Student] = None


class PeerMediationSession(Row):
    mediator_user_id: Optional[str] = None
    session_date: Optional[datetime] = None
    notes: Optional[str] = None
    outcome: Optional[str] = None
    modified_at: Optional[datetime] = None


class DeviceUsageRecord(Row):
    student_id: str
    device_id: Optional[str] = None
    usage_start: Optional[datetime] = None
    usage_end: Optional[datetime] = None
    activity_description: Optional[str] = None
    flagged: bool = False

    students: Optional[Student] = None


class BehavioralIntervention(Row):
    student_id: str
    assigned_by_user_id: Optional[str] = None
    intervention_type: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = Field(default="active")

    students: Optional[Student] = None
