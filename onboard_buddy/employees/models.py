"""
Employee records and their audit trail.

Input models are lenient (blank strings allowed) so that
``validate_employee`` can report every missing field at once.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from onboard_buddy.core.store import utc_now


class WorkArrangement(str, Enum):
    REMOTE = "remote"
    ONSITE = "onsite"
    HYBRID = "hybrid"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class OnboardingPhase(str, Enum):
    PRE_BOARDING = "pre-boarding"
    FIRST_DAY = "first-day"
    FIRST_WEEK = "first-week"
    FIRST_MONTH = "first-month"
    COMPLETED = "completed"


class AuditAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ARCHIVED = "archived"
    RESTORED = "restored"


class HybridSchedule(BaseModel):
    in_office: list[str] = Field(default_factory=list)
    remote: list[str] = Field(default_factory=list)


class WorkArrangementDetails(BaseModel):
    location: str | None = None
    schedule: str | None = None
    equipment: list[str] = Field(default_factory=list)
    remote_tools: list[str] = Field(default_factory=list)
    office_access: bool | None = None
    hybrid_schedule: HybridSchedule | None = None


class Supervisor(BaseModel):
    id: str | None = None
    name: str = ""
    email: str = ""
    department: str = ""


class EmergencyContact(BaseModel):
    name: str
    phone: str
    relationship: str


class Contact(BaseModel):
    email: str = ""
    phone: str = ""
    emergency_contact: EmergencyContact | None = None


class OnboardingProgress(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    tasks_completed: int = 0
    total_tasks: int = 0
    missions_completed: int = 0
    total_missions: int = 0
    current_phase: OnboardingPhase = OnboardingPhase.PRE_BOARDING


class EmployeeCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    full_name: str = ""
    start_date: str = ""
    position: str = ""
    department: str = ""
    work_arrangement: WorkArrangement | None = None
    work_arrangement_details: WorkArrangementDetails = Field(default_factory=WorkArrangementDetails)
    supervisor: Supervisor = Field(default_factory=Supervisor)
    contact: Contact = Field(default_factory=Contact)
    onboarding_progress: OnboardingProgress = Field(default_factory=OnboardingProgress)
    priority: str = "medium"
    tags: list[str] = Field(default_factory=list)
    notes: str = ""


class Employee(EmployeeCreate):
    id: str
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    created_by: str = ""
    last_modified_by: str = ""


class EmployeeUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    full_name: str | None = None
    start_date: str | None = None
    position: str | None = None
    department: str | None = None
    work_arrangement: WorkArrangement | None = None
    work_arrangement_details: WorkArrangementDetails | None = None
    supervisor: Supervisor | None = None
    contact: Contact | None = None
    onboarding_progress: OnboardingProgress | None = None
    status: EmployeeStatus | None = None
    priority: str | None = None
    tags: list[str] | None = None
    notes: str | None = None


class FieldChange(BaseModel):
    field: str
    old_value: Any = None
    new_value: Any = None


class AuditLog(BaseModel):
    """One append-only audit entry. Survives hard deletion of its employee."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    employee_id: str
    action: AuditAction
    changes: list[FieldChange] = Field(default_factory=list)
    performed_by: str
    timestamp: datetime = Field(default_factory=utc_now)
    reason: str | None = None
