"""
Employees - validated records with archive/restore and an audit trail.
"""

from onboard_buddy.employees.models import (
    AuditAction,
    AuditLog,
    Contact,
    Employee,
    EmployeeCreate,
    EmployeeStatus,
    EmployeeUpdate,
    Supervisor,
    WorkArrangement,
)
from onboard_buddy.employees.store import EmployeeStore
from onboard_buddy.employees.validation import validate_employee

__all__ = [
    "AuditAction",
    "AuditLog",
    "Contact",
    "Employee",
    "EmployeeCreate",
    "EmployeeStatus",
    "EmployeeStore",
    "EmployeeUpdate",
    "Supervisor",
    "WorkArrangement",
    "validate_employee",
]
