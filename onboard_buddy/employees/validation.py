"""Employee record validation (collect-all)."""

from __future__ import annotations

import re
from datetime import date

from onboard_buddy.employees.models import EmployeeCreate

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def _one_year_before(today: date) -> date:
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        # Feb 29
        return today.replace(year=today.year - 1, day=28)


def validate_employee(employee: EmployeeCreate, today: date) -> list[str]:
    """Return every violated rule for ``employee``, in form order."""
    errors: list[str] = []

    if not employee.full_name.strip():
        errors.append("Full name is required")

    if not employee.start_date.strip():
        errors.append("Start date is required")
    else:
        try:
            start = date.fromisoformat(employee.start_date[:10])
        except ValueError:
            errors.append("Start date must be a valid date")
        else:
            if start < _one_year_before(today):
                errors.append("Start date cannot be more than 1 year in the past")

    if not employee.position.strip():
        errors.append("Position/role is required")
    if not employee.department.strip():
        errors.append("Department is required")
    if not employee.work_arrangement:
        errors.append("Work arrangement is required")
    if not employee.supervisor.name.strip():
        errors.append("Supervisor name is required")

    if not employee.supervisor.email.strip():
        errors.append("Supervisor email is required")
    elif not is_valid_email(employee.supervisor.email):
        errors.append("Supervisor email must be valid")

    if not employee.contact.email.strip():
        errors.append("Employee email is required")
    elif not is_valid_email(employee.contact.email):
        errors.append("Employee email must be valid")

    if not employee.contact.phone.strip():
        errors.append("Phone number is required")

    return errors
