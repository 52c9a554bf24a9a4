"""Employee Store - validated CRUD with archive/restore and an audit trail."""

from __future__ import annotations

import json
import uuid
from typing import Any

from onboard_buddy.core.store import Clock, Store, patch_changes, utc_now
from onboard_buddy.employees.models import (
    AuditAction,
    AuditLog,
    Employee,
    EmployeeCreate,
    EmployeeStatus,
    EmployeeUpdate,
    FieldChange,
)
from onboard_buddy.employees.validation import validate_employee
from onboard_buddy.errors import EmployeeNotFoundError, EmployeeValidationError
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import log_event

logger = get_logger(__name__)

_ARCHIVED = EmployeeStatus.ARCHIVED.value
_ACTIVE = EmployeeStatus.ACTIVE.value


def _same(a: Any, b: Any) -> bool:
    return json.dumps(a, sort_keys=True, default=str) == json.dumps(b, sort_keys=True, default=str)


class EmployeeStore(Store):
    """
    Employee records.

    Unlike the client-side content stores, operations on unknown ids raise
    ``EmployeeNotFoundError``. Every mutation appends one audit entry in the
    same commit as the record change.
    """

    name = "employee-management"
    version = 1

    def __init__(self, snapshots: SnapshotStore | None = None, clock: Clock = utc_now):
        super().__init__(snapshots, clock)
        self._employees: list[Employee] = []
        self._audit_logs: list[AuditLog] = []

    @property
    def employees(self) -> list[Employee]:
        return list(self._employees)

    def _audit(
        self,
        employee_id: str,
        action: AuditAction,
        changes: list[FieldChange],
        performed_by: str,
        reason: str | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            id=str(uuid.uuid4()),
            employee_id=employee_id,
            action=action,
            changes=changes,
            performed_by=performed_by,
            timestamp=self._clock(),
            reason=reason,
        )
        self._audit_logs = [*self._audit_logs, entry]
        return entry

    def _require(self, employee_id: str) -> Employee:
        employee = self.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(f"Employee not found: {employee_id}")
        return employee

    def _replace(self, updated: Employee) -> None:
        self._employees = [updated if e.id == updated.id else e for e in self._employees]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_employee(self, draft: EmployeeCreate, performed_by: str) -> str:
        """
        Validate and add an employee.

        Returns:
            The new employee id

        Raises:
            EmployeeValidationError: With every violated rule
        """
        errors = validate_employee(draft, self._clock().date())
        if errors:
            raise EmployeeValidationError(errors)

        now = self._clock()
        employee = Employee(
            **draft.model_dump(),
            id=str(uuid.uuid4()),
            status=EmployeeStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            created_by=performed_by,
            last_modified_by=performed_by,
        )
        self._employees = [*self._employees, employee]
        self._audit(
            employee.id,
            AuditAction.CREATED,
            [FieldChange(field="employee", old_value=None, new_value=employee.model_dump(mode="json"))],
            performed_by,
        )
        self._commit()
        log_event("employee.created", employee_id=employee.id, by=performed_by)
        return employee.id

    def update_employee(
        self,
        employee_id: str,
        patch: EmployeeUpdate,
        performed_by: str,
        reason: str | None = None,
    ) -> Employee:
        """
        Apply ``patch`` and record a field-level diff.

        Raises:
            EmployeeNotFoundError: Unknown id
            EmployeeValidationError: Merged record is invalid; nothing applied
        """
        existing = self._require(employee_id)
        changes_in = patch_changes(patch, clearable=("work_arrangement",), mode="json")
        current = existing.model_dump(mode="json")

        merged = {**current, **changes_in}
        errors = validate_employee(EmployeeCreate.model_validate(merged), self._clock().date())
        if errors:
            raise EmployeeValidationError(errors)

        diff = [
            FieldChange(field=key, old_value=current.get(key), new_value=value)
            for key, value in changes_in.items()
            if not _same(current.get(key), value)
        ]
        updated = Employee.model_validate(
            {**merged, "updated_at": self._clock(), "last_modified_by": performed_by}
        )
        self._replace(updated)
        self._audit(employee_id, AuditAction.UPDATED, diff, performed_by, reason)
        self._commit()
        return updated

    def delete_employee(
        self,
        employee_id: str,
        performed_by: str,
        reason: str | None = None,
        archive: bool = True,
    ) -> None:
        """
        Archive (default) or permanently delete an employee.

        The audit entry is kept either way.
        """
        existing = self._require(employee_id)
        action = AuditAction.ARCHIVED if archive else AuditAction.DELETED
        change = FieldChange(
            field="status",
            old_value=existing.status,
            new_value=_ARCHIVED if archive else "deleted",
        )

        if archive:
            self._replace(
                existing.model_copy(
                    update={
                        "status": _ARCHIVED,
                        "updated_at": self._clock(),
                        "last_modified_by": performed_by,
                    }
                )
            )
        else:
            self._employees = [e for e in self._employees if e.id != employee_id]

        self._audit(employee_id, action, [change], performed_by, reason)
        self._commit()
        log_event("employee." + action.value, employee_id=employee_id, by=performed_by)

    def restore_employee(self, employee_id: str, performed_by: str) -> Employee:
        """
        Raises:
            EmployeeNotFoundError: Unknown id or the employee is not archived
        """
        existing = self.get_employee(employee_id)
        if existing is None or existing.status != _ARCHIVED:
            raise EmployeeNotFoundError(f"Employee not found or not archived: {employee_id}")

        restored = existing.model_copy(
            update={"status": _ACTIVE, "updated_at": self._clock(), "last_modified_by": performed_by}
        )
        self._replace(restored)
        self._audit(
            employee_id,
            AuditAction.RESTORED,
            [FieldChange(field="status", old_value=_ARCHIVED, new_value=_ACTIVE)],
            performed_by,
        )
        self._commit()
        return restored

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_employee(self, employee_id: str) -> Employee | None:
        return next((e for e in self._employees if e.id == employee_id), None)

    def employees_by_department(self, department: str) -> list[Employee]:
        return [e for e in self._employees if e.department == department and e.status != _ARCHIVED]

    def employees_by_supervisor(self, supervisor_id: str) -> list[Employee]:
        return [
            e for e in self._employees if e.supervisor.id == supervisor_id and e.status != _ARCHIVED
        ]

    def audit_logs(self, employee_id: str | None = None) -> list[AuditLog]:
        if employee_id is None:
            return list(self._audit_logs)
        return [log for log in self._audit_logs if log.employee_id == employee_id]

    def search(self, query: str) -> list[Employee]:
        term = query.lower()
        return [
            e
            for e in self._employees
            if e.status != _ARCHIVED
            and (
                term in e.full_name.lower()
                or term in e.position.lower()
                or term in e.department.lower()
                or term in e.contact.email.lower()
                or term in e.supervisor.name.lower()
            )
        ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        return {
            "employees": [e.model_dump(mode="json") for e in self._employees],
            "audit_logs": [log.model_dump(mode="json") for log in self._audit_logs],
        }

    def load_state(self, state: dict[str, Any]) -> None:
        self._employees = [Employee.model_validate(e) for e in state.get("employees", [])]
        self._audit_logs = [AuditLog.model_validate(a) for a in state.get("audit_logs", [])]

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        return state
