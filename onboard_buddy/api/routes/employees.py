"""
Employee management API endpoints.

The acting user is taken from the ``X-Performed-By`` header and recorded in
the audit trail.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response
from pydantic import BaseModel

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.employees import AuditLog, Employee, EmployeeCreate, EmployeeUpdate
from onboard_buddy.errors import EmployeeNotFoundError, EmployeeValidationError
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/employees", tags=["employees"])
logger = get_logger(__name__)


class CreateEmployeeResponse(BaseModel):
    id: str


class UpdateEmployeeRequest(BaseModel):
    changes: EmployeeUpdate
    reason: str | None = None


def _validation_failed(e: EmployeeValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})


@router.get("", response_model=list[Employee])
async def list_employees(
    q: str | None = Query(None, description="Search name, position, department, emails"),
    department: str | None = Query(None),
    supervisor_id: str | None = Query(None),
    include_archived: bool = Query(False),
    workspace: Workspace = Depends(get_workspace),
) -> list[Employee]:
    store = workspace.employees
    if q:
        return store.search(q)
    if department:
        return store.employees_by_department(department)
    if supervisor_id:
        return store.employees_by_supervisor(supervisor_id)
    if include_archived:
        return store.employees
    return [e for e in store.employees if e.status != "archived"]


@router.get("/audit", response_model=list[AuditLog])
async def all_audit_logs(workspace: Workspace = Depends(get_workspace)) -> list[AuditLog]:
    return workspace.employees.audit_logs()


@router.post("", response_model=CreateEmployeeResponse, status_code=201)
async def create_employee(
    draft: EmployeeCreate,
    performed_by: str = Header("system", alias="X-Performed-By"),
    workspace: Workspace = Depends(get_workspace),
) -> CreateEmployeeResponse:
    try:
        return CreateEmployeeResponse(id=workspace.employees.add_employee(draft, performed_by))
    except EmployeeValidationError as e:
        raise _validation_failed(e) from None


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(employee_id: str, workspace: Workspace = Depends(get_workspace)) -> Employee:
    employee = workspace.employees.get_employee(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


@router.patch("/{employee_id}", response_model=Employee)
async def update_employee(
    employee_id: str,
    request: UpdateEmployeeRequest,
    performed_by: str = Header("system", alias="X-Performed-By"),
    workspace: Workspace = Depends(get_workspace),
) -> Employee:
    try:
        return workspace.employees.update_employee(
            employee_id, request.changes, performed_by, request.reason
        )
    except EmployeeNotFoundError:
        raise HTTPException(status_code=404, detail="Employee not found") from None
    except EmployeeValidationError as e:
        raise _validation_failed(e) from None


@router.delete("/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: str,
    archive: bool = Query(True, description="False deletes permanently"),
    reason: str | None = Query(None),
    performed_by: str = Header("system", alias="X-Performed-By"),
    workspace: Workspace = Depends(get_workspace),
) -> Response:
    try:
        workspace.employees.delete_employee(employee_id, performed_by, reason, archive=archive)
    except EmployeeNotFoundError:
        raise HTTPException(status_code=404, detail="Employee not found") from None
    return Response(status_code=204)


@router.post("/{employee_id}/restore", response_model=Employee)
async def restore_employee(
    employee_id: str,
    performed_by: str = Header("system", alias="X-Performed-By"),
    workspace: Workspace = Depends(get_workspace),
) -> Employee:
    try:
        return workspace.employees.restore_employee(employee_id, performed_by)
    except EmployeeNotFoundError:
        raise HTTPException(status_code=404, detail="Employee not found or not archived") from None


@router.get("/{employee_id}/audit", response_model=list[AuditLog])
async def employee_audit_logs(employee_id: str, workspace: Workspace = Depends(get_workspace)) -> list[AuditLog]:
    """Audit entries for one employee; still available after permanent deletion."""
    return workspace.employees.audit_logs(employee_id)
