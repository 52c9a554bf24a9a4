"""Signed-in user model."""

from __future__ import annotations

from pydantic import BaseModel, Field

SUPER_ADMIN_ROLE = "super_admin"
NEW_HIRE_ROLE = "new_hire"
ALL_PERMISSIONS = "*"


class User(BaseModel):
    id: str
    email: str
    name: str = ""
    company: str = ""
    start_date: str = ""
    roles: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)

    def has_permission(self, permission: str) -> bool:
        return ALL_PERMISSIONS in self.permissions or permission in self.permissions

    def has_role(self, role: str) -> bool:
        return SUPER_ADMIN_ROLE in self.roles or role in self.roles
