"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from onboard_buddy.workspace import Workspace


def get_workspace(request: Request) -> Workspace:
    """The workspace the app was created with."""
    return request.app.state.workspace
