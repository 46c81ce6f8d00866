from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.messages import error_message
from .filters import Viewer
from .matrix import Action, Module, PermissionLevel, Role, has_permission, normalize_role, permission_level


def current_viewer() -> Optional[Viewer]:
    if "employee_no" not in session:
        return None
    return Viewer(
        employee_no=int(session["employee_no"]),
        role=normalize_role(session.get("role")),
        dept_code=session.get("dept_code"),
        project_code=session.get("project_code"),
    )


def _unauthorized():
    return jsonify({"success": False, "message": error_message("session_expired")}), 401


def _forbidden():
    return jsonify({"success": False, "message": error_message("no_permission")}), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_no" not in session:
            return _unauthorized()
        return view(*args, **kwargs)

    return wrapper


def permission_required(module: Module, *actions: Action):
    """Allow the view when the session role holds any of ``actions`` on ``module``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            viewer = current_viewer()
            if viewer is None:
                return _unauthorized()
            if not any(has_permission(viewer.role, module, a) for a in actions):
                return _forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def level_required(module: Module, *levels: PermissionLevel):
    """Allow the view when the session role holds one of ``levels`` on ``module`` (Admin always)."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            viewer = current_viewer()
            if viewer is None:
                return _unauthorized()
            if viewer.role != Role.ADMIN and permission_level(viewer.role, module) not in levels:
                return _forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator
