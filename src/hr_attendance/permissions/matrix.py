"""Role-based access control: roles, modules and the permission matrix."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from ..core.exceptions import AuthorizationError
from ..core.messages import error_message


class Role(str, Enum):
    """User roles, valued in the backend's UPPER_SNAKE format."""

    ADMIN = "ADMIN"
    GENERAL_MANAGER = "GENERAL_MANAGER"
    HR_MANAGER = "HR_MANAGER"
    FINANCE_MANAGER = "FINANCE_MANAGER"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    PROJECT_SECRETARY = "PROJECT_SECRETARY"
    PROJECT_ADVISOR = "PROJECT_ADVISOR"
    REGIONAL_PROJECT_MANAGER = "REGIONAL_PROJECT_MANAGER"
    WAREHOUSE_MANAGER = "WAREHOUSE_MANAGER"
    EMPLOYEE = "EMPLOYEE"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]

    @property
    def label_ar(self) -> str:
        return ROLE_ARABIC_NAMES[self]


class PermissionLevel(str, Enum):
    FULL = "FULL"  # create, read, update, delete, approve
    MANAGE = "MANAGE"  # create, read, update
    APPROVE = "APPROVE"
    VIEW = "VIEW"
    REQUEST = "REQUEST"
    SELF = "SELF"  # manage own data
    OWN = "OWN"  # view own data


class Module(str, Enum):
    ATTENDANCE = "attendance"
    LEAVE = "leave"
    LOANS = "loans"
    PAYROLL = "payroll"
    PROJECTS = "projects"
    WAREHOUSE = "warehouse"
    REPORTS = "reports"
    EMPLOYEES = "employees"
    SETTINGS = "settings"
    TEMP_LABOR = "temp-labor"
    APPROVALS = "approvals"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    REQUEST = "request"
    VIEW = "view"


ROLE_LABELS = {
    Role.ADMIN: "Admin",
    Role.GENERAL_MANAGER: "General Manager",
    Role.HR_MANAGER: "HR Manager",
    Role.FINANCE_MANAGER: "Finance Manager",
    Role.PROJECT_MANAGER: "Project Manager",
    Role.PROJECT_SECRETARY: "Project Secretary",
    Role.PROJECT_ADVISOR: "Project Advisor",
    Role.REGIONAL_PROJECT_MANAGER: "Regional Project Manager",
    Role.WAREHOUSE_MANAGER: "Warehouse Manager",
    Role.EMPLOYEE: "Employee",
}

ROLE_ARABIC_NAMES = {
    Role.ADMIN: "مدير النظام",
    Role.GENERAL_MANAGER: "المدير العام",
    Role.HR_MANAGER: "مدير الموارد البشرية",
    Role.FINANCE_MANAGER: "مدير المالية",
    Role.PROJECT_MANAGER: "مدير المشروع",
    Role.PROJECT_SECRETARY: "سكرتير المشروع",
    Role.PROJECT_ADVISOR: "مستشار المشروع",
    Role.REGIONAL_PROJECT_MANAGER: "مدير المشاريع الإقليمي",
    Role.WAREHOUSE_MANAGER: "مدير المستودعات",
    Role.EMPLOYEE: "موظف",
}

PERMISSION_LEVEL_ARABIC = {
    PermissionLevel.FULL: "الوصول الكامل",
    PermissionLevel.MANAGE: "إدارة",
    PermissionLevel.APPROVE: "الموافقة",
    PermissionLevel.VIEW: "عرض",
    PermissionLevel.REQUEST: "طلب",
    PermissionLevel.SELF: "الذاتي",
    PermissionLevel.OWN: "الملكية",
}

_P = PermissionLevel
_M = Module

# Modules missing from a role's map are not accessible to that role.
ROLE_PERMISSIONS: dict[Role, dict[Module, PermissionLevel]] = {
    Role.ADMIN: {m: _P.FULL for m in Module},
    Role.GENERAL_MANAGER: {
        _M.ATTENDANCE: _P.VIEW,
        _M.LEAVE: _P.VIEW,
        _M.LOANS: _P.VIEW,
        _M.PAYROLL: _P.APPROVE,
        _M.PROJECTS: _P.VIEW,
        _M.WAREHOUSE: _P.VIEW,
        _M.REPORTS: _P.FULL,
        _M.EMPLOYEES: _P.VIEW,
        _M.SETTINGS: _P.VIEW,
    },
    Role.HR_MANAGER: {
        _M.ATTENDANCE: _P.MANAGE,
        _M.LEAVE: _P.APPROVE,
        _M.LOANS: _P.APPROVE,
        _M.PAYROLL: _P.APPROVE,
        _M.PROJECTS: _P.VIEW,
        _M.REPORTS: _P.VIEW,
        _M.EMPLOYEES: _P.MANAGE,
        _M.SETTINGS: _P.VIEW,
    },
    Role.FINANCE_MANAGER: {
        _M.ATTENDANCE: _P.VIEW,
        _M.LEAVE: _P.VIEW,
        _M.LOANS: _P.APPROVE,
        _M.PAYROLL: _P.APPROVE,
        _M.PROJECTS: _P.VIEW,
        _M.REPORTS: _P.VIEW,
        _M.EMPLOYEES: _P.VIEW,
        _M.SETTINGS: _P.VIEW,
    },
    Role.PROJECT_MANAGER: {
        _M.ATTENDANCE: _P.VIEW,
        _M.LEAVE: _P.APPROVE,
        _M.LOANS: _P.VIEW,
        _M.PAYROLL: _P.VIEW,
        _M.PROJECTS: _P.FULL,
        _M.WAREHOUSE: _P.REQUEST,
        _M.REPORTS: _P.VIEW,
        _M.EMPLOYEES: _P.VIEW,
        _M.TEMP_LABOR: _P.VIEW,
    },
    Role.PROJECT_SECRETARY: {
        _M.ATTENDANCE: _P.MANAGE,
        _M.LEAVE: _P.VIEW,
        _M.LOANS: _P.VIEW,
        _M.PAYROLL: _P.VIEW,
        _M.PROJECTS: _P.VIEW,
        _M.REPORTS: _P.VIEW,
        _M.EMPLOYEES: _P.VIEW,
        _M.APPROVALS: _P.APPROVE,
    },
    Role.PROJECT_ADVISOR: {
        _M.ATTENDANCE: _P.VIEW,
        _M.LEAVE: _P.VIEW,
        _M.LOANS: _P.VIEW,
        _M.PAYROLL: _P.VIEW,
        _M.PROJECTS: _P.VIEW,
        _M.REPORTS: _P.VIEW,
        _M.EMPLOYEES: _P.VIEW,
    },
    Role.REGIONAL_PROJECT_MANAGER: {
        _M.ATTENDANCE: _P.VIEW,
        _M.LEAVE: _P.VIEW,
        _M.LOANS: _P.VIEW,
        _M.PAYROLL: _P.VIEW,
        _M.PROJECTS: _P.FULL,
        _M.WAREHOUSE: _P.VIEW,
        _M.REPORTS: _P.VIEW,
        _M.EMPLOYEES: _P.VIEW,
        _M.APPROVALS: _P.APPROVE,
    },
    Role.WAREHOUSE_MANAGER: {
        _M.WAREHOUSE: _P.FULL,
        _M.REPORTS: _P.VIEW,
    },
    Role.EMPLOYEE: {
        _M.ATTENDANCE: _P.SELF,
        _M.LEAVE: _P.REQUEST,
        _M.LOANS: _P.REQUEST,
        _M.PAYROLL: _P.OWN,
        _M.REPORTS: _P.OWN,
    },
}

_LEVEL_ACTIONS: dict[PermissionLevel, frozenset[Action]] = {
    _P.FULL: frozenset(Action),
    _P.MANAGE: frozenset({Action.CREATE, Action.READ, Action.UPDATE}),
    _P.APPROVE: frozenset({Action.APPROVE, Action.READ}),
    _P.VIEW: frozenset({Action.READ, Action.VIEW}),
    _P.REQUEST: frozenset({Action.REQUEST, Action.READ}),
    _P.SELF: frozenset({Action.CREATE, Action.READ, Action.UPDATE}),
    _P.OWN: frozenset({Action.READ, Action.VIEW}),
}

# Settings pages with an explicit role list, narrower than the module level.
SETTINGS_ROLES: dict[str, frozenset[Role]] = {
    "users": frozenset({Role.ADMIN}),
    "departments": frozenset({Role.ADMIN, Role.HR_MANAGER}),
    "holidays": frozenset({Role.ADMIN, Role.HR_MANAGER}),
    "time-schedules": frozenset({Role.ADMIN, Role.HR_MANAGER}),
    "transaction-types": frozenset({Role.ADMIN}),
    "employee-allowances": frozenset({Role.ADMIN, Role.HR_MANAGER}),
    "allowance-percentages": frozenset({Role.ADMIN, Role.FINANCE_MANAGER}),
}

_BY_LABEL = {label.upper(): role for role, label in ROLE_LABELS.items()}


def normalize_role(value: Union[str, Role, None]) -> Role:
    """Accept backend ("HR_MANAGER") or display ("HR Manager") role names."""
    if isinstance(value, Role):
        return value
    raw = (value or "").strip().upper()
    if raw in Role.__members__:
        return Role[raw]
    role = _BY_LABEL.get(raw) or Role.__members__.get(raw.replace(" ", "_"))
    if role is None:
        raise AuthorizationError(error_message("unknown_role"))
    return role


def permission_level(role: Optional[Role], module: Module) -> Optional[PermissionLevel]:
    if role is None:
        return None
    return ROLE_PERMISSIONS.get(role, {}).get(module)


def has_permission(role: Optional[Role], module: Module, action: Action) -> bool:
    if role is None:
        return False
    if role == Role.ADMIN:
        return True

    level = permission_level(role, module)
    if level is None:
        return False
    return Action(action) in _LEVEL_ACTIONS[level]


def allowed_modules(role: Optional[Role]) -> dict[Module, PermissionLevel]:
    if role is None:
        return {}
    return dict(ROLE_PERMISSIONS.get(role, {}))


def can_manage_settings(role: Optional[Role], setting: str) -> bool:
    if role is None:
        return False
    if role == Role.ADMIN:
        return True
    allowed = SETTINGS_ROLES.get(setting)
    return bool(allowed) and role in allowed


def require_permission(role: Optional[Role], module: Module, action: Action) -> None:
    if not has_permission(role, module, action):
        raise AuthorizationError(error_message("no_permission"))
