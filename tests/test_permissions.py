import pytest

from hr_attendance.core.exceptions import AuthorizationError
from hr_attendance.permissions.filters import (
    Viewer,
    filter_attendance_by_role,
    filter_employees_by_role,
    filter_requests_by_role,
)
from hr_attendance.permissions.matrix import (
    Action,
    Module,
    PermissionLevel,
    Role,
    allowed_modules,
    can_manage_settings,
    has_permission,
    normalize_role,
    permission_level,
    require_permission,
)


def test_admin_has_every_permission():
    for module in Module:
        for action in Action:
            assert has_permission(Role.ADMIN, module, action)


def test_employee_self_service():
    assert has_permission(Role.EMPLOYEE, Module.ATTENDANCE, Action.CREATE)
    assert has_permission(Role.EMPLOYEE, Module.LEAVE, Action.REQUEST)
    assert not has_permission(Role.EMPLOYEE, Module.LEAVE, Action.APPROVE)
    assert not has_permission(Role.EMPLOYEE, Module.EMPLOYEES, Action.READ)
    assert has_permission(Role.EMPLOYEE, Module.PAYROLL, Action.READ)


def test_levels_map_to_actions():
    assert has_permission(Role.HR_MANAGER, Module.LEAVE, Action.APPROVE)
    assert not has_permission(Role.HR_MANAGER, Module.LEAVE, Action.DELETE)
    assert has_permission(Role.HR_MANAGER, Module.ATTENDANCE, Action.UPDATE)
    assert not has_permission(Role.GENERAL_MANAGER, Module.ATTENDANCE, Action.CREATE)
    assert has_permission(Role.PROJECT_MANAGER, Module.PROJECTS, Action.DELETE)
    assert not has_permission(Role.WAREHOUSE_MANAGER, Module.ATTENDANCE, Action.READ)


def test_none_role_has_nothing():
    assert not has_permission(None, Module.ATTENDANCE, Action.READ)
    assert permission_level(None, Module.ATTENDANCE) is None
    assert allowed_modules(None) == {}
    assert not can_manage_settings(None, "holidays")


def test_allowed_modules():
    modules = allowed_modules(Role.WAREHOUSE_MANAGER)
    assert modules == {Module.WAREHOUSE: PermissionLevel.FULL, Module.REPORTS: PermissionLevel.VIEW}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("HR_MANAGER", Role.HR_MANAGER),
        ("hr_manager", Role.HR_MANAGER),
        ("HR Manager", Role.HR_MANAGER),
        ("Regional Project Manager", Role.REGIONAL_PROJECT_MANAGER),
        (" employee ", Role.EMPLOYEE),
        (Role.ADMIN, Role.ADMIN),
    ],
)
def test_normalize_role(raw, expected):
    assert normalize_role(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "SUPERUSER"])
def test_unknown_role_is_rejected(raw):
    with pytest.raises(AuthorizationError):
        normalize_role(raw)


def test_settings_pages():
    assert can_manage_settings(Role.ADMIN, "anything")
    assert can_manage_settings(Role.HR_MANAGER, "time-schedules")
    assert not can_manage_settings(Role.HR_MANAGER, "users")
    assert can_manage_settings(Role.FINANCE_MANAGER, "allowance-percentages")
    assert not can_manage_settings(Role.FINANCE_MANAGER, "unknown-page")


def test_require_permission_raises():
    require_permission(Role.HR_MANAGER, Module.PAYROLL, Action.READ)
    with pytest.raises(AuthorizationError):
        require_permission(Role.EMPLOYEE, Module.PAYROLL, Action.APPROVE)


class Row:
    def __init__(self, employee_no, dept_code=None, project_code=None):
        self.employee_no = employee_no
        self.dept_code = dept_code
        self.project_code = project_code


ROWS = [Row(1, 1, None), Row(4, 2, 101), Row(5, 2, 102), Row(7, 3, 101)]


def _nos(rows):
    return [r.employee_no for r in rows]


def test_employee_sees_only_own_rows():
    viewer = Viewer(employee_no=4, role=Role.EMPLOYEE)
    assert _nos(filter_employees_by_role(ROWS, viewer)) == [4]
    assert _nos(filter_attendance_by_role(ROWS, viewer)) == [4]
    assert _nos(filter_requests_by_role(ROWS, viewer)) == [4]


def test_project_manager_sees_project_rows():
    viewer = Viewer(employee_no=3, role=Role.PROJECT_MANAGER, project_code=101)
    assert _nos(filter_employees_by_role(ROWS, viewer)) == [4, 7]
    assert _nos(filter_attendance_by_role(ROWS, viewer)) == [4, 7]
    # requests are not narrowed for managers
    assert _nos(filter_requests_by_role(ROWS, viewer)) == [1, 4, 5, 7]


def test_project_manager_without_project_sees_nothing():
    viewer = Viewer(employee_no=3, role=Role.PROJECT_MANAGER)
    assert filter_employees_by_role(ROWS, viewer) == []
    assert filter_attendance_by_role(ROWS, viewer) == []


def test_hr_manager_limited_to_department():
    assert _nos(filter_employees_by_role(ROWS, Viewer(2, Role.HR_MANAGER, dept_code=2))) == [4, 5]
    assert _nos(filter_employees_by_role(ROWS, Viewer(2, Role.HR_MANAGER))) == [1, 4, 5, 7]


def test_other_roles_and_missing_viewer():
    assert len(filter_attendance_by_role(ROWS, Viewer(1, Role.GENERAL_MANAGER))) == 4
    assert filter_employees_by_role(ROWS, None) == []
    assert filter_attendance_by_role(ROWS, None) == []
    assert filter_requests_by_role(ROWS, None) == []
