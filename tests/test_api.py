from __future__ import annotations

from datetime import datetime

from hr_attendance.core.messages import ERRORS

SITE = {"latitude": 24.7136, "longitude": 46.6753}


def test_login_me_logout(client):
    resp = client.post("/api/auth/login", json={"username": "employee", "password": "secret123"})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["employeeNo"] == 4
    assert data["role"] == "EMPLOYEE"
    assert data["permissions"]["attendance"] == "SELF"

    me = client.get("/api/auth/me").get_json()
    assert me["success"] is True
    assert me["data"]["fullName"] == "موظف 4"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_login_wrong_password(client):
    resp = client.post("/api/auth/login", json={"username": "employee", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": ERRORS["invalid_credentials"]}


def test_login_inactive_employee(client):
    resp = client.post("/api/auth/login", json={"username": "former", "password": "secret123"})
    assert resp.status_code == 401


def test_requires_session(client):
    resp = client.get("/api/attendance/my-attendance")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == ERRORS["session_expired"]


def test_unknown_route_returns_arabic_json(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": ERRORS["not_found"]}


def test_check_in_and_out(login_as, fixed_now):
    client = login_as(4)

    fixed_now(datetime(2026, 10, 14, 7, 10))
    resp = client.post("/api/attendance/check-in", json=SITE)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "تم تسجيل الحضور بنجاح"
    assert body["data"]["entryTime"] == "2026-10-14T07:10:00"
    assert body["data"]["exitTime"] is None

    fixed_now(datetime(2026, 10, 14, 16, 30))
    resp = client.post("/api/attendance/check-out", json=SITE)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["workingHours"] == "09:20"
    assert data["overtimeHours"] == "01:20"

    history = client.get("/api/attendance/my-attendance?limit=5").get_json()["data"]
    assert len(history) == 1


def test_check_in_outside_geofence(login_as, fixed_now):
    client = login_as(4)
    fixed_now()

    resp = client.post("/api/attendance/check-in", json={"latitude": 24.7236, "longitude": 46.6753})
    assert resp.status_code == 400
    assert "خارج نطاق" in resp.get_json()["message"]


def test_daily_overview_weekend(login_as, fixed_now):
    client = login_as(4)
    fixed_now()

    data = client.get("/api/attendance/daily-overview?date=2026-10-16").get_json()["data"]
    assert data["status"] == "WEEKEND"
    assert data["dayName"] == "الجمعة"
    assert data["scheduledEntry"] == "07:00"


def test_calculate_preview(login_as):
    client = login_as(4)
    resp = client.post(
        "/api/attendance/calculate",
        json={
            "scheduledEntryTime": "07:00",
            "scheduledExitTime": "16:00",
            "requiredHours": 8,
            "entryTime": "07:20",
            "exitTime": "16:30",
        },
    )
    assert resp.get_json()["data"] == {
        "workingHours": "09:10",
        "overtimeHours": "01:10",
        "lateMinutes": 20,
        "earlyMinutes": 0,
        "isHoliday": False,
        "isOvertime": True,
    }


def test_calculate_preview_rejects_bad_time(login_as):
    client = login_as(4)
    resp = client.post(
        "/api/attendance/calculate",
        json={"scheduledEntryTime": "7am", "scheduledExitTime": "16:00", "requiredHours": 8, "entryTime": "07:20", "exitTime": "16:30"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == ERRORS["invalid_time"]


def test_attendance_list_and_auto_checkout_permissions(login_as):
    client = login_as(10)
    assert client.get("/api/attendance").status_code == 403

    client = login_as(4)
    assert client.post("/api/attendance/auto-checkout", json={}).status_code == 403

    client = login_as(2)
    resp = client.post("/api/attendance/auto-checkout", json={"beforeDate": "2026-10-14"})
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"closedTransactions": [], "count": 0}


def test_employees_list_is_role_filtered(login_as):
    client = login_as(4)
    resp = client.get("/api/employees")
    assert resp.status_code == 403
    assert resp.get_json()["message"] == ERRORS["no_permission"]

    client = login_as(2)
    data = client.get("/api/employees").get_json()["data"]
    assert [e["employeeNo"] for e in data] == [1, 2, 8, 10]


def test_leave_approval_flow(login_as):
    client = login_as(4)
    resp = client.post("/api/leaves", json={"fromDate": "2026-10-20", "toDate": "2026-10-21", "reason": "سفر"})
    assert resp.status_code == 201
    rid = resp.get_json()["data"]["requestId"]

    client = login_as(2)
    pending = client.get("/api/approvals/pending").get_json()["data"]
    leave = pending["leave"][0]
    assert leave["requestId"] == rid
    assert leave["kind"] == "leave"
    assert leave["leaveDays"] == 2
    assert leave["statusLabel"] == "جديد"

    assert client.post(f"/api/approvals/leave/{rid}/reject", json={}).status_code == 400
    assert client.post(f"/api/approvals/leave/{rid}/approve", json={"notes": "موافق"}).status_code == 200
    again = client.post(f"/api/approvals/leave/{rid}/approve", json={})
    assert again.status_code == 400
    assert again.get_json()["message"] == "تمت معالجة هذا الطلب مسبقاً"

    client = login_as(4)
    mine = client.get("/api/requests/mine").get_json()["data"]
    assert mine["leave"][0]["status"] == "A"


def test_unknown_request_kind(login_as):
    client = login_as(2)
    resp = client.post("/api/approvals/overtime/1/approve", json={})
    assert resp.status_code == 404


def test_loan_detail_includes_installments(login_as):
    client = login_as(4)
    resp = client.post(
        "/api/loans",
        json={"loanAmount": "900", "noOfInstallments": 3, "firstInstallmentDate": "2026-11-01"},
    )
    rid = resp.get_json()["data"]["requestId"]

    data = client.get(f"/api/requests/loan/{rid}").get_json()["data"]
    assert data["installmentAmount"] == 300.0
    assert [i["dueDate"] for i in data["installments"]] == ["2026-11-01", "2026-12-01", "2027-01-01"]


def test_loan_detail_hidden_from_roles_without_loans_access(login_as):
    client = login_as(4)
    resp = client.post(
        "/api/loans",
        json={"loanAmount": "5000", "noOfInstallments": 10, "firstInstallmentDate": "2026-11-01"},
    )
    rid = resp.get_json()["data"]["requestId"]

    client = login_as(10)
    resp = client.get(f"/api/requests/loan/{rid}")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_submit_for_another_employee_is_forbidden(login_as):
    client = login_as(4)
    resp = client.post(
        "/api/leaves",
        json={"fromDate": "2026-10-20", "toDate": "2026-10-21", "reason": "سفر", "employeeNo": 5},
    )
    assert resp.status_code == 403


def test_payroll_timesheet(login_as):
    client = login_as(10)
    assert client.get("/api/payroll/timesheets").status_code == 403

    client = login_as(2)
    data = client.get("/api/payroll/timesheets?start=2026-10-01&end=2026-10-31").get_json()["data"]
    assert data["start"] == "2026-10-01"
    assert data["rows"] == []
    assert data["summary"] == []

    resp = client.get("/api/payroll/timesheets.csv?start=2026-10-01&end=2026-10-31")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.data.startswith(b"\xef\xbb\xbf")
    assert b"employee_no,full_name,attendance_date" in resp.data
    assert "timesheet_20261001_20261031.csv" in resp.headers["Content-Disposition"]


def test_schedule_settings(login_as):
    client = login_as(4)
    payload = {"entryTime": "06:00", "exitTime": "14:00", "requiredHours": 8, "projectCode": 102}
    assert client.post("/api/time-schedules", json=payload).status_code == 403
    assert client.get("/api/time-schedules/mine").get_json()["data"]["entryTime"] == "07:00"

    client = login_as(2)
    resp = client.post("/api/time-schedules", json=payload)
    assert resp.status_code == 201

    client = login_as(5)
    mine = client.get("/api/time-schedules/mine").get_json()["data"]
    assert mine["scheduleName"] == "Project 102 - Default Schedule"
    assert mine["entryTime"] == "06:00"


def test_holiday_listing(login_as):
    client = login_as(4)
    data = client.get("/api/holidays?year=2026").get_json()["data"]
    assert sorted(h["holidayType"] for h in data) == ["Foundation", "National"]

    resp = client.post(
        "/api/holidays",
        json={"holidayType": "Adha", "hijriYear": 1447, "fromDate": "2026-05-26", "toDate": "2026-05-29"},
    )
    assert resp.status_code == 403
