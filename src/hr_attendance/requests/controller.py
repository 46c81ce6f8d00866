from __future__ import annotations

from flask import Flask

from ..common.http import body_date, json_body, ok, optional_int
from ..common.serialization import to_json
from ..container import Container
from ..permissions.decorators import current_viewer, login_required
from .model import LoanRequest
from .service import parse_kind


def _request_dto(req) -> dict:
    data = to_json(req)
    data["kind"] = req.kind.value
    data["statusLabel"] = req.status.label_ar
    if isinstance(req, LoanRequest):
        data["installments"] = to_json(req.installments)
    return data


def _grouped(groups: dict) -> dict:
    return {kind: [_request_dto(r) for r in rows] for kind, rows in groups.items()}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="api_leave_submit")
    @login_required
    def api_leave_submit():
        body = json_body()
        request_id = container.request_service.submit_leave(
            current_viewer(),
            from_date=body_date(body, "fromDate"),
            to_date=body_date(body, "toDate"),
            reason=body.get("reason") or "",
            employee_no=optional_int(body.get("employeeNo")),
        )
        return ok({"requestId": request_id}, 201, message="تم إرسال طلب الإجازة")

    @app.route("/api/loans", methods=["POST"], endpoint="api_loan_submit")
    @login_required
    def api_loan_submit():
        body = json_body()
        request_id = container.request_service.submit_loan(
            current_viewer(),
            loan_amount=body.get("loanAmount"),
            no_of_installments=body.get("noOfInstallments"),
            first_installment_date=body_date(body, "firstInstallmentDate"),
            employee_no=optional_int(body.get("employeeNo")),
        )
        return ok({"requestId": request_id}, 201, message="تم إرسال طلب السلفة")

    @app.route("/api/allowances", methods=["POST"], endpoint="api_allowance_submit")
    @login_required
    def api_allowance_submit():
        body = json_body()
        request_id = container.request_service.submit_allowance(
            current_viewer(),
            adjustment_type=body.get("adjustmentType"),
            trans_type_code=body.get("transTypeCode"),
            amount=body.get("amount"),
            trans_date=body_date(body, "transDate"),
            notes=body.get("notes"),
            employee_no=optional_int(body.get("employeeNo")),
        )
        return ok({"requestId": request_id}, 201)

    @app.route("/api/manual-attendance", methods=["POST"], endpoint="api_manual_attendance_submit")
    @login_required
    def api_manual_attendance_submit():
        body = json_body()
        request_id = container.request_service.submit_manual_attendance(
            current_viewer(),
            attendance_date=body_date(body, "attendanceDate"),
            entry_time=body.get("entryTime") or "",
            exit_time=body.get("exitTime"),
            project_code=optional_int(body.get("projectCode")),
            reason=body.get("reason") or "",
            employee_no=optional_int(body.get("employeeNo")),
        )
        return ok({"requestId": request_id}, 201)

    @app.route("/api/requests/mine", methods=["GET"], endpoint="api_my_requests")
    @login_required
    def api_my_requests():
        return ok(_grouped(container.request_service.list_mine(current_viewer().employee_no)))

    @app.route("/api/approvals/pending", methods=["GET"], endpoint="api_pending_approvals")
    @login_required
    def api_pending_approvals():
        return ok(_grouped(container.request_service.list_pending(current_viewer())))

    @app.route("/api/requests/<kind>/<int:request_id>", methods=["GET"], endpoint="api_request_detail")
    @login_required
    def api_request_detail(kind: str, request_id: int):
        req = container.request_service.get_request(current_viewer(), parse_kind(kind), request_id)
        return ok(_request_dto(req))

    @app.route("/api/approvals/<kind>/<int:request_id>/approve", methods=["POST"], endpoint="api_approve")
    @login_required
    def api_approve(kind: str, request_id: int):
        body = json_body()
        container.request_service.approve(current_viewer(), parse_kind(kind), request_id, note=body.get("notes"))
        return ok(message="تم اعتماد الطلب")

    @app.route("/api/approvals/<kind>/<int:request_id>/reject", methods=["POST"], endpoint="api_reject")
    @login_required
    def api_reject(kind: str, request_id: int):
        body = json_body()
        container.request_service.reject(
            current_viewer(),
            parse_kind(kind),
            request_id,
            reason=body.get("rejectionReason") or "",
        )
        return ok(message="تم رفض الطلب")
