from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user, domain_errors, error_response, roles_required
from ..core.enums import RecordOutcome, Role
from ..container import Container
from ..tokens.qr import read_payload
from .service import CheckinResult


def _result_response(result: CheckinResult):
    body = {
        "success": result.success,
        "outcome": result.outcome.value,
        "message": result.message,
        "session_id": result.session_id,
        "course_id": result.course_id,
    }
    return jsonify(body), 200 if result.success else 400


def register(app: Flask, container: Container) -> None:
    @app.route("/api/checkin/qr", methods=["POST"], endpoint="api_checkin_qr")
    @roles_required(Role.LEARNER)
    @domain_errors
    def api_checkin_qr():
        data = request.get_json(silent=True) or {}
        qr_code = str(data.get("qr_code", "")).strip()
        if not qr_code:
            return error_response("QR code must not be empty", 400)

        result = container.checkin_service.scan(current_user().username, qr_code)
        return _result_response(result)

    @app.route("/api/checkin/qr/image", methods=["POST"], endpoint="api_checkin_qr_image")
    @roles_required(Role.LEARNER)
    @domain_errors
    def api_checkin_qr_image():
        file = request.files.get("image")
        if file is None or not file.filename:
            return error_response("Please choose an image", 400)

        scanned = read_payload(file.stream)
        if not scanned:
            return error_response("No QR code found in the image", 400)

        result = container.checkin_service.scan(current_user().username, scanned)
        return _result_response(result)

    @app.route("/api/sessions/<session_id>/manual", methods=["POST"], endpoint="manual_checkin")
    @roles_required(Role.INSTRUCTOR)
    @domain_errors
    def manual_checkin(session_id: str):
        data = request.get_json(silent=True) or {}
        outcome = container.checkin_service.manual_entry(current_user(), session_id, data.get("subject_id", ""))
        if outcome == RecordOutcome.DUPLICATE:
            return error_response("This learner has already checked in", 409)
        return jsonify({"success": True, "outcome": outcome.value}), 201
