from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..attendance.model import AttendanceRecord
from ..common.web import current_user, domain_errors, roles_required
from ..core.enums import Role
from ..container import Container
from ..tokens.qr import render_png
from .model import AttendanceSession
from .service import TokenView


def session_json(s: AttendanceSession) -> dict:
    return {
        "session_id": s.session_id,
        "course_id": s.course_id,
        "instructor_id": s.instructor_id,
        "open_time": s.open_time,
        "close_time": s.close_time,
        "is_open": s.is_open,
    }


def record_json(r: AttendanceRecord) -> dict:
    return {
        "record_id": r.record_id,
        "subject_id": r.subject_id,
        "course_id": r.course_id,
        "session_id": r.session_id,
        "recorded_at": r.recorded_at,
    }


def token_json(t: TokenView) -> dict:
    return {
        "session_id": t.session_id,
        "payload": t.payload,
        "issue_time": t.issue_time,
        "validity_window": t.validity_window,
        "seconds_left": t.seconds_left,
        "seconds_to_rotation": t.seconds_to_rotation,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["POST"], endpoint="start_session")
    @roles_required(Role.INSTRUCTOR)
    @domain_errors
    def start_session():
        data = request.get_json(silent=True) or {}
        s = container.session_service.start_session(current_user(), data.get("course_id", ""))
        return jsonify({"success": True, "session": session_json(s)}), 201

    @app.route("/api/sessions/active", methods=["GET"], endpoint="active_session")
    @roles_required(Role.INSTRUCTOR)
    @domain_errors
    def active_session():
        s = container.session_service.active_session_for(current_user().username)
        return jsonify({"session": session_json(s) if s else None})

    @app.route("/api/sessions/<session_id>/end", methods=["POST"], endpoint="end_session")
    @roles_required(Role.INSTRUCTOR, Role.ADMIN)
    @domain_errors
    def end_session(session_id: str):
        s = container.session_service.end_session(current_user(), session_id)
        return jsonify({"success": True, "session": session_json(s)})

    @app.route("/api/sessions/<session_id>", methods=["DELETE"], endpoint="delete_session")
    @roles_required(Role.ADMIN)
    @domain_errors
    def delete_session(session_id: str):
        removed = container.session_service.delete_session(current_user(), session_id)
        return jsonify({"success": True, "records_removed": removed})

    @app.route("/api/sessions/<session_id>/token", methods=["GET"], endpoint="session_token")
    @roles_required(Role.INSTRUCTOR, Role.ADMIN)
    @domain_errors
    def session_token(session_id: str):
        return jsonify(token_json(container.session_service.token_view(current_user(), session_id)))

    @app.route("/api/sessions/<session_id>/token/regenerate", methods=["POST"], endpoint="regenerate_token")
    @roles_required(Role.INSTRUCTOR, Role.ADMIN)
    @domain_errors
    def regenerate_token(session_id: str):
        view = container.session_service.regenerate_token(current_user(), session_id)
        return jsonify({"success": True, "token": token_json(view)})

    @app.route("/api/sessions/<session_id>/token.png", methods=["GET"], endpoint="session_token_image")
    @roles_required(Role.INSTRUCTOR, Role.ADMIN)
    @domain_errors
    def session_token_image(session_id: str):
        view = container.session_service.token_view(current_user(), session_id)
        return send_file(render_png(view.payload), mimetype="image/png")

    @app.route("/api/sessions/<session_id>/records", methods=["GET"], endpoint="session_live_records")
    @roles_required(Role.INSTRUCTOR, Role.ADMIN)
    @domain_errors
    def session_live_records(session_id: str):
        s = container.session_service.owned(current_user(), session_id)
        return jsonify([record_json(r) for r in container.checkin_service.live_records(s.session_id)])
