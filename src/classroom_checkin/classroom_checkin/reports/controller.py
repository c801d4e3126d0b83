from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user, domain_errors, login_required
from ..core.enums import Role
from ..container import Container
from ..sessions.controller import record_json, session_json
from .service import AttendanceStat


def stat_json(s: AttendanceStat) -> dict:
    return {
        "username": s.username,
        "full_name": s.full_name,
        "attended": s.attended,
        "total": s.total,
        "percentage": s.percentage,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/history", methods=["GET"], endpoint="history")
    @login_required
    @domain_errors
    def history():
        sessions = container.history_service.relevant_sessions(current_user(), course_id=request.args.get("course_id"))
        return jsonify([session_json(s) for s in sessions])

    @app.route("/api/history/<session_id>/records", methods=["GET"], endpoint="history_records")
    @login_required
    @domain_errors
    def history_records(session_id: str):
        records = container.history_service.session_records(current_user(), session_id)
        return jsonify([record_json(r) for r in records])

    @app.route("/api/history.csv", methods=["GET"], endpoint="history_csv")
    @login_required
    @domain_errors
    def history_csv():
        course_id = request.args.get("course_id")
        csv_bytes = container.history_service.export_csv(current_user(), course_id=course_id)
        filename = f"attendance_{course_id or 'all'}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/stats", methods=["GET"], endpoint="stats")
    @login_required
    @domain_errors
    def stats():
        user = current_user()
        if user.role == Role.LEARNER:
            return jsonify(stat_json(container.history_service.learner_summary(user.username)))
        if user.role == Role.INSTRUCTOR:
            return jsonify([stat_json(s) for s in container.history_service.instructor_stats(user.username)])
        if user.role == Role.ADMIN:
            overview = container.history_service.admin_overview()
            return jsonify(
                {
                    "total_accounts": overview.total_accounts,
                    "role_counts": {role.value: n for role, n in overview.role_counts.items()},
                    "learners": [stat_json(s) for s in overview.learners],
                }
            )
        raise ValueError(f"unhandled role {user.role!r}")
