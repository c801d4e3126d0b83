from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user, domain_errors, login_required, roles_required
from ..core.enums import Role
from ..container import Container
from .model import Course


def course_json(c: Course) -> dict:
    return {"course_id": c.course_id, "name": c.name, "code": c.code, "instructor_id": c.instructor_id}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/courses", methods=["GET"], endpoint="courses")
    @login_required
    @domain_errors
    def courses():
        return jsonify([course_json(c) for c in container.course_service.list_for(current_user())])

    @app.route("/api/courses", methods=["POST"], endpoint="add_course")
    @roles_required(Role.INSTRUCTOR)
    @domain_errors
    def add_course():
        data = request.get_json(silent=True) or {}
        course = container.course_service.add_course(
            current_user(),
            name=data.get("name", ""),
            code=data.get("code", ""),
        )
        return jsonify({"success": True, "course": course_json(course)}), 201

    @app.route("/api/courses/<course_id>", methods=["DELETE"], endpoint="delete_course")
    @roles_required(Role.INSTRUCTOR, Role.ADMIN)
    @domain_errors
    def delete_course(course_id: str):
        container.course_service.delete_course(current_user(), course_id)
        return jsonify({"success": True})
