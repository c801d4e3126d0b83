from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import current_user, domain_errors, login_required, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import Account
from .service import PROFILE_FIELDS


def account_json(a: Account) -> dict:
    return {
        "username": a.username,
        "role": a.role.value,
        "title": a.title.value if a.title else None,
        "first_name": a.first_name,
        "last_name": a.last_name,
        "full_name": a.full_name,
        "email": a.email,
        "date_of_birth": a.date_of_birth,
        "major": a.major,
        "department": a.department,
    }


def _profile_fields(data: dict) -> dict:
    return {k: data[k] for k in PROFILE_FIELDS if k in data}


def _parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid account type")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @domain_errors
    def login():
        data = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["username"] = s_user.username
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        return jsonify({"success": True, "username": s_user.username, "role": s_user.role.value})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/register", methods=["POST"], endpoint="register")
    @domain_errors
    def register_account():
        data = request.get_json(silent=True) or {}
        account = container.user_service.register(
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=_parse_role(data.get("role", Role.LEARNER.value)),
            **_profile_fields(data),
        )
        return jsonify({"success": True, "account": account_json(account)}), 201

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    @domain_errors
    def me():
        account = container.user_service.get(current_user().username)
        return jsonify(account_json(account))

    @app.route("/api/me", methods=["PATCH"], endpoint="update_me")
    @login_required
    @domain_errors
    def update_me():
        data = request.get_json(silent=True) or {}
        account = container.user_service.update_profile(current_user().username, **_profile_fields(data))
        session["name"] = account.full_name
        return jsonify({"success": True, "account": account_json(account)})

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @roles_required(Role.ADMIN)
    @domain_errors
    def admin_users():
        accounts = container.user_service.list_accounts(current_role=current_user().role)
        return jsonify([account_json(a) for a in accounts])

    @app.route("/api/admin/users/<username>", methods=["PATCH"], endpoint="admin_update_user")
    @roles_required(Role.ADMIN)
    @domain_errors
    def admin_update_user(username: str):
        data = request.get_json(silent=True) or {}
        account = container.user_service.update_user(
            current_role=current_user().role,
            username=username,
            role=_parse_role(data["role"]) if data.get("role") else None,
            password=data.get("password"),
            **_profile_fields(data),
        )
        return jsonify({"success": True, "account": account_json(account)})

    @app.route("/api/admin/users/<username>", methods=["DELETE"], endpoint="admin_delete_user")
    @roles_required(Role.ADMIN)
    @domain_errors
    def admin_delete_user(username: str):
        user = current_user()
        container.user_service.delete_user(current_role=user.role, current_username=user.username, username=username)
        return jsonify({"success": True})
