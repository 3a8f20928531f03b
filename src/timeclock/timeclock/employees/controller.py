from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.web import (
    SESSION_TOKEN_KEY,
    current_token,
    error_response,
    internal_error,
    json_body,
    make_admin_required,
)
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    employees = container.employee_service
    admin_required = make_admin_required(auth.is_admin)

    def _start_session(admin_session):
        session.clear()
        session.permanent = True
        session[SESSION_TOKEN_KEY] = admin_session.token

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            _start_session(auth.login(data.get("username", ""), data.get("password", "")))
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Login failed")
            return internal_error()

    @app.route("/quick-admin-login", methods=["POST"], endpoint="quick_admin_login")
    def quick_admin_login():
        data = json_body()
        try:
            _start_session(auth.quick_login(data.get("pin", "")))
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Quick admin login failed")
            return internal_error()

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        try:
            auth.logout(current_token())
        except Exception:
            logger.exception("Failed to drop server-side session")
        session.clear()
        return jsonify({"success": True})

    @app.route("/is-logged-in", methods=["GET"], endpoint="is_logged_in")
    def is_logged_in():
        try:
            return jsonify({"isLoggedIn": auth.is_admin(current_token())})
        except Exception:
            logger.exception("Session check failed")
            return jsonify({"isLoggedIn": False})

    @app.route("/add-admin", methods=["POST"], endpoint="add_admin")
    def add_admin():
        data = json_body()
        try:
            if not auth.needs_bootstrap() and not auth.is_admin(current_token()):
                return jsonify({"error": "Unauthorized"}), 401
            user_id = auth.create_admin(username=data.get("username", ""), password=data.get("password", ""))
            return jsonify({"id": user_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to add admin")
            return internal_error()

    @app.route("/get-users", methods=["POST"], endpoint="get_users")
    def get_users():
        try:
            return jsonify([u.to_dict() for u in employees.list_users()])
        except Exception:
            logger.exception("Failed to read users")
            return internal_error()

    @app.route("/employee-tags", methods=["GET"], endpoint="employee_tags")
    def employee_tags():
        return jsonify(list(employees.allowed_tags))

    @app.route("/add-employee", methods=["POST"], endpoint="add_employee")
    @admin_required
    def add_employee():
        data = json_body()
        try:
            user_id = employees.add_employee(
                name=data.get("name", ""),
                pin=data.get("pin", ""),
                tags=data.get("tags"),
            )
            return jsonify({"id": user_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to add employee")
            return internal_error()

    @app.route("/delete-employee", methods=["POST"], endpoint="delete_employee")
    @admin_required
    def delete_employee():
        data = json_body()
        try:
            user = employees.delete_employee(pin=data.get("pin", ""))
            return jsonify({"success": True, "name": user.name})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to delete employee")
            return internal_error()

    @app.route("/update-employee-tags", methods=["POST"], endpoint="update_employee_tags")
    @admin_required
    def update_employee_tags():
        data = json_body()
        try:
            tags = employees.update_tags(pin=data.get("pin", ""), tags=data.get("tags") or [])
            return jsonify({"success": True, "tags": list(tags)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to update tags")
            return internal_error()
