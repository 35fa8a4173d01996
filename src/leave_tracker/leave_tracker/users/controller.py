from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import (
    current_actor,
    domain_error_response,
    hr_required,
    json_body,
    login_required,
    message,
    server_error_response,
)
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import DomainError
from .model import User
from .service import SessionUser

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict:
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "employeeId": user.employee_code,
        "department": user.department,
        "position": user.position,
        "phone": user.phone,
        "role": user.role.value,
    }


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    def _start_session(s_user: SessionUser) -> None:
        session.clear()
        session.permanent = True
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        body = json_body()
        try:
            user_id = container.user_service.register(
                name=body.get("name", ""),
                email=body.get("email", ""),
                password=body.get("password", ""),
                department=body.get("department", ""),
                position=body.get("position", ""),
                employee_code=body.get("employeeId", ""),
                phone=body.get("phone"),
            )
            user = container.user_service.get_profile(user_id)
            _start_session(SessionUser.from_user(user))
            logger.info("registered user %s", user_id)
            return jsonify({"user": user_to_dict(user)}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Register")

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        try:
            s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
            _start_session(s_user)
            user = container.user_service.get_profile(s_user.user_id)
            return jsonify({"user": user_to_dict(user)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Login")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return message("Logged out", 200)

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            user = container.user_service.get_profile(current_actor().user_id)
            return jsonify(user_to_dict(user))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Get current user")

    @app.route("/api/users/employees", methods=["GET"], endpoint="employees")
    @hr_required
    def employees():
        try:
            users = container.user_service.list_employees(actor=current_actor())
            return jsonify([user_to_dict(u) for u in users])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Get employees")

    @app.route("/api/users/stats", methods=["GET"], endpoint="user_stats")
    @login_required
    def user_stats():
        try:
            return jsonify(container.leave_service.my_stats(actor=current_actor()).to_dict())
        except Exception:
            return server_error_response("Get user stats")

    @app.route("/api/users/admin-stats", methods=["GET"], endpoint="admin_stats")
    @hr_required
    def admin_stats():
        try:
            stats = container.leave_service.org_stats(
                actor=current_actor(),
                employee_count=container.user_service.count_employees(),
            )
            return jsonify(stats.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Get admin stats")
