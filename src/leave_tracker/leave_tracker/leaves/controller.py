from __future__ import annotations

import logging

from flask import Flask, jsonify, request

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
from ..core.enums import LeaveDecision
from ..core.exceptions import DomainError
from .schemas import parse_leave_patch, parse_new_leave, parse_review, parse_status_filter

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    @login_required
    def apply_leave():
        actor = current_actor()
        try:
            data = parse_new_leave(json_body())
            leave = service.apply(actor=actor, data=data)
            logger.info("leave %s applied by user %s", leave.leave_id, actor.user_id)
            return jsonify(leave.to_dict()), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Apply leave")

    @app.route("/api/leaves/my-leaves", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        try:
            leaves = service.list_mine(actor=current_actor())
            return jsonify([r.to_dict() for r in leaves])
        except Exception:
            return server_error_response("Get my leaves")

    @app.route("/api/leaves/all", methods=["GET"], endpoint="all_leaves")
    @hr_required
    def all_leaves():
        try:
            status = parse_status_filter(request.args.get("status"))
            leaves = service.list_all(actor=current_actor(), status=status)
            return jsonify([r.to_dict() for r in leaves])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Get all leaves")

    @app.route("/api/leaves/today", methods=["GET"], endpoint="today_leaves")
    @login_required
    def today_leaves():
        try:
            return jsonify([r.to_dict() for r in service.todays_leaves()])
        except Exception:
            return server_error_response("Get today leaves")

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="get_leave")
    @login_required
    def get_leave(leave_id: int):
        try:
            return jsonify(service.get(actor=current_actor(), leave_id=leave_id).to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Get leave")

    @app.route("/api/leaves/<int:leave_id>", methods=["PUT"], endpoint="edit_leave")
    @login_required
    def edit_leave(leave_id: int):
        try:
            patch = parse_leave_patch(json_body())
            leave = service.edit(actor=current_actor(), leave_id=leave_id, patch=patch)
            return jsonify(leave.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Edit leave")

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="cancel_leave")
    @login_required
    def cancel_leave(leave_id: int):
        actor = current_actor()
        try:
            service.cancel(actor=actor, leave_id=leave_id)
            logger.info("leave %s cancelled by user %s", leave_id, actor.user_id)
            return message("Leave request cancelled", 200)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("Cancel leave")

    def _decide(leave_id: int, decision: LeaveDecision):
        actor = current_actor()
        try:
            leave = service.decide(
                actor=actor,
                leave_id=leave_id,
                decision=decision,
                review=parse_review(json_body()),
            )
            logger.info("leave %s %s by user %s", leave_id, leave.status.value, actor.user_id)
            return jsonify(leave.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response(f"{decision.value.capitalize()} leave")

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["PUT"], endpoint="approve_leave")
    @hr_required
    def approve_leave(leave_id: int):
        return _decide(leave_id, LeaveDecision.APPROVE)

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["PUT"], endpoint="reject_leave")
    @hr_required
    def reject_leave(leave_id: int):
        return _decide(leave_id, LeaveDecision.REJECT)
