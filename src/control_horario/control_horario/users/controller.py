from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.http import current_user_id, error_response, fail, login_required
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_user():
        data = request.get_json(silent=True) or {}
        try:
            user_id = container.user_service.register(
                full_name=data.get("full_name", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
                company_id=data.get("company_id"),
            )
        except DomainError as e:
            return error_response(e)

        logger.info("user registered", extra={"user_id": user_id})
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except DomainError as e:
            return error_response(e)

        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["company_id"] = s_user.company_id

        return jsonify(
            {
                "success": True,
                "message": "Sesión iniciada",
                "user": {
                    "user_id": s_user.user_id,
                    "full_name": s_user.full_name,
                    "email": s_user.email,
                    "role": s_user.role.value,
                    "company_id": s_user.company_id,
                },
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Sesión cerrada"})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            user = container.users_repo.get_by_id(current_user_id())
        except DomainError as e:
            return error_response(e)
        if not user:
            session.clear()
            return fail("Usuario no encontrado", 401)

        return jsonify(
            {
                "success": True,
                "user": {
                    "user_id": user.user_id,
                    "full_name": user.full_name,
                    "first_name": user.first_name,
                    "email": user.email,
                    "role": user.role.value,
                    "company_id": user.company_id,
                },
            }
        )
