from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        username = data.get("username", "")
        password = data.get("password", "")

        try:
            s_user = container.auth_service.authenticate(username, password)
        except AuthenticationError as e:
            return jsonify({"error": str(e)}), 401

        session["username"] = s_user.username
        session["group"] = s_user.group_key

        # load and merge now so the first API call finds the store READY
        store = container.stores.get(s_user.group_key)
        logger.info("Leader %s logged in (group %s)", s_user.username, s_user.group_key)
        return jsonify({"username": s_user.username, "group": s_user.group_key, "state": store.state.value})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})
