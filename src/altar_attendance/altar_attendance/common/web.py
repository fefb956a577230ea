from __future__ import annotations

from functools import wraps

from flask import jsonify, session


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "group" not in session:
            return jsonify({"error": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper
