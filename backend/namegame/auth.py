from functools import wraps

from flask import current_app, jsonify
from flask_login import current_user


def lecturer_required(view):
    """Guard a lecturer action; a pass-through unless REQUIRE_LECTURER_LOGIN is set."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_app.config.get('REQUIRE_LECTURER_LOGIN') and not current_user.is_authenticated:
            return jsonify({'error': 'Lecturer login required'}), 401
        return view(*args, **kwargs)

    return wrapped
