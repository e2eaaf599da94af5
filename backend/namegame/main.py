from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from namegame import db, socketio, override_store
from namegame.auth import lecturer_required
from namegame.models import Lecturer, Student, Group, GameSession, Submission, group_members
from namegame.services.sessions.scheduler import clear_scheduled_sessions

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Celebrity letter-pair game server'})


@main.route('/api/lecturer/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    lecturer = Lecturer.query.filter_by(username=data.get('username')).first()
    if lecturer and lecturer.check_password(data.get('password') or ''):
        login_user(lecturer, remember=True)
        return jsonify({"success": True, "lecturer": lecturer.to_dict()})
    return jsonify({"success": False, "message": "Invalid credentials"}), 401


@main.route('/api/lecturer/check_login', methods=['GET', 'OPTIONS'])
def check_login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    if not current_user.is_authenticated:
        return jsonify({"success": False}), 401
    return jsonify({"success": True, "lecturer": current_user.to_dict()})


@main.route('/api/lecturer/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})


@main.route('/api/reset', methods=['POST'])
@lecturer_required
def reset_system():
    """Wipe students, groups, sessions, submissions and lecturer overrides."""
    try:
        Submission.query.delete()
        GameSession.query.delete()
        db.session.execute(group_members.delete())
        Group.query.delete()
        Student.query.delete()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    override_store.reset()
    clear_scheduled_sessions()
    current_app.logger.info("[reset] system state cleared")
    socketio.emit('system_reset', {}, namespace='/ws')
    return jsonify({'success': True})
