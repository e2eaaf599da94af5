from flask import Blueprint, jsonify, request, current_app
from namegame import db, socketio
from namegame.auth import lecturer_required
from namegame.models import Student, Group, GameSession, Submission
from namegame.services.scoring import REGULAR
from namegame.services.sessions.scheduler import complete_session, schedule_session_end
import json
import time


sessions = Blueprint('sessions', __name__)


def _valid_answers(answers) -> bool:
    if not isinstance(answers, dict):
        return False
    for pair, names in answers.items():
        if not isinstance(pair, str) or not isinstance(names, list):
            return False
        if any(n is not None and not isinstance(n, str) for n in names):
            return False
    return True


@sessions.route('/session/start', methods=['POST'])
@lecturer_required
def start_session():
    data = request.get_json(silent=True) or {}
    try:
        duration = int(data.get('duration') or 0)
    except (TypeError, ValueError):
        return jsonify({'error': 'duration must be a number of seconds'}), 400
    if duration < 0:
        return jsonify({'error': 'duration must be a number of seconds'}), 400

    group_ids = data.get('group_ids') or []
    query = Group.query.order_by(Group.id)
    if group_ids:
        query = query.filter(Group.id.in_(group_ids))
    session_groups = query.all()
    if not session_groups:
        return jsonify({'error': 'No groups to start'}), 400

    now = time.time()
    session = GameSession(
        duration=duration,
        start_time=now,
        end_time=now + duration,
        group_ids=json.dumps([g.id for g in session_groups]),
    )
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(f"[session] started id={session.id} groups={len(session_groups)} duration={duration}s")

    payload = session.to_dict()
    socketio.emit('session_started', payload, namespace='/ws')
    schedule_session_end(current_app._get_current_object(), session.id)
    return jsonify(payload), 201


@sessions.route('/session/end/<int:session_id>', methods=['POST'])
@lecturer_required
def end_session(session_id):
    session = db.session.get(GameSession, session_id)
    if not session:
        return jsonify({'error': 'Session not found'}), 400
    complete_session(session)
    return jsonify({'success': True, 'session_id': session_id})


@sessions.route('/session/<int:session_id>', methods=['GET'])
def get_session(session_id):
    session = db.session.get(GameSession, session_id)
    return jsonify(session.to_dict() if session else None)


@sessions.route('/sessions/active', methods=['GET'])
def active_sessions():
    rows = GameSession.query.filter_by(completed=False).order_by(GameSession.id).all()
    return jsonify([s.to_dict() for s in rows])


@sessions.route('/sessions/all', methods=['GET'])
def all_sessions():
    rows = GameSession.query.order_by(GameSession.id).all()
    return jsonify([s.to_dict() for s in rows])


@sessions.route('/submissions', methods=['POST'])
def submit_answers():
    data = request.get_json(silent=True) or {}
    student_id = data.get('student_id')
    group_id = data.get('group_id')
    answers = data.get('answers')

    if not student_id:
        return jsonify({'error': 'student_id is required'}), 400
    try:
        student_id = int(student_id)
    except (TypeError, ValueError):
        return jsonify({'error': 'student_id must be an integer'}), 400
    if not _valid_answers(answers):
        return jsonify({'error': 'answers must map letter pairs to lists of names'}), 400

    student = db.session.get(Student, student_id)
    if not student:
        return jsonify({'error': 'Student not found'}), 404

    group = None
    if group_id:
        group = db.session.get(Group, group_id)
        if not group:
            return jsonify({'error': 'Group not found'}), 404

    # nominal members always submit for themselves
    if group is not None and group.type == REGULAR:
        if student not in group.members:
            return jsonify({'error': 'Student is not a member of this group'}), 403
        if group.submitter_id and group.submitter_id != student_id:
            return jsonify({
                'error': 'Another group member already submitted',
                'submitter': group.submitter_id,
            }), 403
        group.submitter_id = student_id
        db.session.add(group)
        submission = Submission.query.filter_by(group_id=group.id).first() or Submission(group_id=group.id)
        submission.student_id = student_id
        key = f"group_{group.id}"
    else:
        submission = Submission.query.filter_by(student_id=student_id, group_id=None).first() \
            or Submission(student_id=student_id)
        key = str(student_id)

    submission.answers = answers
    db.session.add(submission)
    db.session.commit()
    current_app.logger.info(f"[submission] key={key} student={student_id}")

    socketio.emit('submission_received', {'key': key, 'student_id': student_id, 'group_id': group_id}, namespace='/ws')
    return jsonify({'success': True})


@sessions.route('/groups/<int:group_id>/can-submit/<int:student_id>', methods=['GET'])
def can_submit(group_id, student_id):
    group = Group.query.filter_by(id=group_id).first_or_404()

    if not group.active_member_id:
        group.active_member_id = student_id
        db.session.add(group)
        db.session.commit()

    if group.active_member_id == student_id:
        student = db.session.get(Student, student_id)
        return jsonify({
            'can_submit': True,
            'active_member': student.name if student else None,
            'is_active_member': True,
        })

    active = db.session.get(Student, group.active_member_id)
    return jsonify({
        'can_submit': False,
        'active_member': active.name if active else 'another group member',
        'is_active_member': False,
    })
