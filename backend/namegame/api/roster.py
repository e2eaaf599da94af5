from flask import Blueprint, jsonify, request, current_app
from namegame import db, socketio
from namegame.auth import lecturer_required
from namegame.models import Student, Group, Submission
from namegame.services.scoring import GROUP_TYPES, REGULAR


roster = Blueprint('roster', __name__)


def _emit_students():
    students = Student.query.order_by(Student.id).all()
    socketio.emit('students_updated', [s.to_dict() for s in students], namespace='/ws')


def _emit_groups():
    groups = Group.query.order_by(Group.id).all()
    socketio.emit('groups_updated', [g.to_dict() for g in groups], namespace='/ws')


@roster.route('/students/register', methods=['POST'])
def register_student():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    current_app.logger.info(f"[register] name={name!r}")
    if not name:
        return jsonify({'error': 'Name is required'}), 400

    if not data.get('skip_duplicate_check'):
        existing = [s.name.lower() for s in Student.query.all()]
        if name.lower() in existing:
            return jsonify({'error': 'Name already exists'}), 400

    student = Student(name=name)
    db.session.add(student)
    db.session.commit()

    _emit_students()
    return jsonify(student.to_dict()), 201


@roster.route('/students', methods=['GET'])
def list_students():
    students = Student.query.order_by(Student.id).all()
    return jsonify([s.to_dict() for s in students])


@roster.route('/students/<int:student_id>', methods=['DELETE'])
@lecturer_required
def delete_student(student_id):
    student = db.session.get(Student, student_id)
    if student:
        try:
            for group in Group.query.filter(
                (Group.submitter_id == student_id) | (Group.active_member_id == student_id)
            ).all():
                if group.submitter_id == student_id:
                    group.submitter_id = None
                if group.active_member_id == student_id:
                    group.active_member_id = None
                db.session.add(group)
            # a group's shared answers outlive the member who sent them
            Submission.query.filter(
                Submission.student_id == student_id, Submission.group_id.isnot(None)
            ).update({Submission.student_id: None}, synchronize_session=False)
            Submission.query.filter_by(student_id=student_id, group_id=None).delete()
            db.session.delete(student)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info(f"[student] deleted id={student_id}")
    _emit_students()
    return jsonify({'success': True})


@roster.route('/groups', methods=['POST'])
@lecturer_required
def create_group():
    data = request.get_json(silent=True) or {}
    group_type = data.get('type')
    if group_type not in GROUP_TYPES:
        return jsonify({'error': f"Group type must be one of: {', '.join(GROUP_TYPES)}"}), 400

    member_ids = data.get('member_ids') or []
    try:
        member_ids = [int(m) for m in member_ids]
    except (TypeError, ValueError):
        return jsonify({'error': 'member_ids must be a list of student ids'}), 400
    members = Student.query.filter(Student.id.in_(member_ids)).order_by(Student.id).all() if member_ids else []

    min_members = int(current_app.config.get('MIN_GROUP_MEMBERS', 4))
    if len(members) < min_members:
        return jsonify({'error': f'Need at least {min_members} members'}), 400

    label = 'Regular' if group_type == REGULAR else 'Nominal'
    group = Group(type=group_type, name=f"{label} group {Group.query.count() + 1}")
    group.members = members
    db.session.add(group)
    db.session.commit()
    current_app.logger.info(f"[group] created id={group.id} type={group_type} members={len(members)}")

    _emit_groups()
    return jsonify(group.to_dict()), 201


@roster.route('/groups', methods=['GET'])
def list_groups():
    groups = Group.query.order_by(Group.id).all()
    return jsonify([g.to_dict() for g in groups])


@roster.route('/groups/<int:group_id>', methods=['DELETE'])
@lecturer_required
def delete_group(group_id):
    group = db.session.get(Group, group_id)
    if group:
        Submission.query.filter_by(group_id=group_id).delete()
        group.members = []
        db.session.delete(group)
        db.session.commit()
    _emit_groups()
    return jsonify({'success': True})
