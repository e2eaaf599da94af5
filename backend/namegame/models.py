from namegame import db, bcrypt
from namegame.services.verification.constraints import LETTER_PAIRS
from flask_login import UserMixin
from datetime import datetime, timezone
import json


def _utcnow():
    return datetime.now(timezone.utc)


group_members = db.Table(
    'group_member',
    db.Column('group_id', db.Integer, db.ForeignKey('group.id'), primary_key=True),
    db.Column('student_id', db.Integer, db.ForeignKey('student.id'), primary_key=True),
)


class Lecturer(UserMixin, db.Model):
    __tablename__ = 'lecturer'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Student(db.Model):
    __tablename__ = 'student'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    registered_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    groups = db.relationship('Group', secondary=group_members, back_populates='members')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'registered_at': self.registered_at.isoformat() if self.registered_at else None,
        }


class Group(db.Model):
    __tablename__ = 'group'
    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(16), nullable=False)  # regular, nominal
    name = db.Column(db.String(128), nullable=False)
    members = db.relationship('Student', secondary=group_members, back_populates='groups', order_by='Student.id')
    # First member to claim the group's shared submission (regular groups)
    submitter_id = db.Column(db.Integer, db.ForeignKey('student.id', name='fk_group_submitter_id'), nullable=True)
    active_member_id = db.Column(db.Integer, db.ForeignKey('student.id', name='fk_group_active_member_id'), nullable=True)

    submitter = db.relationship('Student', foreign_keys=[submitter_id])
    active_member = db.relationship('Student', foreign_keys=[active_member_id])

    def to_dict(self, include_members=True):
        data = {
            'id': self.id,
            'type': self.type,
            'name': self.name,
            'member_count': len(self.members),
            'submitter_id': self.submitter_id,
            'active_member_id': self.active_member_id,
        }
        if include_members:
            data['members'] = [m.to_dict() for m in self.members]
        return data


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    duration = db.Column(db.Integer, nullable=False)  # seconds
    start_time = db.Column(db.Float, nullable=False)  # epoch seconds
    end_time = db.Column(db.Float, nullable=False)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    group_ids = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of group ids

    def get_group_ids(self):
        try:
            return [int(g) for g in json.loads(self.group_ids or '[]')]
        except (TypeError, ValueError):
            return []

    def to_dict(self):
        ids = self.get_group_ids()
        groups = Group.query.filter(Group.id.in_(ids)).order_by(Group.id).all() if ids else []
        return {
            'id': self.id,
            'group_ids': ids,
            'groups': [g.to_dict() for g in groups],
            'duration': self.duration,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'letter_pairs': list(LETTER_PAIRS),
            'completed': self.completed,
        }


class Submission(db.Model):
    """Answers keyed by group (regular groups) or by student (nominal groups)."""
    __tablename__ = 'submission'
    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('group.id'), nullable=True, unique=True, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id'), nullable=True, index=True)
    answers_json = db.Column(db.Text, nullable=False, default='{}')
    submitted_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def answers(self):
        try:
            data = json.loads(self.answers_json or '{}')
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @answers.setter
    def answers(self, value):
        self.answers_json = json.dumps(value, ensure_ascii=False)

    def to_dict(self):
        return {
            'id': self.id,
            'group_id': self.group_id,
            'student_id': self.student_id,
            'answers': self.answers,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
        }
