"""initial schema: lecturer, student, group, group_member, game_session, submission

Revision ID: 5c2e9a7b1f04
Revises:
Create Date: 2026-10-19 10:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7b1f04'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa.inspect(bind).get_table_names())

    if 'lecturer' not in existing_tables:
        op.create_table(
            'lecturer',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
        )
        op.create_index('ix_lecturer_username', 'lecturer', ['username'], unique=True)

    if 'student' not in existing_tables:
        op.create_table(
            'student',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        )

    if 'group' not in existing_tables:
        op.create_table(
            'group',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('type', sa.String(length=16), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('submitter_id', sa.Integer(), sa.ForeignKey('student.id', name='fk_group_submitter_id'), nullable=True),
            sa.Column('active_member_id', sa.Integer(), sa.ForeignKey('student.id', name='fk_group_active_member_id'), nullable=True),
        )

    if 'group_member' not in existing_tables:
        op.create_table(
            'group_member',
            sa.Column('group_id', sa.Integer(), sa.ForeignKey('group.id'), primary_key=True),
            sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), primary_key=True),
        )

    if 'game_session' not in existing_tables:
        op.create_table(
            'game_session',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('duration', sa.Integer(), nullable=False),
            sa.Column('start_time', sa.Float(), nullable=False),
            sa.Column('end_time', sa.Float(), nullable=False),
            sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('group_ids', sa.Text(), nullable=False, server_default='[]'),
        )

    if 'submission' not in existing_tables:
        op.create_table(
            'submission',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('group_id', sa.Integer(), sa.ForeignKey('group.id'), nullable=True),
            sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), nullable=True),
            sa.Column('answers_json', sa.Text(), nullable=False, server_default='{}'),
            sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_submission_group_id', 'submission', ['group_id'], unique=True)
        op.create_index('ix_submission_student_id', 'submission', ['student_id'], unique=False)


def downgrade():
    op.drop_index('ix_submission_student_id', table_name='submission')
    op.drop_index('ix_submission_group_id', table_name='submission')
    op.drop_table('submission')
    op.drop_table('game_session')
    op.drop_table('group_member')
    op.drop_table('group')
    op.drop_table('student')
    op.drop_index('ix_lecturer_username', table_name='lecturer')
    op.drop_table('lecturer')
