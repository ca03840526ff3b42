"""create service hours tables

Revision ID: 4c1f2a7d9e3b
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4c1f2a7d9e3b'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'students',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('program', sa.String(length=128), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column('remaining_hours', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("status IN ('active','inactive','pending','completed')", name='ck_student_status'),
        sa.CheckConstraint('total_hours >= 0', name='ck_student_total_hours_positive'),
        sa.CheckConstraint('remaining_hours >= 0', name='ck_student_remaining_hours_positive'),
    )
    op.create_index('ix_students_student_id', 'students', ['student_id'], unique=True)
    op.create_index('ix_students_email', 'students', ['email'], unique=True)

    op.create_table(
        'service_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('service_type', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('supervisor_name', sa.String(length=128), nullable=False),
        sa.Column('supervisor_email', sa.String(length=255), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column('remaining_hours', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("status IN ('pending','approved','rejected')", name='ck_service_request_status'),
        sa.CheckConstraint('total_hours > 0', name='ck_service_request_total_hours_positive'),
        sa.CheckConstraint('remaining_hours >= 0', name='ck_service_request_remaining_hours_positive'),
        sa.CheckConstraint('remaining_hours <= total_hours', name='ck_service_request_remaining_within_total'),
    )
    op.create_index('ix_service_requests_status_created', 'service_requests', ['status', 'created_at'])

    op.create_table(
        'service_assignments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('service_request_id', sa.Uuid(), nullable=True),
        sa.Column('hours', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('verification_status', sa.String(length=16), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('service_type', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('supervisor', sa.String(length=128), nullable=True),
        sa.Column('supervisor_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['service_request_id'], ['service_requests.id'], ondelete='RESTRICT'),
        sa.CheckConstraint("status IN ('pending','in_progress','completed','cancelled')", name='ck_assignment_status'),
        sa.CheckConstraint("verification_status IN ('pending','verified','rejected')", name='ck_assignment_verification_status'),
        sa.CheckConstraint('hours > 0', name='ck_assignment_hours_positive'),
    )
    op.create_index('ix_service_assignments_student_id', 'service_assignments', ['student_id'])
    op.create_index('ix_service_assignments_service_request_id', 'service_assignments', ['service_request_id'])
    op.create_index('ix_service_assignments_student_status', 'service_assignments', ['student_id', 'status'])


def downgrade():
    op.drop_index('ix_service_assignments_student_status', table_name='service_assignments')
    op.drop_index('ix_service_assignments_service_request_id', table_name='service_assignments')
    op.drop_index('ix_service_assignments_student_id', table_name='service_assignments')
    op.drop_table('service_assignments')
    op.drop_index('ix_service_requests_status_created', table_name='service_requests')
    op.drop_table('service_requests')
    op.drop_index('ix_students_email', table_name='students')
    op.drop_index('ix_students_student_id', table_name='students')
    op.drop_table('students')
