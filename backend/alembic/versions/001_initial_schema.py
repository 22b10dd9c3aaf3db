"""Create hr_users, employees and attendance tables

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-02-01
"""
from alembic import op
import sqlalchemy as sa

revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'hr_users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_hr_users_id', 'hr_users', ['id'])
    op.create_index('ix_hr_users_email', 'hr_users', ['email'], unique=True)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('designation', sa.String(255), nullable=False),
        sa.Column('hiring_date', sa.Date(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('salary', sa.Numeric(10, 2), nullable=False),
        sa.Column('photo_path', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('age >= 18 AND age <= 70', name='ck_employees_age'),
    )
    op.create_index('ix_employees_id', 'employees', ['id'])
    op.create_index('ix_employees_name', 'employees', ['name'])
    op.create_index('ix_employees_hiring_date', 'employees', ['hiring_date'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'employee_id',
            sa.Integer(),
            sa.ForeignKey('employees.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('check_in_time', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),
    )
    op.create_index('ix_attendance_id', 'attendance', ['id'])
    op.create_index('ix_attendance_employee_id', 'attendance', ['employee_id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])


def downgrade():
    op.drop_table('attendance')
    op.drop_table('employees')
    op.drop_table('hr_users')
