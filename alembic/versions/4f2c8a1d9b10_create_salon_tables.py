"""create salon tables

Revision ID: 4f2c8a1d9b10
Revises:
Create Date: 2026-10-17 09:12:44.501233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4f2c8a1d9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Services and employees
    op.create_table(
        'services',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration_min', sa.Integer, nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('duration_min > 0', name='ck_services_duration_positive'),
    )
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('full_name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(40), nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'employee_services',
        sa.Column('employee_id', sa.Integer, sa.ForeignKey('employees.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('service_id', sa.Integer, sa.ForeignKey('services.id', ondelete='CASCADE'), primary_key=True),
    )

    # 2. Schedule: working hours and holidays
    op.create_table(
        'working_hours',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('employee_id', sa.Integer, sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=True),
        sa.Column('weekday', sa.Integer, nullable=False),
        sa.Column('start_time', sa.Time, nullable=True),
        sa.Column('end_time', sa.Time, nullable=True),
        sa.Column('break_start', sa.Time, nullable=True),
        sa.Column('break_end', sa.Time, nullable=True),
        sa.UniqueConstraint('employee_id', 'weekday', name='uq_working_hours_scope_weekday'),
        sa.CheckConstraint('weekday >= 0 AND weekday <= 6', name='ck_working_hours_weekday'),
    )
    op.create_index('ix_working_hours_employee_id', 'working_hours', ['employee_id'])

    # NULL employee_id does not collide in the unique constraint above
    op.create_index(
        'uq_working_hours_global_weekday', 'working_hours', ['weekday'],
        unique=True,
        postgresql_where=sa.text('employee_id IS NULL'),
        sqlite_where=sa.text('employee_id IS NULL'),
    )

    op.create_table(
        'holidays',
        sa.Column('date', sa.Date, primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
    )

    # 3. Reservations
    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('employee_id', sa.Integer, sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('service_id', sa.Integer, sa.ForeignKey('services.id'), nullable=False),
        sa.Column('client_id', sa.String(64), nullable=True),
        sa.Column('client_full_name', sa.String(120), nullable=True),
        sa.Column('client_phone', sa.String(40), nullable=True),
        sa.Column('start_at', sa.DateTime, nullable=False),
        sa.Column('end_at', sa.DateTime, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='CONFIRMED'),
        sa.Column('type', sa.String(20), nullable=False, server_default='online'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('end_at > start_at', name='ck_reservations_interval'),
    )
    op.create_index('idx_reservations_employee_start', 'reservations', ['employee_id', 'start_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_reservations_employee_start', table_name='reservations')
    op.drop_table('reservations')
    op.drop_table('holidays')
    op.drop_index('uq_working_hours_global_weekday', table_name='working_hours')
    op.drop_index('ix_working_hours_employee_id', table_name='working_hours')
    op.drop_table('working_hours')
    op.drop_table('employee_services')
    op.drop_table('employees')
    op.drop_index('ix_services_is_active', table_name='services')
    op.drop_table('services')
