"""initial_job_board_schema

Creates users, reference data tables, jobs with their location/category
join tables, file uploads and job applications. Seeds the application
statuses that are set automatically (submitted, withdrawn).

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 09:12:40.218311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LOOKUP_TABLES = (
    'locations',
    'job_categories',
    'salary_types',
    'employment_contract_types',
    'job_application_statuses',
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create the job board schema."""

    # 1. Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('role', sa.Enum('user', 'recruiter', 'admin', name='userrole'), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2. Reference data (same shape; categories also carry a description)
    for table in LOOKUP_TABLES:
        extra = [sa.Column('description', sa.Text(), nullable=True)] if table == 'job_categories' else []
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(), nullable=False),
            *extra,
            *_timestamps(),
        )
        op.create_index(f'ix_{table}_id', table, ['id'])
        op.create_index(f'ix_{table}_name', table, ['name'], unique=True)

    # 3. Jobs (soft-deleted through deleted_at)
    op.create_table(
        'jb_jobs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('salary', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('deadline', sa.Date(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('salary_type_id', sa.Integer(), sa.ForeignKey('salary_types.id'), nullable=True),
        sa.Column(
            'employment_contract_type_id',
            sa.Integer(),
            sa.ForeignKey('employment_contract_types.id'),
            nullable=True,
        ),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    for column in ('id', 'title', 'active', 'salary_type_id', 'employment_contract_type_id', 'deleted_at'):
        op.create_index(f'ix_jb_jobs_{column}', 'jb_jobs', [column])

    # 4. Join tables; the composite primary key makes each link unique
    op.create_table(
        'jb_jobs_in_locations',
        sa.Column('job_id', sa.Integer(), sa.ForeignKey('jb_jobs.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_jb_jobs_in_locations_location_id', 'jb_jobs_in_locations', ['location_id'])

    op.create_table(
        'jb_jobs_in_categories',
        sa.Column('job_id', sa.Integer(), sa.ForeignKey('jb_jobs.id', ondelete='CASCADE'), primary_key=True),
        sa.Column(
            'category_id', sa.Integer(), sa.ForeignKey('job_categories.id', ondelete='CASCADE'), primary_key=True
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_jb_jobs_in_categories_category_id', 'jb_jobs_in_categories', ['category_id'])

    # 5. Uploads and applications
    op.create_table(
        'file_uploads',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('path', sa.String(), nullable=False),
        sa.Column('mimetype', sa.String(), nullable=True),
        sa.Column('size_bytes', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_file_uploads_id', 'file_uploads', ['id'])
    op.create_index('ix_file_uploads_user_id', 'file_uploads', ['user_id'])

    op.create_table(
        'job_applications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('job_id', sa.Integer(), sa.ForeignKey('jb_jobs.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('file_upload_id', sa.Integer(), sa.ForeignKey('file_uploads.id'), nullable=True),
        sa.Column(
            'job_application_status_id',
            sa.Integer(),
            sa.ForeignKey('job_application_statuses.id'),
            nullable=True,
        ),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('withdrawn_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('job_id', 'user_id', name='uq_job_applications_job_user'),
    )
    for column in ('id', 'job_id', 'user_id', 'file_upload_id', 'job_application_status_id'):
        op.create_index(f'ix_job_applications_{column}', 'job_applications', [column])

    # 6. Statuses the API sets on its own
    statuses = sa.table('job_application_statuses', sa.column('name', sa.String()))
    op.bulk_insert(statuses, [{'name': 'submitted'}, {'name': 'withdrawn'}])


def downgrade() -> None:
    """Drop the job board schema."""
    op.drop_table('job_applications')
    op.drop_table('file_uploads')
    op.drop_table('jb_jobs_in_categories')
    op.drop_table('jb_jobs_in_locations')
    op.drop_table('jb_jobs')
    for table in reversed(LOOKUP_TABLES):
        op.drop_table(table)
    op.drop_table('users')

    # Drop enum type
    op.execute('DROP TYPE IF EXISTS userrole')
