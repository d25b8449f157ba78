"""initial schema

Revision ID: initial_schema
Revises:
Create Date: 2025-03-01 12:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision: str = 'initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('avatar', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('role', sa.Enum('TUTOR', 'STUDENT', 'ADMIN', name='role'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'subject',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('icon', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('color', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('tutor_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['tutor_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_subject_tutor_id'), 'subject', ['tutor_id'], unique=False)

    op.create_table(
        'topic',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('subject_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.ForeignKeyConstraint(['subject_id'], ['subject.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_topic_subject_id'), 'topic', ['subject_id'], unique=False)

    op.create_table(
        'assignment',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.Enum('DRAFT', 'ACTIVE', 'COMPLETED', 'ARCHIVED', name='assignmentstatus'),
                  nullable=False),
        sa.Column('tutor_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('subject_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['tutor_id'], ['user.id']),
        sa.ForeignKeyConstraint(['subject_id'], ['subject.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assignment_status'), 'assignment', ['status'], unique=False)
    op.create_index(op.f('ix_assignment_tutor_id'), 'assignment', ['tutor_id'], unique=False)
    op.create_index(op.f('ix_assignment_subject_id'), 'assignment', ['subject_id'], unique=False)

    op.create_table(
        'problem',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('question', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('answer', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('difficulty', sa.Enum('EASY', 'MEDIUM', 'HARD', name='difficulty'), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('topic_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('assignment_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assignment_id'], ['assignment.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_problem_assignment_id'), 'problem', ['assignment_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_problem_assignment_id'), table_name='problem')
    op.drop_table('problem')
    op.drop_index(op.f('ix_assignment_subject_id'), table_name='assignment')
    op.drop_index(op.f('ix_assignment_tutor_id'), table_name='assignment')
    op.drop_index(op.f('ix_assignment_status'), table_name='assignment')
    op.drop_table('assignment')
    op.drop_index(op.f('ix_topic_subject_id'), table_name='topic')
    op.drop_table('topic')
    op.drop_index(op.f('ix_subject_tutor_id'), table_name='subject')
    op.drop_table('subject')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')
    sa.Enum(name='difficulty').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='assignmentstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='role').drop(op.get_bind(), checkfirst=True)
