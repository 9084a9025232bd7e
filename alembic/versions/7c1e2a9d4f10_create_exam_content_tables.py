"""create exam content tables

Revision ID: 7c1e2a9d4f10
Revises:
Create Date: 2025-07-01 11:31:16.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c1e2a9d4f10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Parent tables first; every foreign key cascades on delete
    op.create_table('exams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_exams_id'), 'exams', ['id'], unique=False)

    op.create_table('exam_descriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('exam_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('passing_score', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_exam_descriptions_id'), 'exam_descriptions', ['id'], unique=False)
    op.create_index(op.f('ix_exam_descriptions_exam_id'), 'exam_descriptions', ['exam_id'], unique=False)

    op.create_table('sections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('exam_description_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['exam_description_id'], ['exam_descriptions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sections_id'), 'sections', ['id'], unique=False)
    op.create_index(op.f('ix_sections_exam_description_id'), 'sections', ['exam_description_id'], unique=False)

    op.create_table('questions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('section_id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('marks', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['section_id'], ['sections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_questions_id'), 'questions', ['id'], unique=False)
    op.create_index(op.f('ix_questions_section_id'), 'questions', ['section_id'], unique=False)

    op.create_table('options',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('question_id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_options_id'), 'options', ['id'], unique=False)
    op.create_index(op.f('ix_options_question_id'), 'options', ['question_id'], unique=False)

    # TODO: drop either options.is_correct or this table once authoring tools agree on one signal
    op.create_table('correct_options',
        sa.Column('option_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['option_id'], ['options.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('option_id')
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Child tables first
    op.drop_table('correct_options')
    op.drop_index(op.f('ix_options_question_id'), table_name='options')
    op.drop_index(op.f('ix_options_id'), table_name='options')
    op.drop_table('options')
    op.drop_index(op.f('ix_questions_section_id'), table_name='questions')
    op.drop_index(op.f('ix_questions_id'), table_name='questions')
    op.drop_table('questions')
    op.drop_index(op.f('ix_sections_exam_description_id'), table_name='sections')
    op.drop_index(op.f('ix_sections_id'), table_name='sections')
    op.drop_table('sections')
    op.drop_index(op.f('ix_exam_descriptions_exam_id'), table_name='exam_descriptions')
    op.drop_index(op.f('ix_exam_descriptions_id'), table_name='exam_descriptions')
    op.drop_table('exam_descriptions')
    op.drop_index(op.f('ix_exams_id'), table_name='exams')
    op.drop_table('exams')
