"""Create videos and frame_lines tables

Revision ID: 20261017_create_frame_tables
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261017_create_frame_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'videos',
        sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_id', sa.Text(), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('file_type', sa.String(length=100), nullable=False),
        sa.Column('src_x_resolution', sa.Integer(), nullable=False),
        sa.Column('src_y_resolution', sa.Integer(), nullable=False),
        sa.Column('output_x_resolution', sa.Integer(), nullable=False),
        sa.Column('output_y_resolution', sa.Integer(), nullable=False),
        sa.Column('src_fps', sa.Float(), nullable=False),
        sa.Column('output_fps', sa.Float(), nullable=False),
        sa.Column('frame_no', sa.Integer(), nullable=True),
        sa.Column('duration', sa.Float(), nullable=True),
        sa.Column('upload_time', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_videos_upload_time', 'videos', ['upload_time'])

    # line_number is unique by convention only; resets rewrite the whole table
    op.create_table(
        'frame_lines',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('line_number', sa.Integer(), nullable=False),
        sa.Column('frame_number', sa.Integer(), nullable=False),
        sa.Column('line_content', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_frame_lines_line_number', 'frame_lines', ['line_number'])


def downgrade():
    op.drop_index('ix_frame_lines_line_number', table_name='frame_lines')
    op.drop_table('frame_lines')
    op.drop_index('ix_videos_upload_time', table_name='videos')
    op.drop_table('videos')
