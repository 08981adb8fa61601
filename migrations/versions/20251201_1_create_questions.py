"""create questions table

Revision ID: 20251201_1
Revises:
Create Date: 2025-12-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20251201_1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Existing deployments may already own this table; only create it when absent
    conn = op.get_bind()
    if sa.inspect(conn).has_table('questions'):
        return
    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('correct_answer', sa.Text(), nullable=True),
        sa.Column('imgUrl', sa.Text(), nullable=True),
        sa.Column('used', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade():
    op.drop_table('questions')
