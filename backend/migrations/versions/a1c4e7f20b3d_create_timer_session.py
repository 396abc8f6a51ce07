"""create timer_session

Revision ID: a1c4e7f20b3d
Revises:
Create Date: 2026-10-19 00:00:00

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c4e7f20b3d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'timer_session' in set(insp.get_table_names()):
        return

    op.create_table(
        'timer_session',
        sa.Column('pk', sa.Integer(), nullable=False),
        sa.Column('public_id', sa.String(length=32), nullable=False),
        sa.Column('mode', sa.String(length=16), nullable=False),
        sa.Column('is_running', sa.Boolean(), nullable=False),
        sa.Column('start_time', sa.BigInteger(), nullable=True),
        sa.Column('paused_at', sa.BigInteger(), nullable=True),
        sa.Column('duration', sa.BigInteger(), nullable=True),
        sa.Column('show_milliseconds', sa.Boolean(), nullable=False),
        sa.Column('font_size', sa.Integer(), nullable=False),
        sa.Column('theme', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('pk'),
    )
    with op.batch_alter_table('timer_session') as batch_op:
        batch_op.create_index('ix_timer_session_public_id', ['public_id'], unique=True)


def downgrade():
    with op.batch_alter_table('timer_session') as batch_op:
        batch_op.drop_index('ix_timer_session_public_id')
    op.drop_table('timer_session')
