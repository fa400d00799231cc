"""create turn_tally

Revision ID: 5c2d9e7a1b40
Revises:
Create Date: 2026-10-17 10:12:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d9e7a1b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Databases bootstrapped with `flask db-reset` already have the table
    if 'turn_tally' in set(insp.get_table_names()):
        return

    op.create_table(
        'turn_tally',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_profile_id', sa.String(length=128), nullable=False),
        sa.Column('turn_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_turn_tally_user_profile_id'), 'turn_tally', ['user_profile_id'], unique=True)


def downgrade():
    op.drop_index(op.f('ix_turn_tally_user_profile_id'), table_name='turn_tally')
    op.drop_table('turn_tally')
