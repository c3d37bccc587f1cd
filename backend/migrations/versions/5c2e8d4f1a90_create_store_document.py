"""create store_document table

Revision ID: 5c2e8d4f1a90
Revises:
Create Date: 2026-10-17 09:20:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e8d4f1a90'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Tables created by `flask store-reset` already match this revision
    if 'store_document' in set(insp.get_table_names()):
        return

    op.create_table(
        'store_document',
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('document', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'store_document' in set(insp.get_table_names()):
        op.drop_table('store_document')
