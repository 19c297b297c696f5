"""Document store - keyed JSON documents

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One row per (collection, id); version drives optimistic transactions
    op.create_table(
        'documents',
        sa.Column('collection', sa.String(128), primary_key=True),
        sa.Column('doc_id', sa.String(255), primary_key=True),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_documents_collection_created', 'documents', ['collection', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_documents_collection_created', table_name='documents')
    op.drop_table('documents')
