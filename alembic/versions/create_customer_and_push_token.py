"""Create customer and push_token tables

Revision ID: create_customer_push_token
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_customer_push_token'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'customer',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shopify_customer_id', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_customer')),
    )
    op.create_index(op.f('ix_customer_shopify_customer_id'), 'customer', ['shopify_customer_id'], unique=True)

    op.create_table(
        'push_token',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(
            ['customer_id'], ['customer.id'],
            name=op.f('fk_push_token_customer_id_customer'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_push_token')),
        sa.UniqueConstraint('customer_id', 'token', name='uq_push_token_customer_token'),
    )
    op.create_index(op.f('ix_push_token_customer_id'), 'push_token', ['customer_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_push_token_customer_id'), table_name='push_token')
    op.drop_table('push_token')
    op.drop_index(op.f('ix_customer_shopify_customer_id'), table_name='customer')
    op.drop_table('customer')
