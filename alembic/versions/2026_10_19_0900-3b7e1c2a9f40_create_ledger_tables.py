"""create ledger tables

Revision ID: 3b7e1c2a9f40
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e1c2a9f40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'currencies',
        sa.Column('name', sa.String(length=3), nullable=False),
        sa.Column('symbol', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('name', name=op.f('pk_currencies')),
    )

    # Append-only history; latest row per (currency_name, name) wins
    op.create_table(
        'rates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('currency_name', sa.String(length=3), nullable=False),
        sa.Column('name', sa.String(length=3), nullable=False),
        sa.Column('symbol', sa.String(length=10), nullable=False),
        sa.Column('value', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['currency_name'], ['currencies.name'],
            name=op.f('fk_rates_currency_name_currencies'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_rates')),
    )
    op.create_index(op.f('ix_rates_currency_name'), 'rates', ['currency_name'], unique=False)
    op.create_index(
        'ix_rates_currency_name_name_created_at', 'rates',
        ['currency_name', 'name', 'created_at'], unique=False,
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_categories')),
    )

    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('currency_name', sa.String(length=3), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('initial_balance', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['currency_name'], ['currencies.name'],
            name=op.f('fk_accounts_currency_name_currencies'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts')),
    )
    op.create_index(op.f('ix_accounts_currency_name'), 'accounts', ['currency_name'], unique=False)

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('value', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('type', sa.Enum('INCOME', 'EXPENSE', name='transaction_type'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_transactions_account_id_accounts'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_transactions')),
    )
    op.create_index(op.f('ix_transactions_account_id'), 'transactions', ['account_id'], unique=False)

    # Join rows die with their transaction; a referenced category cannot be deleted
    op.create_table(
        'transactions_categories',
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ['transaction_id'], ['transactions.id'],
            name=op.f('fk_transactions_categories_transaction_id_transactions'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['category_id'], ['categories.id'],
            name=op.f('fk_transactions_categories_category_id_categories'),
            ondelete='RESTRICT',
        ),
        sa.PrimaryKeyConstraint(
            'transaction_id', 'category_id', name=op.f('pk_transactions_categories')
        ),
    )
    op.create_index(
        op.f('ix_transactions_categories_category_id'), 'transactions_categories',
        ['category_id'], unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_transactions_categories_category_id'), table_name='transactions_categories')
    op.drop_table('transactions_categories')
    op.drop_index(op.f('ix_transactions_account_id'), table_name='transactions')
    op.drop_table('transactions')
    sa.Enum(name='transaction_type').drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f('ix_accounts_currency_name'), table_name='accounts')
    op.drop_table('accounts')
    op.drop_table('categories')
    op.drop_index('ix_rates_currency_name_name_created_at', table_name='rates')
    op.drop_index(op.f('ix_rates_currency_name'), table_name='rates')
    op.drop_table('rates')
    op.drop_table('currencies')
