"""create companies table

Revision ID: 5e1f0c2a9b34
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5e1f0c2a9b34'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'companies',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('jurisdiction', sa.String(length=20), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('company_address', sa.Text(), nullable=False),
        sa.Column('nature_of_business', sa.Text(), nullable=True),
        sa.Column('number_of_directors', sa.Integer(), nullable=True),
        sa.Column('number_of_shareholders', sa.Integer(), nullable=True),
        sa.Column('sec_code', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "jurisdiction IN ('UK', 'Singapore', 'Caymens')",
            name='ck_companies_jurisdiction',
        ),
        sa.CheckConstraint('number_of_directors >= 0', name='ck_companies_number_of_directors'),
        sa.CheckConstraint('number_of_shareholders >= 0', name='ck_companies_number_of_shareholders'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_companies_jurisdiction', 'companies', ['jurisdiction'], unique=False)
    op.create_index('ix_companies_company_name', 'companies', ['company_name'], unique=False)
    op.create_index('ix_companies_created_at', 'companies', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_companies_created_at', table_name='companies')
    op.drop_index('ix_companies_company_name', table_name='companies')
    op.drop_index('ix_companies_jurisdiction', table_name='companies')
    op.drop_table('companies')
