"""seed companies and employees

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 12:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

companies = sa.table(
    'companies',
    sa.column('id', sa.Integer),
    sa.column('name', sa.String),
    sa.column('address', sa.String),
    sa.column('country', sa.String),
)

employees = sa.table(
    'employees',
    sa.column('id', sa.Integer),
    sa.column('name', sa.String),
    sa.column('age', sa.Integer),
    sa.column('position', sa.String),
    sa.column('company_id', sa.Integer),
)


def upgrade() -> None:
    op.bulk_insert(companies, [
        {'id': 1, 'name': 'IT_Solutions Ltd', 'address': '583 Wall Dr. Gwynn Oak, MD 21207', 'country': 'USA'},
        {'id': 2, 'name': 'Admin_Solutions Ltd', 'address': '312 Forest Avenue, BF 923', 'country': 'USA'},
    ])
    op.bulk_insert(employees, [
        {'id': 1, 'name': 'Sam Raiden', 'age': 26, 'position': 'Software developer', 'company_id': 1},
        {'id': 2, 'name': 'Jana McLeaf', 'age': 30, 'position': 'Software developer', 'company_id': 1},
        {'id': 3, 'name': 'Kane Miller', 'age': 35, 'position': 'Administrator', 'company_id': 2},
    ])


def downgrade() -> None:
    op.execute(employees.delete().where(employees.c.id.in_([1, 2, 3])))
    op.execute(companies.delete().where(companies.c.id.in_([1, 2])))
