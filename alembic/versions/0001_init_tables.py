from alembic import op
import sqlalchemy as sa

revision = "0001_init_tables"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('founded', sa.Integer, nullable=False),
        sa.Column('industry', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=False, server_default=''),
        sa.Column('headquarters', sa.String(200), nullable=False, server_default=''),
        sa.Column('website', sa.String(200), nullable=False, server_default=''),
    )

    op.create_table(
        'departments',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('company_id', sa.Integer, sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.UniqueConstraint('company_id', 'name', name='uq_department_company_name'),
    )

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('department_id', sa.Integer, sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('hire_date', sa.Date(), nullable=False),
        sa.Column('salary', sa.Numeric(18, 2), nullable=False),
    )
    op.create_index('ix_employees_department_id', 'employees', ['department_id'])
    op.create_index('ix_employees_full_name', 'employees', ['full_name'])


def downgrade():
    op.drop_index('ix_employees_full_name', table_name='employees')
    op.drop_index('ix_employees_department_id', table_name='employees')
    op.drop_table('employees')
    op.drop_table('departments')
    op.drop_table('companies')
