"""initial migration

Revision ID: initial_migration
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial_migration'
down_revision = None
branch_labels = None
depends_on = None

TIPOS_AUSENCIA = ('FERIAS', 'ATESTADO', 'TREINAMENTO', 'TROCA_TURNO', 'INTEGRACAO', 'FALTA', 'ABONAR')

def upgrade():
    conn = op.get_bind()
    tables = sa.inspect(conn).get_table_names()

    # Coleções importadas via CSV
    if 'sla_project' not in tables:
        op.create_table('sla_project',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('posicao', sa.Integer(), nullable=False),
            sa.Column('titulo', sa.String(length=255), nullable=False),
            sa.Column('numero_projeto', sa.String(length=80), nullable=False),
            sa.Column('inicio_fase', sa.String(length=40), nullable=True),
            sa.Column('dias_na_fase', sa.Float(), nullable=False),
            sa.Column('entrega_teleinfo', sa.String(length=40), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )

    if 'multi_phase_project' not in tables:
        op.create_table('multi_phase_project',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('posicao', sa.Integer(), nullable=False),
            sa.Column('titulo', sa.String(length=255), nullable=False),
            sa.Column('numero_projeto', sa.String(length=80), nullable=False),
            sa.Column('dias_triagem', sa.Float(), nullable=False),
            sa.Column('dias_kickoff', sa.Float(), nullable=False),
            sa.Column('dias_estoque', sa.Float(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

    if 'status_project' not in tables:
        op.create_table('status_project',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('posicao', sa.Integer(), nullable=False),
            sa.Column('cliente', sa.String(length=255), nullable=False),
            sa.Column('tipo_projeto', sa.String(length=150), nullable=False),
            sa.Column('tipo_produto', sa.String(length=150), nullable=False),
            sa.Column('bu', sa.String(length=80), nullable=False),
            sa.Column('centro_custo', sa.String(length=80), nullable=False),
            sa.Column('status', sa.String(length=120), nullable=False),
            sa.Column('percentual', sa.Float(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )

    if 'import_info' not in tables:
        op.create_table('import_info',
            sa.Column('chave', sa.String(length=40), nullable=False),
            sa.Column('nome_arquivo', sa.String(length=255), nullable=False),
            sa.Column('total_registros', sa.Integer(), nullable=False),
            sa.Column('importado_em', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('chave')
        )

    # Relatório de status
    if 'detailed_project' not in tables:
        op.create_table('detailed_project',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('nome', sa.String(length=255), nullable=False),
            sa.Column('inicio', sa.String(length=20), nullable=True),
            sa.Column('fim', sa.String(length=20), nullable=True),
            sa.Column('centro_custo', sa.String(length=80), nullable=True),
            sa.Column('etapas', sa.Text(), nullable=False),
            sa.Column('horas_vendidas', sa.Text(), nullable=False),
            sa.Column('horas_utilizadas', sa.Text(), nullable=False),
            sa.Column('dados_producao', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )

    if 'key_fact' not in tables:
        op.create_table('key_fact',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('texto', sa.Text(), nullable=False),
            sa.Column('logo_url', sa.String(length=500), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )

    if 'next_step' not in tables:
        op.create_table('next_step',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('projeto', sa.String(length=255), nullable=False),
            sa.Column('descricao', sa.Text(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )

    # Usuários
    if 'user' not in tables:
        op.create_table('user',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('username', sa.String(length=150), nullable=False),
            sa.Column('nome', sa.String(length=255), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('role', sa.Enum('ADMIN', 'USER', name='userrole'), nullable=False),
            sa.Column('avatar', sa.String(length=500), nullable=True),
            sa.Column('password', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_user_username', 'user', ['username'], unique=True)

    # Gestão de equipes
    if 'manager_project' not in tables:
        op.create_table('manager_project',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('nome', sa.String(length=255), nullable=False),
            sa.Column('centro_custo', sa.String(length=80), nullable=False),
            sa.Column('numero_os', sa.String(length=80), nullable=False),
            sa.Column('cliente', sa.String(length=255), nullable=False),
            sa.Column('local', sa.String(length=255), nullable=False),
            sa.Column('bu', sa.String(length=80), nullable=False),
            sa.Column('horas_vendidas', sa.Float(), nullable=False),
            sa.Column('funcionarios_vendidos', sa.Integer(), nullable=False),
            sa.Column('endereco', sa.String(length=500), nullable=False),
            sa.Column('cor', sa.String(length=20), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

    if 'employee' not in tables:
        op.create_table('employee',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('nome', sa.String(length=255), nullable=False),
            sa.Column('cargo', sa.String(length=150), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

    if 'schedule' not in tables:
        op.create_table('schedule',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('data', sa.String(length=10), nullable=False),
            sa.Column('projeto_id', sa.String(length=40), nullable=False),
            sa.Column('funcionario_id', sa.String(length=40), nullable=False),
            sa.Column('veiculo', sa.String(length=40), nullable=False),
            sa.Column('numero_os', sa.String(length=80), nullable=True),
            sa.Column('hora_inicio', sa.String(length=5), nullable=False),
            sa.Column('hora_fim', sa.String(length=5), nullable=False),
            sa.ForeignKeyConstraint(['projeto_id'], ['manager_project.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['funcionario_id'], ['employee.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_schedule_data', 'schedule', ['data'], unique=False)

    if 'absence' not in tables:
        op.create_table('absence',
            sa.Column('id', sa.String(length=40), nullable=False),
            sa.Column('funcionario_id', sa.String(length=40), nullable=False),
            sa.Column('tipo', sa.Enum(*TIPOS_AUSENCIA, name='absencetype'), nullable=False),
            sa.Column('data_inicio', sa.String(length=10), nullable=False),
            sa.Column('data_fim', sa.String(length=10), nullable=False),
            sa.Column('motivo', sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(['funcionario_id'], ['employee.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )

def downgrade():
    op.drop_table('absence')
    op.drop_index('ix_schedule_data', table_name='schedule')
    op.drop_table('schedule')
    op.drop_table('employee')
    op.drop_table('manager_project')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
    op.drop_table('next_step')
    op.drop_table('key_fact')
    op.drop_table('detailed_project')
    op.drop_table('import_info')
    op.drop_table('status_project')
    op.drop_table('multi_phase_project')
    op.drop_table('sla_project')
