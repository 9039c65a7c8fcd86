import click
from flask.cli import with_appcontext
from . import db
from .models import Employee, ManagerProject
from .utils.constants import BU_TI, BU_INFRA, BU_SEGURANCA, CORES_BU_PROJETO

FUNCIONARIOS_INICIAIS = [
    {'id': '1', 'nome': 'Carlos Silva', 'cargo': 'Técnico Líder'},
    {'id': '2', 'nome': 'Roberto Santos', 'cargo': 'Instalador'},
    {'id': '3', 'nome': 'Amanda Oliveira', 'cargo': 'Engenheira'},
    {'id': '4', 'nome': 'Jorge Costa', 'cargo': 'Auxiliar'},
    {'id': '5', 'nome': 'Fernanda Lima', 'cargo': 'Técnica'},
]

PROJETOS_INICIAIS = [
    {'id': 'p1', 'nome': 'Data Center Alpha', 'centro_custo': '10.01.01', 'numero_os': 'OS-9001',
     'cliente': 'Banco Nacional', 'local': 'SP Capital', 'bu': BU_TI,
     'horas_vendidas': 200, 'funcionarios_vendidos': 4, 'endereco': 'Av. Paulista, 1000'},
    {'id': 'p2', 'nome': 'Cabeamento Estruturado', 'centro_custo': '10.02.05', 'numero_os': 'OS-9002',
     'cliente': 'Indústria Metalúrgica', 'local': 'ABC', 'bu': BU_INFRA,
     'horas_vendidas': 150, 'funcionarios_vendidos': 3, 'endereco': 'Rua das Indústrias, 500'},
    {'id': 'p3', 'nome': 'CFTV Expansão', 'centro_custo': '10.03.10', 'numero_os': 'OS-9003',
     'cliente': 'Shopping Center', 'local': 'Zona Sul', 'bu': BU_SEGURANCA,
     'horas_vendidas': 80, 'funcionarios_vendidos': 2, 'endereco': 'Av. Nações Unidas, 2000'},
]

def seed_gestao_equipes():
    """Insere funcionários e projetos de campo de demonstração; retorna (funcionarios, projetos) criados."""
    novos_funcionarios = 0
    if Employee.query.count() == 0:
        for dados in FUNCIONARIOS_INICIAIS:
            db.session.add(Employee(**dados))
            novos_funcionarios += 1

    novos_projetos = 0
    if ManagerProject.query.count() == 0:
        for dados in PROJETOS_INICIAIS:
            db.session.add(ManagerProject(cor=CORES_BU_PROJETO[dados['bu']], **dados))
            novos_projetos += 1

    db.session.commit()
    return novos_funcionarios, novos_projetos

@click.command('seed-db')
@with_appcontext
def seed_db_command():
    """Adiciona dados iniciais da gestão de equipes (funcionários e projetos)."""
    click.echo('Verificando dados iniciais da gestão de equipes...')
    funcionarios, projetos = seed_gestao_equipes()

    if funcionarios:
        click.echo(f'{funcionarios} funcionários criados com sucesso.')
    else:
        click.echo('Funcionários já existem. Nenhum funcionário inicial adicionado.')

    if projetos:
        click.echo(f'{projetos} projetos de campo criados com sucesso.')
    else:
        click.echo('Projetos de campo já existem. Nenhum projeto inicial adicionado.')

def register_commands(app):
    app.cli.add_command(seed_db_command)
