import pytest
from werkzeug.security import check_password_hash

from conftest import TEST_CONFIG
from nexus import create_app, db
from nexus.auth.services import AuthService, MASTER_ADMIN_ID
from nexus.models import User, UserRole
from nexus.utils.exceptions import ValidacaoError


@pytest.fixture
def service(app):
    return AuthService()


def test_admin_mestre_sincronizado_na_inicializacao(service):
    admin = User.query.get(MASTER_ADMIN_ID)
    assert admin.username == 'admin'
    assert admin.role == UserRole.ADMIN
    assert check_password_hash(admin.password, 'senha-admin')


def test_sincronizar_atualiza_senha_sem_duplicar(service):
    service.sincronizar_admin_mestre('admin', 'nova-senha', 'admin@teleinfo.com')
    assert User.query.count() == 1
    assert service.autenticar('admin', 'nova-senha') is not None
    assert service.autenticar('admin', 'senha-admin') is None


def test_login_por_username_ou_email_sem_caixa(service):
    assert service.autenticar('ADMIN', 'senha-admin').id == MASTER_ADMIN_ID
    assert service.autenticar('Admin@Teleinfo.com', 'senha-admin').id == MASTER_ADMIN_ID


def test_login_invalido(service):
    assert service.autenticar('admin', 'errada') is None
    assert service.autenticar('ninguem', 'senha-admin') is None
    assert service.autenticar('', '') is None


def test_adicionar_usuario(service):
    usuario = service.adicionar_usuario({'username': 'maria', 'nome': 'Maria Souza', 'password': '123'})
    assert usuario.role == UserRole.USER
    assert usuario.avatar.startswith('https://ui-avatars.com/api/?name=Maria+Souza')
    assert service.autenticar('maria', '123').id == usuario.id
    assert 'password' not in usuario.to_dict()


def test_adicionar_usuario_validacoes(service):
    with pytest.raises(ValidacaoError):
        service.adicionar_usuario({'username': 'ADMIN', 'nome': 'Outro', 'password': 'x'})
    with pytest.raises(ValidacaoError):
        service.adicionar_usuario({'username': 'joao', 'nome': 'João'})
    with pytest.raises(ValidacaoError):
        service.adicionar_usuario({'username': 'joao', 'nome': 'João', 'password': 'x', 'role': 'ROOT'})


def test_admin_mestre_nao_pode_ser_removido(service):
    with pytest.raises(ValidacaoError):
        service.remover_usuario(MASTER_ADMIN_ID)
    assert User.query.get(MASTER_ADMIN_ID) is not None


def test_remover_usuario(service):
    usuario = service.adicionar_usuario({'username': 'temp', 'nome': 'Temporário', 'password': 'x'})
    service.remover_usuario(usuario.id)
    assert [u.username for u in service.listar_usuarios()] == ['admin']


def test_sincronizar_recusa_username_de_outro_usuario(service):
    chefe = service.adicionar_usuario({'username': 'chefe', 'nome': 'Chefe', 'password': 'x'})
    with pytest.raises(ValidacaoError):
        service.sincronizar_admin_mestre('Chefe', 'outra', 'admin@teleinfo.com')

    admin = User.query.get(MASTER_ADMIN_ID)
    assert admin.username == 'admin'
    assert service.autenticar('chefe', 'x').id == chefe.id


def test_aplicacao_inicia_com_username_de_admin_em_conflito(tmp_path):
    config = {**TEST_CONFIG, 'SQLALCHEMY_DATABASE_URI': f"sqlite:///{(tmp_path / 'nexus.db').as_posix()}"}

    primeira = create_app(config)
    with primeira.app_context():
        AuthService().adicionar_usuario({'username': 'chefe', 'nome': 'Chefe', 'password': 'x'})
        db.session.remove()
        db.engine.dispose()

    segunda = create_app({**config, 'NEXUS_ADMIN_USERNAME': 'chefe'})
    with segunda.app_context():
        assert User.query.get(MASTER_ADMIN_ID).username == 'admin'
        assert User.query.filter_by(username='chefe').count() == 1
        db.session.remove()
        db.engine.dispose()
