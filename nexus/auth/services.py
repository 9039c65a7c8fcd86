# nexus/auth/services.py
import logging
from urllib.parse import quote_plus

from werkzeug.security import generate_password_hash, check_password_hash

from ..models import User, UserRole, gerar_id
from ..utils.exceptions import ValidacaoError
from ..utils.repository import CollectionRepository

logger = logging.getLogger(__name__)

MASTER_ADMIN_ID = 'master-01'

def url_avatar(nome, background='random'):
    return f"https://ui-avatars.com/api/?name={quote_plus(nome or '')}&background={background}"

class AuthService:
    """Autenticação e diretório de usuários."""

    def __init__(self, repositorio=None):
        self.usuarios = repositorio or CollectionRepository(User, ordem=[User.created_at])

    def sincronizar_admin_mestre(self, username, senha, email=None, nome='Administrador'):
        """
        Cria o administrador mestre ou atualiza seus dados e senha.

        Raises:
            ValidacaoError: o username configurado pertence a outro usuário
        """
        conflito = next(
            (u for u in self.usuarios.listar()
             if u.id != MASTER_ADMIN_ID and u.username.casefold() == (username or '').casefold()),
            None,
        )
        if conflito is not None:
            raise ValidacaoError(
                f"Username '{username}' do administrador mestre já pertence ao usuário {conflito.id}"
            )

        admin = self.usuarios.obter(MASTER_ADMIN_ID)
        if admin is None:
            admin = User(id=MASTER_ADMIN_ID)
            logger.info(f"Criando administrador mestre '{username}'")
        admin.username = username
        admin.nome = nome
        admin.email = email
        admin.role = UserRole.ADMIN
        admin.avatar = url_avatar(nome, background='3b82f6&color=fff')
        admin.password = generate_password_hash(senha)
        return self.usuarios.salvar(admin)

    def autenticar(self, login, senha):
        """
        Procura o usuário pelo username ou e-mail (sem diferenciar caixa).

        Returns:
            User | None: usuário cuja senha confere
        """
        alvo = (login or '').strip().casefold()
        if not alvo or not senha:
            return None

        for usuario in self.usuarios.listar():
            mesmo_login = usuario.username.casefold() == alvo
            mesmo_email = bool(usuario.email) and usuario.email.casefold() == alvo
            if (mesmo_login or mesmo_email) and check_password_hash(usuario.password, senha):
                logger.info(f"Login bem-sucedido: {usuario.username}")
                return usuario

        logger.warning(f"Falha de login para '{login}'")
        return None

    def listar_usuarios(self):
        return self.usuarios.listar()

    def adicionar_usuario(self, dados):
        """Cadastra um usuário; username, nome e senha são obrigatórios."""
        dados = dados or {}
        username = (dados.get('username') or '').strip()
        nome = (dados.get('nome') or '').strip()
        senha = dados.get('password') or ''
        if not username or not nome or not senha:
            raise ValidacaoError('Username, nome e senha são obrigatórios')

        if any(u.username.casefold() == username.casefold() for u in self.usuarios.listar()):
            raise ValidacaoError(f"Usuário '{username}' já existe")

        try:
            role = UserRole(dados.get('role') or UserRole.USER.value)
        except ValueError:
            raise ValidacaoError(f"Perfil inválido: {dados.get('role')}")

        usuario = User(
            id=gerar_id('user'),
            username=username,
            nome=nome,
            email=(dados.get('email') or '').strip() or None,
            role=role,
            avatar=url_avatar(nome),
            password=generate_password_hash(senha),
        )
        self.usuarios.salvar(usuario)
        logger.info(f"Usuário {username} criado com perfil {role.value}")
        return usuario

    def remover_usuario(self, usuario_id):
        """Remove um usuário. O administrador mestre nunca é removido."""
        if usuario_id == MASTER_ADMIN_ID:
            raise ValidacaoError('O administrador mestre não pode ser removido')
        self.usuarios.remover(usuario_id)
        logger.info(f"Usuário {usuario_id} removido")
