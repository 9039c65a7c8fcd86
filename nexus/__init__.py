# -*- coding: utf-8 -*-
# nexus/__init__.py

from flask import Flask, jsonify
from flask.logging import default_handler
import logging
import os
from pathlib import Path
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Configuração do SQLite (integridade referencial e concorrência leve)
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Aplica os PRAGMAs do SQLite em cada nova conexão."""
    if type(dbapi_connection).__module__.split('.')[0] not in ('sqlite3', 'pysqlite2'):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA encoding='UTF-8'")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA temp_store=MEMORY")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

from .utils.json_provider import NumpyJSONProvider

# Diretório base do projeto
BASE_DIR = Path(__file__).parent.parent
INSTANCE_FOLDER_PATH = BASE_DIR / 'instance'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s [in %(pathname)s:%(lineno)d]'

# Extensões criadas fora da factory para serem importáveis nos módulos
db = SQLAlchemy()
migrate = Migrate()

MODULOS = [
    {'chave': 'stock', 'titulo': 'Estoque & SLA', 'url': '/stock',
     'desc': 'Monitoramento de SLA por fase, controle de fases e estoque físico.'},
    {'chave': 'report', 'titulo': 'Relatório de Status', 'url': '/report',
     'desc': 'Relatório de status executivo, projetos monitorados e apresentação.'},
    {'chave': 'manager', 'titulo': 'Gestão de Equipes', 'url': '/manager',
     'desc': 'Escalas de funcionários por projeto, ausências e calendário.'},
    {'chave': 'auth', 'titulo': 'Usuários', 'url': '/auth',
     'desc': 'Login e diretório de usuários.'},
]

def default_config():
    """Configuração padrão, lida das variáveis de ambiente."""
    db_path = INSTANCE_FOLDER_PATH / 'nexus.db'
    return {
        'SECRET_KEY': os.environ.get('SECRET_KEY', 'dev_secret_key'),
        'SQLALCHEMY_DATABASE_URI': os.environ.get('NEXUS_DATABASE_URI', f'sqlite:///{db_path.as_posix()}'),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'pool_timeout': 10,
            'pool_recycle': 3600,
            'pool_pre_ping': True,
            'pool_size': 3,
            'max_overflow': 5,
            'connect_args': {
                'timeout': 10,
                'check_same_thread': False
            }
        },
        'GEMINI_API_KEY': os.environ.get('GEMINI_API_KEY', ''),
        'GEMINI_MODEL': os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash'),
        'NEXUS_ADMIN_USERNAME': os.environ.get('NEXUS_ADMIN_USERNAME', 'admin'),
        'NEXUS_ADMIN_PASSWORD': os.environ.get('NEXUS_ADMIN_PASSWORD', 'admin'),
        'NEXUS_ADMIN_EMAIL': os.environ.get('NEXUS_ADMIN_EMAIL', 'admin@teleinfo.com'),
        'NEXUS_ADMIN_NAME': os.environ.get('NEXUS_ADMIN_NAME', 'Administrador'),
        'NEXUS_LOG_LEVEL': os.environ.get('NEXUS_LOG_LEVEL', 'DEBUG'),
        'NEXUS_LOG_FILE': True,
    }

def configure_logging(app):
    """Anexa handlers de arquivo (logs/app.log) e console ao logger da aplicação."""
    log_level = getattr(logging, str(app.config['NEXUS_LOG_LEVEL']).upper(), logging.DEBUG)
    log_format = logging.Formatter(LOG_FORMAT)

    app.logger.removeHandler(default_handler)

    # O logger 'nexus' é compartilhado entre instâncias; evita handlers duplicados
    tipos_existentes = {type(h) for h in app.logger.handlers}

    if app.config.get('NEXUS_LOG_FILE') and logging.FileHandler not in tipos_existentes:
        log_dir = BASE_DIR / 'logs'
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / 'app.log', encoding='utf-8')
        file_handler.setFormatter(log_format)
        file_handler.setLevel(log_level)
        app.logger.addHandler(file_handler)

    if logging.StreamHandler not in tipos_existentes:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(log_format)
        stream_handler.setLevel(log_level)
        app.logger.addHandler(stream_handler)

    app.logger.setLevel(log_level)

def register_blueprints(app):
    """Registra todos os blueprints da aplicação."""
    app.logger.info("Registrando blueprints...")

    from .auth import auth_bp
    app.register_blueprint(auth_bp)

    from .stock import stock_bp
    app.register_blueprint(stock_bp)

    from .report import report_bp
    app.register_blueprint(report_bp)

    from .manager import manager_bp
    app.register_blueprint(manager_bp)

    app.logger.info(f"Blueprints registrados: {', '.join(app.blueprints)}")

def create_app(config=None):
    """
    Cria e configura a instância da aplicação Flask.

    Args:
        config (dict, optional): sobrescreve a configuração padrão (usado nos testes)
    """
    INSTANCE_FOLDER_PATH.mkdir(parents=True, exist_ok=True)

    app = Flask(__name__, instance_path=str(INSTANCE_FOLDER_PATH))
    app.config.update(default_config())
    if config:
        app.config.update(config)

    app.json = NumpyJSONProvider(app)

    configure_logging(app)

    # --- Inicialização das Extensões ---
    db.init_app(app)
    migrate.init_app(app, db)

    # Importa os modelos para que o Flask-Migrate os reconheça
    from . import models

    from . import commands
    commands.register_commands(app)

    from .error_handlers import register_error_handlers
    register_error_handlers(app)

    app.logger.info("Aplicação Flask criada e logging configurado.")
    app.logger.info(f"Usando banco de dados em: {app.config['SQLALCHEMY_DATABASE_URI']}")

    register_blueprints(app)

    with app.app_context():
        db.create_all()
        sincronizar_admin(app)

    @app.route('/')
    def index():
        """Módulos disponíveis no painel."""
        return jsonify({'success': True, 'modulos': MODULOS})

    return app

def sincronizar_admin(app):
    """
    Garante o administrador mestre no diretório de usuários.

    Configuração conflitante é registrada no log e o administrador atual é
    mantido; a aplicação sobe mesmo assim.
    """
    from .auth.services import AuthService
    from .utils.exceptions import ValidacaoError
    try:
        AuthService().sincronizar_admin_mestre(
            username=app.config['NEXUS_ADMIN_USERNAME'],
            senha=app.config['NEXUS_ADMIN_PASSWORD'],
            email=app.config['NEXUS_ADMIN_EMAIL'],
            nome=app.config['NEXUS_ADMIN_NAME'],
        )
    except ValidacaoError as e:
        app.logger.error(f"Administrador mestre não sincronizado: {e}")
