import pytest

from nexus import create_app, db

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_ENGINE_OPTIONS': {},
    'GEMINI_API_KEY': '',
    'NEXUS_ADMIN_USERNAME': 'admin',
    'NEXUS_ADMIN_PASSWORD': 'senha-admin',
    'NEXUS_ADMIN_EMAIL': 'admin@teleinfo.com',
    'NEXUS_LOG_LEVEL': 'WARNING',
    'NEXUS_LOG_FILE': False,
}

@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def logged_client(client):
    resposta = client.post('/auth/api/login', json={'username': 'admin', 'password': 'senha-admin'})
    assert resposta.status_code == 200
    return client
