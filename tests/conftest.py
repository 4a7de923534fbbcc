import os

# Config exige SECRET_KEY já na importação (Fail Fast)
os.environ.setdefault('SECRET_KEY', 'chave-secreta-de-teste')

import pytest

from config import BASE_DIR, Config
from src import create_app

ARQUIVO_DADOS_INICIAIS = BASE_DIR / 'dados' / 'dados_iniciais.json'


class ConfigDeTeste(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    DADOS_INICIAIS = str(ARQUIVO_DADOS_INICIAIS)
    DATA_REFERENCIA = '2024-02-20'
    ATRASO_SUBMISSAO = 0


@pytest.fixture
def app():
    app = create_app(ConfigDeTeste)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repositorio(app):
    return app.extensions['repositorio']
