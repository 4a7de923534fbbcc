"""
Módulo de Configuração

Define a classe de configuração principal. Mantém o padrão 'Fail Fast':
se uma variável crítica estiver faltando, a aplicação nem inicia.
"""

import os
from datetime import date
from pathlib import Path
from dotenv import load_dotenv

# Carrega variáveis do arquivo .env
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


def validar_data_referencia(valor):
    """
    Fail Fast para DATA_REFERENCIA: vazia vale a data do sistema; fora do
    formato AAAA-MM-DD a aplicação não inicia.
    """
    if not valor:
        return None
    try:
        date.fromisoformat(valor)
    except ValueError:
        raise ValueError(f"ERRO CRÍTICO: 'DATA_REFERENCIA' inválida ({valor}). Use o formato AAAA-MM-DD.") from None
    return valor


class Config:
    """
    Classe de configuração base da aplicação.
    """

    # === SEGURANÇA CRÍTICA (Fail Fast) ===
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise ValueError("ERRO CRÍTICO: 'SECRET_KEY' não encontrada no .env. A aplicação não pode iniciar insegura.")

    # === FLASK ===
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1')
    JSON_SORT_KEYS = False
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORTA = int(os.environ.get('PORTA', '5000'))

    # === LOGGING ===
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # === DADOS ===
    # Arquivo JSON lido na inicialização para popular o repositório em memória.
    # Vazio desativa a carga (repositório começa sem registros).
    DADOS_INICIAIS = os.environ.get('DADOS_INICIAIS', str(BASE_DIR / 'dados' / 'dados_iniciais.json'))

    # === PAINÉIS ===
    LIMITE_BAIRROS = int(os.environ.get('LIMITE_BAIRROS', '10'))

    # Atraso artificial (segundos) que simula o envio dos cadastros
    ATRASO_SUBMISSAO = float(os.environ.get('ATRASO_SUBMISSAO', '0'))

    # === RATE LIMITING ===
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '200 per day;50 per hour')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Data usada como "hoje" nos painéis (YYYY-MM-DD). Vazio = data do sistema.
    DATA_REFERENCIA = validar_data_referencia(os.environ.get('DATA_REFERENCIA'))
