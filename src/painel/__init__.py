"""
Módulo de Painéis (Blueprint)

Painel administrativo, métricas do coordenador e visões do instrutor.
"""

from flask import Blueprint

painel_bp = Blueprint(
    'painel_bp',
    __name__,
    url_prefix='/painel'  # Todas as rotas começarão com /painel
)

# Importa as rotas no final para evitar dependência circular
from . import routes
