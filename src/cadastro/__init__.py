"""
Módulo de Cadastros (Blueprint)

Wizards de cadastro de alunos interessados, voluntários e instrutores.
O estado de cada wizard vive na sessão do usuário.
"""

from flask import Blueprint

cadastro_bp = Blueprint(
    'cadastro_bp',
    __name__,
    url_prefix='/cadastro'
)

# Importa as rotas no final para evitar dependência circular
from . import routes
