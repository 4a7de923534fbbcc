"""
Módulo de Gestão (Blueprint)

Cadastro e manutenção das coleções acadêmicas pela coordenação:
cursos, ementas, turmas, alunos, instrutores, interessados, diários
de aula e respostas qualitativas.
"""

from flask import Blueprint

gestao_bp = Blueprint(
    'gestao_bp',
    __name__,
    url_prefix='/gestao'
)

# Importa as rotas no final para evitar dependência circular
from . import routes
