"""
Módulo de Carga dos Dados Iniciais

Lê o arquivo JSON de dados iniciais e popula um RepositorioAcademico.
As coleções são inseridas em ordem de dependência (cursos antes de
ementas, ementas antes de turmas...) para que as referências sejam
validadas pelo próprio repositório.
"""

import json
from pathlib import Path
from typing import Optional, Union

from src.core.logger import get_logger
from src.core.modelos import MODELOS
from src.core.repositorio import RepositorioAcademico

logger = get_logger(__name__)

ORDEM_CARGA = (
    'cursos',
    'instrutores',
    'ementas',
    'turmas',
    'alunos',
    'interessados',
    'diarios',
    'metricas_qualitativas',
)


def popular_repositorio(repositorio: RepositorioAcademico, dados: dict) -> RepositorioAcademico:
    """
    Insere no repositório os registros de um dicionário {colecao: [registros]}.
    Coleções desconhecidas são ignoradas com aviso.
    """
    desconhecidas = set(dados) - set(ORDEM_CARGA)
    for nome in sorted(desconhecidas):
        logger.warning(f"Coleção '{nome}' ignorada na carga inicial.")

    for colecao in ORDEM_CARGA:
        modelo = MODELOS[colecao]
        for item in dados.get(colecao, []):
            repositorio.adicionar(modelo.de_dict(item))

    return repositorio


def carregar_dados_iniciais(caminho: Optional[Union[str, Path]]) -> RepositorioAcademico:
    """
    Cria um repositório a partir do arquivo JSON indicado.

    Sem caminho, ou com arquivo inexistente, devolve um repositório vazio.
    Um arquivo malformado interrompe a inicialização (Fail Fast).
    """
    repositorio = RepositorioAcademico()
    if not caminho:
        return repositorio

    arquivo = Path(caminho)
    if not arquivo.exists():
        logger.warning(f"Arquivo de dados iniciais não encontrado: {arquivo}. Repositório vazio.")
        return repositorio

    try:
        with arquivo.open(encoding='utf-8') as f:
            dados = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Arquivo de dados iniciais inválido ({arquivo}): {e}", exc_info=True)
        raise ValueError(f"JSON inválido em {arquivo}: {e}") from e

    popular_repositorio(repositorio, dados)
    logger.info(
        f"Dados iniciais carregados de {arquivo.name}: "
        + ", ".join(f"{c}={len(repositorio.listar(c))}" for c in ORDEM_CARGA)
    )
    return repositorio
