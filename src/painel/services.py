"""
Camada de Serviço dos Painéis

Monta as respostas dos painéis a partir de uma fotografia do repositório.
As funções são puras e memoizadas pela identidade da fotografia: enquanto
o repositório não muda, o mesmo painel é reaproveitado.
"""

from datetime import date
from functools import lru_cache

from src.core.constants import STATUS_ALUNO, STATUS_INTERESSADO, STATUS_TURMA
from src.core.modelos import DadosAcademicos
from src.painel.filtros import FiltrosPainel, filtrar_dados
from src.painel.metricas import (
    calcular_taxa,
    contar_por_status,
    distribuicao_agrupada,
    media_taxa_presenca,
    metricas_instrutores,
    ranking_instrutores,
    resumo_geral,
)
from src.painel.qualitativas import metricas_qualitativas

LIMITE_BAIRROS_PADRAO = 10


def _bloco_alunos(alunos, interessados, limite_bairros: int) -> dict:
    interessados_alunos = [i for i in interessados if i.tipo == 'aluno']
    status = contar_por_status(alunos, STATUS_ALUNO)
    total = len(alunos)
    return {
        'total': total,
        'por_status': status,
        'taxa_conclusao': calcular_taxa(status['concluido'], total),
        'taxa_evasao': calcular_taxa(status['evadido'], total),
        'por_bairro': distribuicao_agrupada(alunos, 'endereco.bairro', limite=limite_bairros),
        'por_genero': distribuicao_agrupada(interessados_alunos, 'genero'),
        'por_cor_raca': distribuicao_agrupada(interessados_alunos, 'cor_raca'),
    }


def _bloco_instrutores(instrutores, turmas, diarios, hoje: date, restringir: bool) -> dict:
    desempenhos = metricas_instrutores(instrutores, turmas, diarios, hoje, restringir_a_turmas=restringir)
    return {
        'total_ativos': len(desempenhos),
        'ranking': [d.para_dict() for d in ranking_instrutores(desempenhos)],
        'media_taxa_presenca': media_taxa_presenca(desempenhos),
        'total_diarios': sum(d.diarios_lancados for d in desempenhos),
        'turmas_em_andamento': sum(d.turmas_ativas for d in desempenhos),
    }


@lru_cache(maxsize=32)
def montar_painel(dados: DadosAcademicos, filtros: FiltrosPainel, hoje: date,
                  limite_bairros: int = LIMITE_BAIRROS_PADRAO) -> dict:
    """
    Painel administrativo: visão geral sobre todos os dados e abas
    (turmas, alunos, instrutores, interessados) sobre os dados filtrados.
    """
    filtrados = filtrar_dados(dados, filtros)

    visao_geral = resumo_geral(dados)
    visao_geral['instrutores'] = _bloco_instrutores(
        dados.instrutores, dados.turmas, dados.diarios, hoje, restringir=False)

    return {
        'filtros': filtros.para_dict(),
        'visao_geral': visao_geral,
        'turmas': {
            'total': len(filtrados.turmas),
            'por_status': contar_por_status(filtrados.turmas, STATUS_TURMA),
        },
        'alunos': _bloco_alunos(filtrados.alunos, filtrados.interessados, limite_bairros),
        'instrutores': _bloco_instrutores(
            filtrados.instrutores, filtrados.turmas, dados.diarios, hoje, restringir=filtros.ativos),
        'interessados': {
            'total': len(filtrados.interessados),
            'por_status': contar_por_status(filtrados.interessados, STATUS_INTERESSADO),
        },
    }


@lru_cache(maxsize=8)
def montar_metricas(dados: DadosAcademicos, limite_bairros: int = LIMITE_BAIRROS_PADRAO) -> dict:
    """Página de Métricas do coordenador: quantitativas e qualitativas."""
    turmas_status = contar_por_status(dados.turmas, STATUS_TURMA)
    return {
        'quantitativas': {
            'alunos': _bloco_alunos(dados.alunos, dados.interessados, limite_bairros),
            'total_interessados_alunos': sum(1 for i in dados.interessados if i.tipo == 'aluno'),
            'turmas_por_status': turmas_status,
        },
        'qualitativas': metricas_qualitativas(dados.metricas_qualitativas),
    }
