"""
Métricas Qualitativas (questionário dos alunos).
"""

from decimal import Decimal
from typing import Sequence

from src.core.constants import NIVEIS_SATISFACAO
from src.core.modelos import MetricaQualitativa
from src.painel.metricas import calcular_taxa, formatar_decimal

# Escala 1-5 convertida para percentual
FATOR_PERCENTUAL_ESCALA = 20


def _media(valores: Sequence[int], fator: int = 1) -> str:
    if not valores:
        return '0'
    return formatar_decimal(Decimal(sum(valores)) * fator / Decimal(len(valores)))


def metricas_qualitativas(respostas: Sequence[MetricaQualitativa]) -> dict:
    total = len(respostas)

    distribuicao = []
    for nivel in NIVEIS_SATISFACAO:
        quantidade = sum(1 for r in respostas if r.satisfacao_curso == nivel)
        distribuicao.append({
            'nivel': nivel,
            'quantidade': quantidade,
            'percentual': calcular_taxa(quantidade, total),
        })

    tipos_oportunidade = {}
    for resposta in respostas:
        if resposta.tipo_oportunidade:
            tipos_oportunidade[resposta.tipo_oportunidade] = tipos_oportunidade.get(resposta.tipo_oportunidade, 0) + 1

    candidatando = sum(1 for r in respostas if r.candidatando_vagas)
    curso_tecnico = sum(1 for r in respostas if r.interesse_curso_tecnico)
    graduacao = sum(1 for r in respostas if r.interesse_graduacao)

    return {
        'total_respostas': total,
        'media_satisfacao': _media([r.satisfacao_curso for r in respostas]),
        'distribuicao_satisfacao': distribuicao,
        'media_seguranca_digital': _media(
            [r.seguranca_ferramentas_digitais for r in respostas], FATOR_PERCENTUAL_ESCALA),
        'media_habilidade_programacao': _media(
            [r.habilidade_programacao for r in respostas], FATOR_PERCENTUAL_ESCALA),
        'candidatando_vagas': candidatando,
        'percentual_candidatando': calcular_taxa(candidatando, total),
        'tipos_oportunidade': tipos_oportunidade,
        'percentual_curso_tecnico': calcular_taxa(curso_tecnico, total),
        'percentual_graduacao': calcular_taxa(graduacao, total),
    }
