"""
Rotas do Módulo de Painéis

Todas as respostas são JSON prontas para os cartões, gráficos e tabelas.
"""

from datetime import date

from flask import abort, current_app, jsonify, request

from . import painel_bp
from .filtros import FiltrosPainel
from .forms import FiltrosForm
from .metricas import historico_presenca_aluno, painel_instrutor, progresso_ementa
from .services import montar_metricas, montar_painel
from src.core.logger import get_logger
from src.core.repositorio import obter_repositorio

logger = get_logger(__name__)


def data_referencia() -> date:
    """'Hoje' dos painéis: DATA_REFERENCIA da config ou a data do sistema."""
    valor = current_app.config.get('DATA_REFERENCIA')
    if valor:
        return date.fromisoformat(valor)
    return date.today()


@painel_bp.route('/')
def painel_admin():
    form = FiltrosForm(request.args)
    if not form.validate():
        return jsonify({'erro': 'Filtros inválidos.', 'campos': form.errors}), 400

    filtros = FiltrosPainel(
        curso_id=form.curso_id.data or None,
        data_inicial=form.data_inicial.data or None,
        data_final=form.data_final.data or None,
    )
    dados = obter_repositorio().snapshot()
    painel = montar_painel(dados, filtros, data_referencia(), current_app.config.get('LIMITE_BAIRROS', 10))
    return jsonify(painel)


@painel_bp.route('/metricas')
def metricas():
    dados = obter_repositorio().snapshot()
    return jsonify(montar_metricas(dados, current_app.config.get('LIMITE_BAIRROS', 10)))


@painel_bp.route('/instrutores/<instrutor_id>')
def painel_do_instrutor(instrutor_id):
    repositorio = obter_repositorio()
    if repositorio.obter('instrutores', instrutor_id) is None:
        abort(404, "Instrutor não encontrado.")
    return jsonify(painel_instrutor(instrutor_id, repositorio.snapshot(), data_referencia()))


@painel_bp.route('/alunos/<aluno_id>/presencas')
def presencas_do_aluno(aluno_id):
    repositorio = obter_repositorio()
    if repositorio.obter('alunos', aluno_id) is None:
        abort(404, "Aluno não encontrado.")
    return jsonify(historico_presenca_aluno(aluno_id, repositorio.listar('diarios')))


@painel_bp.route('/turmas/<turma_id>/progresso')
def progresso_da_turma(turma_id):
    repositorio = obter_repositorio()
    turma = repositorio.obter('turmas', turma_id)
    if turma is None:
        abort(404, "Turma não encontrada.")

    ementa = repositorio.obter('ementas', turma.ementa_id)
    if ementa is None:
        # Referência quebrada: a turma existe mas sua ementa foi removida
        logger.warning(f"Turma {turma_id} sem ementa ({turma.ementa_id}).")
        abort(404, "Ementa da turma não encontrada.")

    progresso = progresso_ementa(ementa, repositorio.diarios_por_turma(turma_id))
    progresso['turma_id'] = turma_id
    return jsonify(progresso)
