"""
Rotas dos Cadastros em Etapas

Cada ação do wizard é um POST; a resposta sempre traz o estado completo
para que o cliente desenhe a etapa atual, os erros e o progresso.
"""

from flask import abort, current_app, jsonify, request, session

from . import cadastro_bp
from .services import CALLBACKS_SUBMISSAO
from .wizard import (
    WIZARDS,
    AtualizarDados,
    Avancar,
    ControladorWizard,
    IrPara,
    Reiniciar,
    Submeter,
    TransicaoInvalida,
    Voltar,
    WizardEncerrado,
    estado_de_dict,
    estado_para_dict,
)
from src.core.extensions import limiter
from src.core.logger import get_logger
from src.core.repositorio import obter_repositorio
from src.painel.routes import data_referencia

logger = get_logger(__name__)


def _chave_sessao(nome: str) -> str:
    return f'wizard_{nome}'


def _definicao(nome: str):
    definicao = WIZARDS.get(nome)
    if definicao is None:
        abort(404, f"Cadastro '{nome}' não existe.")
    return definicao


def _controlador(definicao) -> ControladorWizard:
    callback = CALLBACKS_SUBMISSAO[definicao.nome]

    def ao_submeter(dados):
        return callback(
            obter_repositorio(),
            dados,
            hoje=data_referencia(),
            atraso=current_app.config.get('ATRASO_SUBMISSAO', 0),
        )

    estado = estado_de_dict(session.get(_chave_sessao(definicao.nome)))
    return ControladorWizard(definicao, ao_submeter, estado)


def _resposta(controlador: ControladorWizard, status: int = 200, **extras):
    definicao = controlador.definicao
    estado = controlador.estado
    corpo = {
        'wizard': definicao.nome,
        'total_passos': definicao.total_passos,
        'permite_salto': definicao.permite_salto,
        'passos': [
            {'numero': p.numero, 'titulo': p.titulo, 'opcional': p.opcional}
            for p in definicao.passos
        ],
        'estado': estado_para_dict(estado),
    }
    if controlador.resultado is not None:
        corpo['resultado'] = controlador.resultado
    corpo.update(extras)
    return jsonify(corpo), status


def _executar(nome: str, acao, status_sucesso: int = 200):
    definicao = _definicao(nome)
    controlador = _controlador(definicao)

    controlador.despachar(acao)
    session[_chave_sessao(nome)] = estado_para_dict(controlador.estado)

    status = 400 if controlador.estado.erros else status_sucesso
    return _resposta(controlador, status)


@cadastro_bp.errorhandler(TransicaoInvalida)
def transicao_invalida(e):
    return jsonify({'erro': str(e)}), 400


@cadastro_bp.errorhandler(WizardEncerrado)
def wizard_encerrado(e):
    return jsonify({'erro': str(e)}), 409


@cadastro_bp.route('/<wizard>')
def estado_atual(wizard):
    definicao = _definicao(wizard)
    return _resposta(_controlador(definicao))


@cadastro_bp.route('/<wizard>/dados', methods=['POST'])
def atualizar_dados(wizard):
    campos = request.get_json(silent=True)
    if not isinstance(campos, dict):
        return jsonify({'erro': 'Envie um objeto JSON com os campos do formulário.'}), 400
    return _executar(wizard, AtualizarDados(campos))


@cadastro_bp.route('/<wizard>/avancar', methods=['POST'])
def avancar(wizard):
    return _executar(wizard, Avancar())


@cadastro_bp.route('/<wizard>/voltar', methods=['POST'])
def voltar(wizard):
    return _executar(wizard, Voltar())


@cadastro_bp.route('/<wizard>/ir/<int:passo>', methods=['POST'])
def ir_para(wizard, passo):
    return _executar(wizard, IrPara(passo))


@cadastro_bp.route('/<wizard>/finalizar', methods=['POST'])
@limiter.limit("10 per minute")
def finalizar(wizard):
    definicao = _definicao(wizard)
    controlador = _controlador(definicao)

    estado = controlador.despachar(Submeter())
    session[_chave_sessao(wizard)] = estado_para_dict(estado)

    if not estado.finalizado:
        return _resposta(controlador, 400, sucesso=False)

    logger.info(f"Cadastro '{wizard}' finalizado: {controlador.resultado}")
    return _resposta(controlador, 201, sucesso=True)


@cadastro_bp.route('/<wizard>/reiniciar', methods=['POST'])
def reiniciar(wizard):
    return _executar(wizard, Reiniciar())
