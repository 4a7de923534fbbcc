"""
Rotas de Gestão (CRUD das coleções acadêmicas)

Criação valida o formulário completo; PATCH valida apenas os campos
enviados, comparados com o registro salvo nas regras entre campos.
Regras de integridade (referências, vagas) ficam no repositório e
chegam aqui como ErroDeIntegridade (409).
"""

import uuid
from dataclasses import fields

from flask import abort, jsonify, request

from . import gestao_bp
from .forms import FORMULARIOS
from src.cadastro.wizard import validar_campos
from src.core.logger import get_logger
from src.core.modelos import MODELOS
from src.core.repositorio import ErroDeIntegridade, RegistroNaoEncontrado, obter_repositorio

logger = get_logger(__name__)


@gestao_bp.errorhandler(ErroDeIntegridade)
def erro_de_integridade(e):
    return jsonify({'erro': str(e)}), 409


@gestao_bp.errorhandler(RegistroNaoEncontrado)
def registro_nao_encontrado(e):
    return jsonify({'erro': str(e)}), 404


# === AUXILIARES ===

def _formulario(colecao: str):
    form_class = FORMULARIOS.get(colecao)
    if form_class is None:
        abort(404, f"Coleção '{colecao}' não existe.")
    return form_class


def _payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, "Envie um objeto JSON com os campos do registro.")
    return payload


def _para_formulario(form_class, payload: dict) -> dict:
    """Chaves do registro -> nomes dos campos do formulário (ex.: data -> data_aula)."""
    inverso = {registro: campo for campo, registro in getattr(form_class, 'RENOMEADOS', {}).items()}
    return {inverso.get(chave, chave): valor for chave, valor in payload.items()}


def _para_registro(form, nomes) -> dict:
    """Valores já processados pelo formulário, com os nomes do registro."""
    renomeados = getattr(form, 'RENOMEADOS', {})
    dados = {}
    for nome in nomes:
        valor = form[nome].data
        dados[renomeados.get(nome, nome)] = None if valor == '' else valor
    return dados


def _preparar(colecao: str, dados: dict) -> dict:
    if colecao == 'ementas' and 'aulas' in dados:
        dados['aulas'] = [
            dict(aula, id=aula.get('id') or uuid.uuid4().hex) for aula in dados['aulas']
        ]
    return dados


def _obter_ou_404(colecao: str, registro_id: str):
    registro = obter_repositorio().obter(colecao, registro_id)
    if registro is None:
        abort(404, f"'{registro_id}' não existe em '{colecao}'.")
    return registro


# === ROTAS ===

@gestao_bp.route('/<colecao>')
def listar(colecao):
    """Lista a coleção; parâmetros da query filtram por igualdade (ex.: ?turma_id=t1)."""
    _formulario(colecao)
    nomes = {f.name for f in fields(MODELOS[colecao])}
    filtros = request.args.to_dict()

    desconhecidos = sorted(set(filtros) - nomes)
    if desconhecidos:
        return jsonify({'erro': f"Filtros desconhecidos: {', '.join(desconhecidos)}"}), 400

    registros = [
        r for r in obter_repositorio().listar(colecao)
        if all(getattr(r, campo) is not None and str(getattr(r, campo)) == valor
               for campo, valor in filtros.items())
    ]
    return jsonify([r.para_dict() for r in registros])


@gestao_bp.route('/<colecao>', methods=['POST'])
def criar(colecao):
    form_class = _formulario(colecao)
    valores = _para_formulario(form_class, _payload())

    form = form_class(data=valores)
    if not form.validate():
        return jsonify({'erro': 'Dados inválidos.', 'campos': form.errors}), 400

    dados = _para_registro(form, [nome for nome in valores if nome in form])
    # Campos vazios na criação ficam com o padrão do modelo
    dados = _preparar(colecao, {k: v for k, v in dados.items() if v is not None})
    repositorio = obter_repositorio()

    turma_id = dados.pop('turma_id', None) if colecao == 'alunos' else None
    registro = repositorio.criar(colecao, dados)

    if turma_id:
        try:
            registro = repositorio.matricular_aluno(registro.id, turma_id)
        except ErroDeIntegridade:
            # Sem vaga ou turma inexistente: o aluno não fica cadastrado pela metade
            repositorio.remover('alunos', registro.id)
            raise

    return jsonify(registro.para_dict()), 201


@gestao_bp.route('/<colecao>/<registro_id>')
def detalhar(colecao, registro_id):
    _formulario(colecao)
    return jsonify(_obter_ou_404(colecao, registro_id).para_dict())


@gestao_bp.route('/<colecao>/<registro_id>', methods=['PATCH'])
def atualizar(colecao, registro_id):
    form_class = _formulario(colecao)
    atual = _obter_ou_404(colecao, registro_id)
    valores = _para_formulario(form_class, _payload())

    # Regras entre campos (ex.: término após o início) comparam com o registro salvo
    completos = {**_para_formulario(form_class, atual.para_dict()), **valores}
    form = form_class(data=completos)
    desconhecidos = sorted(nome for nome in valores if nome not in form)
    if desconhecidos:
        return jsonify({'erro': f"Campos desconhecidos: {', '.join(desconhecidos)}"}), 400

    dependentes = getattr(form_class, 'DEPENDENTES', {})
    campos = list(valores)
    campos += [d for nome in valores for d in dependentes.get(nome, ()) if d not in campos]
    erros = validar_campos(form_class, campos, completos)
    if erros:
        return jsonify({'erro': 'Dados inválidos.', 'campos': erros}), 400

    dados = _preparar(colecao, _para_registro(form, valores))
    repositorio = obter_repositorio()

    if colecao == 'alunos' and 'turma_id' in dados:
        turma_id = dados.pop('turma_id')
        if not turma_id:
            return jsonify({'erro': 'Informe a turma de destino para trocar o aluno de turma.'}), 400
        repositorio.matricular_aluno(registro_id, turma_id)

    registro = repositorio.atualizar(colecao, registro_id, dados) if dados else repositorio.obter(colecao, registro_id)
    return jsonify(registro.para_dict())


@gestao_bp.route('/<colecao>/<registro_id>', methods=['DELETE'])
def remover(colecao, registro_id):
    _formulario(colecao)
    obter_repositorio().remover(colecao, registro_id)
    return jsonify({'mensagem': 'Registro removido.', 'id': registro_id})


@gestao_bp.route('/alunos/<aluno_id>/matricula', methods=['POST'])
def matricular(aluno_id):
    turma_id = _payload().get('turma_id')
    if not turma_id:
        return jsonify({'erro': 'Informe a turma (turma_id).'}), 400

    aluno = obter_repositorio().matricular_aluno(aluno_id, turma_id)
    logger.info(f"Aluno {aluno_id} matriculado na turma {turma_id}.")
    return jsonify(aluno.para_dict())


@gestao_bp.route('/cursos/<curso_id>/ementas')
def ementas_do_curso(curso_id):
    """Ementas ativas do curso."""
    _obter_ou_404('cursos', curso_id)
    return jsonify([e.para_dict() for e in obter_repositorio().ementas_por_curso(curso_id)])


@gestao_bp.route('/turmas/<turma_id>/diarios')
def diarios_da_turma(turma_id):
    _obter_ou_404('turmas', turma_id)
    return jsonify([d.para_dict() for d in obter_repositorio().diarios_por_turma(turma_id)])


@gestao_bp.route('/instrutores/<instrutor_id>/diarios')
def diarios_do_instrutor(instrutor_id):
    """Diários lançados pelo instrutor, mais recentes primeiro."""
    _obter_ou_404('instrutores', instrutor_id)
    return jsonify([d.para_dict() for d in obter_repositorio().diarios_por_instrutor(instrutor_id)])
