"""
Camada de Serviço dos Cadastros

Callbacks de submissão dos wizards: transformam os dados acumulados
em registros do repositório acadêmico.
"""

import time
from datetime import date
from typing import Optional

from src.core.logger import get_logger
from src.core.modelos import Instrutor, Interessado
from src.core.repositorio import ErroDeIntegridade, RepositorioAcademico
from src.painel.metricas import calcular_idade

logger = get_logger(__name__)

# Respostas do cadastro de aluno guardadas fora dos campos do Interessado
CAMPOS_ADICIONAIS_ALUNO = (
    'cpf', 'responsavel_nome', 'responsavel_parentesco', 'contato_emergencia_nome',
    'contato_emergencia_telefone', 'contato_emergencia_parentesco', 'alergias',
    'deficiencias', 'documentos', 'informacoes_corretas',
)
CAMPOS_ADICIONAIS_VOLUNTARIO = (
    'motivo_voluntariado', 'habilidades_experiencia', 'nivel_disponibilidade',
    'experiencia_voluntariado', 'detalhes_experiencia_voluntariado', 'deficiencia_fisica',
    'deficiencia_intelectual', 'necessidade_especial', 'especificacao_deficiencia',
)


def _simular_envio(atraso: float) -> None:
    """Simula a latência do envio (não há backend real)."""
    if atraso and atraso > 0:
        time.sleep(atraso)


def _adicionais(dados: dict, campos) -> dict:
    return {campo: dados[campo] for campo in campos if dados.get(campo) not in (None, '')}


def _idade(data_nascimento: Optional[str], hoje: Optional[date]) -> Optional[int]:
    if not data_nascimento:
        return None
    try:
        return calcular_idade(data_nascimento, hoje)
    except ValueError:
        logger.warning(f"Data de nascimento inválida ignorada: {data_nascimento}")
        return None


def registrar_aluno_interessado(repositorio: RepositorioAcademico, dados: dict,
                                hoje: Optional[date] = None, atraso: float = 0) -> dict:
    """
    Registra o aluno interessado. Se uma turma foi escolhida na última
    etapa, também cria o Aluno, ocupa a vaga e marca o interessado
    como matriculado.

    Raises:
        ErroDeIntegridade: turma inexistente ou sem vagas (nada é gravado).
    """
    turma_id = dados.get('turma_id') or None
    if turma_id:
        # Checa antes de gravar qualquer coisa
        turma = repositorio.obter('turmas', turma_id)
        if turma is None:
            raise ErroDeIntegridade(f"Turma '{turma_id}' não existe.")
        if turma.vagas_ocupadas >= turma.vagas_total:
            raise ErroDeIntegridade(f"Turma '{turma.codigo}' não possui vagas disponíveis.")

    _simular_envio(atraso)

    interessado = repositorio.criar(Interessado.COLECAO, {
        'tipo': 'aluno',
        'status': 'novo',
        'nome': dados.get('nome'),
        'email': dados.get('email', ''),
        'telefone': dados.get('telefone', ''),
        'curso_interesse': dados.get('curso_interesse', ''),
        'genero': dados.get('genero'),
        'cor_raca': dados.get('cor_raca'),
        'etnia': dados.get('etnia'),
        'escolaridade': dados.get('escolaridade'),
        'data_nascimento': dados.get('data_nascimento'),
        'idade': _idade(dados.get('data_nascimento'), hoje),
        'endereco': dados.get('endereco'),
        'informacoes_adicionais': _adicionais(dados, CAMPOS_ADICIONAIS_ALUNO),
    })

    resposta = {'interessado_id': interessado.id, 'aluno_id': None}
    if not turma_id:
        return resposta

    aluno = repositorio.criar('alunos', {
        'nome': dados.get('nome'),
        'status': 'ativo',
        'email': dados.get('email', ''),
        'telefone': dados.get('telefone', ''),
        'cpf': dados.get('cpf', ''),
        'data_nascimento': dados.get('data_nascimento'),
        'endereco': dados.get('endereco'),
    })
    repositorio.matricular_aluno(aluno.id, turma_id)
    repositorio.atualizar(Interessado.COLECAO, interessado.id, {'status': 'matriculado'})

    logger.info(f"Interessado {interessado.id} matriculado na turma {turma_id} (aluno {aluno.id}).")
    resposta['aluno_id'] = aluno.id
    return resposta


def registrar_voluntario(repositorio: RepositorioAcademico, dados: dict,
                         hoje: Optional[date] = None, atraso: float = 0) -> dict:
    """Voluntários entram como Interessado; a área de interesse ocupa o lugar do curso."""
    _simular_envio(atraso)

    interessado = repositorio.criar(Interessado.COLECAO, {
        'tipo': 'voluntario',
        'status': 'novo',
        'nome': dados.get('nome'),
        'email': dados.get('email', ''),
        'telefone': dados.get('telefone', ''),
        'curso_interesse': dados.get('area_interesse', ''),
        'genero': dados.get('genero'),
        'cor_raca': dados.get('cor_raca'),
        'etnia': dados.get('etnia'),
        'escolaridade': dados.get('escolaridade'),
        'data_nascimento': dados.get('data_nascimento'),
        'idade': _idade(dados.get('data_nascimento'), hoje),
        'endereco': dados.get('endereco'),
        'origem': dados.get('origem'),
        'informacoes_adicionais': _adicionais(dados, CAMPOS_ADICIONAIS_VOLUNTARIO),
    })
    return {'interessado_id': interessado.id}


def registrar_instrutor(repositorio: RepositorioAcademico, dados: dict,
                        hoje: Optional[date] = None, atraso: float = 0) -> dict:
    _simular_envio(atraso)

    especialidades = [e.strip() for e in dados.get('especialidades') or () if e and e.strip()]
    instrutor = repositorio.criar(Instrutor.COLECAO, {
        'nome': dados.get('nome'),
        'status': 'ativo',
        'email': dados.get('email', ''),
        'telefone': dados.get('telefone', ''),
        'especialidades': especialidades,
        'biografia': dados.get('biografia') or None,
    })
    return {'instrutor_id': instrutor.id}


CALLBACKS_SUBMISSAO = {
    'aluno': registrar_aluno_interessado,
    'voluntario': registrar_voluntario,
    'instrutor': registrar_instrutor,
}
