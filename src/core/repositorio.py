"""
Repositório Acadêmico em Memória (Service Layer de Dados)

Único dono das coleções do sistema. É criado pela Application Factory
e injetado onde for necessário (app.extensions['repositorio']); não há
instância global.

Toda mutação passa por métodos explícitos que devolvem o registro
novo; leituras para painéis usam `snapshot()`.
"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Dict, Optional, Tuple

from flask import current_app

from src.core.logger import get_logger
from src.core.modelos import MODELOS, Aluno, DadosAcademicos, Registro

logger = get_logger(__name__)

# Coleções cujos registros carimbam data de criação e atualização
CAMPO_DATA_CRIACAO = {
    'ementas': 'data_criacao',
    'turmas': 'data_criacao',
    'alunos': 'data_matricula',
    'instrutores': 'data_cadastro',
    'interessados': 'data_registro',
    'diarios': 'data_criacao',
}
COLECOES_COM_ATUALIZACAO = ('ementas', 'diarios')


class ErroDeIntegridade(ValueError):
    """Mutação que deixaria uma referência quebrada ou uma turma acima da capacidade."""


class RegistroNaoEncontrado(LookupError):
    """Id inexistente em uma operação que exige o registro."""


def _hoje_iso() -> str:
    return date.today().isoformat()


class RepositorioAcademico:
    """
    Guarda cada coleção como dict id -> registro, em ordem de inserção.
    """

    def __init__(self):
        self._colecoes: Dict[str, Dict[str, Registro]] = {nome: {} for nome in MODELOS}
        self._snapshot: Optional[DadosAcademicos] = None
        self.versao = 0

    # === LEITURA ===

    def _colecao(self, colecao: str) -> Dict[str, Registro]:
        if colecao not in self._colecoes:
            raise KeyError(f"Coleção desconhecida: {colecao}")
        return self._colecoes[colecao]

    def listar(self, colecao: str) -> Tuple[Registro, ...]:
        return tuple(self._colecao(colecao).values())

    def obter(self, colecao: str, registro_id: str) -> Optional[Registro]:
        return self._colecao(colecao).get(registro_id)

    def ementas_por_curso(self, curso_id: str) -> list:
        """Ementas ativas de um curso."""
        return [e for e in self.listar('ementas') if e.curso_id == curso_id and e.ativo]

    def diarios_por_turma(self, turma_id: str) -> list:
        diarios = [d for d in self.listar('diarios') if d.turma_id == turma_id]
        return sorted(diarios, key=lambda d: d.data, reverse=True)

    def diarios_por_instrutor(self, instrutor_id: str) -> list:
        diarios = [d for d in self.listar('diarios') if d.instrutor_id == instrutor_id]
        return sorted(diarios, key=lambda d: d.data, reverse=True)

    def snapshot(self) -> DadosAcademicos:
        """
        Fotografia imutável das coleções. O mesmo objeto é devolvido até a
        próxima mutação, o que mantém válidos os caches por identidade.
        """
        if self._snapshot is None:
            self._snapshot = DadosAcademicos(
                **{nome: tuple(registros.values()) for nome, registros in self._colecoes.items()}
            )
        return self._snapshot

    # === ESCRITA ===

    def criar(self, colecao: str, dados: dict) -> Registro:
        """
        Cria um registro a partir de dados de formulário, gerando id e data.
        """
        modelo = MODELOS.get(colecao)
        if modelo is None:
            raise KeyError(f"Coleção desconhecida: {colecao}")

        dados = dict(dados)
        dados['id'] = dados.get('id') or uuid.uuid4().hex
        campo_data = CAMPO_DATA_CRIACAO.get(colecao)
        if campo_data and not dados.get(campo_data):
            dados[campo_data] = _hoje_iso()
        if colecao == 'turmas':
            dados.setdefault('vagas_ocupadas', 0)
            dados.setdefault('status', 'planejada')

        try:
            registro = modelo.de_dict(dados)
        except TypeError as e:
            # Campo obrigatório ausente no dicionário
            raise ErroDeIntegridade(f"Dados incompletos para '{colecao}': {e}") from e

        return self.adicionar(registro)

    def adicionar(self, registro: Registro) -> Registro:
        colecao = registro.COLECAO
        registros = self._colecao(colecao)
        if registro.id in registros:
            raise ErroDeIntegridade(f"Id duplicado em '{colecao}': {registro.id}")

        self._validar_referencias(colecao, registro)
        registros[registro.id] = registro
        self._registrar_mutacao()
        logger.info(f"Registro criado em '{colecao}': {registro.id}")
        return registro

    def atualizar(self, colecao: str, registro_id: str, campos: dict) -> Registro:
        registros = self._colecao(colecao)
        atual = registros.get(registro_id)
        if atual is None:
            raise RegistroNaoEncontrado(f"'{registro_id}' não existe em '{colecao}'.")

        campos = {k: v for k, v in campos.items() if k != 'id'}
        campos = type(atual).normalizar_campos(campos)
        if colecao in COLECOES_COM_ATUALIZACAO:
            campos['data_atualizacao'] = _hoje_iso()

        try:
            novo = replace(atual, **campos)
        except TypeError as e:
            raise ErroDeIntegridade(f"Campo inválido para '{colecao}': {e}") from e

        self._validar_referencias(colecao, novo)
        registros[registro_id] = novo
        self._registrar_mutacao()
        logger.info(f"Registro atualizado em '{colecao}': {registro_id}")
        return novo

    def remover(self, colecao: str, registro_id: str) -> Registro:
        registros = self._colecao(colecao)
        registro = registros.get(registro_id)
        if registro is None:
            raise RegistroNaoEncontrado(f"'{registro_id}' não existe em '{colecao}'.")

        self._validar_remocao(colecao, registro_id)
        if colecao == 'alunos' and registro.turma_id:
            # Libera a vaga ocupada pelo aluno
            turma = self.obter('turmas', registro.turma_id)
            if turma is not None:
                self.atualizar('turmas', turma.id, {'vagas_ocupadas': max(turma.vagas_ocupadas - 1, 0)})
        del registros[registro_id]
        self._registrar_mutacao()
        logger.info(f"Registro removido de '{colecao}': {registro_id}")
        return registro

    def matricular_aluno(self, aluno_id: str, turma_id: str) -> Aluno:
        """
        Vincula o aluno à turma e ocupa uma vaga. Se o aluno já estava em
        outra turma, a vaga anterior é liberada.
        """
        aluno = self.obter('alunos', aluno_id)
        if aluno is None:
            raise RegistroNaoEncontrado(f"Aluno '{aluno_id}' não existe.")
        turma = self.obter('turmas', turma_id)
        if turma is None:
            raise ErroDeIntegridade(f"Turma '{turma_id}' não existe.")
        if aluno.turma_id == turma_id:
            return aluno
        if turma.vagas_ocupadas >= turma.vagas_total:
            logger.warning(f"Matrícula recusada: turma {turma.codigo} sem vagas.")
            raise ErroDeIntegridade(f"Turma '{turma.codigo}' não possui vagas disponíveis.")

        anterior = self.obter('turmas', aluno.turma_id) if aluno.turma_id else None
        if anterior is not None:
            self.atualizar('turmas', anterior.id, {'vagas_ocupadas': max(anterior.vagas_ocupadas - 1, 0)})

        self.atualizar('turmas', turma_id, {'vagas_ocupadas': turma.vagas_ocupadas + 1})
        return self.atualizar('alunos', aluno_id, {'turma_id': turma_id})

    # === INVARIANTES ===

    def _existe(self, colecao: str, registro_id: Optional[str]) -> bool:
        return registro_id in self._colecoes[colecao]

    def _validar_referencias(self, colecao: str, registro: Registro) -> None:
        problema = None

        if colecao == 'ementas':
            if not self._existe('cursos', registro.curso_id):
                problema = f"Curso '{registro.curso_id}' não existe."
        elif colecao == 'turmas':
            if not self._existe('ementas', registro.ementa_id):
                problema = f"Ementa '{registro.ementa_id}' não existe."
            elif registro.instrutor_id and not self._existe('instrutores', registro.instrutor_id):
                problema = f"Instrutor '{registro.instrutor_id}' não existe."
            elif registro.vagas_ocupadas > registro.vagas_total:
                problema = (f"Turma '{registro.codigo}' com {registro.vagas_ocupadas} vagas ocupadas "
                            f"para {registro.vagas_total} disponíveis.")
        elif colecao == 'alunos':
            if registro.turma_id and not self._existe('turmas', registro.turma_id):
                problema = f"Turma '{registro.turma_id}' não existe."
        elif colecao == 'diarios':
            if not self._existe('turmas', registro.turma_id):
                problema = f"Turma '{registro.turma_id}' não existe."
            elif not self._existe('instrutores', registro.instrutor_id):
                problema = f"Instrutor '{registro.instrutor_id}' não existe."

        if problema:
            logger.warning(f"Mutação recusada em '{colecao}': {problema}")
            raise ErroDeIntegridade(problema)

    def _validar_remocao(self, colecao: str, registro_id: str) -> None:
        dependentes = {
            'cursos': (('ementas', 'curso_id'),),
            'ementas': (('turmas', 'ementa_id'),),
            'turmas': (('alunos', 'turma_id'), ('diarios', 'turma_id')),
            'instrutores': (('turmas', 'instrutor_id'), ('diarios', 'instrutor_id')),
        }
        for colecao_dep, campo in dependentes.get(colecao, ()):
            if any(getattr(r, campo) == registro_id for r in self._colecoes[colecao_dep].values()):
                logger.warning(f"Remoção recusada: '{registro_id}' referenciado em '{colecao_dep}'.")
                raise ErroDeIntegridade(f"Registro '{registro_id}' ainda é referenciado em '{colecao_dep}'.")

    def _registrar_mutacao(self) -> None:
        self._snapshot = None
        self.versao += 1


def obter_repositorio() -> RepositorioAcademico:
    """Repositório da aplicação ativa (registrado pela Application Factory)."""
    return current_app.extensions['repositorio']
