"""
Filtros do Painel (curso e período)

Restringe as turmas pelo curso e pela data de início e, a partir das
turmas restantes, os alunos e instrutores ligados a elas. Interessados
são filtrados apenas pelo curso: ainda não têm turma, então o período
não se aplica a eles.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from src.core.modelos import Aluno, DadosAcademicos, Instrutor, Interessado, Turma


@dataclass(frozen=True)
class FiltrosPainel:
    """Datas em ISO (YYYY-MM-DD), comparáveis como texto. Vazio = sem filtro."""
    curso_id: Optional[str] = None
    data_inicial: Optional[str] = None
    data_final: Optional[str] = None

    @property
    def ativos(self) -> bool:
        return bool(self.curso_id or self.data_inicial or self.data_final)

    def para_dict(self) -> dict:
        return {
            'curso_id': self.curso_id or None,
            'data_inicial': self.data_inicial or None,
            'data_final': self.data_final or None,
        }


@dataclass(frozen=True)
class DadosFiltrados:
    turmas: Tuple[Turma, ...]
    alunos: Tuple[Aluno, ...]
    interessados: Tuple[Interessado, ...]
    instrutores: Tuple[Instrutor, ...]


def _ids_cursos_equivalentes(dados: DadosAcademicos, curso_id: str) -> set:
    # O interesse pode ter sido registrado pelo id ou pelo nome do curso
    chaves = {curso_id}
    for curso in dados.cursos:
        if curso.id == curso_id:
            chaves.add(curso.nome)
    return chaves


def filtrar_dados(dados: DadosAcademicos, filtros: FiltrosPainel) -> DadosFiltrados:
    """
    Aplica os filtros do painel. Sem nenhum filtro ativo, devolve as
    coleções originais.
    """
    if not filtros.ativos:
        return DadosFiltrados(
            turmas=dados.turmas,
            alunos=dados.alunos,
            interessados=dados.interessados,
            instrutores=dados.instrutores,
        )

    turmas = dados.turmas
    interessados = dados.interessados

    if filtros.curso_id:
        ementas_ids = {e.id for e in dados.ementas if e.curso_id == filtros.curso_id}
        if not ementas_ids:
            return DadosFiltrados(turmas=(), alunos=(), interessados=(), instrutores=())

        turmas = tuple(t for t in turmas if t.ementa_id in ementas_ids)
        chaves = _ids_cursos_equivalentes(dados, filtros.curso_id)
        interessados = tuple(i for i in interessados if i.curso_interesse in chaves)

    if filtros.data_inicial:
        turmas = tuple(t for t in turmas if t.data_inicio >= filtros.data_inicial)

    if filtros.data_final:
        turmas = tuple(t for t in turmas if t.data_inicio <= filtros.data_final)

    turmas_ids = {t.id for t in turmas}
    instrutores_ids = {t.instrutor_id for t in turmas if t.instrutor_id}

    # Alunos sem turma (ou com turma inexistente) ficam de fora
    alunos = tuple(a for a in dados.alunos if a.turma_id and a.turma_id in turmas_ids)
    instrutores = tuple(i for i in dados.instrutores if i.id in instrutores_ids)

    return DadosFiltrados(
        turmas=turmas,
        alunos=alunos,
        interessados=interessados,
        instrutores=instrutores,
    )
