"""
Métricas Derivadas dos Painéis

Funções puras sobre coleções de registros: contagens por status, taxas,
distribuições agrupadas, desempenho e ranking de instrutores, idade,
histórico de presença e progresso de ementa.

Regras comuns:
- divisão por zero resulta em zero, nunca em exceção;
- referências quebradas (ex.: aluno com turma inexistente) são apenas
  ignoradas nos cruzamentos;
- campos ausentes viram "Não informado" somente aqui, na agregação.
"""

from dataclasses import asdict, dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Sequence, Union

from src.core.constants import (
    DIAS_SEMANA,
    HORAS_SEMANAIS_TURMA,
    NAO_INFORMADO,
    PESO_DIARIOS_RANKING,
    SEMANAS_POR_TURMA,
    STATUS_ALUNO,
    STATUS_INTERESSADO,
    STATUS_PRESENCA,
    STATUS_TURMA,
)
from src.core.modelos import DadosAcademicos, DiarioAula, Ementa, Instrutor, Turma


# === ARITMÉTICA ===

def arredondar(valor: float) -> int:
    """Arredonda para o inteiro mais próximo, com .5 sempre para cima."""
    return int(Decimal(str(valor)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def formatar_decimal(valor: Union[Decimal, float]) -> str:
    """Texto com uma casa decimal (ex.: '33.3', '100.0')."""
    if not isinstance(valor, Decimal):
        valor = Decimal(str(valor))
    return str(valor.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def calcular_taxa(quantidade: int, total: int) -> str:
    """
    Percentual quantidade/total com uma casa decimal, pronto para exibição.
    Com total zero devolve "0".
    """
    if not total:
        return '0'
    return formatar_decimal(Decimal(quantidade) * 100 / Decimal(total))


def percentual_inteiro(quantidade: int, total: int) -> int:
    if not total:
        return 0
    return arredondar(quantidade / total * 100)


# === CONTAGENS E DISTRIBUIÇÕES ===

def contar_por_status(registros: Iterable, status_conhecidos: Sequence[str] = ()) -> dict:
    """
    Mapeia cada status para sua quantidade. Os status conhecidos aparecem
    mesmo com zero; status inesperados também são contados.
    """
    contagem = {status: 0 for status in status_conhecidos}
    for registro in registros:
        contagem[registro.status] = contagem.get(registro.status, 0) + 1
    return contagem


def _ler_campo(registro, caminho: str):
    valor = registro
    for parte in caminho.split('.'):
        valor = getattr(valor, parte, None)
        if valor is None:
            return None
    return valor


def _rotulo(valor) -> str:
    if valor is None:
        return NAO_INFORMADO
    texto = str(valor).strip()
    return texto or NAO_INFORMADO


def distribuicao_agrupada(registros: Sequence, caminho: str, limite: Optional[int] = None,
                          total: Optional[int] = None) -> List[dict]:
    """
    Agrupa os registros pelo campo em `caminho` (ex.: 'endereco.bairro').

    Retorna [{rotulo, quantidade, percentual}] em ordem decrescente de
    quantidade; empates mantêm a ordem em que o valor apareceu primeiro.
    """
    contagem = {}
    for registro in registros:
        rotulo = _rotulo(_ler_campo(registro, caminho))
        contagem[rotulo] = contagem.get(rotulo, 0) + 1

    if total is None:
        total = len(registros)

    ordenado = sorted(contagem.items(), key=lambda item: item[1], reverse=True)
    if limite is not None:
        ordenado = ordenado[:limite]

    return [
        {'rotulo': rotulo, 'quantidade': quantidade, 'percentual': calcular_taxa(quantidade, total)}
        for rotulo, quantidade in ordenado
    ]


# === INSTRUTORES ===

@dataclass(frozen=True)
class DesempenhoInstrutor:
    instrutor_id: str
    nome: str
    especialidades: tuple
    turmas_ativas: int
    turmas_finalizadas: int
    total_turmas: int
    total_alunos: int
    diarios_lancados: int
    diarios_mes_atual: int
    taxa_presenca_media: int

    @property
    def pontuacao(self) -> float:
        return self.taxa_presenca_media + self.diarios_lancados * PESO_DIARIOS_RANKING

    def para_dict(self) -> dict:
        dados = asdict(self)
        dados['especialidades'] = list(self.especialidades)
        dados['pontuacao'] = self.pontuacao
        return dados


def taxa_presenca(diarios: Iterable[DiarioAula]) -> int:
    """Percentual (inteiro) de presenças 'presente' sobre todos os registros."""
    presentes = 0
    registros = 0
    for diario in diarios:
        for presenca in diario.presencas:
            registros += 1
            if presenca.status == 'presente':
                presentes += 1
    return percentual_inteiro(presentes, registros)


def metricas_instrutores(instrutores: Iterable[Instrutor], turmas: Sequence[Turma],
                         diarios: Sequence[DiarioAula], hoje: Optional[date] = None,
                         restringir_a_turmas: bool = False) -> List[DesempenhoInstrutor]:
    """
    Desempenho de cada instrutor ATIVO, na ordem recebida.

    Com `restringir_a_turmas`, só contam os diários das turmas do instrutor
    presentes em `turmas` (uso com dados filtrados).
    """
    mes_atual = (hoje or date.today()).strftime('%Y-%m')
    desempenhos = []

    for instrutor in instrutores:
        if instrutor.status != 'ativo':
            continue

        turmas_instrutor = [t for t in turmas if t.instrutor_id == instrutor.id]
        ids_turmas = {t.id for t in turmas_instrutor}
        diarios_instrutor = [
            d for d in diarios
            if d.instrutor_id == instrutor.id and (not restringir_a_turmas or d.turma_id in ids_turmas)
        ]

        desempenhos.append(DesempenhoInstrutor(
            instrutor_id=instrutor.id,
            nome=instrutor.nome,
            especialidades=tuple(instrutor.especialidades),
            turmas_ativas=sum(1 for t in turmas_instrutor if t.status == 'em_andamento'),
            turmas_finalizadas=sum(1 for t in turmas_instrutor if t.status == 'finalizada'),
            total_turmas=len(turmas_instrutor),
            total_alunos=sum(t.vagas_ocupadas for t in turmas_instrutor),
            diarios_lancados=len(diarios_instrutor),
            diarios_mes_atual=sum(1 for d in diarios_instrutor if d.data.startswith(mes_atual)),
            taxa_presenca_media=taxa_presenca(diarios_instrutor),
        ))

    return desempenhos


def ranking_instrutores(desempenhos: Iterable[DesempenhoInstrutor]) -> List[DesempenhoInstrutor]:
    """Ordena por pontuação decrescente. A ordenação é estável: empates mantêm a ordem de entrada."""
    return sorted(desempenhos, key=lambda d: d.pontuacao, reverse=True)


def media_taxa_presenca(desempenhos: Sequence[DesempenhoInstrutor]) -> int:
    if not desempenhos:
        return 0
    return arredondar(sum(d.taxa_presenca_media for d in desempenhos) / len(desempenhos))


# === PESSOAS ===

def _como_data(valor: Union[str, date]) -> date:
    if isinstance(valor, date):
        return valor
    return date.fromisoformat(valor[:10])


def calcular_idade(data_nascimento: Union[str, date], hoje: Optional[Union[str, date]] = None) -> int:
    """
    Idade em anos completos: diferença dos anos, menos um se o
    aniversário ainda não chegou no ano corrente.
    """
    nascimento = _como_data(data_nascimento)
    referencia = _como_data(hoje) if hoje else date.today()

    idade = referencia.year - nascimento.year
    if (referencia.month, referencia.day) < (nascimento.month, nascimento.day):
        idade -= 1
    return idade


# === RESUMOS ===

def resumo_geral(dados: DadosAcademicos) -> dict:
    """Indicadores de topo do painel (sempre sobre os dados completos)."""
    turmas_status = contar_por_status(dados.turmas, STATUS_TURMA)
    alunos_status = contar_por_status(dados.alunos, STATUS_ALUNO)
    interessados_status = contar_por_status(dados.interessados, STATUS_INTERESSADO)
    total_alunos = len(dados.alunos)
    total_interessados = len(dados.interessados)

    return {
        'total_turmas': len(dados.turmas),
        'turmas_por_status': turmas_status,
        'total_alunos': total_alunos,
        'alunos_por_status': alunos_status,
        'taxa_conclusao': calcular_taxa(alunos_status['concluido'], total_alunos),
        'taxa_evasao': calcular_taxa(alunos_status['evadido'], total_alunos),
        'total_instrutores': len(dados.instrutores),
        'instrutores_ativos': sum(1 for i in dados.instrutores if i.status == 'ativo'),
        'total_interessados': total_interessados,
        'interessados_novos': interessados_status['novo'],
        'taxa_conversao': calcular_taxa(interessados_status['matriculado'], total_interessados),
        'horas_ministradas': turmas_status['em_andamento'] * HORAS_SEMANAIS_TURMA * SEMANAS_POR_TURMA,
        'total_cursos': len(dados.cursos),
    }


def historico_presenca_aluno(aluno_id: str, diarios: Iterable[DiarioAula]) -> dict:
    """Presenças do aluno em todos os diários, mais recentes primeiro."""
    registros = []
    for diario in diarios:
        for presenca in diario.presencas:
            if presenca.aluno_id == aluno_id:
                registros.append((diario, presenca))
                break
    registros.sort(key=lambda r: r[0].data, reverse=True)

    contagem = {status: 0 for status in STATUS_PRESENCA}
    for _, presenca in registros:
        contagem[presenca.status] = contagem.get(presenca.status, 0) + 1

    return {
        'aluno_id': aluno_id,
        'total_aulas': len(registros),
        'por_status': contagem,
        'taxa_presenca': percentual_inteiro(contagem['presente'], len(registros)),
        'registros': [
            {
                'diario_id': diario.id,
                'turma_id': diario.turma_id,
                'data': diario.data,
                'status': presenca.status,
                'justificativa': presenca.justificativa,
            }
            for diario, presenca in registros
        ],
    }


def progresso_ementa(ementa: Ementa, diarios: Iterable[DiarioAula]) -> dict:
    """
    Quantas aulas da ementa já têm diário, a última aula ministrada e as
    duas próximas ainda não ministradas.
    """
    aulas = sorted(ementa.aulas, key=lambda a: a.numero)
    ids_aulas = {a.id for a in aulas}
    ministradas = {d.aula_ementa_id for d in diarios if d.aula_ementa_id in ids_aulas}

    aula_atual = None
    for aula in reversed(aulas):
        if aula.id in ministradas:
            aula_atual = aula
            break

    proximas = [a for a in aulas if a.id not in ministradas][:2]

    return {
        'ementa_id': ementa.id,
        'total_aulas': len(aulas),
        'aulas_completas': len(ministradas),
        'progresso': percentual_inteiro(len(ministradas), len(aulas)),
        'aula_atual': aula_atual.para_dict() if aula_atual else None,
        'proximas_aulas': [a.para_dict() for a in proximas],
    }


def painel_instrutor(instrutor_id: str, dados: DadosAcademicos, hoje: Optional[date] = None) -> dict:
    """Cartões da página inicial do instrutor."""
    hoje = hoje or date.today()
    hoje_iso = hoje.isoformat()
    mes_atual = hoje_iso[:7]
    dia_semana = DIAS_SEMANA[hoje.weekday()]

    minhas_turmas = [t for t in dados.turmas if t.instrutor_id == instrutor_id and t.status != 'cancelada']
    meus_diarios = [d for d in dados.diarios if d.instrutor_id == instrutor_id]

    turma_hoje = None
    for turma in minhas_turmas:
        if turma.status != 'em_andamento':
            continue
        if not any(dia_semana in dia.lower() for dia in turma.dias_semana):
            continue
        if any(d.turma_id == turma.id and d.data == hoje_iso for d in dados.diarios):
            continue
        turma_hoje = turma
        break

    return {
        'instrutor_id': instrutor_id,
        'total_turmas': len(minhas_turmas),
        'turmas_ativas': sum(1 for t in minhas_turmas if t.status == 'em_andamento'),
        'total_alunos': sum(t.vagas_ocupadas for t in minhas_turmas),
        'diarios_mes_atual': sum(1 for d in meus_diarios if d.data.startswith(mes_atual)),
        'taxa_presenca': taxa_presenca(meus_diarios),
        'turma_com_aula_hoje': turma_hoje.para_dict() if turma_hoje else None,
    }
