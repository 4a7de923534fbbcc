"""
Modelos de Dados do Domínio Acadêmico.

Registros imutáveis (dataclasses congeladas) que circulam entre o
repositório, os filtros e os agregadores de métricas. Sequências são
tuplas; campos opcionais são explícitos e valem None quando ausentes.

Alterações são feitas com `dataclasses.replace`, nunca in-place.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Dict, Optional, Tuple


class Registro:
    """
    Comportamento comum de construção/serialização dos registros.

    _ANINHADOS mapeia campo -> tipo de registro aninhado (ex.: endereco).
    _SEQUENCIAS mapeia campo -> tipo dos itens (None para valores simples).
    """

    COLECAO: ClassVar[str] = ''
    _ANINHADOS: ClassVar[Dict[str, type]] = {}
    _SEQUENCIAS: ClassVar[Dict[str, Optional[type]]] = {}

    @classmethod
    def de_dict(cls, dados: dict):
        """Cria o registro a partir de um dicionário, ignorando chaves desconhecidas."""
        nomes = {f.name for f in fields(cls)}
        valores = {}
        for nome, valor in dados.items():
            if nome not in nomes:
                continue
            if nome in cls._ANINHADOS:
                valor = _converter_aninhado(cls._ANINHADOS[nome], valor)
            elif nome in cls._SEQUENCIAS:
                valor = _converter_sequencia(cls._SEQUENCIAS[nome], valor)
            valores[nome] = valor
        return cls(**valores)

    @classmethod
    def normalizar_campos(cls, campos: dict) -> dict:
        """Converte campos parciais (atualizações) para os tipos do registro."""
        normalizados = {}
        for nome, valor in campos.items():
            if nome in cls._ANINHADOS:
                valor = _converter_aninhado(cls._ANINHADOS[nome], valor)
            elif nome in cls._SEQUENCIAS:
                valor = _converter_sequencia(cls._SEQUENCIAS[nome], valor)
            normalizados[nome] = valor
        return normalizados

    def para_dict(self) -> dict:
        return asdict(self)


def _converter_aninhado(tipo, valor):
    if valor is None or isinstance(valor, tipo):
        return valor
    return tipo.de_dict(valor)


def _converter_sequencia(tipo, valores) -> tuple:
    if not valores:
        return ()
    if tipo is None:
        return tuple(valores)
    return tuple(v if isinstance(v, tipo) else tipo.de_dict(v) for v in valores)


@dataclass(frozen=True)
class Endereco(Registro):
    rua: str = ''
    numero: str = ''
    bairro: Optional[str] = None
    cidade: str = ''
    estado: str = ''
    cep: str = ''
    complemento: Optional[str] = None


@dataclass(frozen=True)
class Curso(Registro):
    COLECAO: ClassVar[str] = 'cursos'

    id: str
    nome: str
    descricao: str = ''
    carga_horaria: int = 0
    nivel_ensino: str = ''
    ativo: bool = True


@dataclass(frozen=True)
class AulaEmenta(Registro):
    """Aula dentro de uma ementa; `numero` define a ordem do currículo."""
    _SEQUENCIAS: ClassVar[Dict[str, Optional[type]]] = {'objetivos': None, 'conteudo': None}

    id: str
    numero: int
    titulo: str
    tipo: str = 'teorica'
    carga_horaria: int = 0
    objetivos: Tuple[str, ...] = ()
    conteudo: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Ementa(Registro):
    COLECAO: ClassVar[str] = 'ementas'
    _SEQUENCIAS: ClassVar[Dict[str, Optional[type]]] = {'aulas': AulaEmenta, 'objetivos_gerais': None}

    id: str
    curso_id: str
    titulo: str = ''
    descricao: str = ''
    carga_horaria_total: int = 0
    objetivos_gerais: Tuple[str, ...] = ()
    aulas: Tuple[AulaEmenta, ...] = ()
    ativo: bool = True
    data_criacao: Optional[str] = None
    data_atualizacao: Optional[str] = None


@dataclass(frozen=True)
class Turma(Registro):
    COLECAO: ClassVar[str] = 'turmas'
    _SEQUENCIAS: ClassVar[Dict[str, Optional[type]]] = {'dias_semana': None}

    id: str
    codigo: str
    ementa_id: str
    status: str
    data_inicio: str
    data_fim: str = ''
    instrutor_id: Optional[str] = None
    horario: str = ''
    dias_semana: Tuple[str, ...] = ()
    sala: Optional[str] = None
    vagas_total: int = 0
    vagas_ocupadas: int = 0
    observacoes: Optional[str] = None
    data_criacao: Optional[str] = None


@dataclass(frozen=True)
class Aluno(Registro):
    COLECAO: ClassVar[str] = 'alunos'
    _ANINHADOS: ClassVar[Dict[str, type]] = {'endereco': Endereco}

    id: str
    nome: str
    status: str = 'ativo'
    turma_id: Optional[str] = None
    email: str = ''
    telefone: str = ''
    cpf: str = ''
    data_nascimento: Optional[str] = None
    endereco: Optional[Endereco] = None
    data_matricula: Optional[str] = None
    observacoes: Optional[str] = None


@dataclass(frozen=True)
class Instrutor(Registro):
    COLECAO: ClassVar[str] = 'instrutores'
    _SEQUENCIAS: ClassVar[Dict[str, Optional[type]]] = {'especialidades': None}

    id: str
    nome: str
    status: str = 'ativo'
    especialidades: Tuple[str, ...] = ()
    email: str = ''
    telefone: str = ''
    biografia: Optional[str] = None
    data_cadastro: Optional[str] = None


@dataclass(frozen=True)
class Interessado(Registro):
    """
    Pessoa interessada (aluno ou voluntário) ainda não matriculada.

    Para voluntários, `curso_interesse` guarda a área de interesse.
    Respostas do cadastro sem uso nas métricas (saúde, documentos,
    contato de emergência) ficam em `informacoes_adicionais`.
    """
    COLECAO: ClassVar[str] = 'interessados'
    _ANINHADOS: ClassVar[Dict[str, type]] = {'endereco': Endereco}

    id: str
    tipo: str
    nome: str
    curso_interesse: str = ''
    status: str = 'novo'
    email: str = ''
    telefone: str = ''
    genero: Optional[str] = None
    cor_raca: Optional[str] = None
    etnia: Optional[str] = None
    escolaridade: Optional[str] = None
    data_nascimento: Optional[str] = None
    idade: Optional[int] = None
    endereco: Optional[Endereco] = None
    origem: Optional[str] = None
    observacoes: Optional[str] = None
    data_registro: Optional[str] = None
    informacoes_adicionais: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RegistroPresenca(Registro):
    aluno_id: str
    status: str
    aluno_nome: str = ''
    justificativa: Optional[str] = None


@dataclass(frozen=True)
class DiarioAula(Registro):
    COLECAO: ClassVar[str] = 'diarios'
    _SEQUENCIAS: ClassVar[Dict[str, Optional[type]]] = {'presencas': RegistroPresenca}

    id: str
    turma_id: str
    instrutor_id: str
    data: str
    numero_aula: int = 1
    tipo: str = 'teorica'
    conteudo: str = ''
    resumo: str = ''
    observacoes: Optional[str] = None
    aula_ementa_id: Optional[str] = None
    presencas: Tuple[RegistroPresenca, ...] = ()
    data_criacao: Optional[str] = None
    data_atualizacao: Optional[str] = None


@dataclass(frozen=True)
class MetricaQualitativa(Registro):
    """Resposta de um aluno ao questionário qualitativo (escalas de 1 a 5)."""
    COLECAO: ClassVar[str] = 'metricas_qualitativas'

    id: str
    aluno_id: str
    turma_id: str
    satisfacao_curso: int
    seguranca_ferramentas_digitais: int
    habilidade_programacao: int
    candidatando_vagas: bool = False
    interesse_curso_tecnico: bool = False
    interesse_graduacao: bool = False
    tipo_oportunidade: Optional[str] = None
    area_interesse: Optional[str] = None
    data_resposta: Optional[str] = None


MODELOS = {
    modelo.COLECAO: modelo
    for modelo in (Curso, Ementa, Turma, Aluno, Instrutor, Interessado, DiarioAula, MetricaQualitativa)
}


@dataclass(frozen=True, eq=False)
class DadosAcademicos:
    """
    Fotografia imutável de todas as coleções do repositório.

    eq=False: igualdade e hash por identidade, o que permite memoizar
    as funções de métricas pelo objeto recebido.
    """
    cursos: Tuple[Curso, ...] = ()
    ementas: Tuple[Ementa, ...] = ()
    turmas: Tuple[Turma, ...] = ()
    alunos: Tuple[Aluno, ...] = ()
    instrutores: Tuple[Instrutor, ...] = ()
    interessados: Tuple[Interessado, ...] = ()
    diarios: Tuple[DiarioAula, ...] = ()
    metricas_qualitativas: Tuple[MetricaQualitativa, ...] = ()
