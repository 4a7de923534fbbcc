"""
Cadastros em Etapas (Wizard)

Máquina de estados pura: `transicionar(definicao, estado, acao)` devolve
um novo EstadoWizard sem efeitos colaterais. O envio final (callback de
submissão) fica no ControladorWizard, que é quem conversa com o mundo.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from wtforms import FormField

from src.cadastro.forms import CadastroAlunoForm, CadastroInstrutorForm, CadastroVoluntarioForm
from src.core.logger import get_logger
from src.core.repositorio import ErroDeIntegridade

logger = get_logger(__name__)

ERRO_GERAL = 'geral'
MENSAGEM_FALHA_ENVIO = "Não foi possível enviar o cadastro. Tente novamente."


class TransicaoInvalida(ValueError):
    """Ação não permitida a partir do passo atual."""


class WizardEncerrado(RuntimeError):
    """Ação recebida por um wizard já finalizado (só Reiniciar é aceito)."""


# === DEFINIÇÕES ===

@dataclass(frozen=True)
class Passo:
    numero: int
    titulo: str
    campos: Tuple[str, ...] = ()
    opcional: bool = False


@dataclass(frozen=True)
class DefinicaoWizard:
    nome: str
    formulario: type
    passos: Tuple[Passo, ...]
    permite_salto: bool = False

    @property
    def total_passos(self) -> int:
        return len(self.passos)

    def passo(self, numero: int) -> Passo:
        return self.passos[numero - 1]


@dataclass(frozen=True)
class EstadoWizard:
    passo_atual: int = 1
    concluidos: FrozenSet[int] = frozenset()
    dados: Dict[str, Any] = field(default_factory=dict)
    erros: Dict[str, List[str]] = field(default_factory=dict)
    finalizado: bool = False


# === AÇÕES ===

@dataclass(frozen=True)
class AtualizarDados:
    campos: Dict[str, Any]


@dataclass(frozen=True)
class Avancar:
    pass


@dataclass(frozen=True)
class Voltar:
    pass


@dataclass(frozen=True)
class IrPara:
    passo: int


@dataclass(frozen=True)
class Submeter:
    pass


@dataclass(frozen=True)
class Reiniciar:
    pass


# === VALIDAÇÃO ===

def validar_campos(formulario: type, campos, valores: dict) -> Dict[str, List[str]]:
    """
    Valida apenas os campos informados do formulário WTForms.

    Aceita subformulários inteiros ('endereco') e subcampos com ponto
    ('endereco.cep'). Erros de subformulário são achatados com ponto.

    Returns:
        dict: campo -> lista de mensagens. Vazio quando tudo é válido.
    """
    form = formulario(data=valores)
    erros = {}

    for nome in campos:
        raiz, _, sub = nome.partition('.')
        campo = form[raiz]

        if sub:
            subform = campo.form
            subcampo = subform[sub]
            if not subcampo.validate(subform):
                _achatar(nome, subcampo.errors, erros)
        elif isinstance(campo, FormField):
            if not campo.validate(form):
                _achatar(raiz, campo.errors, erros)
        else:
            # Validadores inline (validate_<campo>) só rodam em form.validate()
            inline = getattr(type(form), f'validate_{nome}', None)
            extras = [inline] if inline is not None else []
            if not campo.validate(form, extras):
                _achatar(nome, campo.errors, erros)

    return erros


def _achatar(nome: str, erros, saida: dict) -> None:
    """
    Erros aninhados do WTForms viram chaves com ponto: 'endereco.cep',
    'especialidades.0' (item de lista), 'presencas.1.status'.
    """
    if isinstance(erros, dict):
        for subnome, mensagens in erros.items():
            _achatar(f'{nome}.{subnome}', mensagens, saida)
        return
    for indice, erro in enumerate(erros):
        if isinstance(erro, (list, dict)):
            if erro:
                _achatar(f'{nome}.{indice}', erro, saida)
        else:
            saida.setdefault(nome, []).append(erro)


def dados_processados(formulario: type, valores: dict) -> dict:
    """
    Valores como o formulário os entrega (textos aparados, listas limpas),
    apenas dos campos que ele conhece.
    """
    form = formulario(data=valores)
    return {nome: form[nome].data for nome in valores if nome in form}


def _validar_passo(definicao: DefinicaoWizard, estado: EstadoWizard, numero: int) -> Dict[str, List[str]]:
    passo = definicao.passo(numero)
    if passo.opcional:
        return {}
    return validar_campos(definicao.formulario, passo.campos, estado.dados)


def _mesclar(dados: dict, campos: dict) -> dict:
    """Mescla em profundidade: atualizar 'endereco.cep' não apaga a rua."""
    mesclado = dict(dados)
    for chave, valor in campos.items():
        if isinstance(valor, dict) and isinstance(mesclado.get(chave), dict):
            valor = _mesclar(mesclado[chave], valor)
        mesclado[chave] = valor
    return mesclado


def _chaves(campos: dict, prefixo: str = '') -> set:
    chaves = set()
    for chave, valor in campos.items():
        nome = f'{prefixo}{chave}'
        chaves.add(nome)
        if isinstance(valor, dict):
            chaves |= _chaves(valor, f'{nome}.')
    return chaves


# === TRANSIÇÕES ===

def _avancar(definicao: DefinicaoWizard, estado: EstadoWizard) -> EstadoWizard:
    erros = _validar_passo(definicao, estado, estado.passo_atual)
    if erros:
        return replace(estado, erros=erros)

    return replace(
        estado,
        passo_atual=min(estado.passo_atual + 1, definicao.total_passos),
        concluidos=estado.concluidos | {estado.passo_atual},
        erros={},
    )


def transicionar(definicao: DefinicaoWizard, estado: EstadoWizard, acao) -> EstadoWizard:
    """
    Aplica uma ação ao estado do wizard e devolve o novo estado.

    Raises:
        WizardEncerrado: qualquer ação, exceto Reiniciar, após o envio.
        TransicaoInvalida: Submeter fora do último passo ou IrPara não permitido.
    """
    if isinstance(acao, Reiniciar):
        return EstadoWizard()

    if estado.finalizado:
        raise WizardEncerrado(f"Cadastro '{definicao.nome}' já foi enviado.")

    if isinstance(acao, AtualizarDados):
        atualizadas = _chaves(acao.campos)
        # Uma lista nova substitui a anterior, inclusive os erros dos itens
        listas = {nome for nome, valor in acao.campos.items() if isinstance(valor, list)}
        erros = {
            k: v for k, v in estado.erros.items()
            if k not in atualizadas and k.split('.')[0] not in listas
        }
        return replace(estado, dados=_mesclar(estado.dados, acao.campos), erros=erros)

    if isinstance(acao, Avancar):
        return _avancar(definicao, estado)

    if isinstance(acao, Voltar):
        return replace(estado, passo_atual=max(estado.passo_atual - 1, 1), erros={})

    if isinstance(acao, IrPara):
        if not definicao.permite_salto:
            raise TransicaoInvalida(f"O cadastro '{definicao.nome}' não permite saltar etapas.")
        if acao.passo in estado.concluidos:
            return replace(estado, passo_atual=acao.passo, erros={})
        if acao.passo == estado.passo_atual + 1:
            return _avancar(definicao, estado)
        raise TransicaoInvalida(f"Etapa {acao.passo} ainda não está disponível.")

    if isinstance(acao, Submeter):
        if estado.passo_atual != definicao.total_passos:
            raise TransicaoInvalida("O envio só é permitido na última etapa.")
        erros = _validar_passo(definicao, estado, estado.passo_atual)
        if erros:
            return replace(estado, erros=erros)
        return replace(
            estado,
            concluidos=estado.concluidos | {estado.passo_atual},
            erros={},
            finalizado=True,
        )

    raise TransicaoInvalida(f"Ação desconhecida: {type(acao).__name__}")


# === CONTROLADOR ===

class ControladorWizard:
    """
    Executa as transições e, quando o estado entra em `finalizado`,
    chama o callback de submissão com os dados acumulados, já processados
    pelo formulário.

    Falhas do callback não propagam: o wizard permanece não finalizado
    com um erro geral, e a falha é registrada no log.
    """

    def __init__(self, definicao: DefinicaoWizard, ao_submeter: Callable[[dict], Any],
                 estado: Optional[EstadoWizard] = None):
        self.definicao = definicao
        self.ao_submeter = ao_submeter
        self.estado = estado or EstadoWizard()
        self.resultado = None

    def despachar(self, acao) -> EstadoWizard:
        novo = transicionar(self.definicao, self.estado, acao)

        if novo.finalizado and not self.estado.finalizado:
            try:
                self.resultado = self.ao_submeter(dados_processados(self.definicao.formulario, novo.dados))
                logger.info(f"Cadastro '{self.definicao.nome}' enviado com sucesso.")
            except ErroDeIntegridade as e:
                logger.warning(f"Cadastro '{self.definicao.nome}' recusado: {e}")
                novo = replace(novo, finalizado=False, erros={ERRO_GERAL: [str(e)]})
            except Exception as e:
                logger.error(f"Erro ao enviar cadastro '{self.definicao.nome}': {e}", exc_info=True)
                novo = replace(novo, finalizado=False, erros={ERRO_GERAL: [MENSAGEM_FALHA_ENVIO]})

        self.estado = novo
        return novo


# === SERIALIZAÇÃO (sessão Flask) ===

def estado_para_dict(estado: EstadoWizard) -> dict:
    return {
        'passo_atual': estado.passo_atual,
        'concluidos': sorted(estado.concluidos),
        'dados': estado.dados,
        'erros': estado.erros,
        'finalizado': estado.finalizado,
    }


def estado_de_dict(dados: Optional[dict]) -> EstadoWizard:
    if not dados:
        return EstadoWizard()
    return EstadoWizard(
        passo_atual=int(dados.get('passo_atual', 1)),
        concluidos=frozenset(dados.get('concluidos', ())),
        dados=dict(dados.get('dados') or {}),
        erros=dict(dados.get('erros') or {}),
        finalizado=bool(dados.get('finalizado', False)),
    )


# === WIZARDS DISPONÍVEIS ===

WIZARD_ALUNO = DefinicaoWizard(
    nome='aluno',
    formulario=CadastroAlunoForm,
    passos=(
        Passo(1, 'Dados Pessoais', ('nome', 'cpf', 'email', 'telefone', 'data_nascimento',
                                    'genero', 'escolaridade', 'curso_interesse')),
        Passo(2, 'Endereço', ('endereco',)),
        Passo(3, 'Contato de Emergência', ('contato_emergencia_nome', 'contato_emergencia_telefone',
                                           'contato_emergencia_parentesco')),
        Passo(4, 'Autodeclaração', ('cor_raca',)),
        Passo(5, 'Documentos', ('documentos', 'informacoes_corretas'), opcional=True),
        Passo(6, 'Turma', ('turma_id',), opcional=True),
    ),
)

WIZARD_VOLUNTARIO = DefinicaoWizard(
    nome='voluntario',
    formulario=CadastroVoluntarioForm,
    passos=(
        Passo(1, 'Dados Pessoais', ('nome', 'email', 'telefone', 'data_nascimento', 'genero', 'escolaridade')),
        Passo(2, 'Endereço', ('endereco.cep', 'endereco.rua', 'endereco.numero', 'endereco.bairro',
                              'endereco.cidade', 'endereco.estado')),
        Passo(3, 'Voluntariado', ('area_interesse', 'motivo_voluntariado', 'habilidades_experiencia',
                                  'nivel_disponibilidade', 'experiencia_voluntariado')),
        Passo(4, 'Autodeclaração', ('cor_raca',)),
        Passo(5, 'Origem', ('origem',)),
    ),
    permite_salto=True,
)

WIZARD_INSTRUTOR = DefinicaoWizard(
    nome='instrutor',
    formulario=CadastroInstrutorForm,
    passos=(
        Passo(1, 'Dados Pessoais', ('nome', 'email', 'telefone')),
        Passo(2, 'Especialidades', ('especialidades',)),
        Passo(3, 'Biografia', ('biografia',), opcional=True),
    ),
)

WIZARDS = {w.nome: w for w in (WIZARD_ALUNO, WIZARD_VOLUNTARIO, WIZARD_INSTRUTOR)}
