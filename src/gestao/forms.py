"""
Formulários de Gestão (cursos, ementas, turmas, alunos, instrutores,
interessados, diários e métricas qualitativas).

Alimentados por JSON (`data=`), como os formulários dos cadastros.
"""

from wtforms import BooleanField, Form, FormField
from wtforms.validators import AnyOf, DataRequired, Length, NumberRange, Regexp, ValidationError

from src.cadastro.forms import (
    FORMATO_DATA,
    CadastroInstrutorForm,
    CampoInteiro,
    CampoLista,
    CampoTexto,
    DadosPessoaisMixin,
    EnderecoForm,
    Opcional,
)
from src.core.constants import (
    DIAS_SEMANA,
    NIVEIS_SATISFACAO,
    STATUS_ALUNO,
    STATUS_INSTRUTOR,
    STATUS_INTERESSADO,
    STATUS_PRESENCA,
    STATUS_TURMA,
    TIPOS_AULA,
    TIPOS_INTERESSADO,
    TIPOS_OPORTUNIDADE,
)


def _data(rotulo: str, obrigatoria: bool = True):
    validadores = [DataRequired(message=f"{rotulo} é obrigatória")] if obrigatoria else [Opcional()]
    validadores.append(Regexp(FORMATO_DATA, message=f"{rotulo} inválida (formato: AAAA-MM-DD)"))
    return CampoTexto(rotulo, validators=validadores)


def _nota(rotulo: str):
    return CampoInteiro(rotulo, validators=[
        DataRequired(message=f"{rotulo}: informe uma nota de 1 a 5"),
        AnyOf(NIVEIS_SATISFACAO, message=f"{rotulo}: informe uma nota de 1 a 5")
    ])


class CursoForm(Form):
    nome = CampoTexto('Nome', validators=[
        DataRequired(message="Nome deve ter pelo menos 3 caracteres"),
        Length(min=3, message="Nome deve ter pelo menos 3 caracteres")
    ])
    descricao = CampoTexto('Descrição', validators=[Opcional()])
    carga_horaria = CampoInteiro('Carga horária', validators=[
        Opcional(),
        NumberRange(min=1, message="Carga horária deve ser pelo menos 1 hora")
    ])
    nivel_ensino = CampoTexto('Nível de ensino', validators=[Opcional()])
    ativo = BooleanField('Ativo')


class AulaEmentaForm(Form):
    id = CampoTexto('Id', validators=[Opcional()])
    numero = CampoInteiro('Número', validators=[
        DataRequired(message="Número da aula deve ser pelo menos 1"),
        NumberRange(min=1, message="Número da aula deve ser pelo menos 1")
    ])
    titulo = CampoTexto('Título', validators=[
        DataRequired(message="Título deve ter pelo menos 3 caracteres"),
        Length(min=3, message="Título deve ter pelo menos 3 caracteres")
    ])
    tipo = CampoTexto('Tipo', validators=[
        DataRequired(message="Selecione o tipo da aula"),
        AnyOf(TIPOS_AULA, message="Tipo de aula inválido")
    ])
    carga_horaria = CampoInteiro('Carga horária', validators=[
        DataRequired(message="Carga horária deve ser pelo menos 1 hora"),
        NumberRange(min=1, message="Carga horária deve ser pelo menos 1 hora")
    ])
    objetivos = CampoLista(CampoTexto('Objetivo'))
    conteudo = CampoLista(CampoTexto('Conteúdo'))


class EmentaForm(Form):
    curso_id = CampoTexto('Curso', validators=[DataRequired(message="Selecione um curso")])
    titulo = CampoTexto('Título', validators=[
        DataRequired(message="Título deve ter pelo menos 3 caracteres"),
        Length(min=3, message="Título deve ter pelo menos 3 caracteres")
    ])
    descricao = CampoTexto('Descrição', validators=[
        DataRequired(message="Descrição deve ter pelo menos 10 caracteres"),
        Length(min=10, message="Descrição deve ter pelo menos 10 caracteres")
    ])
    carga_horaria_total = CampoInteiro('Carga horária total', validators=[
        DataRequired(message="Carga horária total deve ser pelo menos 1 hora"),
        NumberRange(min=1, message="Carga horária total deve ser pelo menos 1 hora")
    ])
    objetivos_gerais = CampoLista(CampoTexto('Objetivo geral'))
    aulas = CampoLista(FormField(AulaEmentaForm), validators=[
        Length(min=1, message="Adicione pelo menos uma aula")
    ])
    ativo = BooleanField('Ativa')


class TurmaForm(Form):
    codigo = CampoTexto('Código', validators=[
        DataRequired(message="Código deve ter pelo menos 3 caracteres"),
        Length(min=3, message="Código deve ter pelo menos 3 caracteres")
    ])
    ementa_id = CampoTexto('Ementa', validators=[DataRequired(message="Selecione uma ementa")])
    instrutor_id = CampoTexto('Instrutor', validators=[DataRequired(message="Selecione um instrutor")])
    data_inicio = _data('Data de início')
    data_fim = _data('Data de término')
    horario = CampoTexto('Horário', validators=[DataRequired(message="Horário é obrigatório")])
    dias_semana = CampoLista(CampoTexto('Dia', validators=[
        AnyOf(DIAS_SEMANA, message="Dia da semana inválido")
    ]), validators=[
        Length(min=1, message="Selecione pelo menos um dia da semana")
    ])
    sala = CampoTexto('Sala', validators=[Opcional()])
    vagas_total = CampoInteiro('Vagas', validators=[
        DataRequired(message="Deve haver pelo menos 1 vaga"),
        NumberRange(min=1, message="Deve haver pelo menos 1 vaga")
    ])
    status = CampoTexto('Status', validators=[
        Opcional(),
        AnyOf(STATUS_TURMA, message="Status de turma inválido")
    ])
    observacoes = CampoTexto('Observações', validators=[Opcional()])

    # PATCH de data_inicio também revalida data_fim
    DEPENDENTES = {'data_inicio': ('data_fim',)}

    def validate_data_fim(self, field):
        if self.data_inicio.data and field.data and field.data < self.data_inicio.data:
            raise ValidationError("Data de término não pode ser anterior à data de início")


class AlunoForm(DadosPessoaisMixin, Form):
    cpf = CampoTexto('CPF', validators=[
        DataRequired(message="CPF inválido"),
        Regexp(r'^\d{3}\.?\d{3}\.?\d{3}-?\d{2}$', message="CPF inválido")
    ])
    data_nascimento = _data('Data de nascimento')
    endereco = FormField(EnderecoForm)
    turma_id = CampoTexto('Turma', validators=[Opcional()])
    status = CampoTexto('Status', validators=[
        Opcional(),
        AnyOf(STATUS_ALUNO, message="Status de aluno inválido")
    ])
    observacoes = CampoTexto('Observações', validators=[Opcional()])


class InstrutorForm(CadastroInstrutorForm):
    status = CampoTexto('Status', validators=[
        Opcional(),
        AnyOf(STATUS_INSTRUTOR, message="Status de instrutor inválido")
    ])


class InteressadoForm(DadosPessoaisMixin, Form):
    """Registro direto de interessado pela coordenação (sem wizard)."""

    tipo = CampoTexto('Tipo', validators=[
        DataRequired(message="Informe o tipo de interessado"),
        AnyOf(TIPOS_INTERESSADO, message="Tipo deve ser 'aluno' ou 'voluntario'")
    ])
    curso_interesse = CampoTexto('Curso de interesse', validators=[
        DataRequired(message="Selecione um curso de interesse")
    ])
    status = CampoTexto('Status', validators=[
        Opcional(),
        AnyOf(STATUS_INTERESSADO, message="Status de interessado inválido")
    ])
    genero = CampoTexto('Gênero', validators=[Opcional()])
    cor_raca = CampoTexto('Cor/Raça', validators=[Opcional()])
    etnia = CampoTexto('Etnia', validators=[Opcional()])
    escolaridade = CampoTexto('Escolaridade', validators=[Opcional()])
    data_nascimento = _data('Data de nascimento', obrigatoria=False)
    origem = CampoTexto('Origem', validators=[Opcional()])
    observacoes = CampoTexto('Observações', validators=[Opcional()])


class PresencaForm(Form):
    aluno_id = CampoTexto('Aluno', validators=[DataRequired(message="Informe o aluno")])
    aluno_nome = CampoTexto('Nome do aluno', validators=[Opcional()])
    status = CampoTexto('Presença', validators=[
        DataRequired(message="Informe a presença"),
        AnyOf(STATUS_PRESENCA, message="Status de presença inválido")
    ])
    justificativa = CampoTexto('Justificativa', validators=[Opcional()])


class DiarioAulaForm(Form):
    """O campo `data` do diário chega aqui como `data_aula` (ver RENOMEADOS)."""

    RENOMEADOS = {'data_aula': 'data'}

    turma_id = CampoTexto('Turma', validators=[DataRequired(message="Selecione uma turma")])
    instrutor_id = CampoTexto('Instrutor', validators=[DataRequired(message="Selecione um instrutor")])
    data_aula = _data('Data')
    numero_aula = CampoInteiro('Número da aula', validators=[
        DataRequired(message="Número da aula deve ser pelo menos 1"),
        NumberRange(min=1, message="Número da aula deve ser pelo menos 1")
    ])
    tipo = CampoTexto('Tipo', validators=[
        DataRequired(message="Selecione o tipo da aula"),
        AnyOf(TIPOS_AULA, message="Tipo de aula inválido")
    ])
    conteudo = CampoTexto('Conteúdo', validators=[
        DataRequired(message="Conteúdo deve ter pelo menos 10 caracteres"),
        Length(min=10, message="Conteúdo deve ter pelo menos 10 caracteres")
    ])
    resumo = CampoTexto('Resumo', validators=[
        DataRequired(message="Resumo deve ter pelo menos 10 caracteres"),
        Length(min=10, message="Resumo deve ter pelo menos 10 caracteres")
    ])
    observacoes = CampoTexto('Observações', validators=[Opcional()])
    aula_ementa_id = CampoTexto('Aula da ementa', validators=[Opcional()])
    presencas = CampoLista(FormField(PresencaForm))


class MetricaQualitativaForm(Form):
    aluno_id = CampoTexto('Aluno', validators=[DataRequired(message="Informe o aluno")])
    turma_id = CampoTexto('Turma', validators=[DataRequired(message="Informe a turma")])
    satisfacao_curso = _nota('Satisfação com o curso')
    seguranca_ferramentas_digitais = _nota('Segurança com ferramentas digitais')
    habilidade_programacao = _nota('Habilidade de programação')
    candidatando_vagas = BooleanField('Candidatando-se a vagas')
    interesse_curso_tecnico = BooleanField('Interesse em curso técnico')
    interesse_graduacao = BooleanField('Interesse em graduação')
    tipo_oportunidade = CampoTexto('Tipo de oportunidade', validators=[
        Opcional(),
        AnyOf(TIPOS_OPORTUNIDADE, message="Tipo de oportunidade inválido")
    ])
    area_interesse = CampoTexto('Área de interesse', validators=[Opcional()])
    data_resposta = _data('Data da resposta', obrigatoria=False)


FORMULARIOS = {
    'cursos': CursoForm,
    'ementas': EmentaForm,
    'turmas': TurmaForm,
    'alunos': AlunoForm,
    'instrutores': InstrutorForm,
    'interessados': InteressadoForm,
    'diarios': DiarioAulaForm,
    'metricas_qualitativas': MetricaQualitativaForm,
}
