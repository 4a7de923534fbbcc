"""
Formulários dos Cadastros em Etapas (WTForms)

Os wizards validam dados acumulados na sessão, não um POST de HTML,
por isso os formulários herdam de `wtforms.Form` e são alimentados
com `data=`.
"""

from wtforms import BooleanField, FieldList, Form, FormField, IntegerField, StringField
from wtforms.utils import unset_value
from wtforms.validators import DataRequired, Email, Length, Optional, Regexp, StopValidation

FORMATO_DATA = r'^\d{4}-\d{2}-\d{2}$'


class Opcional(Optional):
    """
    Optional que olha para `field.data`. Formulários alimentados por
    dicionário não têm `raw_data`, e o Optional do WTForms pararia sempre.
    """

    def __call__(self, form, field):
        if field.data is None or (isinstance(field.data, str) and not field.data.strip()):
            field.errors[:] = []
            raise StopValidation()


class CampoTexto(StringField):
    """StringField alimentado por dicionário: converte para texto e apara espaços."""

    def process_data(self, value):
        self.data = str(value).strip() if value is not None else None


class CampoInteiro(IntegerField):
    def process_data(self, value):
        if value is None or value == '':
            self.data = None
            return
        try:
            self.data = int(value)
        except (TypeError, ValueError):
            self.data = None
            raise ValueError("Informe um número inteiro")


class CampoLista(FieldList):
    """
    FieldList alimentado por dicionário. Só aceita listas: um texto solto
    seria percorrido letra a letra.
    """

    tipo_invalido = False

    def process(self, formdata, data=unset_value, **kwargs):
        self.tipo_invalido = data is not unset_value and data is not None \
            and not isinstance(data, (list, tuple))
        if self.tipo_invalido:
            data = ()
        super().process(formdata, data, **kwargs)

    def validate(self, form, extra_validators=()):
        if self.tipo_invalido:
            self.errors = ["Informe uma lista de valores"]
            return False
        return super().validate(form, extra_validators)


class EnderecoForm(Form):
    rua = CampoTexto('Rua', validators=[
        DataRequired(message="Rua é obrigatória"),
        Length(min=3, message="Rua é obrigatória")
    ])
    numero = CampoTexto('Número', validators=[DataRequired(message="Número é obrigatório")])
    complemento = CampoTexto('Complemento', validators=[Opcional()])
    bairro = CampoTexto('Bairro', validators=[
        DataRequired(message="Bairro é obrigatório"),
        Length(min=2, message="Bairro é obrigatório")
    ])
    cidade = CampoTexto('Cidade', validators=[
        DataRequired(message="Cidade é obrigatória"),
        Length(min=2, message="Cidade é obrigatória")
    ])
    estado = CampoTexto('Estado', validators=[
        DataRequired(message="Use a sigla do estado (ex: SP)"),
        Length(min=2, max=2, message="Use a sigla do estado (ex: SP)")
    ])
    cep = CampoTexto('CEP', validators=[
        DataRequired(message="CEP deve ter 8 dígitos"),
        Regexp(r'^\d{8}$', message="CEP deve ter 8 dígitos")
    ])


class DocumentosForm(Form):
    identidade = BooleanField('Identidade')
    comprovante_escolaridade = BooleanField('Comprovante de escolaridade')
    comprovante_residencia = BooleanField('Comprovante de residência')
    outro = BooleanField('Outro')


class DadosPessoaisMixin:
    nome = CampoTexto('Nome', validators=[
        DataRequired(message="Nome deve ter pelo menos 3 caracteres"),
        Length(min=3, message="Nome deve ter pelo menos 3 caracteres")
    ])
    email = CampoTexto('Email', validators=[
        DataRequired(message="Email inválido"),
        Email(message="Email inválido")
    ])
    telefone = CampoTexto('Telefone', validators=[
        DataRequired(message="Telefone inválido"),
        Length(min=10, message="Telefone inválido")
    ])


class CadastroAlunoForm(DadosPessoaisMixin, Form):
    """Cadastro completo do aluno interessado (formulário público e coordenação)."""

    data_nascimento = CampoTexto('Data de nascimento', validators=[
        DataRequired(message="Data de nascimento é obrigatória"),
        Regexp(FORMATO_DATA, message="Data de nascimento inválida (formato: AAAA-MM-DD)")
    ])
    cpf = CampoTexto('CPF', validators=[
        DataRequired(message="CPF inválido"),
        Length(min=11, message="CPF inválido")
    ])
    genero = CampoTexto('Gênero', validators=[DataRequired(message="Selecione o gênero")])
    escolaridade = CampoTexto('Escolaridade', validators=[DataRequired(message="Selecione a escolaridade")])
    curso_interesse = CampoTexto('Curso de interesse', validators=[
        DataRequired(message="Selecione o curso de interesse")
    ])

    endereco = FormField(EnderecoForm)

    responsavel_nome = CampoTexto('Nome do responsável', validators=[Opcional()])
    responsavel_parentesco = CampoTexto('Parentesco do responsável', validators=[Opcional()])
    contato_emergencia_nome = CampoTexto('Contato de emergência', validators=[
        DataRequired(message="Nome do contato de emergência é obrigatório"),
        Length(min=3, message="Nome do contato de emergência é obrigatório")
    ])
    contato_emergencia_telefone = CampoTexto('Telefone de emergência', validators=[
        DataRequired(message="Telefone do contato de emergência é obrigatório"),
        Length(min=10, message="Telefone do contato de emergência é obrigatório")
    ])
    contato_emergencia_parentesco = CampoTexto('Parentesco', validators=[
        DataRequired(message="Parentesco do contato de emergência é obrigatório")
    ])

    cor_raca = CampoTexto('Cor/Raça', validators=[DataRequired(message="Selecione a cor/raça")])
    etnia = CampoTexto('Etnia', validators=[Opcional()])
    alergias = CampoTexto('Alergias', validators=[Opcional()])
    deficiencias = CampoTexto('Deficiências', validators=[Opcional()])

    informacoes_corretas = BooleanField('Informações corretas')
    documentos = FormField(DocumentosForm)

    # Etapa opcional: vincular a uma turma já na inscrição
    turma_id = CampoTexto('Turma', validators=[Opcional()])


class CadastroVoluntarioForm(DadosPessoaisMixin, Form):
    data_nascimento = CampoTexto('Data de nascimento', validators=[
        DataRequired(message="Data de nascimento é obrigatória"),
        Regexp(FORMATO_DATA, message="Data de nascimento inválida (formato: AAAA-MM-DD)")
    ])
    genero = CampoTexto('Gênero', validators=[DataRequired(message="Selecione o gênero")])
    escolaridade = CampoTexto('Escolaridade', validators=[DataRequired(message="Selecione a escolaridade")])
    area_interesse = CampoTexto('Área de interesse', validators=[
        DataRequired(message="Selecione a área de interesse")
    ])

    endereco = FormField(EnderecoForm)

    motivo_voluntariado = CampoTexto('Motivo', validators=[
        DataRequired(message="Descreva o motivo com pelo menos 10 caracteres"),
        Length(min=10, message="Descreva o motivo com pelo menos 10 caracteres")
    ])
    habilidades_experiencia = CampoTexto('Habilidades', validators=[
        DataRequired(message="Descreva suas habilidades com pelo menos 10 caracteres"),
        Length(min=10, message="Descreva suas habilidades com pelo menos 10 caracteres")
    ])
    nivel_disponibilidade = CampoTexto('Disponibilidade', validators=[
        DataRequired(message="Informe o nível de disponibilidade")
    ])
    experiencia_voluntariado = BooleanField('Já foi voluntário')
    detalhes_experiencia_voluntariado = CampoTexto('Detalhes da experiência', validators=[Opcional()])

    cor_raca = CampoTexto('Cor/Raça', validators=[DataRequired(message="Selecione a cor/raça")])
    etnia = CampoTexto('Etnia', validators=[Opcional()])
    deficiencia_fisica = BooleanField('Deficiência física')
    deficiencia_intelectual = BooleanField('Deficiência intelectual')
    necessidade_especial = BooleanField('Necessidade especial')
    especificacao_deficiencia = CampoTexto('Especificação', validators=[Opcional()])

    origem = CampoTexto('Origem', validators=[
        DataRequired(message="Informe como encontrou o formulário")
    ])


class CadastroInstrutorForm(DadosPessoaisMixin, Form):
    especialidades = CampoLista(CampoTexto('Especialidade', validators=[
        DataRequired(message="Especialidade não pode ficar em branco")
    ]), validators=[
        Length(min=1, message="Adicione pelo menos uma especialidade")
    ])
    biografia = CampoTexto('Biografia', validators=[Opcional()])
